"""
Data models - uploaded files, prompt parts and the two phase results
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ContentKind(str, Enum):
    """Normalized content kind of an uploaded file, valued by its MIME type"""
    PDF = "application/pdf"
    PNG = "image/png"
    JPEG = "image/jpeg"
    WEBP = "image/webp"
    SPREADSHEET = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class IngestedFile:
    id: str
    original_name: str
    encoded_payload: str
    content_kind: ContentKind
    media_type: str

    @property
    def is_spreadsheet(self) -> bool:
        return self.content_kind is ContentKind.SPREADSHEET

    def describe(self) -> dict:
        """Metadata for API responses (the payload stays server side)"""
        return {
            "id": self.id,
            "name": self.original_name,
            "content_kind": self.content_kind.value,
            "media_type": self.media_type,
        }


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class BinaryPart:
    media_kind: str
    payload: str
    filename: str = ""


PromptPart = Union[TextPart, BinaryPart]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


# --- Phase 1: completeness check ---

class PartStatus(_CamelModel):
    part_name: str
    status: Literal["Provided", "Missing"]
    matched_filename: Optional[str] = None


class CompletenessRow(_CamelModel):
    original: PartStatus
    substitutes: List[PartStatus]

    def statuses(self) -> List[PartStatus]:
        return [self.original, *self.substitutes]


class CompletenessResult(_CamelModel):
    grouped_rows: List[CompletenessRow]
    all_provided: bool
    message: str

    @model_validator(mode="after")
    def _derive_all_provided(self):
        # allProvided must reflect the rows, whatever the remote side claimed
        derived = all(
            part.status == "Provided"
            for row in self.grouped_rows
            for part in row.statuses()
        )
        if derived != self.all_provided:
            print(f"Completeness result reported allProvided={self.all_provided}, rows say {derived}")
            self.all_provided = derived
        return self

    def missing_parts(self) -> List[str]:
        return [
            part.part_name
            for row in self.grouped_rows
            for part in row.statuses()
            if part.status == "Missing"
        ]


# --- Phase 2: full analysis ---

class ComplianceLevel(str, Enum):
    FULLY_COMPLIANT = "Fully Compliant"
    PARTIAL = "Partial / Review Needed"
    NON_COMPLIANT = "Non-Compliant"


class SpecItem(_CamelModel):
    id: int
    parameter: str
    unit: str = ""
    value_a: str
    value_b: str
    compliance_b: ComplianceLevel
    value_c: str
    compliance_c: ComplianceLevel
    comment: str


class MappedParts(_CamelModel):
    part_a: str
    part_b: str = ""
    part_c: str = ""


class ComparisonGroup(_CamelModel):
    id: str
    row_number: int
    mapped_parts: MappedParts
    summary: str
    recommendation: Literal["B", "C", "None", "Both"]
    specs: List[SpecItem]

    @field_validator("specs")
    @classmethod
    def _check_specs(cls, specs: List[SpecItem]) -> List[SpecItem]:
        if not specs:
            raise ValueError("comparison group has no specification items")
        ids = [item.id for item in specs]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate specification item ids: {ids}")
        return specs


class AnalysisResult(_CamelModel):
    groups: List[ComparisonGroup]
    missing_files: List[str]
