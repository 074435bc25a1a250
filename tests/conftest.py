import io
import json

import pandas as pd
import pytest

from subsource_validator.services.file_service import ingest_file

XLSX_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class FakeGenerationClient:
    """Canned generation capability that records every call"""

    def __init__(self, response_text="", error=None):
        self.response_text = response_text
        self.error = error
        self.calls = []

    def generate(self, parts, schema, schema_name):
        self.calls.append({"parts": list(parts), "schema": schema, "schema_name": schema_name})
        if self.error is not None:
            raise self.error
        return self.response_text


def xlsx_bytes(rows, extra_sheets=None):
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name="Master", index=False, header=False)
        for name, sheet_rows in (extra_sheets or {}).items():
            pd.DataFrame(sheet_rows).to_excel(writer, sheet_name=name, index=False, header=False)
    return buffer.getvalue()


MASTER_ROWS = [
    ["Original", "Substitute 1", "Substitute 2"],
    ["M1", "M1-SUB", None],
]

COMPLETENESS_RESPONSE = {
    "groupedRows": [
        {
            "original": {"partName": "M1", "status": "Provided", "matchedFilename": "M1_datasheet.pdf"},
            "substitutes": [{"partName": "M1-SUB", "status": "Missing", "matchedFilename": None}],
        }
    ],
    "allProvided": False,
    "message": "1 datasheet missing.",
}


def spec_item(item_id, **overrides):
    item = {
        "id": item_id,
        "parameter": f"Parameter {item_id}",
        "unit": "V",
        "valueA": "100",
        "valueB": "100",
        "complianceB": "Fully Compliant",
        "valueC": "N/A (Missing File)",
        "complianceC": "Non-Compliant",
        "comment": "Same rating.",
    }
    item.update(overrides)
    return item


def analysis_response(specs=None, recommendation="B"):
    return {
        "groups": [
            {
                "id": "group-1",
                "rowNumber": 1,
                "mappedParts": {"partA": "M1", "partB": "M1-SUB", "partC": ""},
                "summary": "M1-SUB matches every critical rating.",
                "recommendation": recommendation,
                "specs": specs if specs is not None else [spec_item(1), spec_item(2, parameter="Id", unit="A")],
            }
        ],
        "missingFiles": ["M1-SUB"],
    }


@pytest.fixture(autouse=True)
def log_dir(tmp_path, monkeypatch):
    path = tmp_path / "logs"
    monkeypatch.setenv("ANALYSIS_LOG_DIR", str(path))
    return path


@pytest.fixture
def master_xlsx():
    return ingest_file("master_list.xlsx", xlsx_bytes(MASTER_ROWS), XLSX_TYPE)


@pytest.fixture
def master_pdf():
    return ingest_file("master_list.pdf", b"%PDF-1.4 master", "application/pdf")


@pytest.fixture
def datasheet_pdf():
    return ingest_file("M1_datasheet.pdf", b"%PDF-1.4 datasheet", "application/pdf")


@pytest.fixture
def completeness_client():
    return FakeGenerationClient(json.dumps(COMPLETENESS_RESPONSE))


@pytest.fixture
def analysis_client():
    return FakeGenerationClient(json.dumps(analysis_response()))
