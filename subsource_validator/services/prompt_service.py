"""
Prompt Service - Assembles the ordered prompt parts for each phase
"""
import json
from typing import List

from ..config import ANALYSIS_PROMPT, COMPLETENESS_PROMPT, MISSING_FILE_PLACEHOLDER
from ..errors import InputValidationError
from ..models import IngestedFile, PromptPart, TextPart
from .file_service import to_prompt_parts

MASTER_LIST_LABEL = "Master List"


def _attach(parts: List[PromptPart], content: PromptPart, marker: str) -> None:
    # Binary documents need a text marker so the model knows which file follows
    if isinstance(content, TextPart):
        parts.append(content)
    else:
        parts.append(TextPart(text=marker))
        parts.append(content)


def build_completeness_parts(master_list: IngestedFile, filenames: List[str]) -> List[PromptPart]:
    """
    Build the Phase 1 prompt

    Only the master list content is attached; datasheets are represented by
    their filenames alone.

    Args:
        master_list: The ingested master list
        filenames: Names of every uploaded datasheet

    Returns:
        Ordered prompt parts
    """
    if master_list is None:
        raise InputValidationError("No master list provided.")

    parts: List[PromptPart] = [
        TextPart(text=COMPLETENESS_PROMPT.format(filenames=json.dumps(filenames, ensure_ascii=False)))
    ]
    [master_content] = to_prompt_parts([(master_list, MASTER_LIST_LABEL)])
    _attach(parts, master_content, "DOCUMENT: Master List Image/PDF")
    return parts


def build_analysis_parts(master_list: IngestedFile, datasheets: List[IngestedFile]) -> List[PromptPart]:
    """
    Build the Phase 2 prompt: instructions, the master list, then every
    datasheet preceded by a marker naming it

    Args:
        master_list: The ingested master list
        datasheets: All ingested datasheets, in upload order

    Returns:
        Ordered prompt parts
    """
    if master_list is None:
        raise InputValidationError("No master list provided.")
    if not datasheets:
        raise InputValidationError("No datasheets provided for analysis.")

    filenames = [ds.original_name for ds in datasheets]
    parts: List[PromptPart] = [
        TextPart(text=ANALYSIS_PROMPT.format(
            filenames=json.dumps(filenames, ensure_ascii=False),
            missing_placeholder=MISSING_FILE_PLACEHOLDER,
        ))
    ]

    labelled = [(master_list, MASTER_LIST_LABEL)]
    labelled.extend(
        (ds, f"Datasheet File #{index}: {ds.original_name}")
        for index, ds in enumerate(datasheets, 1)
    )
    master_content, *datasheet_contents = to_prompt_parts(labelled)

    _attach(parts, master_content, "DOCUMENT: Master List (Reference)")
    for index, (ds, content) in enumerate(zip(datasheets, datasheet_contents), 1):
        _attach(parts, content, f"DOCUMENT (File #{index}): Filename: {ds.original_name}")

    return parts
