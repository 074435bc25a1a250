"""
Validation Service - The two phases: completeness check and full analysis
"""
from typing import List

from ..errors import InputValidationError
from ..models import AnalysisResult, CompletenessResult, IngestedFile
from .ai_service import GenerationClient, extract
from .file_service import validate_media_type
from .prompt_service import build_analysis_parts, build_completeness_parts
from .response_schemas import (
    ANALYSIS_SCHEMA,
    ANALYSIS_SCHEMA_NAME,
    COMPLETENESS_SCHEMA,
    COMPLETENESS_SCHEMA_NAME,
)


def _require_inputs(master_list: IngestedFile, datasheets: List[IngestedFile]) -> None:
    if master_list is None:
        raise InputValidationError("No master list provided.")
    if not datasheets:
        raise InputValidationError("No datasheets provided.")


def check_completeness(master_list: IngestedFile, datasheets: List[IngestedFile],
                       client: GenerationClient) -> CompletenessResult:
    """
    Phase 1: which parts of the master list have a matching datasheet

    Args:
        master_list: The ingested master list
        datasheets: Uploaded datasheets (only their names are sent)
        client: Generation capability

    Returns:
        Validated completeness result
    """
    _require_inputs(master_list, datasheets)
    validate_media_type(master_list.original_name, master_list.media_type)

    filenames = [ds.original_name for ds in datasheets]
    parts = build_completeness_parts(master_list, filenames)
    return extract(client, parts, COMPLETENESS_SCHEMA, COMPLETENESS_SCHEMA_NAME, CompletenessResult)


def analyze_datasheets(master_list: IngestedFile, datasheets: List[IngestedFile],
                       client: GenerationClient) -> AnalysisResult:
    """
    Phase 2: per-group specification comparison of original vs substitutes

    Args:
        master_list: The ingested master list
        datasheets: Every uploaded datasheet, attached in full

    Returns:
        Validated analysis result
    """
    _require_inputs(master_list, datasheets)
    validate_media_type(master_list.original_name, master_list.media_type)
    for ds in datasheets:
        validate_media_type(ds.original_name, ds.media_type)

    parts = build_analysis_parts(master_list, datasheets)
    return extract(client, parts, ANALYSIS_SCHEMA, ANALYSIS_SCHEMA_NAME, AnalysisResult)
