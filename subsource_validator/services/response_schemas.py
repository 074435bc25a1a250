"""
Declared output schemas for the two phases.

Written for strict structured output: every property is required and objects
forbid extra keys, so optional values are expressed as nullable types.
"""
from ..models import ComplianceLevel

COMPLETENESS_SCHEMA_NAME = "completeness_check"
ANALYSIS_SCHEMA_NAME = "substitution_analysis"

COMPLIANCE_VALUES = [level.value for level in ComplianceLevel]

_PART_STATUS_SCHEMA = {
    "type": "object",
    "properties": {
        "partName": {"type": "string"},
        "status": {"type": "string", "enum": ["Provided", "Missing"]},
        "matchedFilename": {"type": ["string", "null"]},
    },
    "required": ["partName", "status", "matchedFilename"],
    "additionalProperties": False,
}

COMPLETENESS_SCHEMA = {
    "type": "object",
    "properties": {
        "groupedRows": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "original": _PART_STATUS_SCHEMA,
                    # array so B, C, ... are all captured
                    "substitutes": {"type": "array", "items": _PART_STATUS_SCHEMA},
                },
                "required": ["original", "substitutes"],
                "additionalProperties": False,
            },
        },
        "allProvided": {"type": "boolean"},
        "message": {"type": "string"},
    },
    "required": ["groupedRows", "allProvided", "message"],
    "additionalProperties": False,
}

_SPEC_ITEM_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "integer"},
        "parameter": {"type": "string"},
        "unit": {"type": "string"},
        "valueA": {"type": "string"},
        "valueB": {"type": "string"},
        "complianceB": {"type": "string", "enum": COMPLIANCE_VALUES},
        "valueC": {"type": "string"},
        "complianceC": {"type": "string", "enum": COMPLIANCE_VALUES},
        "comment": {"type": "string"},
    },
    "required": [
        "id", "parameter", "unit", "valueA", "valueB",
        "complianceB", "valueC", "complianceC", "comment",
    ],
    "additionalProperties": False,
}

ANALYSIS_SCHEMA = {
    "type": "object",
    "properties": {
        "missingFiles": {
            "type": "array",
            "items": {"type": "string"},
            "description": "List of part numbers that had NO attached datasheet.",
        },
        "groups": {
            "type": "array",
            "description": "List of comparison groups (one per row in Master List)",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "rowNumber": {"type": "integer"},
                    "summary": {
                        "type": "string",
                        "description": "Executive summary for this specific component group.",
                    },
                    "mappedParts": {
                        "type": "object",
                        "properties": {
                            "partA": {"type": "string"},
                            "partB": {"type": "string"},
                            "partC": {"type": "string"},
                        },
                        "required": ["partA", "partB", "partC"],
                        "additionalProperties": False,
                    },
                    "recommendation": {"type": "string", "enum": ["B", "C", "None", "Both"]},
                    "specs": {"type": "array", "items": _SPEC_ITEM_SCHEMA},
                },
                "required": ["id", "rowNumber", "summary", "mappedParts", "recommendation", "specs"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["groups", "missingFiles"],
    "additionalProperties": False,
}
