"""
Export Service - CSV report of an analysis result
"""
from typing import List

from ..errors import InputValidationError
from ..models import AnalysisResult

BOM = "\ufeff"  # Excel needs it to read UTF-8


def _escape(value) -> str:
    return ("" if value is None else str(value)).replace('"', '""')


def _quoted(value) -> str:
    return f'"{_escape(value)}"'


def group_label(index: int) -> str:
    """A, B, C ... by group position"""
    return chr(65 + index)


def export_analysis_csv(result: AnalysisResult) -> str:
    """
    Render an analysis as the CSV report

    Each group gets three quoted header lines, a 9-column table and two
    blank separator lines.

    Args:
        result: Validated analysis result

    Returns:
        CSV text, prefixed with a byte-order mark
    """
    if result is None or not result.groups:
        raise InputValidationError("No data to export")

    csv_rows: List[str] = []
    for index, group in enumerate(result.groups):
        label = group_label(index)
        sub1_label = f"{label}-1"
        sub2_label = f"{label}-2"

        part_a = _escape(group.mapped_parts.part_a or "Part A")
        part_b = _escape(group.mapped_parts.part_b or "Part B")
        part_c = _escape(group.mapped_parts.part_c or "Part C")

        csv_rows.append(f'"GROUP {label}: {part_a} vs Substitutes"')
        csv_rows.append(f'"Summary: {_escape(group.summary)}"')
        csv_rows.append(f'"Recommendation: {group.recommendation or "-"}"')

        headers = [
            "ID",
            "Parameter",
            "Unit",
            f"Spec {label} ({part_a})",
            f"Spec {sub1_label} ({part_b})",
            f"{sub1_label} Result",
            f"Spec {sub2_label} ({part_c})",
            f"{sub2_label} Result",
            "Comment",
        ]
        csv_rows.append(",".join(headers))

        for item in group.specs:
            row = [
                str(item.id),
                _quoted(item.parameter),
                _quoted(item.unit),
                _quoted(item.value_a),
                _quoted(item.value_b),
                _quoted(item.compliance_b.value),
                _quoted(item.value_c),
                _quoted(item.compliance_c.value),
                _quoted(item.comment),
            ]
            csv_rows.append(",".join(row))

        csv_rows.append("")
        csv_rows.append("")

    return BOM + "\n".join(csv_rows)
