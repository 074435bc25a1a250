"""
Analysis Logger - Log completeness checks and analysis results to .txt/.json files
"""
import json
import os
import traceback
from datetime import datetime
from typing import List

from ..config import get_log_directory
from ..models import AnalysisResult, ComparisonGroup, CompletenessResult


def _ensure_log_directory() -> str:
    log_dir = get_log_directory()
    os.makedirs(log_dir, exist_ok=True)
    return log_dir


def _wrap(text: str, width: int = 78, indent: str = "  ") -> List[str]:
    """Wrap long free text for the .txt log"""
    lines = []
    current_line = ""
    for word in text.split():
        if len(current_line) + len(word) + 1 > width:
            if current_line:
                lines.append(f"{indent}{current_line}")
            current_line = word
        else:
            current_line = f"{current_line} {word}" if current_line else word
    if current_line:
        lines.append(f"{indent}{current_line}")
    return lines


def format_comparison_group(group: ComparisonGroup) -> str:
    """
    Format a single comparison group for text output.

    Args:
        group: One comparison group of an analysis result

    Returns:
        Formatted string representation
    """
    parts = group.mapped_parts
    lines = ["=" * 80]
    lines.append(f"Row {group.row_number}: {parts.part_a} vs {parts.part_b or '-'} / {parts.part_c or '-'}")
    lines.append(f"Recommendation: {group.recommendation}")

    if group.summary:
        lines.append("\nSummary:")
        lines.extend(_wrap(group.summary))

    lines.append("\nSpecifications:")
    for item in group.specs:
        unit = f" [{item.unit}]" if item.unit else ""
        lines.append(f"  {item.id:>2}. {item.parameter}{unit}")
        lines.append(f"      A: {item.value_a}")
        lines.append(f"      B: {item.value_b} ({item.compliance_b.value})")
        lines.append(f"      C: {item.value_c} ({item.compliance_c.value})")
        if item.comment:
            lines.extend(_wrap(item.comment, indent="      # "))

    lines.append("")
    return "\n".join(lines)


def _write_json_log(log_dir: str, prefix: str, timestamp: str, metadata: dict, payload: dict) -> str:
    log_path = os.path.join(log_dir, f"{prefix}_{timestamp}.json")
    with open(log_path, 'w', encoding='utf-8') as f:
        json.dump({"metadata": metadata, "result": payload}, f, indent=2, ensure_ascii=False)
    return log_path


def log_completeness_result(result: CompletenessResult, filenames: List[str]) -> str:
    """
    Log a completeness check to a .txt file, with a .json twin.

    Args:
        result: Validated completeness result
        filenames: Datasheet filenames the check was run against

    Returns:
        Path to the created .txt log file, or "" if logging failed
    """
    try:
        log_dir = _ensure_log_directory()
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        log_path = os.path.join(log_dir, f"completeness_{timestamp}.txt")

        with open(log_path, 'w', encoding='utf-8') as f:
            f.write("=" * 80 + "\n")
            f.write("Completeness Check Log\n")
            f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
            f.write("=" * 80 + "\n\n")

            f.write("SUMMARY\n")
            f.write("-" * 80 + "\n")
            f.write(f"Uploaded Datasheets: {len(filenames)}\n")
            f.write(f"Master List Rows: {len(result.grouped_rows)}\n")
            f.write(f"All Provided: {result.all_provided}\n")
            f.write(f"Message: {result.message}\n")
            f.write("\n" + "=" * 80 + "\n\n")

            for idx, row in enumerate(result.grouped_rows, 1):
                f.write(f"Row #{idx}\n")
                for role, part in [("Original", row.original)] + [("Substitute", s) for s in row.substitutes]:
                    matched = f" -> {part.matched_filename}" if part.matched_filename else ""
                    f.write(f"  {role:<10} {part.part_name}: {part.status}{matched}\n")
                f.write("\n")

            f.write("=" * 80 + "\n")
            f.write("End of Completeness Log\n")

        _write_json_log(
            log_dir, "completeness", timestamp,
            {"generated": datetime.now().isoformat(), "filenames": filenames},
            result.to_payload(),
        )
        return log_path

    except Exception as e:
        # Log error but don't fail the phase
        print(f"Error writing completeness log: {e}")
        traceback.print_exc()
        return ""


def log_analysis_results(result: AnalysisResult, filenames: List[str]) -> str:
    """
    Log a full analysis to a .txt file, with a .json twin.

    Args:
        result: Validated analysis result
        filenames: Datasheet filenames attached to the analysis

    Returns:
        Path to the created .txt log file, or "" if logging failed
    """
    try:
        log_dir = _ensure_log_directory()
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        log_path = os.path.join(log_dir, f"analysis_{timestamp}.txt")

        with open(log_path, 'w', encoding='utf-8') as f:
            f.write("=" * 80 + "\n")
            f.write("Substitution Analysis Log\n")
            f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
            f.write("=" * 80 + "\n\n")

            f.write("SUMMARY\n")
            f.write("-" * 80 + "\n")
            f.write(f"Datasheets Attached: {len(filenames)}\n")
            f.write(f"Comparison Groups: {len(result.groups)}\n")
            missing = ", ".join(result.missing_files) if result.missing_files else "None"
            f.write(f"Missing Files: {missing}\n")
            f.write("\n" + "=" * 80 + "\n\n")

            f.write("DETAILED RESULTS\n")
            f.write("-" * 80 + "\n\n")
            for idx, group in enumerate(result.groups, 1):
                f.write(f"Group #{idx}\n")
                f.write(format_comparison_group(group))
                f.write("\n")

            f.write("=" * 80 + "\n")
            f.write("End of Analysis Log\n")
            f.write(f"Log file: {log_path}\n")
            f.write("=" * 80 + "\n")

        _write_json_log(
            log_dir, "analysis", timestamp,
            {
                "generated": datetime.now().isoformat(),
                "filenames": filenames,
                "total_groups": len(result.groups),
            },
            result.to_payload(),
        )
        return log_path

    except Exception as e:
        print(f"Error writing analysis log: {e}")
        traceback.print_exc()
        return ""
