"""
Report formatting and export utilities.

This module provides functions to export reconciliation reports
as JSON or as console/terminal output.
"""

import json
from typing import Any

BUCKET_LABELS = {
    "matched": "Matched",
    "left_only": "Left Only",
    "right_only": "Right Only",
    "duplicates": "Duplicates",
}


def export_report_json(report: dict[str, Any], output_path: str) -> None:
    """
    Export report to JSON file

    Args:
        report: Report dictionary
        output_path: Path to output file
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(report, f, indent=2, ensure_ascii=False)


def format_report_console(report: dict[str, Any]) -> str:
    """
    Format report for console output

    Args:
        report: Report dictionary

    Returns:
        Formatted string for console display
    """
    lines = []

    lines.append("=" * 80)
    lines.append("RECONCILIATION REPORT")
    lines.append("=" * 80)
    lines.append(f"Status: {report['status']}")
    lines.append(f"Timestamp: {report['timestamp']}")
    lines.append(f"Key Columns: {', '.join(report['key_columns'])}")
    for bucket, label in BUCKET_LABELS.items():
        lines.append(f"{label}: {report['counts'][bucket]:,}")
    lines.append(f"Duplicate Keys: {report['duplicate_keys']:,}")
    lines.append(f"Match Rate: {report['match_rate']}%")
    lines.append("")

    lines.append("SUMMARY")
    lines.append("-" * 80)
    lines.append(report['summary'])
    lines.append("")

    warnings = [message for level, message in report['log'] if level == "warning"]
    if warnings:
        lines.append("WARNINGS")
        lines.append("-" * 80)
        for message in warnings:
            lines.append(f"  {message}")
        lines.append("")

    if report['recommendations']:
        lines.append("RECOMMENDATIONS")
        lines.append("-" * 80)
        for i, rec in enumerate(report['recommendations'], 1):
            lines.append(f"{i}. {rec}")
        lines.append("")

    lines.append("=" * 80)

    return "\n".join(lines)
