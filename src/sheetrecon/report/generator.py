"""
Report generation for reconciliation results.

This module summarises a reconciliation run into a plain dictionary:
bucket counts, overall status, the engine log and follow-up
recommendations.
"""

from datetime import UTC, datetime
from typing import Any, Sequence

from ..cells import ZERO, format_number, parse_number
from ..model import Table


class ReportStatus:
    """Constants for report status values."""

    MATCH = "MATCH"
    MISMATCH = "MISMATCH"
    NO_DATA = "NO_DATA"


def format_timestamp(timestamp: datetime) -> str:
    """
    Format timestamp for reports

    Args:
        timestamp: DateTime object

    Returns:
        ISO 8601 formatted timestamp string
    """
    return timestamp.isoformat()


def generate_report(result) -> dict[str, Any]:
    """
    Generate a report from a reconciliation result

    Args:
        result: ReconciliationResult from run_reconciliation()

    Returns:
        Dictionary containing:
        - status: MATCH, MISMATCH, or NO_DATA
        - key_columns: Key columns used for matching
        - counts: Rows per bucket
        - merged_rows: Rows in the unified table
        - duplicate_keys: Ambiguous keys excluded from matching
        - match_rate: Matched rows over all classified rows, in percent
        - summary: Human-readable summary
        - recommendations: List of recommended actions
        - log: Engine log as ``[level, message]`` pairs
        - timestamp: Report generation timestamp
    """
    counts = result.counts()
    total = sum(counts.values())
    duplicate_keys = result.buckets.duplicate_key_count

    if total == 0:
        status = ReportStatus.NO_DATA
    elif counts["matched"] == total:
        status = ReportStatus.MATCH
    else:
        status = ReportStatus.MISMATCH

    match_rate = round(counts["matched"] * 100 / total, 2) if total else 0.0

    return {
        "status": status,
        "key_columns": list(result.key_columns),
        "counts": counts,
        "merged_rows": len(result.merged),
        "duplicate_keys": duplicate_keys,
        "match_rate": match_rate,
        "summary": _generate_summary(status, counts),
        "recommendations": _generate_recommendations(counts, duplicate_keys),
        "log": [list(entry) for entry in result.log],
        "timestamp": format_timestamp(datetime.now(UTC)),
    }


def _generate_summary(status: str, counts: dict[str, int]) -> str:
    """
    Generate human-readable summary

    Args:
        status: Report status
        counts: Rows per bucket

    Returns:
        Summary string
    """
    if status == ReportStatus.NO_DATA:
        return "Both inputs are empty. Nothing to reconcile."
    if status == ReportStatus.MATCH:
        return f"All {counts['matched']} rows matched on both sides."
    return (
        f"{counts['matched']} rows matched, {counts['left_only']} left only, "
        f"{counts['right_only']} right only and {counts['duplicates']} "
        f"rows with duplicate keys."
    )


def _generate_recommendations(counts: dict[str, int], duplicate_keys: int) -> list[str]:
    """
    Generate actionable recommendations based on bucket counts

    Args:
        counts: Rows per bucket
        duplicate_keys: Ambiguous keys excluded from matching

    Returns:
        List of recommendation strings
    """
    recommendations = []

    if duplicate_keys:
        recommendations.append(
            f"{duplicate_keys} key(s) occur more than once on a side. "
            "Add key columns until every key is unique, then rerun."
        )

    if counts["left_only"] or counts["right_only"]:
        recommendations.append(
            "Rows exist on one side only. Check key spelling, surrounding "
            "whitespace and letter case (try --case-insensitive)."
        )

    return recommendations


def add_totals_row(
    table: Table, columns: Sequence[str], label: str = "Total"
) -> Table:
    """
    Append a row holding the sum of each named numeric column.

    Non-numeric cells count as 0. The first cell holds ``label`` unless the
    first column is itself summed; other cells are empty. Unknown column
    names are ignored.

    Args:
        table: Source table
        columns: Columns to sum
        label: Text for the first cell

    Returns:
        New table with one extra row
    """
    indices = {i for i in (table.column_index(name) for name in columns) if i is not None}
    if not indices:
        return table

    totals = []
    for position in range(len(table.headers)):
        if position in indices:
            total = sum((parse_number(row[position]) for row in table.rows), ZERO)
            totals.append(format_number(total))
        else:
            totals.append(label if position == 0 else "")

    return table.with_rows(table.rows + (tuple(totals),))
