"""
Schema unification of reconciliation buckets.

Buckets are concatenated into one table. The ``L__``/``R__`` copies of each
key column are folded back into a single column and user-requested
difference columns are appended.
Optional row status columns trace every merged row back to its bucket.
"""

import logging
from typing import Iterator, Sequence

from ..cells import format_number, parse_number
from ..exceptions import InvalidDiffSpecError
from ..model import LEFT_PREFIX, RIGHT_PREFIX, DiffColumnSpec, ReconciliationBuckets, Table

logger = logging.getLogger(__name__)

MATCH_STATUS_COLUMN = "match_status"
DIFF_COLS_COLUMN = "diff_cols"
DUP_KEY_FLAG_COLUMN = "dup_key_flag"
STATUS_COLUMNS = (MATCH_STATUS_COLUMN, DIFF_COLS_COLUMN, DUP_KEY_FLAG_COLUMN)


def _merged_headers(tables: Sequence[Table]) -> list[str]:
    seen = {}
    for table in tables:
        for header in table.headers:
            seen.setdefault(header, None)
    return list(seen)


def _shared_columns(headers: Sequence[str]) -> list[str]:
    """Columns present with both an ``L__`` and an ``R__`` copy, in left order."""
    present = set(headers)
    return [
        h[len(LEFT_PREFIX):] for h in headers
        if h.startswith(LEFT_PREFIX) and f"{RIGHT_PREFIX}{h[len(LEFT_PREFIX):]}" in present
    ]


def _row_statuses(buckets: ReconciliationBuckets) -> Iterator[tuple[str, str]]:
    """(match_status, dup_key_flag) for every bucket row, in unification order."""
    for _ in buckets.matched.rows:
        yield "both", "0"
    for _ in buckets.left_only.rows:
        yield "left_only", "0"
    for _ in buckets.right_only.rows:
        yield "right_only", "0"
    for position, _ in enumerate(buckets.duplicates.rows):
        side = "left_only" if position < buckets.duplicate_left_rows else "right_only"
        yield side, "1"


def _check_diff_specs(
    diff_specs: Sequence[DiffColumnSpec], headers: Sequence[str]
) -> list[DiffColumnSpec]:
    """Complete specs in declaration order; incomplete ones are ignored."""
    taken = set(headers)
    active = []
    for spec in diff_specs:
        if not spec.is_complete:
            logger.debug(f"Ignoring incomplete difference column spec: {spec}")
            continue
        if spec.label in taken:
            raise InvalidDiffSpecError(
                f"Difference column label {spec.label!r} collides with an existing column"
            )
        taken.add(spec.label)
        active.append(spec)
    return active


def unify(
    buckets: ReconciliationBuckets,
    key_column_names: Sequence[str],
    diff_specs: Sequence[DiffColumnSpec] = (),
    status_columns: bool = False,
) -> Table:
    """
    Merge all buckets into one table with a unified schema.

    Rows come in bucket order: matched, left-only, right-only, duplicates.
    Each ``L__k``/``R__k`` pair whose ``k`` is a key column becomes one
    column ``k``; key columns lead, in declared order, and every other
    column keeps its first-seen position. The folded value is the left one
    when non-empty, else the right one.

    Difference columns are computed from the rows as they were before
    folding, so ``L__<left_column>`` and ``R__<right_column>`` are always
    the side-specific values.

    With ``status_columns`` three columns are appended last:

    - ``match_status``: ``both`` for matched rows, else the side the row
      came from (``left_only`` or ``right_only``), duplicates included
    - ``diff_cols``: for matched rows, the comma-joined columns present on
      both sides whose left and right values differ; empty otherwise
    - ``dup_key_flag``: ``1`` for rows of an ambiguous key, else ``0``

    Args:
        buckets: Output of reconcile()
        key_column_names: Key columns as the user selected them
        diff_specs: Difference columns, appended in order
        status_columns: Append the row status columns

    Returns:
        Unified table

    Raises:
        InvalidDiffSpecError: If a diff label repeats or names an existing
            column (status columns included when requested)
    """
    tables = list(buckets.tables().values())
    source_headers = _merged_headers(tables)
    present = set(source_headers)

    folded_keys = []
    folded_sources = set()
    for key in dict.fromkeys(key_column_names):
        candidates = (f"{LEFT_PREFIX}{key}", f"{RIGHT_PREFIX}{key}", key)
        if any(c in present for c in candidates):
            folded_keys.append(key)
            folded_sources.update(candidates)

    other_headers = [h for h in source_headers if h not in folded_sources]
    headers = folded_keys + other_headers

    reserved = headers + list(STATUS_COLUMNS) if status_columns else headers
    active_diffs = _check_diff_specs(diff_specs, reserved)
    shared = _shared_columns(source_headers)
    statuses = _row_statuses(buckets)

    rows = []
    for table in tables:
        for source_row in table.rows:
            row_map = dict(zip(table.headers, source_row))
            row = [
                row_map.get(f"{LEFT_PREFIX}{key}")
                or row_map.get(f"{RIGHT_PREFIX}{key}")
                or row_map.get(key)
                or ""
                for key in folded_keys
            ]
            row.extend(row_map.get(h, "") for h in other_headers)
            for spec in active_diffs:
                difference = (
                    parse_number(row_map.get(f"{LEFT_PREFIX}{spec.left_column}", ""))
                    - parse_number(row_map.get(f"{RIGHT_PREFIX}{spec.right_column}", ""))
                )
                row.append(format_number(difference))
            if status_columns:
                match_status, dup_key_flag = next(statuses)
                diff_cols = ""
                if match_status == "both":
                    diff_cols = ",".join(
                        name for name in shared
                        if row_map.get(f"{LEFT_PREFIX}{name}", "")
                        != row_map.get(f"{RIGHT_PREFIX}{name}", "")
                    )
                row.extend((match_status, diff_cols, dup_key_flag))
            rows.append(tuple(row))

    headers.extend(spec.label for spec in active_diffs)
    if status_columns:
        headers.extend(STATUS_COLUMNS)
    logger.debug(
        f"Unified {len(rows)} rows into {len(headers)} columns "
        f"({len(folded_keys)} key, {len(active_diffs)} difference)"
    )
    return Table(tuple(headers), tuple(rows))
