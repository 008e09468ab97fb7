"""
Key-based reconciliation engine.

This module classifies the rows of two tables by composite key into
matched pairs, left-only rows, right-only rows and ambiguous duplicates.
"""

import logging
from typing import Sequence

from ..exceptions import KeyColumnError
from ..keys import build_key, join_key_cells
from ..model import (
    LEFT_PREFIX,
    RIGHT_PREFIX,
    KeyOptions,
    ReconciliationBuckets,
    Table,
    require_key_columns,
)

logger = logging.getLogger(__name__)


def _index_keys(
    table: Table, key_indices: Sequence[int], options: KeyOptions
) -> tuple[list[str], dict[str, list[int]]]:
    """Key of every row plus key -> row positions, in one pass."""
    keys = []
    positions: dict[str, list[int]] = {}
    for position, row in enumerate(table.rows):
        key = build_key(row, key_indices, options)
        keys.append(key)
        positions.setdefault(key, []).append(position)
    return keys, positions


def reconcile(
    left: Table,
    right: Table,
    left_key_cols: Sequence[int],
    right_key_cols: Sequence[int],
    options: KeyOptions,
    key_name: str | None = None,
) -> ReconciliationBuckets:
    """
    Classify two tables by composite key.

    A key present on both sides with exactly one row per side is a match.
    A key present on both sides with several rows on either side is
    ambiguous: every row of that key, from both sides, goes to duplicates.
    Keys seen on one side only go to that side's bucket, one output row per
    input row.

    The key column of every output row holds the row's own key cells joined
    with the delimiter, as written in the source. Normalization only decides
    which rows share a key.

    Args:
        left: Left table
        right: Right table
        left_key_cols: Key column positions in ``left``
        right_key_cols: Key column positions in ``right``, same key order
        options: Key normalization
        key_name: Header of the output key column (default: left key
            column names joined with the delimiter)

    Returns:
        ReconciliationBuckets whose tables all share the header
        ``[key, L__<left non-key>..., R__<right non-key>...]``

    Raises:
        MissingKeyColumnsError: If either side has no key column
        KeyColumnError: If the sides select a different number of key columns
    """
    require_key_columns(left_key_cols)
    require_key_columns(right_key_cols)
    if len(left_key_cols) != len(right_key_cols):
        raise KeyColumnError(
            f"Left selects {len(left_key_cols)} key column(s), "
            f"right selects {len(right_key_cols)}"
        )

    if key_name is None:
        key_name = options.delimiter.join(
            left.headers[i] if 0 <= i < len(left.headers) else "" for i in left_key_cols
        )

    left_key_set = set(left_key_cols)
    right_key_set = set(right_key_cols)
    left_value_cols = [i for i in range(len(left.headers)) if i not in left_key_set]
    right_value_cols = [i for i in range(len(right.headers)) if i not in right_key_set]

    headers = (
        (key_name,)
        + tuple(f"{LEFT_PREFIX}{left.headers[i]}" for i in left_value_cols)
        + tuple(f"{RIGHT_PREFIX}{right.headers[i]}" for i in right_value_cols)
    )
    left_blank = ("",) * len(left_value_cols)
    right_blank = ("",) * len(right_value_cols)

    def left_cells(row: tuple) -> tuple:
        return tuple(row[i] for i in left_value_cols)

    def right_cells(row: tuple) -> tuple:
        return tuple(row[i] for i in right_value_cols)

    # output rows carry the key cells as written; normalized keys only group
    def left_key(row: tuple) -> tuple:
        return (join_key_cells(row, left_key_cols, options.delimiter),)

    def right_key(row: tuple) -> tuple:
        return (join_key_cells(row, right_key_cols, options.delimiter),)

    left_keys, left_map = _index_keys(left, left_key_cols, options)
    right_keys, right_map = _index_keys(right, right_key_cols, options)

    ambiguous = {
        key for key in left_map.keys() & right_map.keys()
        if len(left_map[key]) > 1 or len(right_map[key]) > 1
    }

    matched_rows = []
    left_only_rows = []
    dup_left_rows = []
    for position, row in enumerate(left.rows):
        key = left_keys[position]
        if key in ambiguous:
            dup_left_rows.append(left_key(row) + left_cells(row) + right_blank)
        elif key in right_map:
            partner = right.rows[right_map[key][0]]
            matched_rows.append(left_key(row) + left_cells(row) + right_cells(partner))
        else:
            left_only_rows.append(left_key(row) + left_cells(row) + right_blank)

    right_only_rows = []
    dup_right_rows = []
    for position, row in enumerate(right.rows):
        key = right_keys[position]
        if key in ambiguous:
            dup_right_rows.append(right_key(row) + left_blank + right_cells(row))
        elif key not in left_map:
            right_only_rows.append(right_key(row) + left_blank + right_cells(row))

    log = [
        ("info", f"left_rows={len(left.rows)}"),
        ("info", f"right_rows={len(right.rows)}"),
        ("info", f"key_column={key_name}"),
        ("info", f"trim={options.trim}"),
        ("info", f"case_insensitive={options.case_insensitive}"),
        ("info", f"matched={len(matched_rows)}"),
        ("info", f"left_only={len(left_only_rows)}"),
        ("info", f"right_only={len(right_only_rows)}"),
    ]
    dup_level = "warning" if ambiguous else "info"
    log.append((dup_level, f"duplicate_keys={len(ambiguous)}"))
    log.append((dup_level, f"duplicates_left={len(dup_left_rows)}"))
    log.append((dup_level, f"duplicates_right={len(dup_right_rows)}"))

    logger.debug(
        f"Reconciled {len(left.rows)} left / {len(right.rows)} right rows: "
        f"{len(matched_rows)} matched, {len(left_only_rows)} left-only, "
        f"{len(right_only_rows)} right-only, "
        f"{len(dup_left_rows) + len(dup_right_rows)} duplicate-key rows"
    )

    return ReconciliationBuckets(
        matched=Table(headers, tuple(matched_rows)),
        left_only=Table(headers, tuple(left_only_rows)),
        right_only=Table(headers, tuple(right_only_rows)),
        duplicates=Table(headers, tuple(dup_left_rows + dup_right_rows)),
        log=tuple(log),
        duplicate_key_count=len(ambiguous),
        duplicate_left_rows=len(dup_left_rows),
    )
