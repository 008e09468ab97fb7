"""
Stable multi-column row sorting.

Cells are compared on their typed value: two numbers compare numerically,
two dates chronologically, anything else as locale-collated text. The same
comparator backs the reconciliation pre-sort, result ordering and the
user-requested output sort.
"""

import locale
import logging
from functools import cmp_to_key
from typing import Sequence

from .cells import Cell, DateCell, NumberCell, parse_cell
from .exceptions import TooManySortColumnsError
from .keys import normalize_key
from .model import KeyOptions, SortSpec, Table

logger = logging.getLogger(__name__)

MAX_SORT_COLUMNS = 3


def set_collation(name: str = "") -> str:
    """
    Select the locale used to collate text cells.

    Python starts in the C locale, where text compares by code point. The
    empty name picks the user's environment (LC_ALL, LC_COLLATE, LANG).

    Args:
        name: Locale name such as ``ja_JP.UTF-8``, or empty for the environment

    Returns:
        The collation locale now in effect
    """
    try:
        return locale.setlocale(locale.LC_COLLATE, name)
    except locale.Error as e:
        current = locale.setlocale(locale.LC_COLLATE)
        logger.warning(f"Collation locale {name!r} unavailable ({e}), keeping {current!r}")
        return current


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_cells(a: Cell, b: Cell) -> int:
    """
    Three-way comparison of two typed cells.

    Returns:
        Negative, zero or positive like a classic ``cmp``
    """
    if isinstance(a, NumberCell) and isinstance(b, NumberCell):
        return _cmp(a.value, b.value)
    if isinstance(a, DateCell) and isinstance(b, DateCell):
        return _cmp(a.value, b.value)
    return locale.strcoll(a.text, b.text)


def _sort_rows(
    rows: Sequence[tuple],
    typed: Sequence[tuple[Cell, ...]],
    columns: Sequence[tuple[int, bool]],
) -> list[tuple]:
    """Sort ``rows`` by ``(index, descending)`` columns using ``typed`` cells."""

    def compare(i: int, j: int) -> int:
        for index, descending in columns:
            result = compare_cells(typed[i][index], typed[j][index])
            if result:
                return -result if descending else result
        return 0

    # sorted() is stable, so ties keep their input order
    order = sorted(range(len(rows)), key=cmp_to_key(compare))
    return [rows[i] for i in order]


def sort_table(table: Table, sort_specs: Sequence[SortSpec]) -> Table:
    """
    Sort a table by up to three columns.

    Args:
        table: Table to sort (left unchanged)
        sort_specs: Priority chain of columns and directions. Columns that
            are not in the table are skipped.

    Returns:
        New sorted table

    Raises:
        TooManySortColumnsError: If more than three specs are given
    """
    if len(sort_specs) > MAX_SORT_COLUMNS:
        raise TooManySortColumnsError(
            f"At most {MAX_SORT_COLUMNS} sort columns are supported, got {len(sort_specs)}"
        )

    columns = []
    for spec in sort_specs:
        index = table.column_index(spec.column)
        if index is None:
            logger.debug(f"Sort column {spec.column!r} not in table, skipping")
            continue
        columns.append((index, spec.descending))

    if not columns or len(table.rows) < 2:
        return table

    return table.with_rows(_sort_rows(table.rows, table.typed_rows, columns))


def sort_by_key_columns(
    table: Table, key_indices: Sequence[int], options: KeyOptions
) -> Table:
    """
    Ascending sort on the key columns, in key order.

    Compared values get the key normalization (trim, lowercase) first, so
    rows that produce the same composite key end up adjacent.
    """
    indices = [i for i in key_indices if 0 <= i < len(table.headers)]
    if not indices or len(table.rows) < 2:
        return table

    # typed key cells only, addressed by their position in the key
    typed = [
        tuple(parse_cell(normalize_key(row[i], options)) for i in indices)
        for row in table.rows
    ]
    return table.with_rows(
        _sort_rows(table.rows, typed, [(k, False) for k in range(len(indices))])
    )
