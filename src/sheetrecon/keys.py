"""
Composite key construction.

A composite key joins the values of the key columns with the delimiter and
then normalizes the joined string as a whole. Segments are positional, so
the order of the key columns is part of the key.
"""

from typing import Sequence

from .model import KeyOptions, require_key_columns


def normalize_key(value: str, options: KeyOptions) -> str:
    """Apply trim and case folding to an already joined key."""
    if options.trim:
        value = value.strip()
    if options.case_insensitive:
        value = value.lower()
    return value


def join_key_cells(row: Sequence[str], key_indices: Sequence[int], delimiter: str = "|") -> str:
    """Join the raw key cells of a row, without normalization."""
    return delimiter.join(row[i] if 0 <= i < len(row) else "" for i in key_indices)


def build_key(row: Sequence[str], key_indices: Sequence[int], options: KeyOptions) -> str:
    """
    Build the composite key of a row.

    Args:
        row: Row cells
        key_indices: Positions of the key columns, in key order
        options: Normalization and delimiter

    Returns:
        Joined and normalized key string

    Raises:
        MissingKeyColumnsError: If ``key_indices`` is empty
    """
    require_key_columns(key_indices)
    return normalize_key(join_key_cells(row, key_indices, options.delimiter), options)


def resolve_key_indices(table, key_columns: Sequence[str]) -> list[int]:
    """
    Map key column names to positions in ``table``.

    Raises:
        MissingKeyColumnsError: If no key column is given
        UnknownColumnError: If a key column is not a header
    """
    require_key_columns(key_columns)
    return table.column_indices(key_columns)


def helper_key_name(
    key_columns: Sequence[str], headers: Sequence[str], delimiter: str = "|"
) -> str:
    """
    Name for a temporary column holding the precomputed composite key.

    The joined key names are used as-is unless they collide with an
    existing header, in which case they are wrapped in ``__`` until unique.
    """
    require_key_columns(key_columns)
    name = delimiter.join(key_columns)
    taken = set(headers)
    while name in taken:
        name = f"__{name}__"
    return name
