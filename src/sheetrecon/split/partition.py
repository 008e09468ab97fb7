"""
Key-based partitioning of a single table.
"""

import logging
from typing import Sequence

from ..keys import build_key
from ..model import KeyOptions, Partition, Table, require_key_columns

logger = logging.getLogger(__name__)


def partition(
    table: Table, key_indices: Sequence[int], options: KeyOptions
) -> list[Partition]:
    """
    Group rows by composite key.

    Partitions come out in the order their key was first seen and keep the
    rows in input order. Every partition carries the full source header
    list, key columns included.

    Args:
        table: Table to split
        key_indices: Key column positions
        options: Key normalization; ``key_value`` is the key under these options

    Returns:
        Ordered list of partitions

    Raises:
        MissingKeyColumnsError: If ``key_indices`` is empty
    """
    require_key_columns(key_indices)
    groups: dict[str, list[tuple]] = {}
    for row in table.rows:
        groups.setdefault(build_key(row, key_indices, options), []).append(row)

    # dicts keep insertion order, which is first-seen key order
    parts = [
        Partition(key_value=key, table=table.with_rows(rows))
        for key, rows in groups.items()
    ]
    logger.debug(f"Split {len(table.rows)} rows into {len(parts)} partition(s)")
    return parts
