"""
Core data structures shared by the reconciliation and partition engines.

All structures are immutable. Engines never modify a Table in place; they
build and return new ones.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Any, Iterable, Sequence

from .cells import Cell, parse_cell
from .exceptions import DuplicateHeaderError, MissingKeyColumnsError, UnknownColumnError

logger = logging.getLogger(__name__)

LEFT_PREFIX = "L__"
RIGHT_PREFIX = "R__"


@dataclass(frozen=True)
class Table:
    """
    Ordered headers plus rows of text cells.

    Rows shorter than the header list are padded with empty strings and
    cells past the last header are dropped, so every row has exactly
    ``len(headers)`` cells.
    """

    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()

    def __post_init__(self):
        headers = tuple(str(h) for h in self.headers)
        duplicates = [name for name, count in Counter(headers).items() if count > 1]
        if duplicates:
            raise DuplicateHeaderError(duplicates)

        width = len(headers)
        normalized = []
        truncated = 0
        for row in self.rows:
            cells = tuple("" if cell is None else str(cell) for cell in row)
            if len(cells) < width:
                cells = cells + ("",) * (width - len(cells))
            elif len(cells) > width:
                cells = cells[:width]
                truncated += 1
            normalized.append(cells)

        if truncated:
            logger.warning(
                f"Dropped cells beyond the last header in {truncated} row(s) "
                f"({width} columns)"
            )

        object.__setattr__(self, "headers", headers)
        object.__setattr__(self, "rows", tuple(normalized))

    @classmethod
    def from_records(
        cls, headers: Iterable[str], rows: Iterable[Iterable[Any]] = ()
    ) -> "Table":
        """Build a table from any iterables of headers and rows."""
        return cls(tuple(headers), tuple(tuple(row) for row in rows))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Table":
        """Build a table from its interchange form ``{headers, rows}``."""
        return cls.from_records(data["headers"], data.get("rows", ()))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the interchange form ``{headers, rows}``."""
        return {
            "headers": list(self.headers),
            "rows": [list(row) for row in self.rows],
        }

    def __len__(self) -> int:
        return len(self.rows)

    @cached_property
    def typed_rows(self) -> tuple[tuple[Cell, ...], ...]:
        """Rows with every cell classified, computed once per table."""
        return tuple(tuple(parse_cell(cell) for cell in row) for row in self.rows)

    def column_index(self, name: str) -> int | None:
        """Position of a column, or None when absent."""
        try:
            return self.headers.index(name)
        except ValueError:
            return None

    def column_indices(self, names: Sequence[str]) -> list[int]:
        """
        Resolve column names to positions.

        Raises:
            UnknownColumnError: If any name is not a header
        """
        indices = []
        for name in names:
            index = self.column_index(name)
            if index is None:
                raise UnknownColumnError(name, self.headers)
            indices.append(index)
        return indices

    def with_rows(self, rows: Iterable[Sequence[str]]) -> "Table":
        """Same headers, different rows."""
        return Table(self.headers, tuple(tuple(row) for row in rows))

    def select_columns(self, names: Sequence[str]) -> "Table":
        """
        Project the table onto the given columns, in the given order.

        Unknown names are ignored. An empty selection keeps every column.
        """
        indices = [i for i in (self.column_index(n) for n in names) if i is not None]
        if not indices:
            return self
        return Table(
            tuple(self.headers[i] for i in indices),
            tuple(tuple(row[i] for i in indices) for row in self.rows),
        )

    def drop_column(self, name: str) -> "Table":
        """Remove one column if present."""
        index = self.column_index(name)
        if index is None:
            return self
        return Table(
            self.headers[:index] + self.headers[index + 1:],
            tuple(row[:index] + row[index + 1:] for row in self.rows),
        )

    def with_column(self, name: str, values: Sequence[str]) -> "Table":
        """Append a column; ``values`` holds one cell per row."""
        if len(values) != len(self.rows):
            raise ValueError(
                f"Column {name!r} has {len(values)} values for {len(self.rows)} rows"
            )
        return Table(
            self.headers + (name,),
            tuple(row + (value,) for row, value in zip(self.rows, values)),
        )


@dataclass(frozen=True)
class KeyOptions:
    """Normalization applied when building composite keys."""

    trim: bool = True
    case_insensitive: bool = False
    delimiter: str = "|"

    @classmethod
    def split_default(cls) -> "KeyOptions":
        """Policy used by the split operation unless told otherwise."""
        return cls(trim=True, case_insensitive=False)

    def to_dict(self) -> dict[str, bool]:
        return {"trim": self.trim, "case_insensitive": self.case_insensitive}


@dataclass(frozen=True)
class DiffColumnSpec:
    """A derived ``L__left_column - R__right_column`` numeric column."""

    left_column: str
    right_column: str
    label: str

    @property
    def is_complete(self) -> bool:
        return bool(self.left_column and self.right_column and self.label)


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortSpec:
    column: str
    direction: SortDirection = SortDirection.ASC

    def __post_init__(self):
        object.__setattr__(self, "direction", SortDirection(self.direction))

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC


@dataclass(frozen=True)
class Partition:
    """Rows sharing one composite key value."""

    key_value: str
    table: Table

    def to_dict(self) -> dict[str, Any]:
        return {"key_value": self.key_value, "table": self.table.to_dict()}


@dataclass(frozen=True)
class ReconciliationBuckets:
    """
    Classification of two keyed tables.

    Every bucket shares one header list:
    ``[key, L__<left columns>..., R__<right columns>...]``.

    ``duplicates`` lists the left rows first; ``duplicate_left_rows`` says
    how many of them there are.
    """

    matched: Table
    left_only: Table
    right_only: Table
    duplicates: Table
    log: tuple[tuple[str, str], ...] = field(default=())
    duplicate_key_count: int = 0
    duplicate_left_rows: int = 0

    def tables(self) -> dict[str, Table]:
        """Buckets by name, in unification order."""
        return {
            "matched": self.matched,
            "left_only": self.left_only,
            "right_only": self.right_only,
            "duplicates": self.duplicates,
        }

    def map_tables(self, func) -> "ReconciliationBuckets":
        """Apply ``func`` to every bucket table, keeping the log."""
        return ReconciliationBuckets(
            matched=func(self.matched),
            left_only=func(self.left_only),
            right_only=func(self.right_only),
            duplicates=func(self.duplicates),
            log=self.log,
            duplicate_key_count=self.duplicate_key_count,
            duplicate_left_rows=self.duplicate_left_rows,
        )


def require_key_columns(key_columns: Sequence) -> None:
    """Reject an empty key column selection."""
    if not key_columns:
        raise MissingKeyColumnsError()
