"""
Exception hierarchy for the reconciliation and partition engine.

Classification outcomes (left-only rows, duplicate keys) are never errors;
these exceptions cover rejected preconditions and malformed input at the
interchange boundary.
"""


class SheetReconError(Exception):
    """Base class for all sheetrecon errors."""


class MissingKeyColumnsError(SheetReconError):
    """Raised when an operation is invoked without any key column."""

    def __init__(self, message: str = "At least one key column is required"):
        super().__init__(message)


class UnknownColumnError(SheetReconError):
    """Raised when a named column does not exist in a table's headers."""

    def __init__(self, column: str, headers=()):
        self.column = column
        self.headers = tuple(headers)
        super().__init__(f"Column not found: {column!r}")


class KeyColumnError(SheetReconError):
    """Raised when left and right key column selections are incompatible."""


class DuplicateHeaderError(SheetReconError):
    """Raised when a table declares the same column name twice."""

    def __init__(self, duplicates):
        self.duplicates = tuple(duplicates)
        super().__init__(f"Duplicate header names: {', '.join(self.duplicates)}")


class InvalidDiffSpecError(SheetReconError):
    """Raised when a difference column label is unusable."""


class TooManySortColumnsError(SheetReconError):
    """Raised when more sort columns are requested than supported."""


class InterchangeError(SheetReconError):
    """Raised when an interchange payload cannot be decoded."""
