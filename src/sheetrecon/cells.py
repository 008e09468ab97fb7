"""
Typed view of textual cells.

Tables store every value as text. Sorting and difference columns need to
know whether a cell is a number or a date, so each cell is classified once
into a TextCell, NumberCell or DateCell and the typed value is reused.
"""

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation

_NUMBER_RE = re.compile(
    r"^[+-]?(?:\d{1,3}(?:,\d{3})+|\d+)?(?:\.\d+)?(?:[eE][+-]?\d+)?$"
)
_DATE_RE = re.compile(r"^(\d{4})([-/.])(\d{1,2})\2(\d{1,2})$")

ZERO = Decimal(0)


@dataclass(frozen=True)
class TextCell:
    """Cell holding plain text."""

    text: str


@dataclass(frozen=True)
class NumberCell:
    """Cell whose text is a finite number."""

    text: str
    value: Decimal


@dataclass(frozen=True)
class DateCell:
    """Cell whose text is a calendar date."""

    text: str
    value: date


Cell = TextCell | NumberCell | DateCell


def _parse_decimal(stripped: str) -> Decimal | None:
    if not stripped or not _NUMBER_RE.match(stripped):
        return None
    # the regex also accepts lone signs and separators
    if not any(ch.isdigit() for ch in stripped):
        return None
    try:
        value = Decimal(stripped.replace(",", ""))
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def _parse_date(stripped: str) -> date | None:
    match = _DATE_RE.match(stripped)
    if not match:
        return None
    year, _, month, day = match.groups()
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def parse_cell(text: str) -> Cell:
    """
    Classify a text cell.

    Args:
        text: Raw cell text

    Returns:
        NumberCell for numeric text, DateCell for ISO-like dates,
        TextCell otherwise
    """
    stripped = text.strip()

    number = _parse_decimal(stripped)
    if number is not None:
        return NumberCell(text, number)

    day = _parse_date(stripped)
    if day is not None:
        return DateCell(text, day)

    return TextCell(text)


def parse_number(text: str) -> Decimal:
    """Numeric value of a cell, 0 when the text is not a number."""
    number = _parse_decimal(text.strip())
    return ZERO if number is None else number


def format_number(value: Decimal) -> str:
    """
    Render a Decimal without exponent or trailing zeros.

    Example:
        >>> format_number(Decimal("-10.00"))
        '-10'
        >>> format_number(Decimal("10.250"))
        '10.25'
    """
    if value == 0:
        return "0"
    text = format(value.normalize(), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
