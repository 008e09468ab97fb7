"""
JSON interchange boundary of the engine.

Hosts exchange plain JSON records with the engine:

- compare_files: ``{left_headers, left_rows, right_headers, right_rows, key,
  options: {trim, case_insensitive}}`` -> ``{result, left_only, right_only,
  duplicates, log}``
- split_file: ``{headers, rows, key}`` -> ``{parts: [{key_value, table}]}``

``key`` names a helper column holding the precomputed composite key on
every input table. Callers add it with attach_key_column() and remove it
from every returned table with strip_column().
"""

import json
import logging
from typing import Any, Sequence

from .compare import reconcile
from .exceptions import InterchangeError, SheetReconError
from .keys import build_key, helper_key_name, resolve_key_indices
from .model import KeyOptions, Table
from .split import partition
from .utils.tracing import add_span_attributes, trace_operation

logger = logging.getLogger(__name__)


def attach_key_column(
    table: Table,
    key_columns: Sequence[str],
    options: KeyOptions,
    name: str | None = None,
) -> tuple[Table, str]:
    """
    Append a helper column holding each row's composite key.

    Args:
        table: Source table
        key_columns: Key column names, in key order
        options: Key normalization
        name: Helper column name (default: helper_key_name() for the table)

    Returns:
        Tuple of (table with helper column, helper column name)
    """
    indices = resolve_key_indices(table, key_columns)
    if name is None:
        name = helper_key_name(key_columns, table.headers, options.delimiter)
    keys = [build_key(row, indices, options) for row in table.rows]
    return table.with_column(name, keys), name


def strip_column(table: Table, name: str) -> Table:
    """Remove a helper column from a returned table."""
    return table.drop_column(name)


def _decode(input_json: str | bytes) -> dict[str, Any]:
    try:
        payload = json.loads(input_json)
    except (TypeError, ValueError) as e:
        raise InterchangeError(f"Invalid JSON input: {e}") from e
    if not isinstance(payload, dict):
        raise InterchangeError("Input must be a JSON object")
    return payload


def _field(payload: dict[str, Any], name: str, kind: type) -> Any:
    if name not in payload:
        raise InterchangeError(f"Missing field: {name}")
    value = payload[name]
    if not isinstance(value, kind):
        raise InterchangeError(f"Field {name} must be {kind.__name__}")
    return value


def _table(payload: dict[str, Any], headers_field: str, rows_field: str) -> Table:
    headers = _field(payload, headers_field, list)
    rows = _field(payload, rows_field, list)
    if not all(isinstance(h, str) for h in headers):
        raise InterchangeError(f"Field {headers_field} must hold strings")
    if not all(isinstance(r, list) for r in rows):
        raise InterchangeError(f"Field {rows_field} must hold lists")
    try:
        return Table.from_records(headers, rows)
    except SheetReconError as e:
        raise InterchangeError(f"Invalid table in {headers_field}: {e}") from e


def _key_index(table: Table, key: str, side: str) -> int:
    index = table.column_index(key)
    if index is None:
        raise InterchangeError(f"Key column {key!r} not found in {side} headers")
    return index


def _options(payload: dict[str, Any]) -> KeyOptions:
    raw = _field(payload, "options", dict)
    trim = raw.get("trim", False)
    case_insensitive = raw.get("case_insensitive", False)
    if not isinstance(trim, bool) or not isinstance(case_insensitive, bool):
        raise InterchangeError("Options trim and case_insensitive must be booleans")
    return KeyOptions(trim=trim, case_insensitive=case_insensitive)


def compare_files(input_json: str | bytes) -> str:
    """
    Reconcile two tables given as a JSON request.

    Returns:
        JSON response; ``result`` holds the matched bucket

    Raises:
        InterchangeError: If the request cannot be decoded
    """
    with trace_operation("compare_files", component="interchange"):
        payload = _decode(input_json)
        left = _table(payload, "left_headers", "left_rows")
        right = _table(payload, "right_headers", "right_rows")
        key = _field(payload, "key", str)
        options = _options(payload)

        buckets = reconcile(
            left,
            right,
            [_key_index(left, key, "left")],
            [_key_index(right, key, "right")],
            options,
            key_name=key,
        )
        add_span_attributes(
            left_rows=len(left),
            right_rows=len(right),
            matched=len(buckets.matched),
        )

        return json.dumps({
            "result": buckets.matched.to_dict(),
            "left_only": buckets.left_only.to_dict(),
            "right_only": buckets.right_only.to_dict(),
            "duplicates": buckets.duplicates.to_dict(),
            "log": [list(entry) for entry in buckets.log],
        }, ensure_ascii=False)


def split_file(input_json: str | bytes) -> str:
    """
    Partition one table given as a JSON request.

    ``key_value`` of each part is the helper column value under the default
    split policy (trimmed, case preserved).

    Raises:
        InterchangeError: If the request cannot be decoded
    """
    with trace_operation("split_file", component="interchange"):
        payload = _decode(input_json)
        table = _table(payload, "headers", "rows")
        key = _field(payload, "key", str)

        parts = partition(table, [_key_index(table, key, "input")], KeyOptions.split_default())
        add_span_attributes(rows=len(table), parts=len(parts))

        return json.dumps(
            {"parts": [part.to_dict() for part in parts]},
            ensure_ascii=False,
        )
