"""
Unit tests for sheetrecon/model.py

Tests table normalization and projection helpers, option objects and
bucket containers.
"""

import logging

import pytest

from sheetrecon.cells import NumberCell, TextCell
from sheetrecon.exceptions import (
    DuplicateHeaderError,
    MissingKeyColumnsError,
    UnknownColumnError,
)
from sheetrecon.model import (
    DiffColumnSpec,
    KeyOptions,
    Partition,
    ReconciliationBuckets,
    SortDirection,
    SortSpec,
    Table,
    require_key_columns,
)


class TestTable:
    """Test Table construction and helpers"""

    def test_short_rows_are_padded(self):
        """Test missing trailing cells read as empty strings"""
        table = Table(("a", "b", "c"), (("1",),))

        assert table.rows == (("1", "", ""),)

    def test_long_rows_are_truncated_with_warning(self, caplog):
        """Test cells past the last header are dropped and logged"""
        # Act
        with caplog.at_level(logging.WARNING, logger="sheetrecon.model"):
            table = Table(("a",), (("1", "2"), ("3",)))

        # Assert
        assert table.rows == (("1",), ("3",))
        assert "1 row(s)" in caplog.text

    def test_cells_are_stringified(self):
        table = Table.from_records(["a", "b"], [[1, None]])

        assert table.rows == (("1", ""),)

    def test_duplicate_headers_rejected(self):
        with pytest.raises(DuplicateHeaderError) as exc_info:
            Table(("id", "x", "id"))

        assert exc_info.value.duplicates == ("id",)

    def test_dict_round_trip(self):
        data = {"headers": ["id", "v"], "rows": [["1", "a"]]}

        assert Table.from_dict(data).to_dict() == data

    def test_from_dict_without_rows(self):
        assert len(Table.from_dict({"headers": ["id"]})) == 0

    def test_typed_rows_computed_once(self):
        """Test typed view is cached on the instance"""
        table = Table(("n", "t"), (("5", "x"),))

        first = table.typed_rows

        assert first is table.typed_rows
        assert isinstance(first[0][0], NumberCell)
        assert first[0][1] == TextCell("x")

    def test_column_indices(self):
        table = Table(("a", "b", "c"))

        assert table.column_indices(["c", "a"]) == [2, 0]
        assert table.column_index("zz") is None

    def test_column_indices_unknown(self):
        table = Table(("a",))

        with pytest.raises(UnknownColumnError) as exc_info:
            table.column_indices(["a", "zz"])

        assert exc_info.value.column == "zz"
        assert exc_info.value.headers == ("a",)

    def test_select_columns(self):
        """Test projection follows the requested order and skips unknown names"""
        table = Table(("a", "b", "c"), (("1", "2", "3"),))

        selected = table.select_columns(["c", "zz", "a"])

        assert selected.headers == ("c", "a")
        assert selected.rows == (("3", "1"),)

    def test_select_nothing_keeps_table(self):
        table = Table(("a",), (("1",),))

        assert table.select_columns([]) is table
        assert table.select_columns(["zz"]) is table

    def test_drop_column(self):
        table = Table(("a", "b", "c"), (("1", "2", "3"),))

        dropped = table.drop_column("b")

        assert dropped.headers == ("a", "c")
        assert dropped.rows == (("1", "3"),)
        assert table.drop_column("zz") is table

    def test_with_column(self):
        table = Table(("a",), (("1",), ("2",)))

        extended = table.with_column("k", ["x", "y"])

        assert extended.headers == ("a", "k")
        assert extended.rows == (("1", "x"), ("2", "y"))
        assert table.headers == ("a",)

    def test_with_column_length_mismatch(self):
        table = Table(("a",), (("1",),))

        with pytest.raises(ValueError):
            table.with_column("k", [])


class TestOptions:
    """Test option and spec objects"""

    def test_key_option_defaults(self):
        options = KeyOptions()

        assert options.trim is True
        assert options.case_insensitive is False
        assert options.delimiter == "|"

    def test_split_default(self):
        assert KeyOptions.split_default() == KeyOptions(trim=True, case_insensitive=False)

    def test_diff_spec_completeness(self):
        assert DiffColumnSpec("a", "b", "d").is_complete
        assert not DiffColumnSpec("a", "", "d").is_complete
        assert not DiffColumnSpec("a", "b", "").is_complete

    def test_sort_spec_direction_coercion(self):
        spec = SortSpec("amount", "desc")

        assert spec.direction is SortDirection.DESC
        assert spec.descending
        assert not SortSpec("amount").descending

    def test_sort_spec_invalid_direction(self):
        with pytest.raises(ValueError):
            SortSpec("amount", "sideways")

    def test_partition_to_dict(self):
        part = Partition("a", Table(("k",), (("a",),)))

        assert part.to_dict() == {
            "key_value": "a",
            "table": {"headers": ["k"], "rows": [["a"]]},
        }


class TestReconciliationBuckets:
    """Test bucket container helpers"""

    def setup_method(self):
        empty = Table(("k", "L__v", "R__v"))
        self.buckets = ReconciliationBuckets(
            matched=empty,
            left_only=empty.with_rows([("a", "1", "")]),
            right_only=empty,
            duplicates=empty,
            log=(("info", "matched=0"),),
            duplicate_key_count=2,
            duplicate_left_rows=1,
        )

    def test_tables_order(self):
        assert list(self.buckets.tables()) == [
            "matched", "left_only", "right_only", "duplicates",
        ]

    def test_map_tables_keeps_log(self):
        mapped = self.buckets.map_tables(lambda t: t.drop_column("k"))

        assert mapped.left_only.headers == ("L__v", "R__v")
        assert mapped.log == self.buckets.log
        assert mapped.duplicate_key_count == 2
        assert mapped.duplicate_left_rows == 1


class TestRequireKeyColumns:

    def test_empty_rejected(self):
        with pytest.raises(MissingKeyColumnsError):
            require_key_columns([])

    def test_non_empty_accepted(self):
        require_key_columns([0])
