"""
Unit tests for sheetrecon/compare/unify.py
"""

from dataclasses import replace

import pytest

from sheetrecon.compare import STATUS_COLUMNS, reconcile, unify
from sheetrecon.exceptions import InvalidDiffSpecError
from sheetrecon.model import DiffColumnSpec, KeyOptions, ReconciliationBuckets, Table

HEADERS = ("L__id", "L__amount", "R__id", "R__amount")


def make_buckets(matched=(), left_only=(), right_only=(), duplicates=(), headers=HEADERS):
    table = Table(headers)
    return ReconciliationBuckets(
        matched=table.with_rows(matched),
        left_only=table.with_rows(left_only),
        right_only=table.with_rows(right_only),
        duplicates=table.with_rows(duplicates),
    )


def matched_buckets():
    return make_buckets(matched=[("A", "10", "A", "20")])


class TestUnify:
    """Test unify()"""

    def setup_method(self):
        self.buckets = make_buckets(
            matched=[("A", "10", "A", "20")],
            left_only=[("B", "5", "", "")],
            right_only=[("", "", "C", "7")],
        )

    def test_key_columns_folded_and_leading(self):
        merged = unify(self.buckets, ["id"])

        assert merged.headers == ("id", "L__amount", "R__amount")
        assert [row[0] for row in merged.rows] == ["A", "B", "C"]

    def test_difference_column(self):
        """Test diff = L__left - R__right with missing values as 0"""
        # Act
        merged = unify(
            self.buckets, ["id"], [DiffColumnSpec("amount", "amount", "diff")]
        )

        # Assert
        assert merged.headers[-1] == "diff"
        assert [row[-1] for row in merged.rows] == ["-10", "5", "-7"]

    def test_bucket_order(self):
        buckets = make_buckets(
            matched=[("M", "", "M", "")],
            left_only=[("L", "", "", "")],
            right_only=[("", "", "R", "")],
            duplicates=[("D", "", "", "")],
        )

        merged = unify(buckets, ["id"])

        assert [row[0] for row in merged.rows] == ["M", "L", "R", "D"]

    def test_left_value_wins_when_present(self):
        buckets = make_buckets(matched=[("left", "", "right", "")])

        merged = unify(buckets, ["id"])

        assert merged.rows[0][0] == "left"

    def test_declared_key_order(self):
        headers = ("L__x", "L__a", "L__b", "R__x", "R__a", "R__b")
        buckets = make_buckets(matched=[("1", "a", "b", "2", "a", "b")], headers=headers)

        merged = unify(buckets, ["b", "a"])

        assert merged.headers == ("b", "a", "L__x", "R__x")
        assert merged.rows == (("b", "a", "1", "2"),)

    def test_bare_key_column_kept(self):
        """Test a key column already named without prefix stays as is"""
        left = Table(("id", "v"), (("A", "1"),))
        right = Table(("id", "v"), (("A", "2"),))

        merged = unify(reconcile(left, right, [0], [0], KeyOptions()), ["id"])

        assert merged.headers == ("id", "L__v", "R__v")
        assert merged.rows == (("A", "1", "2"),)

    def test_unknown_key_names_ignored(self):
        merged = unify(self.buckets, ["id", "nope"])

        assert merged.headers == ("id", "L__amount", "R__amount")

    def test_incomplete_diff_ignored(self):
        merged = unify(self.buckets, ["id"], [DiffColumnSpec("amount", "", "diff")])

        assert "diff" not in merged.headers

    def test_diff_over_non_numeric_values(self):
        buckets = make_buckets(matched=[("A", "n/a", "A", "1,000.5")])

        merged = unify(buckets, ["id"], [DiffColumnSpec("amount", "amount", "d")])

        assert merged.rows[0][-1] == "-1000.5"

    def test_multiple_diffs_in_order(self):
        merged = unify(
            self.buckets,
            ["id"],
            [
                DiffColumnSpec("amount", "amount", "d1"),
                DiffColumnSpec("id", "amount", "d2"),
            ],
        )

        assert merged.headers[-2:] == ("d1", "d2")

    def test_label_collision_with_column(self):
        with pytest.raises(InvalidDiffSpecError):
            unify(self.buckets, ["id"], [DiffColumnSpec("amount", "amount", "L__amount")])

    def test_repeated_label(self):
        specs = [DiffColumnSpec("amount", "amount", "d")] * 2

        with pytest.raises(InvalidDiffSpecError):
            unify(self.buckets, ["id"], specs)

    def test_empty_buckets(self):
        merged = unify(make_buckets(), ["id"])

        assert merged.headers == ("id", "L__amount", "R__amount")
        assert len(merged) == 0


class TestStatusColumns:
    """Test the optional match_status, diff_cols and dup_key_flag columns"""

    def test_not_added_by_default(self):
        merged = unify(make_buckets(matched=[("A", "1", "A", "1")]), ["id"])

        assert not set(STATUS_COLUMNS) & set(merged.headers)

    def test_status_per_bucket(self):
        """Test every merged row names the bucket it came from"""
        # Arrange
        buckets = make_buckets(
            matched=[("A", "10", "A", "20")],
            left_only=[("B", "5", "", "")],
            right_only=[("", "", "C", "7")],
        )

        # Act
        merged = unify(buckets, ["id"], status_columns=True)

        # Assert
        assert merged.headers[-3:] == ("match_status", "diff_cols", "dup_key_flag")
        assert [row[-3:] for row in merged.rows] == [
            ("both", "amount", "0"),
            ("left_only", "", "0"),
            ("right_only", "", "0"),
        ]

    def test_diff_cols_lists_every_differing_shared_column(self):
        headers = ("L__id", "L__name", "L__qty", "L__note", "R__id", "R__qty", "R__name")
        buckets = make_buckets(
            matched=[("A", "Ito", "1", "x", "a", "2", "Ito")], headers=headers
        )

        merged = unify(buckets, ["id"], status_columns=True)

        # key text differs by case; note has no right copy
        assert merged.rows[0][-2] == "id,qty"

    def test_matching_values_leave_diff_cols_empty(self):
        merged = unify(
            make_buckets(matched=[("A", "10", "A", "10")]), ["id"], status_columns=True
        )

        assert merged.rows[0][-3:] == ("both", "", "0")

    def test_duplicates_flagged_with_their_side(self):
        buckets = replace(
            make_buckets(
                duplicates=[("X", "1", "", ""), ("X", "2", "", ""), ("", "", "X", "9")]
            ),
            duplicate_left_rows=2,
        )

        merged = unify(buckets, ["id"], status_columns=True)

        assert [row[-3:] for row in merged.rows] == [
            ("left_only", "", "1"),
            ("left_only", "", "1"),
            ("right_only", "", "1"),
        ]

    def test_from_reconcile(self):
        left = Table(("id", "v"), (("X", "1"), ("X", "2"), ("Y", "3")))
        right = Table(("id", "v"), (("X", "9"), ("Y", "3"), ("Z", "0")))

        merged = unify(
            reconcile(left, right, [0], [0], KeyOptions()), ["id"], status_columns=True
        )

        statuses = [(row[0], row[-3], row[-1]) for row in merged.rows]
        assert statuses == [
            ("Y", "both", "0"),
            ("Z", "right_only", "0"),
            ("X", "left_only", "1"),
            ("X", "left_only", "1"),
            ("X", "right_only", "1"),
        ]

    def test_diff_columns_come_before_status_columns(self):
        merged = unify(
            matched_buckets(),
            ["id"],
            [DiffColumnSpec("amount", "amount", "diff")],
            status_columns=True,
        )

        assert merged.headers[-4:] == ("diff", "match_status", "diff_cols", "dup_key_flag")

    def test_diff_label_collides_with_status_column(self):
        with pytest.raises(InvalidDiffSpecError):
            unify(
                matched_buckets(),
                ["id"],
                [DiffColumnSpec("amount", "amount", "match_status")],
                status_columns=True,
            )
