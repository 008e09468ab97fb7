"""
Property-based tests for partitioning and sorting using Hypothesis.

Tests invariants that should hold for all inputs:
- Partitions cover every row exactly once and agree on their key
- Sorting is stable for rows equal on every sort column
"""

from collections import Counter

from hypothesis import given, strategies as st

from sheetrecon.keys import build_key
from sheetrecon.model import KeyOptions, SortSpec, Table
from sheetrecon.sorting import sort_table
from sheetrecon.split import partition

cells = st.sampled_from(["a", "b", " a", "B", "1", "01", "2024-01-05", "2024/1/5", ""])
options = st.builds(KeyOptions, trim=st.booleans(), case_insensitive=st.booleans())


# Property: partition law
@given(
    table_rows=st.lists(st.tuples(cells, cells, cells), max_size=15),
    key_indices=st.sampled_from([[0], [1], [0, 1], [1, 0], [2, 0, 1]]),
    key_options=options,
)
def test_partition_law(table_rows, key_indices, key_options):
    """Partitions hold every row once, each under its own key"""
    table = Table(("a", "b", "c"), tuple(table_rows))

    parts = partition(table, key_indices, key_options)

    # Property 1: Row multiset is preserved
    assert Counter(row for p in parts for row in p.table.rows) == Counter(table.rows)

    # Property 2: Every row in a partition has the partition key
    for part in parts:
        assert part.table.rows
        for row in part.table.rows:
            assert build_key(row, key_indices, key_options) == part.key_value

    # Property 3: Keys are distinct and appear in first-seen order
    seen = list(dict.fromkeys(build_key(r, key_indices, key_options) for r in table.rows))
    assert [p.key_value for p in parts] == seen


# Property: sort stability
@given(
    sort_values=st.lists(cells, max_size=20),
    descending=st.booleans(),
)
def test_sort_stability(sort_values, descending):
    """Rows equal on the sort column keep their input order"""
    table = Table(
        ("value", "position"),
        tuple((value, str(i)) for i, value in enumerate(sort_values)),
    )
    direction = "desc" if descending else "asc"

    result = sort_table(table, [SortSpec("value", direction)])

    # Property 1: Same rows
    assert Counter(result.rows) == Counter(table.rows)

    # Property 2: Ties keep relative order
    for value in set(sort_values):
        positions = [int(row[1]) for row in result.rows if row[0] == value]
        assert positions == sorted(positions)
