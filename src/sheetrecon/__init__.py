"""
Table reconciliation and partition engine

This package matches the rows of two tables by composite key and splits
one table into partitions by composite key.

Components:
- compare: matched / left-only / right-only / duplicate classification and
  column unification
- split: partitioning by key and partition file names
- sorting: typed multi-column stable sort
- pipeline: end-to-end reconcile and split runs
- interchange: JSON request/response boundary
- report: reconciliation reports and total rows

Usage:
    from sheetrecon import Table, run_reconciliation

    result = run_reconciliation(left, right, ["id"])
    print(len(result.buckets.matched))
"""

from .exceptions import SheetReconError
from .interchange import compare_files, split_file
from .model import (
    DiffColumnSpec,
    KeyOptions,
    Partition,
    ReconciliationBuckets,
    SortDirection,
    SortSpec,
    Table,
)
from .pipeline import ReconciliationResult, run_reconciliation, run_split

__version__ = "1.0.0"
__all__ = [
    "Table",
    "KeyOptions",
    "DiffColumnSpec",
    "SortSpec",
    "SortDirection",
    "Partition",
    "ReconciliationBuckets",
    "ReconciliationResult",
    "run_reconciliation",
    "run_split",
    "compare_files",
    "split_file",
    "SheetReconError",
]
