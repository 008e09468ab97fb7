"""
End-to-end reconcile and split runs.

Composes the engine stages the way the application drives them:

reconcile: pre-sort (optional) -> helper key column -> reconcile ->
strip helper column -> unify -> user sort

split: partition -> per-partition user sort

Each run is traced, counted in Prometheus and logged with its context.
"""

import time
from dataclasses import dataclass
from typing import Sequence

from .compare import reconcile, unify
from .interchange import attach_key_column, strip_column
from .keys import helper_key_name, resolve_key_indices
from .model import (
    DiffColumnSpec,
    KeyOptions,
    Partition,
    ReconciliationBuckets,
    SortSpec,
    Table,
    require_key_columns,
)
from .sorting import sort_by_key_columns, sort_table
from .split import partition
from .utils.logging import ContextLogger
from .utils.metrics import ReconciliationMetrics, get_metrics
from .utils.tracing import add_span_attributes, add_span_event, trace_operation

logger = ContextLogger(__name__)


@dataclass(frozen=True)
class ReconciliationResult:
    """Buckets plus the unified, sorted merge of all of them."""

    buckets: ReconciliationBuckets
    merged: Table
    key_columns: tuple[str, ...]

    @property
    def log(self) -> tuple[tuple[str, str], ...]:
        return self.buckets.log

    def counts(self) -> dict[str, int]:
        """Row count per bucket."""
        return {name: len(table) for name, table in self.buckets.tables().items()}


def run_reconciliation(
    left: Table,
    right: Table,
    key_columns: Sequence[str],
    options: KeyOptions | None = None,
    diff_specs: Sequence[DiffColumnSpec] = (),
    sort_specs: Sequence[SortSpec] = (),
    presort: bool = True,
    status_columns: bool = False,
    metrics: ReconciliationMetrics | None = None,
) -> ReconciliationResult:
    """
    Reconcile two tables by named key columns.

    Args:
        left: Left table
        right: Right table
        key_columns: Key column names present in both tables, in key order
        options: Key normalization (default: trim, case sensitive)
        diff_specs: Difference columns for the merged table
        sort_specs: Sort applied to the merged table (at most 3)
        presort: Sort both inputs by key before classification
        status_columns: Append match_status, diff_cols and dup_key_flag to
            the merged table
        metrics: Metrics sink (default: process-wide metrics)

    Returns:
        ReconciliationResult

    Raises:
        MissingKeyColumnsError: If no key column is given
        UnknownColumnError: If a key column is missing on either side
        InvalidDiffSpecError: If a diff label collides with a column
        TooManySortColumnsError: If more than 3 sort specs are given
    """
    require_key_columns(key_columns)
    options = options or KeyOptions()
    metrics = metrics or get_metrics()
    run_logger = logger.bind(operation="reconcile", key="|".join(key_columns))
    started = time.perf_counter()
    success = False

    try:
        with trace_operation(
            "reconcile",
            component="pipeline",
            key_columns=",".join(key_columns),
            trim=options.trim,
            case_insensitive=options.case_insensitive,
        ):
            left_indices = resolve_key_indices(left, key_columns)
            right_indices = resolve_key_indices(right, key_columns)

            if presort:
                left = sort_by_key_columns(left, left_indices, options)
                right = sort_by_key_columns(right, right_indices, options)
                add_span_event("presorted")

            helper = helper_key_name(
                key_columns, left.headers + right.headers, options.delimiter
            )
            keyed_left, _ = attach_key_column(left, key_columns, options, helper)
            keyed_right, _ = attach_key_column(right, key_columns, options, helper)

            buckets = reconcile(
                keyed_left,
                keyed_right,
                [len(left.headers)],
                [len(right.headers)],
                options,
                key_name=helper,
            )
            buckets = buckets.map_tables(lambda table: strip_column(table, helper))

            merged = sort_table(
                unify(buckets, key_columns, diff_specs, status_columns), sort_specs
            )

            result = ReconciliationResult(
                buckets=buckets, merged=merged, key_columns=tuple(key_columns)
            )
            counts = result.counts()
            add_span_attributes(**counts, duplicate_keys=buckets.duplicate_key_count)
            metrics.record_buckets(counts, buckets.duplicate_key_count)

            if buckets.duplicate_key_count:
                run_logger.warning(
                    f"{buckets.duplicate_key_count} ambiguous key(s) excluded from matching",
                    duplicate_rows=counts["duplicates"],
                )
            run_logger.info("Reconciliation complete", **counts)
            success = True
            return result
    finally:
        metrics.record_run("reconcile", success, time.perf_counter() - started)


def run_split(
    table: Table,
    key_columns: Sequence[str],
    options: KeyOptions | None = None,
    sort_specs: Sequence[SortSpec] = (),
    metrics: ReconciliationMetrics | None = None,
) -> list[Partition]:
    """
    Split a table into partitions by named key columns.

    Args:
        table: Table to split
        key_columns: Key column names, in key order
        options: Key normalization (default: KeyOptions.split_default())
        sort_specs: Sort applied inside every partition (at most 3)
        metrics: Metrics sink (default: process-wide metrics)

    Returns:
        Partitions in first-seen key order
    """
    require_key_columns(key_columns)
    options = options or KeyOptions.split_default()
    metrics = metrics or get_metrics()
    run_logger = logger.bind(operation="split", key="|".join(key_columns))
    started = time.perf_counter()
    success = False

    try:
        with trace_operation(
            "split", component="pipeline", key_columns=",".join(key_columns)
        ):
            indices = resolve_key_indices(table, key_columns)
            parts = partition(table, indices, options)
            if sort_specs:
                parts = [
                    Partition(part.key_value, sort_table(part.table, sort_specs))
                    for part in parts
                ]

            add_span_attributes(rows=len(table), partitions=len(parts))
            metrics.record_partitions(len(parts))
            run_logger.info("Split complete", rows=len(table), partitions=len(parts))
            success = True
            return parts
    finally:
        metrics.record_run("split", success, time.perf_counter() - started)
