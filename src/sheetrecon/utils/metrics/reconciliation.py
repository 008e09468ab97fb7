"""
Metrics for reconciliation and split operations.

Tracks runs, classified rows per bucket, partitions produced and run
duration.
"""

import logging
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from .registry import get_or_create_metric

logger = logging.getLogger(__name__)


class ReconciliationMetrics:
    """
    Prometheus metrics for engine operations

    Pass a dedicated CollectorRegistry to isolate instances (tests);
    instances sharing a registry share the underlying metrics.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        """
        Initialize reconciliation metrics

        Args:
            registry: Custom Prometheus registry (default: global REGISTRY)
        """
        self.registry = registry or REGISTRY

        self.runs_total = get_or_create_metric(
            lambda: Counter(
                "sheetrecon_runs_total",
                "Total number of engine runs",
                ["operation", "status"],
                registry=self.registry,
            ),
            "sheetrecon_runs_total",
            self.registry,
        )

        self.rows_classified_total = get_or_create_metric(
            lambda: Counter(
                "sheetrecon_rows_classified_total",
                "Rows routed to each reconciliation bucket",
                ["bucket"],
                registry=self.registry,
            ),
            "sheetrecon_rows_classified_total",
            self.registry,
        )

        self.duplicate_keys_total = get_or_create_metric(
            lambda: Counter(
                "sheetrecon_duplicate_keys_total",
                "Ambiguous keys excluded from matching",
                registry=self.registry,
            ),
            "sheetrecon_duplicate_keys_total",
            self.registry,
        )

        self.partitions_total = get_or_create_metric(
            lambda: Counter(
                "sheetrecon_partitions_total",
                "Partitions produced by split runs",
                registry=self.registry,
            ),
            "sheetrecon_partitions_total",
            self.registry,
        )

        self.duration_seconds = get_or_create_metric(
            lambda: Histogram(
                "sheetrecon_duration_seconds",
                "Duration of engine runs in seconds",
                ["operation"],
                buckets=(0.01, 0.05, 0.1, 0.5, 1, 5, 10, 30, 60),
                registry=self.registry,
            ),
            "sheetrecon_duration_seconds",
            self.registry,
        )

    def record_run(self, operation: str, success: bool, duration: float) -> None:
        """
        Record one engine run

        Args:
            operation: ``reconcile`` or ``split``
            success: Whether the run completed
            duration: Duration in seconds
        """
        status = "success" if success else "failed"
        self.runs_total.labels(operation=operation, status=status).inc()
        self.duration_seconds.labels(operation=operation).observe(duration)
        logger.debug(
            f"Recorded {operation} run: status={status}, duration={duration:.3f}s"
        )

    def record_buckets(self, bucket_sizes: dict[str, int], duplicate_keys: int = 0) -> None:
        """Count rows per bucket name and ambiguous keys."""
        for bucket, size in bucket_sizes.items():
            self.rows_classified_total.labels(bucket=bucket).inc(size)
        if duplicate_keys:
            self.duplicate_keys_total.inc(duplicate_keys)

    def record_partitions(self, count: int) -> None:
        self.partitions_total.inc(count)
