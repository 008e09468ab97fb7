"""
Prometheus metrics for sheetrecon

Usage:
    from sheetrecon.utils.metrics import get_metrics

    metrics = get_metrics()
    metrics.record_run("reconcile", success=True, duration=0.42)
"""

import threading

from .reconciliation import ReconciliationMetrics
from .registry import get_or_create_metric

_default_metrics: ReconciliationMetrics | None = None
_default_lock = threading.Lock()


def get_metrics() -> ReconciliationMetrics:
    """Process-wide ReconciliationMetrics on the global registry."""
    global _default_metrics

    with _default_lock:
        if _default_metrics is None:
            _default_metrics = ReconciliationMetrics()
        return _default_metrics


__all__ = [
    "ReconciliationMetrics",
    "get_metrics",
    "get_or_create_metric",
]
