"""
Ambient utilities for sheetrecon

Provides:
- logging: structured/console logging setup
- tracing: OpenTelemetry spans around engine operations
- metrics: Prometheus counters for reconciliation and split runs
"""

__all__ = ["logging", "tracing", "metrics"]
