"""
Context managers and utilities for span management.
"""

from contextlib import contextmanager

from opentelemetry import trace

from .tracer import get_tracer


@contextmanager
def trace_operation(
    operation_name: str,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL,
    **attributes
):
    """
    Context manager for tracing operations.

    Creates a span, sets the given attributes and records any exception
    raised inside the block before re-raising it.

    Args:
        operation_name: Name of the operation being traced
        kind: Span kind
        **attributes: Custom attributes to add to the span

    Yields:
        The active span

    Example:
        >>> with trace_operation("reconcile", key="id") as span:
        ...     buckets = reconcile(...)
        ...     span.set_attribute("matched", len(buckets.matched))
    """
    with get_tracer().start_as_current_span(
        operation_name,
        kind=kind,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        for key, value in attributes.items():
            span.set_attribute(key, str(value))

        try:
            yield span
        except Exception as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)
            span.record_exception(e)
            span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
            raise


def add_span_attributes(**attributes):
    """Add attributes to the current span, if one is recording."""
    current_span = trace.get_current_span()
    if current_span.is_recording():
        for key, value in attributes.items():
            current_span.set_attribute(key, str(value))


def add_span_event(name: str, **attributes):
    """Add an event to the current span, if one is recording."""
    current_span = trace.get_current_span()
    if current_span.is_recording():
        current_span.add_event(name, attributes={k: str(v) for k, v in attributes.items()})
