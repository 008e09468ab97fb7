"""
Tracer initialization and configuration for OpenTelemetry.

Until initialize_tracing() is called, spans go to whatever tracer provider
is globally installed (the no-op provider by default), so the engine can be
used as a library without any exporter.
"""

import logging
import os

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

logger = logging.getLogger(__name__)

INSTRUMENTATION_NAME = "sheetrecon"

_provider: TracerProvider | None = None


def initialize_tracing(
    service_name: str = "sheetrecon",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
    sampling_rate: float = 1.0,
) -> trace.Tracer:
    """
    Install an SDK tracer provider with the configured exporters.

    Args:
        service_name: Name of the service for identification
        otlp_endpoint: OTLP gRPC collector endpoint (default: ``OTLP_ENDPOINT``
            environment variable; no OTLP export when unset)
        console_export: Also print spans to stdout (also ``TRACE_CONSOLE=true``)
        sampling_rate: Sampling rate 0.0-1.0

    Returns:
        Tracer bound to the new provider
    """
    global _provider

    if _provider is not None:
        logger.warning("Tracing already initialized, returning existing tracer")
        return _provider.get_tracer(INSTRUMENTATION_NAME)

    provider = TracerProvider(
        resource=Resource(attributes={SERVICE_NAME: service_name}),
        sampler=TraceIdRatioBased(sampling_rate),
    )
    exporters = []

    otlp_endpoint = otlp_endpoint or os.getenv("OTLP_ENDPOINT")
    if otlp_endpoint:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
        except ImportError:
            logger.warning(
                "OTLP endpoint configured but opentelemetry-exporter-otlp-proto-grpc "
                "is not installed"
            )
        else:
            provider.add_span_processor(
                BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
            )
            exporters.append("OTLP")

    if console_export or os.getenv("TRACE_CONSOLE", "").lower() == "true":
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        exporters.append("Console")

    trace.set_tracer_provider(provider)
    _provider = provider

    logger.info(
        f"Tracing initialized: {service_name} "
        f"(exporters: {', '.join(exporters) or 'none'}, sampling: {sampling_rate})"
    )
    return provider.get_tracer(INSTRUMENTATION_NAME)


def get_tracer() -> trace.Tracer:
    """Tracer from the currently installed global provider."""
    return trace.get_tracer(INSTRUMENTATION_NAME)


def shutdown_tracing() -> None:
    """Flush pending spans and shut the SDK provider down."""
    global _provider

    if _provider is None:
        return
    try:
        _provider.shutdown()
        logger.info("Tracing shutdown complete")
    finally:
        _provider = None
