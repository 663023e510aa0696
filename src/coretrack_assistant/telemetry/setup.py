"""OpenTelemetry setup and configuration."""

import logging
from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import (
    ALWAYS_OFF,
    ALWAYS_ON,
    ParentBased,
    TraceIdRatioBased,
)

from coretrack_assistant import __version__

if TYPE_CHECKING:
    from opentelemetry.sdk.trace.export import SpanExporter
    from opentelemetry.sdk.trace.sampling import Sampler

logger = logging.getLogger(__name__)

_tracer_provider: TracerProvider | None = None

_SAMPLERS: dict[str, "Sampler"] = {
    "always_on": ALWAYS_ON,
    "always_off": ALWAYS_OFF,
    "parentbased_always_on": ParentBased(ALWAYS_ON),
    "parentbased_always_off": ParentBased(ALWAYS_OFF),
}


def get_sampler(sampler_type: str, sampler_arg: float) -> "Sampler":
    """Get the sampler for a configured sampler name."""
    if sampler_type == "traceidratio":
        return TraceIdRatioBased(sampler_arg)
    if sampler_type == "parentbased_traceidratio":
        return ParentBased(TraceIdRatioBased(sampler_arg))
    if sampler_type in _SAMPLERS:
        return _SAMPLERS[sampler_type]

    logger.warning("Unknown sampler type '%s', using always_on", sampler_type)
    return ALWAYS_ON


def _create_exporter(
    exporter_type: str, otlp_endpoint: str, otlp_http_endpoint: str
) -> "SpanExporter":
    """Create the span exporter; OTLP exporters come from the ``otel`` extra."""
    if exporter_type == "otlp":
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )

        return OTLPSpanExporter(endpoint=otlp_endpoint)

    if exporter_type == "otlp-http":
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
            OTLPSpanExporter as HTTPSpanExporter,
        )

        return HTTPSpanExporter(endpoint=f"{otlp_http_endpoint}/v1/traces")

    return ConsoleSpanExporter()


def setup_telemetry() -> None:
    """Initialize OpenTelemetry tracing.

    Call early in startup, before the FastAPI app is created.
    """
    global _tracer_provider

    from coretrack_assistant.config import get_settings

    settings = get_settings()

    if not settings.otel_enabled:
        logger.debug("OpenTelemetry tracing is disabled")
        return

    logger.info(
        "Initializing OpenTelemetry tracing (service=%s, exporter=%s, sampler=%s)",
        settings.otel_service_name,
        settings.otel_exporter_type,
        settings.otel_traces_sampler,
    )

    resource = Resource.create(
        {
            "service.name": settings.otel_service_name,
            "service.version": __version__,
            "deployment.environment": "development" if settings.debug else "production",
        }
    )
    sampler = get_sampler(settings.otel_traces_sampler, settings.otel_traces_sampler_arg)

    _tracer_provider = TracerProvider(resource=resource, sampler=sampler)
    exporter = _create_exporter(
        settings.otel_exporter_type,
        settings.otel_exporter_otlp_endpoint,
        settings.otel_exporter_otlp_http_endpoint,
    )
    _tracer_provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(_tracer_provider)

    _instrument_httpx()

    logger.info("OpenTelemetry tracing initialized successfully")


def _instrument_httpx() -> None:
    """Instrument HTTPX so backend calls get client spans."""
    try:
        from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

        HTTPXClientInstrumentor().instrument()
        logger.debug("HTTPX instrumentation enabled")
    except ImportError:
        logger.warning(
            "HTTPX instrumentation not available. "
            "Install with: pip install opentelemetry-instrumentation-httpx"
        )


def instrument_app(app: object) -> None:
    """Instrument a FastAPI app when tracing is enabled."""
    if _tracer_provider is None:
        return
    try:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        FastAPIInstrumentor.instrument_app(app)
        logger.debug("FastAPI instrumentation enabled")
    except ImportError:
        logger.warning(
            "FastAPI instrumentation not available. "
            "Install with: pip install opentelemetry-instrumentation-fastapi"
        )


def shutdown_telemetry() -> None:
    """Flush pending spans and shut down the tracer provider."""
    global _tracer_provider

    if _tracer_provider is not None:
        logger.info("Shutting down OpenTelemetry tracing")
        _tracer_provider.shutdown()
        _tracer_provider = None
