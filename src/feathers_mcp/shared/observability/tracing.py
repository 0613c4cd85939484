# OpenTelemetry tracing for routed tool calls

import os
from contextlib import contextmanager
from typing import Iterator, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span, SpanKind

from feathers_mcp import __version__

from .logging import get_logger

logger = get_logger(__name__)

TRACER_NAME = "feathers_mcp.routing"


def _build_provider(service_name: str, service_version: str) -> TracerProvider:
    return TracerProvider(
        resource=Resource.create(
            {
                SERVICE_NAME: service_name,
                SERVICE_VERSION: service_version,
                "deployment.environment": os.getenv("ENV", "development"),
            }
        )
    )


def init_tracing(
    service_name: Optional[str] = None,
    service_version: Optional[str] = None,
    endpoint: Optional[str] = None,
) -> TracerProvider:
    """
    Install a global TracerProvider.

    ``service_name`` and ``endpoint`` fall back to OTEL_SERVICE_NAME and
    OTEL_EXPORTER_OTLP_ENDPOINT. With no endpoint, spans stay in-process.
    """
    service_name = service_name or os.getenv("OTEL_SERVICE_NAME", "feathers-mcp")
    provider = _build_provider(service_name, service_version or __version__)

    endpoint = endpoint or os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if endpoint:
        exporter = OTLPSpanExporter(endpoint=f"{endpoint.rstrip('/')}/v1/traces")
        provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)
    logger.info(
        "Tracing initialized",
        service=service_name,
        exporter=endpoint or "none",
    )
    return provider


def get_tracer(name: str = TRACER_NAME):
    return trace.get_tracer(name)


@contextmanager
def trace_tool_call(tool_name: str) -> Iterator[Span]:
    """
    Open a span around one routed tool call.

    The dispatcher never raises, so the caller records the outcome on the
    yielded span (``tool.status`` / ``tool.error_code``) instead of relying
    on exception propagation.
    """
    with get_tracer().start_as_current_span(
        f"tool.route.{tool_name}",
        kind=SpanKind.INTERNAL,
        attributes={"tool.name": tool_name},
    ) as span:
        yield span
