"""
OpenTelemetry Trace Context Management

Tracer setup, client spans and W3C trace context propagation into outgoing
HTTP headers.
"""

import logging
from typing import Dict, Any, Optional

from opentelemetry import propagate, trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

logger = logging.getLogger(__name__)


def setup_tracer(service_name: str, otlp_endpoint: str = "localhost:4317"):
    """Configure OpenTelemetry tracer

    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address
    """
    provider = TracerProvider(
        sampler=ALWAYS_ON,
        resource=Resource.create({"service.name": service_name}),
    )
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
    trace.set_tracer_provider(provider)

    tracer = trace.get_tracer(service_name)

    logger.info(f"OpenTelemetry trace configured, service name: {service_name}, OTLP endpoint: {otlp_endpoint}")

    return tracer


def inject_trace_context(headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Inject the current trace context into a header mapping

    Adds ``traceparent`` (and ``tracestate`` when present) for the active
    span. Without an active span the headers are returned unchanged.

    Args:
        headers: Header mapping to update in place; a new dict is created if omitted

    Returns:
        Dict[str, str]: The updated headers
    """
    if headers is None:
        headers = {}
    propagate.inject(headers)
    return headers


def create_span(name: str, attributes: Dict[str, Any] = None):
    """Create new client span as the current span

    Args:
        name: Span name
        attributes: Span attributes

    Returns:
        Context manager yielding the span
    """
    tracer = trace.get_tracer(__name__)
    return tracer.start_as_current_span(
        name,
        attributes=attributes or {},
        kind=trace.SpanKind.CLIENT,
    )
