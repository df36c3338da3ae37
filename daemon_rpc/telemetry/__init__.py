"""
OpenTelemetry Integration Module

- tracer: tracer setup, client spans, trace header injection
- metrics: rpc.client.* counters and latency histogram
"""

from .tracer import setup_tracer, inject_trace_context, create_span
from .metrics import setup_metrics, ClientMetrics, get_client_metrics

__all__ = [
    "setup_tracer",
    "inject_trace_context",
    "create_span",
    "setup_metrics",
    "ClientMetrics",
    "get_client_metrics",
]
