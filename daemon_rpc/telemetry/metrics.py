"""
OpenTelemetry Metrics Collection

The ``rpc.client.*`` instrument family recorded by every client call. Until
``setup_metrics`` installs a MeterProvider, the OpenTelemetry API hands out
proxy instruments that start exporting once a provider is set.
"""

import logging
import threading
from typing import Optional

from opentelemetry import metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    PeriodicExportingMetricReader
)
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter

logger = logging.getLogger(__name__)


def setup_metrics(service_name: str,
                  otlp_endpoint: str = "localhost:4317",
                  export_interval_ms: int = 5000,
                  console: bool = False):
    """Configure OpenTelemetry metrics collection

    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address
        export_interval_ms: Metrics export interval in milliseconds
        console: Also print metrics to stdout (for development debugging)
    """
    readers = [
        PeriodicExportingMetricReader(
            OTLPMetricExporter(endpoint=otlp_endpoint),
            export_interval_millis=export_interval_ms
        )
    ]
    if console:
        readers.append(
            PeriodicExportingMetricReader(
                ConsoleMetricExporter(),
                export_interval_millis=export_interval_ms
            )
        )

    provider = MeterProvider(metric_readers=readers)
    metrics.set_meter_provider(provider)
    meter = metrics.get_meter(service_name)

    logger.info(f"OpenTelemetry metrics configured, service name: {service_name}, OTLP endpoint: {otlp_endpoint}")

    return meter


class ClientMetrics:
    """Counters and latency histogram of RPC client calls, labelled by method"""

    def __init__(self, meter: Optional[metrics.Meter] = None):
        meter = meter or metrics.get_meter(__name__)
        self.requests = meter.create_counter(
            "rpc.client.requests", unit="1", description="RPC requests sent")
        self.success = meter.create_counter(
            "rpc.client.success", unit="1", description="Calls answered with a result")
        self.errors = meter.create_counter(
            "rpc.client.errors", unit="1", description="Calls failed before a response was decoded, by type")
        self.rpc_errors = meter.create_counter(
            "rpc.client.rpc_errors", unit="1", description="Calls answered with a daemon error object")
        self.latency = meter.create_histogram(
            "rpc.client.latency", unit="ms", description="Round trip latency")

    def record_request(self, method: str):
        self.requests.add(1, {"method": method})

    def record_latency(self, method: str, value_ms: float):
        self.latency.record(value_ms, {"method": method})

    def record_success(self, method: str):
        self.success.add(1, {"method": method})

    def record_rpc_error(self, method: str, code: int):
        self.rpc_errors.add(1, {"method": method, "code": str(code)})

    def record_failure(self, method: str, kind: str, **attributes: str):
        """Count a failed call

        Args:
            method: Remote method name
            kind: Failure type, e.g. ``"transport"`` or ``"decode"``
            attributes: Extra labels, e.g. ``status``
        """
        self.errors.add(1, {"method": method, "type": kind, **attributes})


_client_metrics: Optional[ClientMetrics] = None
_lock = threading.Lock()


def get_client_metrics() -> ClientMetrics:
    """Process-wide ``ClientMetrics``, created on first use"""
    global _client_metrics
    if _client_metrics is None:
        with _lock:
            if _client_metrics is None:
                _client_metrics = ClientMetrics()
    return _client_metrics
