"""
OpenTelemetry Integration Module

- tracer: span export setup and call spans
- metrics: counters and latency histograms
"""

from .tracer import setup_tracer, create_span
from .metrics import setup_metrics, increment_counter, record_latency


def setup_telemetry(config) -> None:
    """Enable trace and metric export for a TelemetryConfig"""
    if not config.enabled:
        return
    setup_tracer(config.service_name, config.otlp_endpoint)
    setup_metrics(config.service_name, config.otlp_endpoint, config.export_interval_ms)


__all__ = [
    "setup_tracer",
    "setup_metrics",
    "setup_telemetry",
    "create_span",
    "increment_counter",
    "record_latency",
]
