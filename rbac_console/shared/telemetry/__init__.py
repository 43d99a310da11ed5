"""Logging setup, OpenTelemetry provider and the traced decorator."""

from rbac_console.shared.telemetry.logging import setup_logging
from rbac_console.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from rbac_console.shared.telemetry.tracing import add_span_attributes, traced

__all__ = [
    "TelemetryConfig",
    "add_span_attributes",
    "get_telemetry",
    "set_telemetry",
    "setup_logging",
    "traced",
]
