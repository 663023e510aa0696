"""OpenTelemetry integration for distributed tracing."""

from coretrack_assistant.telemetry.setup import (
    instrument_app,
    setup_telemetry,
    shutdown_telemetry,
)

__all__ = ["instrument_app", "setup_telemetry", "shutdown_telemetry"]
