"""Tests for OpenTelemetry setup."""

from unittest.mock import patch

from opentelemetry.sdk.trace.sampling import ALWAYS_OFF, ALWAYS_ON, ParentBased, TraceIdRatioBased

from coretrack_assistant.config import Settings
from coretrack_assistant.telemetry import setup as telemetry_setup


class TestSampler:
    """Tests for sampler selection."""

    def test_named_samplers(self):
        """Test fixed samplers."""
        assert telemetry_setup.get_sampler("always_on", 1.0) is ALWAYS_ON
        assert telemetry_setup.get_sampler("always_off", 1.0) is ALWAYS_OFF

    def test_ratio_samplers(self):
        """Test ratio-based samplers."""
        assert isinstance(telemetry_setup.get_sampler("traceidratio", 0.5), TraceIdRatioBased)
        assert isinstance(
            telemetry_setup.get_sampler("parentbased_traceidratio", 0.5), ParentBased
        )

    def test_unknown_sampler_defaults_to_always_on(self):
        """Test fallback for an unknown name."""
        assert telemetry_setup.get_sampler("sometimes", 1.0) is ALWAYS_ON


class TestSetup:
    """Tests for setup and shutdown."""

    def test_disabled_does_nothing(self):
        """Test that disabled tracing installs no provider."""
        with patch(
            "coretrack_assistant.config.get_settings",
            return_value=Settings(otel_enabled=False),
        ):
            telemetry_setup.setup_telemetry()

        assert telemetry_setup._tracer_provider is None

    def test_console_exporter_setup_and_shutdown(self):
        """Test enabling tracing with the console exporter."""
        settings = Settings(otel_enabled=True, otel_exporter_type="console")
        with (
            patch("coretrack_assistant.config.get_settings", return_value=settings),
            patch.object(telemetry_setup, "_instrument_httpx"),
            patch.object(telemetry_setup.trace, "set_tracer_provider"),
        ):
            telemetry_setup.setup_telemetry()

        assert telemetry_setup._tracer_provider is not None

        telemetry_setup.shutdown_telemetry()
        assert telemetry_setup._tracer_provider is None
