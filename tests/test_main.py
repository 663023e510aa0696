"""Tests for the server entry point."""

import logging
from unittest.mock import patch

import pytest
from fastapi import FastAPI

from coretrack_assistant import main as main_module
from coretrack_assistant.config import Settings


class TestStartupLog:
    """Tests for the startup configuration summary."""

    def test_reports_limiter_and_sweeper_configuration(self, test_settings, caplog):
        """Test that caps, cooldown and sweeper timing are logged."""
        with caplog.at_level(logging.INFO, logger="coretrack_assistant.main"):
            main_module.log_startup(test_settings)

        text = caplog.text
        assert "Rate limits: 12/min, 400/day standard, 1000/day premium" in text
        assert "quota cooldown 5m 0s" in text
        assert "Tenant sweeper: every 1h 0m, inactive retention 7d 0h" in text
        assert "api_key=configured" in text
        assert "primary=gemini-1.5-flash fallback=gemini-1.5-pro" in text

    def test_placeholder_key_reported_missing(self, caplog):
        """Test that the sample placeholder key is not reported as configured."""
        settings = Settings(gemini_api_key="your_gemini_api_key_here")

        with caplog.at_level(logging.INFO, logger="coretrack_assistant.main"):
            main_module.log_startup(settings)

        assert "api_key=missing" in caplog.text


class TestMain:
    """Tests for main()."""

    def test_runs_app_and_shuts_down_telemetry(self, test_settings):
        """Test that the app is served and tracing is always shut down."""
        with (
            patch.object(main_module, "load_dotenv"),
            patch.object(main_module, "get_settings", return_value=test_settings),
            patch.object(main_module, "setup_logging"),
            patch("coretrack_assistant.telemetry.setup_telemetry") as setup,
            patch("coretrack_assistant.telemetry.shutdown_telemetry") as shutdown,
            patch.object(
                main_module.uvicorn, "run", side_effect=KeyboardInterrupt
            ) as run,
        ):
            with pytest.raises(KeyboardInterrupt):
                main_module.main()

        setup.assert_called_once()
        shutdown.assert_called_once()
        app = run.call_args.args[0]
        assert isinstance(app, FastAPI)
        assert run.call_args.kwargs["host"] == test_settings.agent_host
        assert run.call_args.kwargs["port"] == test_settings.agent_port
