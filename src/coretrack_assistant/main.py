"""Main entry point for the CoreTrack assistant."""

import logging
import sys

import uvicorn
from dotenv import load_dotenv

from coretrack_assistant.config import Settings, get_settings
from coretrack_assistant.ratelimit import format_duration
from coretrack_assistant.router.backends import PLACEHOLDER_API_KEY

logger = logging.getLogger(__name__)

JSON_LOG_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", '
    '"logger": "%(name)s", "message": "%(message)s"}'
)
TEXT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format=JSON_LOG_FORMAT if settings.log_format == "json" else TEXT_LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def log_startup(settings: Settings) -> None:
    """Log the serving, backend and rate limit configuration."""
    key_configured = bool(settings.gemini_api_key) and (
        settings.gemini_api_key != PLACEHOLDER_API_KEY
    )

    logger.info(
        "Starting %s on %s:%d",
        settings.agent_name,
        settings.agent_host,
        settings.agent_port,
    )
    logger.info(
        "Gemini backends: primary=%s fallback=%s api_key=%s timeout=%.1fs",
        settings.gemini_primary_model,
        settings.gemini_fallback_model,
        "configured" if key_configured else "missing",
        settings.backend_timeout_seconds,
    )
    logger.info(
        "Rate limits: %d/min, %d/day standard, %d/day premium, quota cooldown %s",
        settings.rate_limit_max_per_minute,
        settings.rate_limit_max_per_day_standard,
        settings.rate_limit_max_per_day_premium,
        format_duration(settings.backend_overload_cooldown_ms),
    )
    logger.info(
        "Tenant sweeper: every %s, inactive retention %s",
        format_duration(settings.rate_limit_sweep_interval_ms),
        format_duration(settings.rate_limit_inactive_retention_ms),
    )
    if settings.otel_enabled:
        logger.info(
            "Tracing enabled: exporter=%s service=%s",
            settings.otel_exporter_type,
            settings.otel_service_name,
        )


def main() -> None:
    """Run the assistant server."""
    load_dotenv()

    settings = get_settings()
    setup_logging(settings)
    log_startup(settings)

    # Tracing must be set up before the app is created
    from coretrack_assistant.telemetry import setup_telemetry, shutdown_telemetry

    setup_telemetry()

    from coretrack_assistant.api.app import create_app

    try:
        uvicorn.run(
            create_app(settings),
            host=settings.agent_host,
            port=settings.agent_port,
            log_level=settings.log_level.lower(),
        )
    finally:
        shutdown_telemetry()


if __name__ == "__main__":
    main()
