"""Application settings and configuration management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Gemini Configuration
    gemini_api_key: str | None = Field(
        default=None,
        description="Google AI Studio API key for the Gemini REST API",
    )
    gemini_api_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the Gemini generateContent API",
    )
    gemini_primary_model: str = Field(
        default="gemini-1.5-flash",
        description="Fast model tried first",
    )
    gemini_fallback_model: str = Field(
        default="gemini-1.5-pro",
        description="Capable model used when the primary is overloaded",
    )
    gemini_max_output_tokens: int = Field(
        default=800,
        description="Maximum output tokens per generation",
    )
    backend_timeout_seconds: float = Field(
        default=30.0,
        description="Per-call backend timeout; expiry counts as overload",
    )
    backend_overload_cooldown_ms: int = Field(
        default=300_000,
        description="Block duration after a backend-reported quota error",
    )

    # Rate Limiting (in-memory, per tenant)
    rate_limit_max_per_minute: int = Field(
        default=12,
        description="Per-tenant requests per minute",
    )
    rate_limit_max_per_day_standard: int = Field(
        default=400,
        description="Daily requests for the default tiers",
    )
    rate_limit_max_per_day_premium: int = Field(
        default=1000,
        description="Daily requests for the enterprise tier",
    )
    rate_limit_inactive_retention_ms: int = Field(
        default=7 * 86_400_000,
        description="Inactivity after which a tenant record is swept",
    )
    rate_limit_sweep_interval_ms: int = Field(
        default=3_600_000,
        description="Interval between inactive tenant sweeps",
    )

    # Agent Configuration
    agent_name: str = Field(
        default="coretrack_assistant",
        description="Service name",
    )
    agent_description: str = Field(
        default="CoreTrack AI business assistant",
        description="Service description",
    )
    agent_host: str = Field(
        default="0.0.0.0",
        description="Server host",
    )
    agent_port: int = Field(
        default=8000,
        description="Server port",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log format",
    )

    # Development Settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # OpenTelemetry Configuration
    otel_enabled: bool = Field(
        default=False,
        description="Enable OpenTelemetry tracing",
    )
    otel_service_name: str = Field(
        default="coretrack_assistant",
        description="Service name for OpenTelemetry traces",
    )
    otel_exporter_otlp_endpoint: str = Field(
        default="http://localhost:4317",
        description="OTLP exporter endpoint (gRPC)",
    )
    otel_exporter_otlp_http_endpoint: str = Field(
        default="http://localhost:4318",
        description="OTLP exporter endpoint (HTTP)",
    )
    otel_exporter_type: Literal["otlp", "otlp-http", "console"] = Field(
        default="otlp",
        description="Telemetry exporter type",
    )
    otel_traces_sampler: Literal["always_on", "always_off", "traceidratio", "parentbased_always_on", "parentbased_always_off", "parentbased_traceidratio"] = Field(
        default="always_on",
        description="Trace sampling strategy",
    )
    otel_traces_sampler_arg: float = Field(
        default=1.0,
        description="Sampler argument (e.g., ratio for traceidratio)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
