"""Pytest configuration and fixtures."""

import os

import pytest

# Set test environment variables before importing application modules
os.environ["GEMINI_API_KEY"] = ""
os.environ["OTEL_ENABLED"] = "false"
os.environ["DEBUG"] = "true"

from coretrack_assistant.config import Settings  # noqa: E402
from coretrack_assistant.ratelimit import TenantRateLimiter  # noqa: E402
from coretrack_assistant.router import BackendOverloaded  # noqa: E402

# Arbitrary fixed epoch (2024-01-01T00:00:00Z) used as "t=0"
T0_MS = 1_704_067_200_000


class FakeClock:
    """Manually advanced clock returning epoch milliseconds."""

    def __init__(self, start_ms: int = T0_MS) -> None:
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


class FakeBackend:
    """Scripted generation backend that records every prompt."""

    def __init__(self, name: str, *responses, configured: bool = True) -> None:
        self.name = name
        self._responses = list(responses) or ["OK"]
        self._configured = configured
        self.calls: list[str] = []

    @property
    def is_configured(self) -> bool:
        return self._configured

    async def generate(self, prompt: str) -> str:
        self.calls.append(prompt)
        # The last scripted response repeats forever
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def overloaded(name: str = "primary") -> BackendOverloaded:
    return BackendOverloaded(name, "503 Service Unavailable")


@pytest.fixture
def test_settings():
    """Provide test settings."""
    return Settings(
        gemini_api_key="test-api-key",
        rate_limit_max_per_minute=12,
        rate_limit_max_per_day_standard=400,
        rate_limit_max_per_day_premium=1000,
        backend_overload_cooldown_ms=300_000,
        backend_timeout_seconds=5.0,
        debug=True,
    )


@pytest.fixture
def clock():
    """Provide a fake clock starting at T0_MS."""
    return FakeClock()


@pytest.fixture
def rate_limiter(test_settings, clock):
    """Provide a rate limiter driven by the fake clock."""
    return TenantRateLimiter(test_settings, clock=clock)
