"""Error taxonomy for admission control and generation backends."""

import math


class AssistantError(Exception):
    """Base class for rate limiting and backend errors."""


class Throttled(AssistantError):
    """The caller must wait before the AI path is available again."""

    def __init__(self, message: str, wait_ms: int):
        super().__init__(message)
        self.wait_ms = wait_ms

    @property
    def wait_seconds(self) -> int:
        return math.ceil(self.wait_ms / 1000)


class RateLimited(Throttled):
    """Admission control refused the request."""

    def __init__(self, wait_ms: int):
        super().__init__(
            f"Rate limit exceeded. Please wait {math.ceil(wait_ms / 1000)} seconds "
            "before trying again.",
            wait_ms,
        )


class BackendQuotaExceeded(Throttled):
    """The backend reported its own quota as exhausted.

    Backends raise it with ``wait_ms=0``; the router re-raises it with the
    cooldown it applied to the tenant.
    """

    def __init__(self, wait_ms: int = 0, backend: str | None = None):
        super().__init__(
            f"API quota exceeded. Please wait {math.ceil(wait_ms / 1000)} seconds "
            "before trying again.",
            wait_ms,
        )
        self.backend = backend


class BackendOverloaded(AssistantError):
    """The backend is temporarily unavailable or timed out."""

    def __init__(self, backend: str, details: str = ""):
        message = f"Backend {backend} overloaded"
        if details:
            message = f"{message}: {details}"
        super().__init__(message)
        self.backend = backend
        self.details = details


class BackendError(AssistantError):
    """Non-retryable backend failure (bad request, auth, malformed response)."""

    def __init__(
        self,
        details: str,
        backend: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(details)
        self.details = details
        self.backend = backend
        self.status_code = status_code


class Unconfigured(AssistantError):
    """No backend credentials or endpoint are available."""
