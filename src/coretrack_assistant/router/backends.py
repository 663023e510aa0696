"""Generation backends for the model router."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from coretrack_assistant.router.errors import (
    BackendError,
    BackendOverloaded,
    BackendQuotaExceeded,
    Unconfigured,
)

if TYPE_CHECKING:
    from coretrack_assistant.config.settings import Settings

logger = logging.getLogger(__name__)

# Placeholder shipped in sample .env files; treated as no key at all
PLACEHOLDER_API_KEY = "your_gemini_api_key_here"

SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


class GenerationBackend(Protocol):
    """A text generation backend the router can call."""

    name: str

    @property
    def is_configured(self) -> bool: ...

    async def generate(self, prompt: str) -> str:
        """Generate text for a prompt.

        Raises:
            BackendOverloaded: Temporary capacity problem.
            BackendQuotaExceeded: The backend's own quota is exhausted.
            BackendError: Any other failure.
            Unconfigured: No credentials are available.
        """
        ...


class GeminiBackend:
    """Gemini ``generateContent`` REST backend."""

    def __init__(
        self,
        model: str,
        api_key: str | None,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        max_output_tokens: int = 800,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        name: str | None = None,
    ) -> None:
        """Initialize the backend.

        Args:
            model: Gemini model id, e.g. ``gemini-1.5-flash``.
            api_key: Google AI Studio API key.
            base_url: API base URL.
            max_output_tokens: Output token cap per generation.
            http_client: Optional shared HTTP client.
            timeout: Request timeout for per-call clients.
            name: Display name for logs (defaults to the model id).
        """
        self.model = model
        self.name = name or model
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._max_output_tokens = max_output_tokens
        self._http_client = http_client
        self._timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key) and self._api_key != PLACEHOLDER_API_KEY

    @property
    def url(self) -> str:
        return f"{self._base_url}/models/{self.model}:generateContent"

    def build_request_body(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": 0.7,
                "topK": 40,
                "topP": 0.95,
                "maxOutputTokens": self._max_output_tokens,
            },
            "safetySettings": SAFETY_SETTINGS,
        }

    async def _post(self, body: dict[str, Any]) -> httpx.Response:
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self._api_key or "",
        }
        if self._http_client:
            return await self._http_client.post(self.url, json=body, headers=headers)

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(self.url, json=body, headers=headers)

    async def generate(self, prompt: str) -> str:
        """Call the model and return the first candidate's text."""
        if not self.is_configured:
            raise Unconfigured("Gemini API key not configured")

        try:
            response = await self._post(self.build_request_body(prompt))
        except httpx.TimeoutException as e:
            raise BackendOverloaded(self.name, f"timeout: {e}") from e
        except httpx.HTTPError as e:
            raise BackendError(f"Gemini {self.name} request failed: {e}", self.name) from e

        logger.debug("Gemini %s response status: %d", self.name, response.status_code)

        if response.status_code == 429:
            raise BackendQuotaExceeded(backend=self.name)
        if response.status_code == 503:
            raise BackendOverloaded(self.name, response.text)
        if response.is_error:
            raise BackendError(
                f"Gemini {self.name} API error: {response.status_code} - {response.text}",
                self.name,
                status_code=response.status_code,
            )

        try:
            data = response.json()
            return str(data["candidates"][0]["content"]["parts"][0]["text"])
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise BackendError(
                f"Invalid response from Gemini {self.name} API",
                self.name,
                status_code=response.status_code,
            ) from e


def create_gemini_backends(
    settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> tuple[GeminiBackend, GeminiBackend]:
    """Build the (primary, fallback) Gemini backend pair from settings."""
    common: dict[str, Any] = {
        "api_key": settings.gemini_api_key,
        "base_url": settings.gemini_api_base_url,
        "max_output_tokens": settings.gemini_max_output_tokens,
        "http_client": http_client,
        "timeout": settings.backend_timeout_seconds,
    }
    return (
        GeminiBackend(settings.gemini_primary_model, **common),
        GeminiBackend(settings.gemini_fallback_model, **common),
    )
