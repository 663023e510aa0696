"""Model router: admission control plus primary/secondary backend fallback."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from opentelemetry import trace

from coretrack_assistant.config import get_settings
from coretrack_assistant.ratelimit import (
    LimitType,
    SubscriptionTier,
    TenantRateLimiter,
    resolve_tier,
)
from coretrack_assistant.router.backends import GenerationBackend, create_gemini_backends
from coretrack_assistant.router.errors import (
    BackendError,
    BackendOverloaded,
    BackendQuotaExceeded,
    RateLimited,
)

if TYPE_CHECKING:
    import httpx

    from coretrack_assistant.config.settings import Settings

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass(frozen=True)
class RouterResult:
    """Outcome of a router invocation."""

    text: str | None
    backend: str | None = None
    attempts: int = 0
    configured: bool = True

    @classmethod
    def unconfigured(cls) -> RouterResult:
        return cls(text=None, configured=False)


class ModelRouter:
    """Routes generation requests through admission control to backends.

    Exactly two backends are tried per call, primary then secondary, and
    only an overload of the primary moves on to the secondary.
    """

    def __init__(
        self,
        rate_limiter: TenantRateLimiter,
        primary: GenerationBackend,
        secondary: GenerationBackend | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the router.

        Args:
            rate_limiter: Per-tenant admission control.
            primary: Fast backend tried first.
            secondary: Capable backend used when the primary is overloaded.
            settings: Application settings.
        """
        settings = settings or get_settings()
        self._rate_limiter = rate_limiter
        self._primary = primary
        self._secondary = secondary
        self._timeout = settings.backend_timeout_seconds
        self._quota_cooldown_ms = settings.backend_overload_cooldown_ms

    @property
    def rate_limiter(self) -> TenantRateLimiter:
        return self._rate_limiter

    @property
    def backends(self) -> list[GenerationBackend]:
        """Configured backends in call order."""
        candidates = [self._primary, self._secondary]
        return [b for b in candidates if b is not None and b.is_configured]

    @property
    def is_configured(self) -> bool:
        return bool(self.backends)

    async def _call(self, backend: GenerationBackend, prompt: str) -> str:
        try:
            return await asyncio.wait_for(backend.generate(prompt), timeout=self._timeout)
        except TimeoutError as e:
            raise BackendOverloaded(backend.name, f"timed out after {self._timeout}s") from e

    async def invoke(
        self,
        tenant_id: str,
        tier: SubscriptionTier | str | None,
        prompt: str,
    ) -> RouterResult:
        """Generate text for a tenant, falling back on overload.

        Args:
            tenant_id: Tenant identifier.
            tier: Subscription tier or plan name.
            prompt: Prompt text.

        Returns:
            Router result; ``configured`` is False when no backend has
            credentials, in which case nothing else is checked.

        Raises:
            RateLimited: Admission control refused the call.
            BackendQuotaExceeded: A backend quota cooldown is active or was
                just triggered.
            BackendOverloaded: Every backend tried was overloaded.
            BackendError: A backend failed with a non-retryable error.
        """
        backends = self.backends
        if not backends:
            logger.info("No generation backend configured")
            return RouterResult.unconfigured()

        tier = resolve_tier(tier)
        admission = self._rate_limiter.acquire(tenant_id, tier)
        if not admission.allowed:
            wait_ms = admission.wait_ms or 0
            if admission.limit_type == LimitType.BACKEND_QUOTA:
                raise BackendQuotaExceeded(wait_ms)
            raise RateLimited(wait_ms)

        counted = False
        try:
            with tracer.start_as_current_span("model_router.invoke") as span:
                span.set_attribute("tenant.id", tenant_id)
                span.set_attribute("tenant.tier", tier.value)

                last_error: BackendOverloaded | None = None
                for attempt, backend in enumerate(backends, start=1):
                    logger.info(
                        "Trying backend %s for tenant %s (attempt %d)",
                        backend.name,
                        tenant_id,
                        attempt,
                    )
                    try:
                        text = await self._call(backend, prompt)
                    except BackendOverloaded as e:
                        logger.warning("Backend %s overloaded: %s", backend.name, e)
                        last_error = e
                        continue
                    except BackendQuotaExceeded as e:
                        self._rate_limiter.block(
                            tenant_id, self._quota_cooldown_ms, LimitType.BACKEND_QUOTA
                        )
                        span.set_attribute("router.outcome", "quota_exceeded")
                        raise BackendQuotaExceeded(
                            self._quota_cooldown_ms, backend.name
                        ) from e
                    except BackendError:
                        span.set_attribute("router.outcome", "error")
                        raise
                    except Exception as e:
                        span.set_attribute("router.outcome", "error")
                        raise BackendError(str(e), backend.name) from e

                    self._rate_limiter.record_success(tenant_id)
                    counted = True
                    span.set_attribute("router.backend", backend.name)
                    span.set_attribute("router.attempts", attempt)
                    logger.info(
                        "Got response from backend %s for tenant %s",
                        backend.name,
                        tenant_id,
                    )
                    return RouterResult(text=text, backend=backend.name, attempts=attempt)

                span.set_attribute("router.outcome", "overloaded")
                if last_error is None:
                    raise BackendError("All backends failed")
                raise last_error
        finally:
            if not counted:
                self._rate_limiter.release(tenant_id)


def create_model_router(
    rate_limiter: TenantRateLimiter,
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> ModelRouter:
    """Build a router over the configured Gemini primary/fallback models."""
    settings = settings or get_settings()
    primary, secondary = create_gemini_backends(settings, http_client)
    return ModelRouter(rate_limiter, primary, secondary, settings=settings)
