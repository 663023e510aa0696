"""FastAPI application for the CoreTrack assistant."""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from coretrack_assistant import __version__
from coretrack_assistant.api.router import chat_router, ratelimit_router
from coretrack_assistant.chat import ChatService
from coretrack_assistant.config import Settings, get_settings
from coretrack_assistant.ratelimit import TenantRateLimiter, TenantSweeper
from coretrack_assistant.router import ModelRouter, create_model_router
from coretrack_assistant.telemetry import instrument_app

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    rate_limiter: TenantRateLimiter | None = None,
    model_router: ModelRouter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings.
        rate_limiter: Limiter to use instead of a fresh one.
        model_router: Router to use instead of the Gemini router; its own
            limiter takes precedence over ``rate_limiter``.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Own the HTTP client and the sweeper for the app's lifetime."""
        if model_router is not None:
            limiter = model_router.rate_limiter
        else:
            limiter = rate_limiter or TenantRateLimiter(settings)
        http_client = httpx.AsyncClient(timeout=settings.backend_timeout_seconds)
        router = model_router or create_model_router(limiter, settings, http_client)

        app.state.rate_limiter = limiter
        app.state.model_router = router
        app.state.chat_service = ChatService(router)
        app.state.sweeper = TenantSweeper(limiter)

        if not router.is_configured:
            logger.warning("Gemini API key not configured, AI answers disabled")

        async with app.state.sweeper:
            try:
                yield
            finally:
                await http_client.aclose()

    app = FastAPI(
        title=settings.agent_name,
        description=settings.agent_description,
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Health check endpoint
    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy", "agent": settings.agent_name}

    # Ready check endpoint
    @app.get("/ready")
    async def ready_check() -> dict:
        """Readiness check endpoint."""
        return {
            "status": "ready",
            "agent": settings.agent_name,
            "ai_configured": app.state.model_router.is_configured,
        }

    # Provides: POST /chat
    app.include_router(chat_router)

    # Provides:
    # - GET /ratelimit/tenants/{tenant_id} - Tenant status
    # - POST /ratelimit/tenants/{tenant_id}/reset - Reset a tenant
    # - GET /ratelimit/status - Fleet status
    # - GET /ratelimit/sweeper - Sweeper status
    app.include_router(ratelimit_router)

    instrument_app(app)

    return app
