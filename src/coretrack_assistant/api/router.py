"""API routes for chat and rate limit administration."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from coretrack_assistant.chat import ChatRequest, ChatResponse, ChatService
from coretrack_assistant.ratelimit import (
    FleetStatus,
    TenantRateLimiter,
    TenantStatus,
    TenantSweeper,
)

logger = logging.getLogger(__name__)


def get_chat_service(request: Request) -> ChatService:
    """Chat service owned by the running app."""
    return request.app.state.chat_service


def get_rate_limiter(request: Request) -> TenantRateLimiter:
    """Rate limiter owned by the running app."""
    return request.app.state.rate_limiter


def get_sweeper(request: Request) -> TenantSweeper:
    """Sweeper owned by the running app."""
    return request.app.state.sweeper


chat_router = APIRouter(tags=["chat"])
ratelimit_router = APIRouter(prefix="/ratelimit", tags=["ratelimit"])


@chat_router.post(
    "/chat",
    response_model=ChatResponse,
    summary="Ask the assistant",
    description="Answer a message; falls back to static help when AI is unavailable.",
)
async def chat(
    body: ChatRequest,
    chat_service: Annotated[ChatService, Depends(get_chat_service)],
) -> ChatResponse:
    """Answer a chat message."""
    return await chat_service.send_message(
        body.message,
        body.context,
        body.contextual_data,
    )


@ratelimit_router.get(
    "/tenants/{tenant_id}",
    response_model=TenantStatus,
    summary="Get tenant rate limit status",
)
async def get_tenant_status(
    tenant_id: str,
    rate_limiter: Annotated[TenantRateLimiter, Depends(get_rate_limiter)],
) -> TenantStatus:
    """Get one tenant's counters, caps and block state."""
    return rate_limiter.get_tenant_status(tenant_id)


@ratelimit_router.post(
    "/tenants/{tenant_id}/reset",
    summary="Reset tenant rate limits",
)
async def reset_tenant(
    tenant_id: str,
    rate_limiter: Annotated[TenantRateLimiter, Depends(get_rate_limiter)],
) -> dict:
    """Reset a tenant's counters and block."""
    rate_limiter.reset_limits(tenant_id)
    return {"status": "reset", "tenant_id": tenant_id}


@ratelimit_router.get(
    "/status",
    response_model=FleetStatus,
    summary="Get fleet rate limit status",
)
async def get_fleet_status(
    rate_limiter: Annotated[TenantRateLimiter, Depends(get_rate_limiter)],
) -> FleetStatus:
    """Get aggregate counts across tenants."""
    return rate_limiter.get_fleet_status()


@ratelimit_router.get(
    "/sweeper",
    summary="Get sweeper status",
)
async def get_sweeper_status(
    sweeper: Annotated[TenantSweeper, Depends(get_sweeper)],
) -> dict:
    """Get inactive-tenant sweeper status."""
    return sweeper.get_status()
