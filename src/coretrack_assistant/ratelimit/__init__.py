"""Per-tenant rate limiting module.

This module implements admission control for AI requests:
- Subscription tier-based daily caps
- Requests per minute/day per tenant
- Backend quota cooldown blocks
- Periodic cleanup of inactive tenants
"""

from coretrack_assistant.ratelimit.limiter import TenantRateLimiter, format_duration
from coretrack_assistant.ratelimit.models import (
    DEFAULT_TIER,
    PLAN_TO_TIER,
    Admission,
    FleetStatus,
    LimitType,
    RateLimitRecord,
    SubscriptionTier,
    TenantStatus,
    TierLimits,
    get_tier_for_plan,
    resolve_tier,
)
from coretrack_assistant.ratelimit.sweeper import TenantSweeper

__all__ = [
    # Limiter
    "TenantRateLimiter",
    "format_duration",
    # Sweeper
    "TenantSweeper",
    # Models
    "DEFAULT_TIER",
    "PLAN_TO_TIER",
    "Admission",
    "FleetStatus",
    "LimitType",
    "RateLimitRecord",
    "SubscriptionTier",
    "TenantStatus",
    "TierLimits",
    "get_tier_for_plan",
    "resolve_tier",
]
