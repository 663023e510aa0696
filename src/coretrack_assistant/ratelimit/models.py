"""Rate limiting data models and subscription tiers."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, Field


class SubscriptionTier(str, Enum):
    """Subscription tier levels."""

    STARTER = "starter"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


DEFAULT_TIER = SubscriptionTier.STARTER

# Plan name to tier mapping
PLAN_TO_TIER: dict[str, SubscriptionTier] = {
    # Starter tier
    "free": SubscriptionTier.STARTER,
    "trial": SubscriptionTier.STARTER,
    "basic": SubscriptionTier.STARTER,
    "starter": SubscriptionTier.STARTER,
    # Professional tier
    "professional": SubscriptionTier.PROFESSIONAL,
    "pro": SubscriptionTier.PROFESSIONAL,
    "standard": SubscriptionTier.PROFESSIONAL,
    # Enterprise tier
    "enterprise": SubscriptionTier.ENTERPRISE,
    "premium": SubscriptionTier.ENTERPRISE,
    "unlimited": SubscriptionTier.ENTERPRISE,
}

# Tiers billed at the premium daily cap; all others use the standard cap
PREMIUM_TIERS = frozenset({SubscriptionTier.ENTERPRISE})


def get_tier_for_plan(plan: str | None) -> SubscriptionTier:
    """Get subscription tier for a plan name.

    Args:
        plan: Plan name from the subscription layer.

    Returns:
        Subscription tier.
    """
    if not plan:
        return DEFAULT_TIER

    return PLAN_TO_TIER.get(plan.lower(), DEFAULT_TIER)


def resolve_tier(tier: SubscriptionTier | str | None) -> SubscriptionTier:
    """Normalize a tier or plan name to a subscription tier.

    Unknown names fall back to the default tier.
    """
    if isinstance(tier, SubscriptionTier):
        return tier
    return get_tier_for_plan(str(tier) if tier else None)


class LimitType(str, Enum):
    """Reason a tenant is currently blocked."""

    MINUTE = "minute"
    DAY = "day"
    BACKEND_QUOTA = "backend_quota"


class TierLimits(NamedTuple):
    """Rate limits for a subscription tier."""

    requests_per_minute: int
    requests_per_day: int


class Admission(NamedTuple):
    """Result of an admission check."""

    allowed: bool
    wait_ms: int | None = None
    limit_type: LimitType | None = None


@dataclass
class RateLimitRecord:
    """Mutable per-tenant counters, owned by ``TenantRateLimiter``.

    All timestamps are epoch milliseconds.
    """

    minute_window_start: int
    day_window_start: int
    requests_this_minute: int = 0
    requests_today: int = 0
    blocked: bool = False
    blocked_until: int | None = None
    block_reason: LimitType | None = None
    tier: SubscriptionTier = DEFAULT_TIER
    # Admitted calls that have not yet succeeded or been released
    in_flight: int = 0

    @classmethod
    def fresh(cls, now: int, tier: SubscriptionTier = DEFAULT_TIER) -> "RateLimitRecord":
        return cls(minute_window_start=now, day_window_start=now, tier=tier)

    @property
    def last_activity(self) -> int:
        return max(self.minute_window_start, self.day_window_start)

    @property
    def first_seen(self) -> int:
        return min(self.minute_window_start, self.day_window_start)


class TenantStatus(BaseModel):
    """Read-only snapshot of one tenant's rate limit state."""

    tenant_id: str = Field(..., description="Tenant identifier")
    tracked: bool = Field(..., description="Whether a record exists for the tenant")
    tier: SubscriptionTier = Field(..., description="Last seen subscription tier")

    # Current usage
    requests_this_minute: int = Field(0, description="Requests in current minute window")
    requests_today: int = Field(0, description="Requests in current day window")
    in_flight: int = Field(0, description="Admitted requests still awaiting a backend")

    # Limits
    max_per_minute: int = Field(..., description="Requests per minute limit")
    max_per_day: int = Field(..., description="Requests per day limit for the tier")

    # Status
    blocked: bool = Field(False, description="Whether the tenant is blocked")
    blocked_until: datetime | None = Field(None, description="End of the current block")
    block_reason: LimitType | None = Field(None, description="Why the tenant is blocked")
    next_reset_ms: int = Field(0, description="Milliseconds until the next window reset")
    last_activity: datetime | None = Field(None, description="Latest window start")
    last_activity_age: str = Field("0s", description="Time since last activity")
    tenant_age: str = Field("0s", description="Time since the oldest window start")


class FleetStatus(BaseModel):
    """Aggregate rate limit state across all tracked tenants."""

    total_tenants: int = Field(0, description="Tracked tenants")
    active_tenants: int = Field(0, description="Tenants active in the last 24 hours")
    blocked_tenants: int = Field(0, description="Tenants currently flagged as blocked")
    total_requests_today: int = Field(0, description="Sum of daily counts")
    oldest_activity: datetime | None = Field(
        None, description="Oldest last-activity timestamp among tracked tenants"
    )
