"""In-memory per-tenant rate limiter with minute and day windows."""

import logging
import threading
import time
from collections.abc import Callable
from datetime import UTC, datetime

from coretrack_assistant.config import Settings, get_settings
from coretrack_assistant.ratelimit.models import (
    DEFAULT_TIER,
    PREMIUM_TIERS,
    Admission,
    FleetStatus,
    LimitType,
    RateLimitRecord,
    SubscriptionTier,
    TenantStatus,
    TierLimits,
    resolve_tier,
)

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _to_datetime(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=UTC)


def format_duration(ms: int) -> str:
    """Format a duration as the two most significant units, e.g. ``2d 3h``."""
    seconds = max(0, ms) // 1000
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if days > 0:
        return f"{days}d {hours % 24}h"
    if hours > 0:
        return f"{hours}h {minutes % 60}m"
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"


class TenantRateLimiter:
    """Per-tenant rate limiter over fixed minute and day windows.

    Each tenant gets a lazily created ``RateLimitRecord``. Windows roll over
    once their length has fully elapsed. Admission checks never count a
    request; ``record_success`` does, so failed backend calls cost nothing.
    ``acquire`` also reserves an in-flight slot that counts against both
    caps until ``record_success`` or ``release`` frees it.

    Every check-then-mutate step runs under one lock and never awaits.
    """

    # Time windows in milliseconds
    MINUTE_MS = 60_000
    DAY_MS = 86_400_000

    def __init__(
        self,
        settings: Settings | None = None,
        clock: Callable[[], int] | None = None,
    ):
        """Initialize rate limiter.

        Args:
            settings: Application settings.
            clock: Returns the current time in epoch milliseconds.
        """
        self._settings = settings or get_settings()
        self._clock = clock or _now_ms
        self._records: dict[str, RateLimitRecord] = {}
        self._lock = threading.Lock()

        self.max_per_minute = self._settings.rate_limit_max_per_minute
        self.inactive_retention_ms = self._settings.rate_limit_inactive_retention_ms
        self.sweep_interval_ms = self._settings.rate_limit_sweep_interval_ms
        self._daily_limits: dict[SubscriptionTier, int] = {
            tier: (
                self._settings.rate_limit_max_per_day_premium
                if tier in PREMIUM_TIERS
                else self._settings.rate_limit_max_per_day_standard
            )
            for tier in SubscriptionTier
        }

    def now(self) -> int:
        """Current time in epoch milliseconds, from the injected clock."""
        return self._clock()

    def get_limits(self, tier: SubscriptionTier | str | None = None) -> TierLimits:
        """Get the effective limits for a tier.

        Args:
            tier: Subscription tier or plan name, or None for the default tier.

        Returns:
            Per-minute and per-day limits.
        """
        return TierLimits(
            requests_per_minute=self.max_per_minute,
            requests_per_day=self._daily_limits[resolve_tier(tier)],
        )

    def _get_or_create(self, tenant_id: str, now: int) -> RateLimitRecord:
        record = self._records.get(tenant_id)
        if record is None:
            record = RateLimitRecord.fresh(now)
            self._records[tenant_id] = record
            logger.debug("Tracking new tenant: %s", tenant_id)
        return record

    def _roll_windows(self, record: RateLimitRecord, now: int) -> None:
        if now - record.minute_window_start >= self.MINUTE_MS:
            record.requests_this_minute = 0
            record.minute_window_start = now

        if now - record.day_window_start >= self.DAY_MS:
            record.requests_today = 0
            record.day_window_start = now

    def _set_block(
        self,
        record: RateLimitRecord,
        until: int,
        reason: LimitType,
    ) -> None:
        record.blocked = True
        record.blocked_until = until
        record.block_reason = reason

    def check_admission(
        self,
        tenant_id: str,
        tier: SubscriptionTier | str | None = None,
    ) -> Admission:
        """Decide whether a tenant may make a request now.

        Does not count or reserve the request. Callers that go on to call a
        backend should use ``acquire`` instead.

        Args:
            tenant_id: Tenant identifier.
            tier: Subscription tier or plan name, or None for the default tier.

        Returns:
            Admission with the wait in milliseconds when refused.

        Raises:
            ValueError: If tenant_id is empty.
        """
        return self._admit(tenant_id, tier, reserve=False)

    def acquire(
        self,
        tenant_id: str,
        tier: SubscriptionTier | str | None = None,
    ) -> Admission:
        """Check admission and reserve a slot when allowed.

        A granted slot counts against both caps until ``record_success``
        or ``release`` is called for it.

        Args:
            tenant_id: Tenant identifier.
            tier: Subscription tier or plan name, or None for the default tier.

        Returns:
            Admission with the wait in milliseconds when refused.

        Raises:
            ValueError: If tenant_id is empty.
        """
        return self._admit(tenant_id, tier, reserve=True)

    def _admit(
        self,
        tenant_id: str,
        tier: SubscriptionTier | str | None,
        reserve: bool,
    ) -> Admission:
        if not tenant_id:
            raise ValueError("tenant_id must be a non-empty string")

        tier = resolve_tier(tier)
        daily_limit = self._daily_limits[tier]

        with self._lock:
            now = self._clock()
            record = self._get_or_create(tenant_id, now)
            record.tier = tier
            self._roll_windows(record, now)

            if record.blocked:
                if record.blocked_until is not None and now < record.blocked_until:
                    return Admission(
                        allowed=False,
                        wait_ms=record.blocked_until - now,
                        limit_type=record.block_reason,
                    )
                record.blocked = False
                record.blocked_until = None
                record.block_reason = None

            # In-flight slots refuse new calls; only counted requests set a block
            if record.requests_this_minute + record.in_flight >= self.max_per_minute:
                until = record.minute_window_start + self.MINUTE_MS
                if record.requests_this_minute >= self.max_per_minute:
                    self._set_block(record, until, LimitType.MINUTE)
                logger.info(
                    "Tenant %s hit per-minute limit (%d/%d, %d in flight)",
                    tenant_id,
                    record.requests_this_minute,
                    self.max_per_minute,
                    record.in_flight,
                )
                return Admission(False, until - now, LimitType.MINUTE)

            if record.requests_today + record.in_flight >= daily_limit:
                until = record.day_window_start + self.DAY_MS
                if record.requests_today >= daily_limit:
                    self._set_block(record, until, LimitType.DAY)
                logger.info(
                    "Tenant %s hit daily limit (%d/%d, tier=%s, %d in flight)",
                    tenant_id,
                    record.requests_today,
                    daily_limit,
                    tier.value,
                    record.in_flight,
                )
                return Admission(False, until - now, LimitType.DAY)

            if reserve:
                record.in_flight += 1
            return Admission(allowed=True)

    def record_success(self, tenant_id: str) -> None:
        """Count one successful downstream call against both windows.

        Also frees the slot reserved by ``acquire``, if any.

        Args:
            tenant_id: Tenant identifier.
        """
        with self._lock:
            now = self._clock()
            record = self._get_or_create(tenant_id, now)
            self._roll_windows(record, now)
            record.requests_this_minute += 1
            record.requests_today += 1
            record.in_flight = max(0, record.in_flight - 1)

    def release(self, tenant_id: str) -> None:
        """Free a slot reserved by ``acquire`` without counting a request.

        Args:
            tenant_id: Tenant identifier.
        """
        with self._lock:
            record = self._records.get(tenant_id)
            if record is not None:
                record.in_flight = max(0, record.in_flight - 1)

    def block(
        self,
        tenant_id: str,
        duration_ms: int,
        reason: LimitType = LimitType.BACKEND_QUOTA,
    ) -> int:
        """Block a tenant for a fixed duration.

        Args:
            tenant_id: Tenant identifier.
            duration_ms: Block length in milliseconds.
            reason: Why the tenant is blocked.

        Returns:
            The block expiry in epoch milliseconds.
        """
        with self._lock:
            now = self._clock()
            record = self._get_or_create(tenant_id, now)
            until = now + duration_ms
            self._set_block(record, until, reason)

        logger.warning(
            "Tenant %s blocked for %d ms (%s)", tenant_id, duration_ms, reason.value
        )
        return until

    def sweep_inactive(self) -> int:
        """Delete records for tenants inactive beyond the retention window.

        Returns:
            Number of records removed.
        """
        removed = 0
        with self._lock:
            now = self._clock()
            for tenant_id in list(self._records):
                record = self._records.get(tenant_id)
                if record is not None and now - record.last_activity > self.inactive_retention_ms:
                    del self._records[tenant_id]
                    removed += 1

        if removed:
            logger.info("Cleaned up %d inactive tenant rate limits", removed)
        return removed

    def reset_limits(self, tenant_id: str) -> None:
        """Reset one tenant's counters and block (admin function).

        Args:
            tenant_id: Tenant identifier.
        """
        with self._lock:
            now = self._clock()
            previous = self._records.get(tenant_id)
            tier = previous.tier if previous else DEFAULT_TIER
            self._records[tenant_id] = RateLimitRecord.fresh(now, tier)

        logger.info("Rate limits reset for tenant: %s", tenant_id)

    def reset_all(self) -> None:
        """Reset every tracked tenant (admin function)."""
        with self._lock:
            now = self._clock()
            for tenant_id, record in list(self._records.items()):
                self._records[tenant_id] = RateLimitRecord.fresh(now, record.tier)
            count = len(self._records)

        logger.info("Rate limits reset for all %d tenants", count)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, tenant_id: object) -> bool:
        return tenant_id in self._records

    def get_record(self, tenant_id: str) -> RateLimitRecord | None:
        """Return a copy of a tenant's record, or None if untracked."""
        with self._lock:
            record = self._records.get(tenant_id)
            if record is None:
                return None
            return RateLimitRecord(**vars(record))

    def get_tenant_status(self, tenant_id: str) -> TenantStatus:
        """Snapshot one tenant's state without rolling windows.

        Args:
            tenant_id: Tenant identifier.

        Returns:
            Tenant status; untracked tenants get a zeroed snapshot.
        """
        with self._lock:
            now = self._clock()
            record = self._records.get(tenant_id)
            if record is None:
                return TenantStatus(
                    tenant_id=tenant_id,
                    tracked=False,
                    tier=DEFAULT_TIER,
                    max_per_minute=self.max_per_minute,
                    max_per_day=self._daily_limits[DEFAULT_TIER],
                )

            next_minute_reset = self.MINUTE_MS - (now - record.minute_window_start)
            next_day_reset = self.DAY_MS - (now - record.day_window_start)

            return TenantStatus(
                tenant_id=tenant_id,
                tracked=True,
                tier=record.tier,
                requests_this_minute=record.requests_this_minute,
                requests_today=record.requests_today,
                in_flight=record.in_flight,
                max_per_minute=self.max_per_minute,
                max_per_day=self._daily_limits[record.tier],
                blocked=record.blocked,
                blocked_until=(
                    _to_datetime(record.blocked_until)
                    if record.blocked_until is not None
                    else None
                ),
                block_reason=record.block_reason,
                next_reset_ms=max(0, min(next_minute_reset, next_day_reset)),
                last_activity=_to_datetime(record.last_activity),
                last_activity_age=format_duration(now - record.last_activity),
                tenant_age=format_duration(now - record.first_seen),
            )

    def get_fleet_status(self) -> FleetStatus:
        """Aggregate counts across all tracked tenants.

        Returns:
            Fleet status.
        """
        with self._lock:
            now = self._clock()
            records = self._records.values()
            if not records:
                return FleetStatus()

            return FleetStatus(
                total_tenants=len(records),
                active_tenants=sum(
                    1 for r in records if now - r.last_activity < self.DAY_MS
                ),
                blocked_tenants=sum(1 for r in records if r.blocked),
                total_requests_today=sum(r.requests_today for r in records),
                oldest_activity=_to_datetime(min(r.last_activity for r in records)),
            )
