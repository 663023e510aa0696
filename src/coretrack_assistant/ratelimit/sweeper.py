"""Background sweeper for inactive tenant rate limit records."""

import asyncio
import logging
from datetime import UTC, datetime

from coretrack_assistant.ratelimit.limiter import TenantRateLimiter

logger = logging.getLogger(__name__)


class TenantSweeper:
    """Periodically removes rate limit records of dormant tenants.

    The sweeper owns a single asyncio task. Use ``start``/``stop`` or
    ``async with`` to scope its lifetime to the owning service.
    """

    def __init__(
        self,
        rate_limiter: TenantRateLimiter,
        interval_ms: int | None = None,
    ) -> None:
        """Initialize the sweeper.

        Args:
            rate_limiter: Limiter whose records are swept.
            interval_ms: Sweep interval (default: rate_limit_sweep_interval_ms).
        """
        self._rate_limiter = rate_limiter
        self._interval_ms = (
            interval_ms if interval_ms is not None else rate_limiter.sweep_interval_ms
        )

        self._task: asyncio.Task | None = None

        # State
        self._running = False
        self._last_run: datetime | None = None
        self._run_count = 0
        self._removed_total = 0

    def sweep(self) -> int:
        """Run one sweep and update bookkeeping.

        Returns:
            Number of records removed.
        """
        removed = self._rate_limiter.sweep_inactive()
        self._last_run = datetime.now(UTC)
        self._run_count += 1
        self._removed_total += removed
        return removed

    async def _run_loop(self) -> None:
        while self._running:
            await asyncio.sleep(self._interval_ms / 1000)
            try:
                self.sweep()
            except Exception as e:
                logger.exception("Sweeper: sweep failed: %s", e)

    async def start(self) -> None:
        """Start the background sweep task."""
        if self._running:
            logger.warning("Sweeper already running")
            return

        self._running = True
        self._task = asyncio.create_task(
            self._run_loop(),
            name="tenant_rate_limit_sweeper",
        )
        logger.info(
            "Automatic rate limit cleanup scheduled (every %d ms)",
            self._interval_ms,
        )

    async def stop(self) -> None:
        """Stop the sweeper and wait for its task to finish."""
        if not self._running:
            return

        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("Automatic rate limit cleanup stopped")

    async def run_immediate(self) -> int:
        """Run a sweep now, outside the schedule."""
        logger.info("Running immediate tenant sweep")
        return self.sweep()

    async def __aenter__(self) -> "TenantSweeper":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    def get_status(self) -> dict:
        """Get sweeper status.

        Returns:
            Status dictionary.
        """
        return {
            "running": self._running,
            "interval_ms": self._interval_ms,
            "inactive_retention_ms": self._rate_limiter.inactive_retention_ms,
            "last_run": self._last_run.isoformat() if self._last_run else None,
            "run_count": self._run_count,
            "removed_total": self._removed_total,
            "tracked_tenants": len(self._rate_limiter),
        }

    @property
    def is_running(self) -> bool:
        """Check if the sweeper is running."""
        return self._running
