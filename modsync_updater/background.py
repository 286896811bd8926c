"""Periodic upgrade notifications (started once per process)."""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Callable

from .models.failures import NotFound, RateLimited
from .models.upgrade import UpgradeCheckResult, UpgradeStatus
from .upgrade import UpgradeChecker

logger = logging.getLogger(__name__)

_MAX_BACKOFF_S = 6 * 60 * 60

UpdateCallback = Callable[[UpgradeCheckResult], Awaitable[None] | None]


class UpgradeNotifier:
    """Check for plugin upgrades on a timer and announce new versions once.

    Rate limiting is not reported; when the API says no quota is left the
    interval doubles (up to six hours) until a check succeeds again.
    """

    def __init__(
        self,
        checker: UpgradeChecker,
        on_update: UpdateCallback,
        interval_s: float,
    ) -> None:
        self._checker = checker
        self._on_update = on_update
        self.interval_s = interval_s
        self.current_delay_s = interval_s
        self.notified_version: str | None = None
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def ensure_started(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _loop(self) -> None:
        while True:
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Upgrade notifier iteration failed")
            await asyncio.sleep(self.current_delay_s)

    async def run_once(self) -> UpgradeCheckResult:
        """Perform one check, update the back-off delay and notify if needed."""
        result = await self._checker.check_for_upgrade()
        failure = result.failure

        if isinstance(failure, RateLimited):
            if failure.remaining_quota == "0":
                self.current_delay_s = min(self.current_delay_s * 2, _MAX_BACKOFF_S)
            logger.debug(
                "Upgrade check rate limited (remaining=%s); next in %.0fs",
                failure.remaining_quota,
                self.current_delay_s,
            )
            return result

        self.current_delay_s = self.interval_s
        if isinstance(failure, NotFound):
            logger.debug("No releases published yet")
            return result
        if result.status is UpgradeStatus.ERROR:
            logger.warning("Upgrade check failed: %s", result.message)
            return result

        if result.has_update:
            version = str(result.latest_version)
            if version != self.notified_version:
                logger.info(
                    "ModSync update available: %s -> %s",
                    result.current_version,
                    version,
                )
                self.notified_version = version
                maybe = self._on_update(result)
                if inspect.isawaitable(maybe):
                    await maybe
        return result
