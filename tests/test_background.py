import asyncio

import pytest

from modsync_updater.background import UpgradeNotifier
from modsync_updater.models.failures import RateLimited, TransportFailure
from modsync_updater.models.upgrade import UpgradeCheckResult, UpgradeStatus
from modsync_updater.models.version import SemanticVersion


class ScriptedChecker:
    """Returns queued results in order, repeating the last one."""

    def __init__(self, *results: UpgradeCheckResult) -> None:
        self.results = list(results)
        self.calls = 0

    async def check_for_upgrade(self) -> UpgradeCheckResult:
        self.calls += 1
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0]


CURRENT = SemanticVersion(1, 0, 0)


def _available(version: str) -> UpgradeCheckResult:
    return UpgradeCheckResult(
        UpgradeStatus.UPGRADE_AVAILABLE, CURRENT, SemanticVersion.parse(version)
    )


def _failed(failure) -> UpgradeCheckResult:
    return UpgradeCheckResult(
        UpgradeStatus.ERROR, CURRENT, message=failure.describe(), failure=failure
    )


@pytest.mark.asyncio
async def test_notifies_once_per_version() -> None:
    seen: list[str] = []
    checker = ScriptedChecker(_available("1.1.0"), _available("1.1.0"), _available("1.2.0"))
    notifier = UpgradeNotifier(
        checker, lambda r: seen.append(str(r.latest_version)), interval_s=60
    )

    for _ in range(3):
        await notifier.run_once()

    assert seen == ["1.1.0", "1.2.0"]
    assert notifier.notified_version == "1.2.0"


@pytest.mark.asyncio
async def test_async_callback_is_awaited() -> None:
    seen: list[str] = []

    async def on_update(result: UpgradeCheckResult) -> None:
        seen.append(str(result.latest_version))

    notifier = UpgradeNotifier(ScriptedChecker(_available("1.1.0")), on_update, 60)
    await notifier.run_once()

    assert seen == ["1.1.0"]


@pytest.mark.asyncio
async def test_rate_limit_backs_off_and_recovers() -> None:
    checker = ScriptedChecker(
        _failed(RateLimited("0")),
        _failed(RateLimited("0")),
        _failed(RateLimited("12")),
        _available("1.1.0"),
    )
    notifier = UpgradeNotifier(checker, lambda r: None, interval_s=60)

    await notifier.run_once()
    assert notifier.current_delay_s == 120
    await notifier.run_once()
    assert notifier.current_delay_s == 240
    await notifier.run_once()
    assert notifier.current_delay_s == 240
    await notifier.run_once()
    assert notifier.current_delay_s == 60


@pytest.mark.asyncio
async def test_backoff_is_capped() -> None:
    notifier = UpgradeNotifier(
        ScriptedChecker(_failed(RateLimited("0"))), lambda r: None, interval_s=4 * 3600
    )
    await notifier.run_once()
    await notifier.run_once()
    assert notifier.current_delay_s == 6 * 3600


@pytest.mark.asyncio
async def test_transport_failure_is_logged(caplog) -> None:
    notifier = UpgradeNotifier(
        ScriptedChecker(_failed(TransportFailure(reason="ConnectTimeout"))),
        lambda r: None,
        interval_s=60,
    )

    with caplog.at_level("WARNING"):
        await notifier.run_once()

    assert "Upgrade check failed" in caplog.text
    assert notifier.notified_version is None


@pytest.mark.asyncio
async def test_start_and_stop() -> None:
    checker = ScriptedChecker(_available("1.1.0"))
    notifier = UpgradeNotifier(checker, lambda r: None, interval_s=3600)

    notifier.ensure_started()
    notifier.ensure_started()
    await asyncio.sleep(0.05)
    assert notifier.running
    assert checker.calls == 1

    await notifier.stop()
    assert not notifier.running


@pytest.mark.asyncio
async def test_future_returning_callback_is_awaited() -> None:
    seen: list[str] = []
    loop = asyncio.get_running_loop()

    def on_update(result: UpgradeCheckResult) -> asyncio.Future:
        delivered = loop.create_future()

        def _deliver() -> None:
            seen.append(str(result.latest_version))
            delivered.set_result(None)

        loop.call_later(0.05, _deliver)
        return delivered

    notifier = UpgradeNotifier(ScriptedChecker(_available("1.1.0")), on_update, 60)
    await notifier.run_once()

    assert seen == ["1.1.0"]
