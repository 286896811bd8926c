"""Self-upgrade checks and their reporting into per-player UI state."""

from __future__ import annotations

import asyncio
import logging
import re

from .github_client import ReleaseLookupCache
from .models.failures import (
    LookupFailure,
    NotFound,
    RateLimited,
    ReleaseLookupError,
    TransportFailure,
)
from .models.ui_state import StatusType, UIState
from .models.upgrade import UpgradeCheckResult, UpgradeStatus
from .models.version import SemanticVersion

logger = logging.getLogger(__name__)

_NOTES_MAX_CHARS = 200
_MARKDOWN_HEADER_RE = re.compile(r"#+ ")


def notes_preview(body: str | None, limit: int = _NOTES_MAX_CHARS) -> str:
    """Shorten release notes for a chat line and drop markdown markers."""
    if not body:
        return ""
    notes = body if len(body) <= limit else body[: limit - 3] + "..."
    notes = notes.replace("**", "").replace("*", "")
    return _MARKDOWN_HEADER_RE.sub("", notes)


class UpgradeChecker:
    """Compare the running plugin version against the latest release."""

    def __init__(
        self,
        lookup: ReleaseLookupCache,
        current_version: str,
        include_prereleases: bool = False,
    ) -> None:
        self._lookup = lookup
        self._current_raw = current_version
        self.include_prereleases = include_prereleases

    @property
    def current_version(self) -> SemanticVersion | None:
        return SemanticVersion.try_parse(self._current_raw)

    async def check_for_upgrade(self) -> UpgradeCheckResult:
        """Fetch the latest release and classify it.

        Lookup failures never raise; they come back as an ERROR result
        carrying the failure so callers can decide how loud to be.
        """
        current = self.current_version
        if current is None:
            return UpgradeCheckResult(
                status=UpgradeStatus.ERROR,
                current_version=None,
                message=f"Invalid running version: {self._current_raw}",
            )

        try:
            release = await self._lookup.fetch_latest_release()
        except ReleaseLookupError as exc:
            return UpgradeCheckResult(
                status=UpgradeStatus.ERROR,
                current_version=current,
                message=str(exc),
                failure=exc.failure,
            )

        latest = SemanticVersion.try_parse(release.version)
        if latest is None:
            return UpgradeCheckResult(
                status=UpgradeStatus.ERROR,
                current_version=current,
                message=f"Invalid version format in release: {release.tag_name}",
            )

        if release.prerelease and not self.include_prereleases:
            return UpgradeCheckResult(
                status=UpgradeStatus.UP_TO_DATE,
                current_version=current,
                latest_version=latest,
                release=release,
                message="Latest release is a prerelease (skipped)",
            )

        status = (
            UpgradeStatus.UPGRADE_AVAILABLE
            if latest.is_newer_than(current)
            else UpgradeStatus.UP_TO_DATE
        )
        return UpgradeCheckResult(
            status=status,
            current_version=current,
            latest_version=latest,
            release=release,
        )


def _failure_status_type(failure: LookupFailure | None) -> StatusType:
    if isinstance(failure, (RateLimited, TransportFailure)):
        return StatusType.WARNING
    if isinstance(failure, NotFound):
        return StatusType.INFO
    return StatusType.ERROR


def apply_check_result(state: UIState, result: UpgradeCheckResult) -> None:
    """Render a finished upgrade check as the player's status line."""
    state.stop_loading()
    if result.has_update:
        state.set_status(f"Update available: {result.latest_version}", StatusType.INFO)
    elif result.status is UpgradeStatus.UP_TO_DATE:
        state.set_status("ModSync is up to date", StatusType.SUCCESS)
    else:
        state.set_status(
            f"Error checking for updates: {result.message}",
            _failure_status_type(result.failure),
        )


def start_check(state: UIState, checker: UpgradeChecker) -> asyncio.Task[UpgradeCheckResult]:
    """Run an upgrade check for one player without blocking the caller.

    The task becomes the player's pending operation. If it is cancelled
    (page closed, state reset) the status is left alone.
    """
    state.start_loading()
    task = asyncio.get_running_loop().create_task(checker.check_for_upgrade())

    def _done(t: asyncio.Task[UpgradeCheckResult]) -> None:
        if state.pending_operation is not None and state.pending_operation is not t:
            # Superseded by a newer operation which owns the status now.
            if not t.cancelled():
                t.exception()
            return
        if t.cancelled():
            state.stop_loading()
            return
        exc = t.exception()
        if exc is not None:
            logger.error("Upgrade check crashed", exc_info=exc)
            state.stop_loading()
            state.set_status(f"Error checking for updates: {exc}", StatusType.ERROR)
            return
        apply_check_result(state, t.result())

    task.add_done_callback(_done)
    state.set_pending_operation(task)
    return task


__all__ = [
    "UpgradeChecker",
    "apply_check_result",
    "notes_preview",
    "start_check",
]
