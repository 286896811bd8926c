"""Entrypoint for a one-shot ModSync upgrade check.

This module wires up the release cache and checker, runs one check and
logs the outcome. The exit code is 0 when the check ran, 1 on errors.
"""

from __future__ import annotations

import asyncio
import logging

from . import config
from .github_client import ReleaseLookupCache
from .logger import setup_logging
from .models.upgrade import UpgradeCheckResult, UpgradeStatus
from .upgrade import UpgradeChecker, notes_preview

logger = logging.getLogger(__name__)


def build_checker(lookup: ReleaseLookupCache | None = None) -> UpgradeChecker:
    return UpgradeChecker(
        lookup or ReleaseLookupCache(),
        current_version=config.CURRENT_VERSION,
        include_prereleases=config.INCLUDE_PRERELEASES,
    )


def log_result(result: UpgradeCheckResult) -> None:
    if result.has_update:
        logger.info("Update available: %s -> %s", result.current_version, result.latest_version)
        release = result.release
        if release is not None:
            main_jar = release.find_main_jar()
            if main_jar is not None:
                logger.info("Download: %s", main_jar.download_url)
            bootstrap_jar = release.find_bootstrap_jar()
            if bootstrap_jar is not None:
                logger.info("Bootstrap jar: %s (manual update required)", bootstrap_jar.name)
            notes = notes_preview(release.body)
            if notes:
                logger.info("Release notes: %s", notes)
    elif result.status is UpgradeStatus.UP_TO_DATE:
        suffix = f" ({result.message})" if result.message else ""
        logger.info("ModSync is up to date (%s)%s", result.current_version, suffix)
    else:
        logger.error("Update check failed: %s", result.message)


def run() -> int:
    setup_logging()
    config.validate_settings()
    logger.info("Checking for ModSync updates...")
    lookup = ReleaseLookupCache()
    try:
        result = asyncio.run(build_checker(lookup).check_for_upgrade())
    finally:
        lookup.close()
    log_result(result)
    return 1 if result.status is UpgradeStatus.ERROR else 0


if __name__ == "__main__":
    raise SystemExit(run())
