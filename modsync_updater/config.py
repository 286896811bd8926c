"""Central configuration for modsync_updater."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .models.version import SemanticVersion

logger = logging.getLogger(__name__)

# Release lookup target. Fixed for the plugin, never read from the environment.
GITHUB_API_BASE = "https://api.github.com"
REPO_OWNER = "Onyxmoon"
REPO_NAME = "modsync"
USER_AGENT = "ModSync-Plugin"
ACCEPT_MEDIA_TYPE = "application/vnd.github+json"

CACHE_TTL_S = 15 * 60
CONNECT_TIMEOUT_S = 10.0
READ_TIMEOUT_S = 30.0

_MIN_CHECK_INTERVAL_S = 60.0


def _parse_bool(raw: str | None) -> bool:
    return (raw or "").strip().lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Caller-level settings for the upgrade notification flow.

    All settings are loaded from environment variables with sensible defaults.
    """

    CURRENT_VERSION: str
    INCLUDE_PRERELEASES: bool
    CHECK_INTERVAL_S: float


def _read_settings() -> Settings:
    """Read caller configuration from environment variables.

    Note:
        Invalid numeric values fall back to defaults. The check interval
        is clamped to at least one minute to stay under the API rate limit.
    """
    current_version = (os.environ.get("MODSYNC_VERSION") or "0.0.0").strip()
    include_prereleases = _parse_bool(os.environ.get("MODSYNC_INCLUDE_PRERELEASES"))
    try:
        interval = float(os.environ.get("MODSYNC_CHECK_INTERVAL_S", "3600") or "3600")
    except ValueError:
        interval = 3600.0

    return Settings(
        CURRENT_VERSION=current_version,
        INCLUDE_PRERELEASES=include_prereleases,
        CHECK_INTERVAL_S=max(_MIN_CHECK_INTERVAL_S, interval),
    )


settings = _read_settings()


def validate_settings() -> None:
    """Log warnings for settings the upgrade check cannot work with."""
    if SemanticVersion.try_parse(settings.CURRENT_VERSION) is None:
        logger.warning(
            "MODSYNC_VERSION %r is not a semantic version; upgrade checks will fail",
            settings.CURRENT_VERSION,
        )


# Exported constants
CURRENT_VERSION: str = settings.CURRENT_VERSION
INCLUDE_PRERELEASES: bool = settings.INCLUDE_PRERELEASES
CHECK_INTERVAL_S: float = settings.CHECK_INTERVAL_S
