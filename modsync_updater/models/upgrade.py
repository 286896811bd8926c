"""Upgrade check result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from .failures import LookupFailure
from .release import ReleaseInfo
from .version import SemanticVersion


class UpgradeStatus(Enum):
    UP_TO_DATE = auto()
    UPGRADE_AVAILABLE = auto()
    ERROR = auto()


@dataclass(frozen=True)
class UpgradeCheckResult:
    status: UpgradeStatus
    current_version: SemanticVersion | None
    latest_version: SemanticVersion | None = None
    release: ReleaseInfo | None = None
    message: str | None = None
    failure: LookupFailure | None = None

    @property
    def has_update(self) -> bool:
        return self.status is UpgradeStatus.UPGRADE_AVAILABLE
