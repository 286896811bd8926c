"""Cache-related dataclasses."""

from __future__ import annotations

from dataclasses import dataclass

from .release import ReleaseInfo


@dataclass(frozen=True)
class CacheEntry:
    """Cached release with its expiry, swapped as one immutable snapshot."""

    release: ReleaseInfo
    expires_at: float

    def is_fresh(self, now: float) -> bool:
        return now < self.expires_at
