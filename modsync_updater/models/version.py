"""Semantic version parsing and ordering."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:-([a-zA-Z0-9.-]+))?$")


@total_ordering
@dataclass(frozen=True)
class SemanticVersion:
    """major.minor.patch[-prerelease], ordered for update detection.

    A release sorts above any prerelease of the same numbers; prerelease
    labels are compared as plain strings.
    """

    major: int
    minor: int
    patch: int
    prerelease: str | None = None

    @classmethod
    def parse(cls, version: str) -> SemanticVersion:
        """Parse ``"1.2.3"`` or ``"v1.2.3-alpha"``.

        Raises:
            ValueError: If the string is empty or not a semantic version.
        """
        if not version or not version.strip():
            raise ValueError("Version string cannot be empty")
        normalized = version.strip()
        if normalized.startswith("v"):
            normalized = normalized[1:]
        match = _VERSION_RE.match(normalized)
        if not match:
            raise ValueError(f"Invalid semantic version: {version}")
        major, minor, patch, prerelease = match.groups()
        return cls(int(major), int(minor), int(patch), prerelease)

    @classmethod
    def try_parse(cls, version: str | None) -> SemanticVersion | None:
        if version is None:
            return None
        try:
            return cls.parse(version)
        except ValueError:
            return None

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    def _key(self) -> tuple[int, int, int, int, str]:
        # Releases (1) sort after prereleases (0) of the same numbers.
        if self.prerelease is None:
            return (self.major, self.minor, self.patch, 1, "")
        return (self.major, self.minor, self.patch, 0, self.prerelease)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._key() < other._key()

    def is_newer_than(self, other: SemanticVersion) -> bool:
        return self > other

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        return f"{base}-{self.prerelease}" if self.prerelease else base
