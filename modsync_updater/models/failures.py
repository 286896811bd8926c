"""Release lookup failure variants and the error that carries them."""

from __future__ import annotations

from dataclasses import dataclass

# Reported when a 403 response has no X-RateLimit-Remaining header.
UNKNOWN_QUOTA = "?"


@dataclass(frozen=True)
class RateLimited:
    remaining_quota: str = UNKNOWN_QUOTA

    def describe(self) -> str:
        return f"Rate limited. Remaining: {self.remaining_quota}"


@dataclass(frozen=True)
class NotFound:
    def describe(self) -> str:
        return "No releases found"


@dataclass(frozen=True)
class TransportFailure:
    """Connection, DNS or timeout failure. No HTTP status when nothing came back."""

    status_code: int | None = None
    reason: str = ""

    def describe(self) -> str:
        detail = f": {self.reason}" if self.reason else ""
        if self.status_code is None:
            return f"Network error{detail}"
        return f"Network error (HTTP {self.status_code}){detail}"


@dataclass(frozen=True)
class UnknownStatus:
    status_code: int

    def describe(self) -> str:
        return f"GitHub API error: {self.status_code}"


@dataclass(frozen=True)
class MalformedResponse:
    reason: str = ""

    def describe(self) -> str:
        return f"Malformed release response: {self.reason}" if self.reason else "Malformed release response"


LookupFailure = RateLimited | NotFound | TransportFailure | UnknownStatus | MalformedResponse


class ReleaseLookupError(Exception):
    """Raised through the lookup handle when the latest release cannot be fetched."""

    def __init__(self, failure: LookupFailure) -> None:
        super().__init__(failure.describe())
        self.failure = failure
