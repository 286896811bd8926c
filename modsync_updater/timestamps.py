"""Timestamp parsing for release metadata."""

from __future__ import annotations

import re
from datetime import datetime, timezone

# fromisoformat on 3.10 only takes 3 or 6 fraction digits.
_FRACTION_RE = re.compile(r"(:\d{2})\.(\d+)")


def _normalize_fraction(match: re.Match[str]) -> str:
    digits = match.group(2)[:6].ljust(6, "0")
    return f"{match.group(1)}.{digits}"


def _from_epoch(seconds: float) -> datetime:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError) as exc:
        raise ValueError(f"Timestamp out of range: {seconds!r}") from exc


def parse_timestamp(value: object) -> datetime | None:
    """Parse epoch seconds or an ISO-8601 string into an aware UTC datetime.

    Args:
        value: Epoch seconds (int, float or numeric string), an ISO-8601
            string such as ``"2024-01-01T00:00:00Z"``, or None.

    Returns:
        The timestamp converted to UTC, or None when value is None.
        Naive ISO strings are taken to be UTC already.

    Raises:
        ValueError: If the value is neither a number nor an ISO-8601 string.

    Example:
        >>> parse_timestamp("2024-01-01T00:00:00Z")
        datetime.datetime(2024, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)
    """
    if value is None:
        return None
    # bool is an int subclass but never a timestamp
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return _from_epoch(value)
    if not isinstance(value, str):
        raise ValueError(f"Invalid timestamp: {value!r}")

    text = value.strip()
    if not text:
        raise ValueError("Invalid timestamp: empty string")
    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        return _from_epoch(seconds)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(_normalize_fraction, text, count=1)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


__all__ = ["parse_timestamp"]
