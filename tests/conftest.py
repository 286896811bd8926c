"""Shared test fixtures and dummy classes."""

from __future__ import annotations

import threading
from typing import Any

import pytest


class DummyResponse:
    """Dummy HTTP response for testing."""

    def __init__(
        self,
        data: object,
        status: int = 200,
        headers: dict[str, str] | None = None,
        invalid_json: bool = False,
    ) -> None:
        self._data = data
        self.status_code = status
        self.headers = headers or {}
        self.ok = 200 <= status < 300
        self._invalid_json = invalid_json

    def json(self) -> object:
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._data


class DummySession:
    """Stands in for requests.Session; replays one response or raises."""

    def __init__(self, response: object = None) -> None:
        self.response = response
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._lock = threading.Lock()
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> object:
        with self._lock:
            self.calls.append((url, kwargs))
        if isinstance(self.response, BaseException):
            raise self.response
        return self.response

    def close(self) -> None:
        self.closed = True


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def release_payload(tag: str = "v1.2.0", **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "tag_name": tag,
        "name": f"ModSync {tag}",
        "published_at": "2024-01-01T00:00:00Z",
        "prerelease": False,
        "draft": False,
        "html_url": f"https://github.com/Onyxmoon/modsync/releases/tag/{tag}",
        "body": "notes",
        "assets": [
            {
                "name": f"modsync-{tag.lstrip('v')}.jar",
                "size": 1024,
                "browser_download_url": "https://example.com/modsync.jar",
                "content_type": "application/java-archive",
            }
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
