"""GitHub "latest release" lookup behind a time-bounded cache.

The network call runs in a worker thread (``asyncio.to_thread``) so the
event loop never blocks. Concurrent cache misses share one in-flight
request unless the cache is built with ``coalesce=False``, which restores
per-caller requests where the last response to land wins the cache slot.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

import requests

from . import config
from .models.cache import CacheEntry
from .models.failures import (
    UNKNOWN_QUOTA,
    MalformedResponse,
    NotFound,
    RateLimited,
    ReleaseLookupError,
    TransportFailure,
    UnknownStatus,
)
from .models.release import ReleaseInfo

__all__ = ["ReleaseLookupCache", "latest_release_url"]

logger = logging.getLogger(__name__)

_HEADERS = {
    "Accept": config.ACCEPT_MEDIA_TYPE,
    "User-Agent": config.USER_AGENT,
}


def latest_release_url(owner: str = config.REPO_OWNER, repo: str = config.REPO_NAME) -> str:
    return f"{config.GITHUB_API_BASE}/repos/{owner}/{repo}/releases/latest"


def _parse_release(resp: requests.Response) -> ReleaseInfo:
    try:
        data = resp.json()
    except ValueError as exc:
        raise ReleaseLookupError(MalformedResponse(f"invalid JSON: {exc}")) from exc
    try:
        return ReleaseInfo.from_payload(data)
    except ValueError as exc:
        raise ReleaseLookupError(MalformedResponse(str(exc))) from exc


def _release_from_response(resp: requests.Response) -> ReleaseInfo:
    """Map an API response to a release or a typed lookup failure."""
    status = resp.status_code
    if status == 200:
        return _parse_release(resp)
    if status == 403:
        remaining = resp.headers.get("X-RateLimit-Remaining")
        raise ReleaseLookupError(RateLimited(remaining if remaining is not None else UNKNOWN_QUOTA))
    if status == 404:
        raise ReleaseLookupError(NotFound())
    raise ReleaseLookupError(UnknownStatus(status))


class ReleaseLookupCache:
    """Latest plugin release, cached for ``ttl_s`` seconds.

    One instance is meant to live for the whole process and be handed to
    whatever needs release information. It must be used from a single
    event loop.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        owner: str = config.REPO_OWNER,
        repo: str = config.REPO_NAME,
        ttl_s: float = config.CACHE_TTL_S,
        connect_timeout_s: float = config.CONNECT_TIMEOUT_S,
        read_timeout_s: float = config.READ_TIMEOUT_S,
        coalesce: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._url = latest_release_url(owner, repo)
        self._ttl_s = ttl_s
        self._timeout = (connect_timeout_s, read_timeout_s)
        self._coalesce = coalesce
        self._clock = clock
        # Release and expiry are replaced together as one frozen snapshot.
        self._entry: CacheEntry | None = None
        self._inflight: asyncio.Task[ReleaseInfo] | None = None
        # Strong references; the event loop only keeps weak ones.
        self._requests: set[asyncio.Task[ReleaseInfo]] = set()

    @property
    def url(self) -> str:
        return self._url

    @property
    def entry(self) -> CacheEntry | None:
        return self._entry

    def fetch_latest_release(self) -> asyncio.Future[ReleaseInfo]:
        """Return a handle resolving to the latest release.

        A fresh cache entry resolves the handle immediately. Otherwise the
        handle resolves once the request completes, or is rejected with
        ``ReleaseLookupError``. Cancelling the returned handle never
        cancels the shared request.

        Must be called while the event loop is running.
        """
        loop = asyncio.get_running_loop()
        entry = self._entry
        if entry is not None and entry.is_fresh(self._clock()):
            logger.debug("Using cached GitHub release info")
            done: asyncio.Future[ReleaseInfo] = loop.create_future()
            done.set_result(entry.release)
            return done

        if self._coalesce and self._inflight is not None and not self._inflight.done():
            logger.debug("Joining in-flight GitHub release request")
            return asyncio.shield(self._inflight)

        logger.debug("Requesting latest release from %s", self._url)
        task = loop.create_task(self._refresh())
        self._requests.add(task)
        task.add_done_callback(self._on_refresh_done)
        if self._coalesce:
            self._inflight = task
        return asyncio.shield(task)

    def clear_cache(self) -> None:
        """Drop the cached release so the next fetch goes to the network."""
        self._entry = None

    def close(self) -> None:
        """Close the HTTP session if this cache created it."""
        if self._owns_session:
            self._session.close()

    async def _refresh(self) -> ReleaseInfo:
        release = await asyncio.to_thread(self._request_latest)
        self._entry = CacheEntry(release=release, expires_at=self._clock() + self._ttl_s)
        return release

    def _request_latest(self) -> ReleaseInfo:
        try:
            resp = self._session.get(
                self._url,
                headers=_HEADERS,
                timeout=self._timeout,
                allow_redirects=True,
            )
        except requests.exceptions.RequestException as exc:
            status = getattr(exc.response, "status_code", None)
            raise ReleaseLookupError(
                TransportFailure(status_code=status, reason=type(exc).__name__)
            ) from exc
        return _release_from_response(resp)

    def _on_refresh_done(self, task: asyncio.Task[ReleaseInfo]) -> None:
        self._requests.discard(task)
        if self._inflight is task:
            self._inflight = None
        # Every caller may have walked away; mark the outcome as retrieved.
        if not task.cancelled():
            task.exception()
