"""Query/mutation cache for API resources.

Keyed by tuples such as ``("/api/playlist",)`` or
``("/api/photos", 7, "enhancement")``. Entries never expire on their own:
an entry reflects the last successful response for its key until a
mutation invalidates it, after which the next read refetches.

Usage:
    cache = QueryCache(retry_limit=3)
    songs = await cache.fetch(("/api/playlist",), load_playlist)
    await cache.mutate(lambda: add_song(...), invalidates=[("/api/playlist",)])
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_none,
)

from http_client import HttpError, NotFoundError

logger = logging.getLogger(__name__)

QueryKey = tuple
Fetcher = Callable[[], Awaitable[Any]]

MAX_RETRY_WAIT = 30  # seconds


def make_key(*parts: Any) -> QueryKey:
    """Build a hashable cache key. Dict parts are frozen; their None values dropped."""
    return tuple(_freeze(p) for p in parts)


def _freeze(part: Any) -> Any:
    if isinstance(part, dict):
        return tuple(sorted((k, _freeze(v)) for k, v in part.items() if v is not None))
    if isinstance(part, (list, tuple)):
        return tuple(_freeze(p) for p in part)
    return part


def is_retryable(exc: BaseException) -> bool:
    """Transient failures only: transport errors, HTTP 5xx and 429."""
    if isinstance(exc, NotFoundError):
        return False
    if isinstance(exc, HttpError):
        return exc.is_transient
    return isinstance(exc, httpx.TransportError)


def _consume_exception(task: asyncio.Task) -> None:
    # Every waiter may have been cancelled; the failure is already logged in _call_with_retry.
    if not task.cancelled():
        task.exception()


@dataclass
class _Entry:
    data: Any
    updated_at: float = field(default_factory=time.time)


class QueryCache:
    """Process-local cache with in-flight de-duplication and prefix invalidation."""

    def __init__(self, retry_limit: int = 3, retry_wait: float = 1.0) -> None:
        self.retry_limit = retry_limit
        self.retry_wait = retry_wait
        self._entries: dict[QueryKey, _Entry] = {}
        self._in_flight: dict[QueryKey, asyncio.Task] = {}
        self._generations: dict[QueryKey, int] = {}

    # ── reads ──────────────────────────────────────────────

    async def fetch(self, key: QueryKey, fetcher: Fetcher, retry: Optional[int] = None) -> Any:
        """Return the cached value for ``key`` or load it with ``fetcher``.

        Concurrent callers of an uncached key share one in-flight fetch.
        ``retry`` overrides the default number of extra attempts.
        """
        entry = self._entries.get(key)
        if entry is not None:
            return entry.data

        task = self._in_flight.get(key)
        if task is None:
            generation = self._generations.get(key, 0)
            task = asyncio.ensure_future(self._load(key, fetcher, retry, generation))
            task.add_done_callback(_consume_exception)
            self._in_flight[key] = task
        # One caller giving up must not cancel the fetch for the others.
        return await asyncio.shield(task)

    async def _load(
        self, key: QueryKey, fetcher: Fetcher, retry: Optional[int], generation: int
    ) -> Any:
        try:
            data = await self._call_with_retry(key, fetcher, retry)
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]
        # Invalidated while in flight: serve the waiters, but do not cache.
        if self._generations.get(key, 0) == generation:
            self._entries[key] = _Entry(data)
        return data

    async def _call_with_retry(self, key: QueryKey, fetcher: Fetcher, retry: Optional[int]) -> Any:
        attempts = (self.retry_limit if retry is None else retry) + 1
        wait = (
            wait_exponential(multiplier=self.retry_wait, max=MAX_RETRY_WAIT)
            if self.retry_wait > 0 else wait_none()
        )
        retrying = AsyncRetrying(
            retry=retry_if_exception(is_retryable),
            stop=stop_after_attempt(attempts),
            wait=wait,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        result = None
        try:
            async for attempt in retrying:
                with attempt:
                    result = await fetcher()
        except Exception as exc:
            logger.warning("Query %r failed: %s", key, exc)
            raise
        return result

    def get_query_data(self, key: QueryKey) -> Any:
        entry = self._entries.get(key)
        return entry.data if entry is not None else None

    def set_query_data(self, key: QueryKey, value: Any) -> Any:
        """Store a value directly, or apply ``value(old)`` when it is callable.

        An updater returning None leaves the key untouched.
        """
        if callable(value):
            value = value(self.get_query_data(key))
        if value is None:
            return None
        self._entries[key] = _Entry(value)
        return value

    def keys(self, prefix: QueryKey = ()) -> list[QueryKey]:
        return [k for k in self._entries if k[:len(prefix)] == prefix]

    def invalidate(self, prefix: QueryKey) -> int:
        """Drop every entry whose key starts with ``prefix``. Returns the count dropped.

        Fetches in flight for matching keys are detached: their results reach
        the callers already waiting but are not cached.
        """
        matching = set(self.keys(prefix))
        matching.update(k for k in self._in_flight if k[:len(prefix)] == prefix)
        for key in matching:
            self._entries.pop(key, None)
            self._in_flight.pop(key, None)
            self._generations[key] = self._generations.get(key, 0) + 1
        if matching:
            logger.debug("Invalidated %d quer%s under %r", len(matching),
                         "y" if len(matching) == 1 else "ies", prefix)
        return len(matching)

    def clear(self) -> None:
        for key in list(self._in_flight):
            self._generations[key] = self._generations.get(key, 0) + 1
        self._entries.clear()
        self._in_flight.clear()

    # ── writes ─────────────────────────────────────────────

    async def mutate(
        self,
        mutation: Fetcher,
        *,
        invalidates: Iterable[QueryKey] = (),
        on_success: Callable[[Any], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ) -> Any:
        """Run a side-effecting call once (never retried).

        On success the ``invalidates`` prefixes are dropped and ``on_success``
        receives the result (used for in-place patches). On failure
        ``on_error`` is called and the exception re-raised.
        """
        try:
            result = await mutation()
        except Exception as exc:
            logger.warning("Mutation failed: %s", exc)
            if on_error is not None:
                on_error(exc)
            raise

        for prefix in invalidates:
            self.invalidate(prefix)
        if on_success is not None:
            on_success(result)
        return result
