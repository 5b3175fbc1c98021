"""
In-memory response cache keyed by logical request.

Entries are raw decoded payloads. They are only ever added or dropped all at
once by clear(); there is no eviction. Concurrent requests for a key that is
still being fetched share the in-flight fetch instead of issuing another.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from dex_browser.utils.core.logger import get_logger

logger = get_logger(__name__)


def entity_key(identifier: int | str) -> str:
    """Cache key for a single entity lookup."""
    return f"entity:{str(identifier).strip().lower()}"


def list_key(limit: int, offset: int) -> str:
    """Cache key for one page of the list endpoint."""
    return f"list:{limit}:{offset}"


class ResponseCache:
    """Process-scoped payload cache with hit/miss accounting."""

    def __init__(self):
        self._entries: dict[str, Any] = {}
        self._in_flight: dict[str, asyncio.Task] = {}
        self._generation = 0
        self._hits = 0
        self._misses = 0

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def generation(self) -> int:
        """Incremented by every clear(); payloads fetched before a clear are not stored."""
        return self._generation

    def get(self, key: str) -> Optional[Any]:
        return self._entries.get(key)

    def put(self, key: str, payload: Any) -> None:
        self._entries[key] = payload
        logger.debug(f"Cached '{key}' (cache size: {len(self._entries)})")

    async def get_or_fetch(self, key: str, fetch: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached payload for key, fetching it at most once.

        The fetch runs in its own task, so cancelling one caller does not
        cancel it for the others waiting on the same key. The payload is
        stored only if fetch() succeeds and the cache was not cleared in the
        meantime; failures are not cached, so a later call retries the fetch.

        Args:
            key (str): Cache key for the logical request
            fetch (Callable[[], Awaitable[Any]]): Coroutine factory producing the payload

        Returns:
            Any: The cached or freshly fetched payload
        """
        if key in self._entries:
            self._hits += 1
            logger.debug(f"Cache hit for '{key}' [hit rate: {self.hit_rate:.1%}]")
            return self._entries[key]

        task = self._in_flight.get(key)
        if task is not None and not task.done():
            self._hits += 1
            logger.debug(f"Joining in-flight fetch for '{key}'")
        else:
            self._misses += 1
            task = asyncio.get_running_loop().create_task(
                self._fetch_and_store(key, fetch, self._generation)
            )
            task.add_done_callback(lambda done: self._fetch_done(key, done))
            self._in_flight[key] = task

        return await asyncio.shield(task)

    async def _fetch_and_store(
        self, key: str, fetch: Callable[[], Awaitable[Any]], generation: int
    ) -> Any:
        payload = await fetch()
        if generation == self._generation:
            self.put(key, payload)
        else:
            logger.debug(f"Discarding '{key}' fetched before the cache was cleared")
        return payload

    def _fetch_done(self, key: str, task: asyncio.Task) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        if not task.cancelled():
            # Mark retrieved so a failure nobody awaited is not reported by asyncio
            task.exception()

    def clear(self) -> None:
        """Drop every entry and forget hit/miss counts.

        Fetches still in flight complete for their callers but are not stored.
        """
        logger.info(f"Clearing cache ({len(self._entries)} entries)")
        self._entries.clear()
        self._in_flight.clear()
        self._generation += 1
        self._hits = 0
        self._misses = 0

    @property
    def hit_rate(self) -> float:
        total = self._hits + self._misses
        return self._hits / total if total else 0.0

    def stats(self) -> dict[str, Any]:
        return {
            "size": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self.hit_rate,
        }
