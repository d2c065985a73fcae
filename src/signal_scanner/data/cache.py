"""Session-scoped, read-through cache for daily history.

Entries are keyed by ``(code, range, interval)``, written once and never
evicted for the lifetime of the cache. Concurrent requests for a key that
is still being fetched share the in-flight task, so the wrapped provider
is called at most once per key. A failed fetch is dropped from the cache
and the next request retries.
"""

import asyncio
import logging

from signal_scanner.core.models import Candle, HistoryRange, Interval
from signal_scanner.core.protocols import HistoryProvider

logger = logging.getLogger(__name__)

CacheKey = tuple[str, HistoryRange, Interval]


class HistoryCache:
    """In-memory single-flight store of history fetches."""

    def __init__(self) -> None:
        """Initialize an empty cache."""
        self._entries: dict[CacheKey, asyncio.Task[list[Candle]]] = {}

    def __len__(self) -> int:
        """Return the number of keys fetched or in flight."""
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        """Return whether ``key`` has been fetched or is in flight."""
        return key in self._entries

    def peek(self, code: str, history_range: HistoryRange, interval: Interval) -> list[Candle] | None:
        """Return the cached candles for a key without fetching.

        Returns:
            The candles if a fetch for the key completed successfully,
            otherwise ``None``.

        """
        task = self._entries.get((code, history_range, interval))
        if task is None or not task.done() or task.cancelled() or task.exception() is not None:
            return None
        return task.result()

    async def get_or_fetch(
        self,
        provider: HistoryProvider,
        code: str,
        history_range: HistoryRange,
        interval: Interval,
    ) -> list[Candle]:
        """Return candles for the key, fetching from ``provider`` on a miss.

        Args:
            provider: Source used when the key is absent.
            code: Instrument code.
            history_range: Lookback range.
            interval: Candle interval.

        Returns:
            The cached or freshly fetched candles.

        Raises:
            Exception: Whatever the provider raised for this fetch.

        """
        key: CacheKey = (code, history_range, interval)
        task = self._entries.get(key)
        if task is None:
            task = asyncio.create_task(provider.get_history(code, history_range, interval))
            self._entries[key] = task
            task.add_done_callback(lambda t: self._drop_failed(key, t))
        else:
            logger.debug("History cache hit for %s %s", code, history_range.value)
        return await asyncio.shield(task)

    def _drop_failed(self, key: CacheKey, task: asyncio.Task[list[Candle]]) -> None:
        """Remove ``task`` from the cache if it did not complete successfully."""
        if task.cancelled() or task.exception() is not None:
            if self._entries.get(key) is task:
                del self._entries[key]
            logger.debug("Dropped failed history fetch for %s", key[0])

    def clear(self) -> None:
        """Forget every entry."""
        self._entries.clear()


class CachedHistoryProvider:
    """Wrap a ``HistoryProvider`` with a ``HistoryCache``.

    Implement the ``HistoryProvider`` protocol itself, so the scanner and
    CLI can use it wherever a plain provider is accepted.
    """

    def __init__(self, provider: HistoryProvider, cache: HistoryCache | None = None) -> None:
        """Initialize the wrapper.

        Args:
            provider: The underlying history source.
            cache: Cache to share; a fresh one is created when omitted.

        """
        self._provider = provider
        self.cache = cache if cache is not None else HistoryCache()

    async def get_history(
        self,
        code: str,
        history_range: HistoryRange,
        interval: Interval,
    ) -> list[Candle]:
        """Return candles from the cache, fetching through the provider on a miss."""
        return await self.cache.get_or_fetch(self._provider, code, history_range, interval)
