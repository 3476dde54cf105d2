"""
Per-endpoint query cache for API clients.

Entries are keyed by a tuple whose first element is the endpoint path, e.g.
``("/api/posts",)`` or ``("/api/posts", 7)``. An entry is served until its
staleness window runs out; after that the next read fetches again.
Invalidation drops every entry whose key starts with the given prefix.
"""
import time
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)

QueryKey = Tuple[Hashable, ...]

DEFAULT_STALE_TIME = 30.0


@dataclass
class CacheEntry:
    data: Any
    fetched_at: float
    stale_time: float

    def is_stale(self, now: float) -> bool:
        return now - self.fetched_at >= self.stale_time


class QueryCache:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[QueryKey, CacheEntry] = {}
        self._clock = clock

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: QueryKey) -> Optional[Any]:
        """Cached data for a key, or None if it is missing or stale"""
        entry = self._entries.get(key)
        if entry is None or entry.is_stale(self._clock()):
            return None
        return entry.data

    def set(self, key: QueryKey, data: Any, stale_time: float = DEFAULT_STALE_TIME) -> None:
        self._entries[key] = CacheEntry(data=data, fetched_at=self._clock(), stale_time=stale_time)

    def fetch(
        self,
        key: QueryKey,
        fetcher: Callable[[], Any],
        stale_time: float = DEFAULT_STALE_TIME
    ) -> Any:
        """Return fresh cached data, or call fetcher and cache what it returns"""
        data = self.get(key)
        if data is not None:
            logger.debug(f"Cache hit for {key}")
            return data

        logger.debug(f"Cache miss for {key}")
        data = fetcher()
        self.set(key, data, stale_time)
        return data

    def invalidate(self, prefix: QueryKey) -> int:
        """Drop every entry whose key starts with prefix; returns how many were dropped"""
        size = len(prefix)
        doomed = [key for key in self._entries if key[:size] == prefix]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()
