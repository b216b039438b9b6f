# src/journal/query_cache.py
"""Shared cache for remote collections with an explicit staleness window."""
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

QueryKey = tuple[str, ...]


@dataclass
class CacheEntry:
    """Cached data for one query key."""

    data: Any
    updated_at: float
    invalidated: bool = False


class QueryCache:
    """Keyed cache of server-confirmed query results.

    An entry is fresh for ``stale_time`` seconds after it was written, unless
    it was invalidated first. Writes replace the entry outright, so the last
    write wins.
    """

    def __init__(
        self,
        stale_time: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            stale_time: Seconds an entry stays fresh after being written.
            clock: Monotonic time source, injectable for tests.
        """
        self._stale_time = stale_time
        self._clock = clock
        self._entries: dict[QueryKey, CacheEntry] = {}

    @property
    def stale_time(self) -> float:
        return self._stale_time

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    def has(self, key: QueryKey) -> bool:
        return key in self._entries

    def get(self, key: QueryKey) -> Any | None:
        """Return the cached data for key, fresh or not."""
        entry = self._entries.get(key)
        return entry.data if entry else None

    def set(self, key: QueryKey, data: Any) -> None:
        self._entries[key] = CacheEntry(data=data, updated_at=self._clock())

    def age(self, key: QueryKey) -> float | None:
        """Seconds since key was last written, or None if never cached."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        return self._clock() - entry.updated_at

    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        if entry is None or entry.invalidated:
            return True
        return self._clock() - entry.updated_at >= self._stale_time

    def invalidate(self, prefix: QueryKey) -> list[QueryKey]:
        """Mark every key starting with prefix as stale.

        Cached data is kept so readers still see the last confirmed state
        until the refetch lands.

        Returns:
            The keys that were invalidated.
        """
        matched = [k for k in self._entries if k[: len(prefix)] == prefix]
        for key in matched:
            self._entries[key].invalidated = True
        return matched

    def clear(self) -> None:
        self._entries.clear()
