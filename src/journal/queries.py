# src/journal/queries.py
"""Cached collection queries over the Google Sheets client.

Each query exposes the cached collection, loading and mutation flags, and
add/update/delete triggers. Mutations are sent to the server first; only a
confirmed write invalidates the cached collection and, when enabled, refetches
it. Nothing is applied locally ahead of the server.
"""
import logging
from abc import ABC, abstractmethod
from collections import Counter
from collections.abc import Awaitable, Callable
from datetime import date
from typing import Generic, TypeVar

from src.journal.query_cache import QueryCache, QueryKey
from src.models.trade import PsychologyEntry, Strategy, Trade
from src.sheets.client import GoogleSheetsClient
from src.sheets.errors import SheetsError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_PAST_TENSE = {"add": "added", "update": "updated", "delete": "deleted"}


class CollectionQuery(ABC, Generic[T]):
    """Cached view of one remote collection."""

    key: QueryKey = ()
    label: str = "item"

    def __init__(
        self,
        client: GoogleSheetsClient,
        cache: QueryCache,
        refetch_on_mutation: bool = True,
    ) -> None:
        """Initialize the query.

        Args:
            client: Remote store client.
            cache: Cache shared by all queries.
            refetch_on_mutation: Refetch the collection right after a
                confirmed mutation instead of waiting for the next read.
        """
        self._client = client
        self._cache = cache
        self._refetch_on_mutation = refetch_on_mutation
        self._loading: Counter[QueryKey] = Counter()
        self._in_flight: Counter[str] = Counter()
        self._error: Exception | None = None

    @property
    def is_enabled(self) -> bool:
        """Queries only run against a configured client."""
        return self._client.is_configured

    @property
    def items(self) -> list[T]:
        """Cached collection, empty until the first successful fetch."""
        return self._cache.get(self.key) or []

    @property
    def is_loading(self) -> bool:
        """True while the collection or any per-key read under it is loading."""
        return any(k[: len(self.key)] == self.key for k in self._loading)

    @property
    def is_stale(self) -> bool:
        return self._cache.is_stale(self.key)

    @property
    def error(self) -> Exception | None:
        """Error from the last failed fetch, cleared by the next success."""
        return self._error

    @property
    def is_adding(self) -> bool:
        return self._in_flight["add"] > 0

    @property
    def is_updating(self) -> bool:
        return self._in_flight["update"] > 0

    @property
    def is_deleting(self) -> bool:
        return self._in_flight["delete"] > 0

    async def fetch(self, force: bool = False) -> list[T]:
        """Return the collection, loading it from the server when stale.

        Args:
            force: Ignore the cached copy even if it is still fresh.
        """
        return await self._fetch_key(self.key, self._load, force)

    async def _fetch_key(
        self,
        key: QueryKey,
        loader: Callable[[], Awaitable[list]],
        force: bool,
    ) -> list:
        if not self.is_enabled:
            return []

        if not force and not self._cache.is_stale(key):
            return self._cache.get(key) or []

        self._loading[key] += 1
        try:
            data = await loader()
        except SheetsError as e:
            self._error = e
            logger.error(f"Failed to load {key}: {e}")
            raise
        finally:
            self._loading[key] -= 1
            if not self._loading[key]:
                del self._loading[key]

        self._error = None
        self._cache.set(key, data)
        return data

    async def add(self, item: T) -> T:
        return await self._mutate("add", lambda: self._add(item))

    async def update(self, item_id: int, fields: dict | T) -> T | None:
        return await self._mutate("update", lambda: self._update(item_id, fields))

    async def delete(self, item_id: int) -> None:
        await self._mutate("delete", lambda: self._delete(item_id))

    async def _mutate(self, kind: str, operation: Callable[[], Awaitable[R]]) -> R:
        self._in_flight[kind] += 1
        try:
            result = await operation()
        except SheetsError as e:
            logger.error(f"Failed to {kind} {self.label}: {e}")
            raise
        finally:
            self._in_flight[kind] -= 1

        logger.info(f"{self.label.capitalize()} {_PAST_TENSE[kind]} successfully")
        await self._after_mutation()
        return result

    async def _after_mutation(self) -> None:
        self._cache.invalidate(self.key)
        if not self._refetch_on_mutation:
            return
        try:
            await self.fetch(force=True)
        except SheetsError as e:
            logger.warning(f"Refetch of {self.key} after mutation failed: {e}")

    @abstractmethod
    async def _load(self) -> list[T]:
        pass

    @abstractmethod
    async def _add(self, item: T) -> T:
        pass

    @abstractmethod
    async def _update(self, item_id: int, fields: dict | T) -> T | None:
        pass

    @abstractmethod
    async def _delete(self, item_id: int) -> None:
        pass


class TradeQueries(CollectionQuery[Trade]):
    """Trades collection plus per-day trade lookups."""

    key = ("trades",)
    label = "trade"

    async def for_date(self, day: date | str, force: bool = False) -> list[Trade]:
        """Trades for one day, cached under ``("trades", <iso date>)``."""
        iso = day.isoformat() if isinstance(day, date) else day
        return await self._fetch_key(
            (*self.key, iso),
            lambda: self._client.get_trades_by_date(iso),
            force,
        )

    async def _load(self) -> list[Trade]:
        return await self._client.get_trades()

    async def _add(self, item: Trade) -> Trade:
        return await self._client.add_trade(item)

    async def _update(self, item_id: int, fields: dict | Trade) -> Trade | None:
        return await self._client.update_trade(item_id, fields)

    async def _delete(self, item_id: int) -> None:
        await self._client.delete_trade(item_id)


class StrategyQueries(CollectionQuery[Strategy]):
    key = ("strategies",)
    label = "strategy"

    async def _load(self) -> list[Strategy]:
        return await self._client.get_strategies()

    async def _add(self, item: Strategy) -> Strategy:
        return await self._client.add_strategy(item)

    async def _update(self, item_id: int, fields: dict | Strategy) -> Strategy | None:
        return await self._client.update_strategy(item_id, fields)

    async def _delete(self, item_id: int) -> None:
        await self._client.delete_strategy(item_id)


class PsychologyQueries(CollectionQuery[PsychologyEntry]):
    key = ("psychologyEntries",)
    label = "psychology entry"

    async def _load(self) -> list[PsychologyEntry]:
        return await self._client.get_psychology_entries()

    async def _add(self, item: PsychologyEntry) -> PsychologyEntry:
        return await self._client.add_psychology_entry(item)

    async def _update(
        self, item_id: int, fields: dict | PsychologyEntry
    ) -> PsychologyEntry | None:
        return await self._client.update_psychology_entry(item_id, fields)

    async def _delete(self, item_id: int) -> None:
        await self._client.delete_psychology_entry(item_id)
