"""Persisted list of the most recent search-page queries."""

import asyncio
from typing import Final

from pydantic import TypeAdapter, ValidationError

from propertyvue.db.kv import KeyValueStore
from propertyvue.logging import get_logger

logger = get_logger(__name__)

RECENT_SEARCHES_KEY: Final = "propertyvue_recent_searches"
DEFAULT_LIMIT: Final = 5

_QueriesAdapter = TypeAdapter(list[str])


class RecentSearches:
    """Most-recent-first, de-duplicated query history."""

    def __init__(
        self, kv: KeyValueStore, *, key: str = RECENT_SEARCHES_KEY, limit: int = DEFAULT_LIMIT
    ) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self._kv = kv
        self._key = key
        self._limit = limit
        self._queries: list[str] | None = None
        self._load_lock = asyncio.Lock()

    async def _entries(self) -> list[str]:
        if self._queries is not None:
            return self._queries
        async with self._load_lock:
            if self._queries is None:
                raw = await self._kv.load(self._key)
                try:
                    queries = _QueriesAdapter.validate_json(raw) if raw else []
                except (ValidationError, UnicodeDecodeError):
                    logger.warning("recent_searches_load_corrupt", key=self._key)
                    queries = []
                self._queries = queries[: self._limit]
        return self._queries

    async def list_all(self) -> list[str]:
        return list(await self._entries())

    async def record(self, query: str) -> list[str]:
        """Move ``query`` to the front of the history. Blank queries are ignored.

        Returns:
            The updated history.
        """
        entries = await self._entries()
        if not query.strip():
            return list(entries)
        updated = [query, *(q for q in entries if q != query)][: self._limit]
        self._queries = updated
        await self._kv.save(self._key, _QueriesAdapter.dump_json(updated))
        return list(updated)

    async def clear(self) -> None:
        """Empty the history. Waits for a first load in flight so it cannot resurrect entries."""
        async with self._load_lock:
            self._queries = []
        await self._kv.save(self._key, _QueriesAdapter.dump_json([]))
