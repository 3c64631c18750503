"""Key-value persistence port and its backends.

Stores keep their durable state as one encoded blob per fixed key. Any
backend that can load and save bytes by key will do.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

import aiosqlite

from propertyvue.exceptions import PersistenceError
from propertyvue.logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Durable slot storage keyed by a namespaced string."""

    async def load(self, key: str) -> bytes | None:
        """Return the blob stored under ``key``, or None if the slot is empty."""
        ...

    async def save(self, key: str, value: bytes) -> None:
        """Replace the blob stored under ``key``."""
        ...


class MemoryKeyValueStore:
    """In-process backend. Shared instances behave like one browser profile."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._slots: dict[str, bytes] = dict(initial or {})

    async def load(self, key: str) -> bytes | None:
        return self._slots.get(key)

    async def save(self, key: str, value: bytes) -> None:
        self._slots[key] = bytes(value)

    def keys(self) -> list[str]:
        return list(self._slots)


class SqliteKeyValueStore:
    """SQLite-backed slot storage. Last writer wins."""

    def __init__(self, db_path: str) -> None:
        """Initialize storage with database path.

        Args:
            db_path: Path to SQLite database file, or ":memory:" for in-memory.
        """
        self.db_path = db_path
        self._conn: aiosqlite.Connection | None = None
        self._ensure_directory()

    def _ensure_directory(self) -> None:
        """Ensure the directory for the database exists."""
        if self.db_path != ":memory:":
            path = Path(self.db_path)
            path.parent.mkdir(parents=True, exist_ok=True)

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self._conn = await aiosqlite.connect(self.db_path)
            self._conn.row_factory = aiosqlite.Row
            await self._conn.execute("PRAGMA journal_mode=WAL")
            await self._conn.execute("PRAGMA busy_timeout=5000")
            await self._conn.execute("PRAGMA synchronous=NORMAL")
        return self._conn

    async def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def initialize(self) -> None:
        """Initialize the database schema."""
        conn = await self._get_connection()
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS kv_slots (
                key TEXT PRIMARY KEY,
                value BLOB NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        await conn.commit()

    async def load(self, key: str) -> bytes | None:
        conn = await self._get_connection()
        async with conn.execute("SELECT value FROM kv_slots WHERE key = ?", (key,)) as cursor:
            row = await cursor.fetchone()
        if row is None:
            return None
        value = row["value"]
        # Rows written by other tools may hold TEXT rather than BLOB
        return value.encode("utf-8") if isinstance(value, str) else bytes(value)

    async def save(self, key: str, value: bytes) -> None:
        conn = await self._get_connection()
        try:
            await conn.execute(
                """
                INSERT INTO kv_slots (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, bytes(value), datetime.now(UTC).isoformat()),
            )
            await conn.commit()
        except aiosqlite.Error as e:
            logger.error("kv_save_failed", key=key, db_path=self.db_path, error=str(e))
            raise PersistenceError(f"could not save slot {key!r}") from e
        logger.debug("kv_saved", key=key, size=len(value))
