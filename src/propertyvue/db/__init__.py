"""Durable storage backends for the stores."""

from propertyvue.db.kv import KeyValueStore, MemoryKeyValueStore, SqliteKeyValueStore

__all__ = ["KeyValueStore", "MemoryKeyValueStore", "SqliteKeyValueStore"]
