"""SQLite storage implementations."""

from possync.infrastructure.storage.sqlite.connection import QueueDatabase
from possync.infrastructure.storage.sqlite.kv_store import SQLiteKeyValueStore

__all__ = [
    "QueueDatabase",
    "SQLiteKeyValueStore",
]
