"""SQLite implementation of the key-value store."""

from datetime import UTC, datetime

import aiosqlite

from possync.config import get_logger
from possync.core.exceptions import StorageReadError, StorageWriteError
from possync.core.interfaces import IKeyValueStore
from possync.infrastructure.storage.sqlite.connection import QueueDatabase

logger = get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""


class SQLiteKeyValueStore(IKeyValueStore):
    """Blob storage in a single SQLite table."""

    def __init__(self, database: QueueDatabase):
        self._db = database
        self._schema_ready = False

    async def ensure_schema(self) -> None:
        """Create the kv_store table if missing."""
        if self._schema_ready:
            return
        async with self._db.transaction() as conn:
            await conn.execute(SCHEMA)
        self._schema_ready = True

    async def get(self, key: str) -> str | None:
        try:
            await self.ensure_schema()
            async with self._db.acquire() as conn:
                cursor = await conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?",
                    (key,),
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StorageReadError(key, str(e)) from e
        return row["value"] if row else None

    async def set(self, key: str, value: str) -> None:
        try:
            await self.ensure_schema()
            async with self._db.transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, value, datetime.now(UTC).isoformat()),
                )
        except aiosqlite.Error as e:
            logger.error("sqlite_kv_write_failed", key=key, error=str(e))
            raise StorageWriteError(key, str(e)) from e

    async def close(self) -> None:
        await self._db.close()
