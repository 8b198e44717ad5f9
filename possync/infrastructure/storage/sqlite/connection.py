"""
Single-connection SQLite access for the local queue.

A register has one writer, so one aiosqlite connection serialized by a
lock is enough. Transactions commit on success and roll back on error.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from possync.config import get_logger

logger = get_logger(__name__)


class QueueDatabase:
    """Lazily opened SQLite database file holding the queue."""

    def __init__(self, db_path: Path, busy_timeout: int = 30000):
        self.db_path = Path(db_path)
        self.busy_timeout = busy_timeout
        self._conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    async def open(self) -> aiosqlite.Connection:
        """Open the database file, creating its directory if needed."""
        if self._conn is not None:
            return self._conn

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(self.db_path)
        # FULL sync so an acknowledged queue write survives power loss
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA synchronous=FULL")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        conn.row_factory = aiosqlite.Row

        self._conn = conn
        logger.info("queue_database_opened", db_path=str(self.db_path))
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Hold the connection exclusively.

        Usage:
            async with db.acquire() as conn:
                await conn.execute(...)
        """
        async with self._lock:
            yield await self.open()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        async with self.acquire() as conn:
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise

    async def close(self) -> None:
        """Close the connection; the next acquire reopens it."""
        async with self._lock:
            if self._conn is None:
                return
            await self._conn.close()
            self._conn = None
            logger.info("queue_database_closed", db_path=str(self.db_path))
