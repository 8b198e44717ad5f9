"""Tests for the SQLite key-value backend."""

import asyncio

import pytest
import pytest_asyncio

from possync.core.exceptions import StorageReadError
from possync.infrastructure.storage import JsonTicketStore
from possync.infrastructure.storage.sqlite import QueueDatabase, SQLiteKeyValueStore


@pytest_asyncio.fixture
async def db(tmp_path):
    database = QueueDatabase(tmp_path / "pos_queue.db")
    yield database
    await database.close()


class TestQueueDatabase:
    async def test_open_creates_database(self, tmp_path):
        db = QueueDatabase(tmp_path / "sub" / "q.db")
        await db.open()
        try:
            assert db.is_open
            assert (tmp_path / "sub" / "q.db").exists()
            async with db.acquire() as conn:
                cursor = await conn.execute("PRAGMA synchronous")
                row = await cursor.fetchone()
            assert row[0] == 2  # FULL
        finally:
            await db.close()

    async def test_reopens_after_close(self, db):
        await db.open()
        await db.close()
        assert not db.is_open

        async with db.acquire() as conn:
            await conn.execute("SELECT 1")
        assert db.is_open

    async def test_close_twice(self, db):
        await db.open()
        await db.close()
        await db.close()

    async def test_transaction_rolls_back(self, db):
        async with db.transaction() as conn:
            await conn.execute("CREATE TABLE t (v TEXT)")

        with pytest.raises(RuntimeError):
            async with db.transaction() as conn:
                await conn.execute("INSERT INTO t VALUES ('lost')")
                raise RuntimeError("abort")

        async with db.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            (count,) = await cursor.fetchone()
        assert count == 0


class TestSQLiteKeyValueStore:
    async def test_get_missing(self, db):
        assert await SQLiteKeyValueStore(db).get("k") is None

    async def test_set_and_get(self, db):
        kv = SQLiteKeyValueStore(db)
        await kv.set("k", "v1")
        assert await kv.get("k") == "v1"

    async def test_upsert(self, db):
        kv = SQLiteKeyValueStore(db)
        await kv.set("k", "v1")
        await kv.set("k", "v2")

        assert await kv.get("k") == "v2"
        async with db.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM kv_store")
            (count,) = await cursor.fetchone()
        assert count == 1

    async def test_concurrent_writes_are_serialized(self, db):
        kv = SQLiteKeyValueStore(db)

        await asyncio.gather(*(kv.set(f"k{i}", str(i)) for i in range(10)))

        assert [await kv.get(f"k{i}") for i in range(10)] == [str(i) for i in range(10)]

    async def test_persists_across_reopen(self, tmp_path):
        first = QueueDatabase(tmp_path / "q.db")
        await SQLiteKeyValueStore(first).set("k", "durable")
        await first.close()

        second = QueueDatabase(tmp_path / "q.db")
        try:
            assert await SQLiteKeyValueStore(second).get("k") == "durable"
        finally:
            await second.close()

    async def test_read_error_is_wrapped(self, db):
        kv = SQLiteKeyValueStore(db)
        await kv.ensure_schema()
        async with db.transaction() as conn:
            await conn.execute("DROP TABLE kv_store")

        with pytest.raises(StorageReadError):
            await kv.get("k")

    async def test_backs_ticket_store(self, db, clock):
        store = JsonTicketStore(SQLiteKeyValueStore(db), clock=clock)

        await store.insert("pos-1-aaa", {"total": 5})
        await store.mark_error("pos-1-aaa", "HTTP 502")

        [ticket] = await store.list_all()
        assert ticket.is_error
        assert ticket.last_error == "HTTP 502"
