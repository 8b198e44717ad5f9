"""Tests for JsonTicketStore."""

import json

import pytest

from possync.core.entities.ticket import TicketStatus
from possync.core.exceptions import DuplicateTicketError, StorageReadError, StorageWriteError
from possync.infrastructure.storage import DEFAULT_QUEUE_KEY, FileKeyValueStore, JsonTicketStore

START_MS = 1_718_000_000_000


def stored(kv, key: str = DEFAULT_QUEUE_KEY) -> list[dict]:
    return json.loads(kv._data[key])


class TestInsert:
    async def test_insert_creates_pending_ticket(self, store, kv, sample_payload):
        result = await store.insert("pos-1-aaa", sample_payload)

        assert result.ok
        [ticket] = await store.list_all()
        assert ticket.ticket_id == "pos-1-aaa"
        assert ticket.status == TicketStatus.PENDING
        assert ticket.created_at == START_MS
        assert ticket.payload == sample_payload

    async def test_stored_layout(self, store, kv, sample_payload):
        await store.insert("pos-1-aaa", sample_payload)

        [record] = stored(kv)
        assert record == {
            "ticketId": "pos-1-aaa",
            "payload": sample_payload,
            "createdAt": START_MS,
            "status": "pending",
            "attempts": 0,
        }

    async def test_newest_first(self, store):
        for ticket_id in ("pos-1-aaa", "pos-2-bbb", "pos-3-ccc"):
            await store.insert(ticket_id, {"total": 1})

        assert [t.ticket_id for t in await store.list_all()] == ["pos-3-ccc", "pos-2-bbb", "pos-1-aaa"]

    async def test_duplicate_is_refused(self, store):
        await store.insert("pos-1-aaa", {"total": 1})

        result = await store.insert("pos-1-aaa", {"total": 2})

        assert not result.ok
        assert isinstance(result.error, DuplicateTicketError)
        [ticket] = await store.list_all()
        assert ticket.payload == {"total": 1}

    async def test_write_failure_is_returned(self, store, kv):
        kv.fail_writes = True

        result = await store.insert("pos-1-aaa", {"total": 1})

        assert not result.ok
        assert isinstance(result.error, StorageWriteError)


class TestQueries:
    async def test_empty_store(self, store):
        assert await store.list_all() == []
        assert await store.list_pending() == []
        assert await store.get("pos-1-aaa") is None

    async def test_list_pending_excludes_synced_and_errors(self, store):
        for ticket_id in ("a", "b", "c"):
            await store.insert(ticket_id, {})
        await store.mark_synced("a", 1, "inv-1")
        await store.mark_error("b", "HTTP 500")

        assert [t.ticket_id for t in await store.list_pending()] == ["c"]

    async def test_get(self, store):
        await store.insert("a", {"total": 3})
        assert (await store.get("a")).total == 3.0


class TestMutations:
    async def test_mark_synced(self, store):
        await store.insert("a", {})
        await store.mark_error("a", "timeout")

        result = await store.mark_synced("a", 1042, "inv-1042")

        assert result.ok
        ticket = await store.get("a")
        assert ticket.is_synced
        assert (ticket.invoice_no, ticket.invoice_id) == (1042, "inv-1042")
        assert ticket.last_error is None

    async def test_mark_error(self, store):
        await store.insert("a", {})

        await store.mark_error("a", "unknown product")

        ticket = await store.get("a")
        assert ticket.is_error
        assert ticket.last_error == "unknown product"

    async def test_synced_ticket_is_final(self, store):
        await store.insert("a", {})
        await store.mark_synced("a", 1, "inv-1")

        assert (await store.mark_error("a", "late failure")).ok
        assert (await store.mark_synced("a", 2, "inv-2")).ok

        ticket = await store.get("a")
        assert ticket.is_synced
        assert ticket.invoice_no == 1

    async def test_missing_ticket_is_noop(self, store, kv):
        await store.insert("a", {})
        before = kv._data[DEFAULT_QUEUE_KEY]

        assert (await store.mark_synced("zzz", 1, "x")).ok
        assert (await store.mark_error("zzz", "x")).ok
        assert (await store.record_attempt("zzz")).ok
        assert kv._data[DEFAULT_QUEUE_KEY] == before

    async def test_record_attempt(self, store):
        await store.insert("a", {})

        await store.record_attempt("a")
        await store.record_attempt("a")

        ticket = await store.get("a")
        assert ticket.attempts == 2
        assert ticket.last_attempt_at > ticket.created_at


class TestCorruption:
    @pytest.mark.parametrize("blob", ["{not json", '{"ticketId": "a"}', "42", "null"])
    async def test_unparseable_queue_reads_as_empty(self, kv, clock, blob):
        kv._data[DEFAULT_QUEUE_KEY] = blob
        store = JsonTicketStore(kv, clock=clock)

        assert await store.list_all() == []
        assert await store.list_pending() == []

    async def test_corrupt_blob_is_quarantined_on_write(self, kv, clock):
        kv._data[DEFAULT_QUEUE_KEY] = "{not json"
        store = JsonTicketStore(kv, clock=clock)

        result = await store.insert("a", {"total": 1})

        assert result.ok
        quarantined = [k for k in kv.keys() if k.startswith(f"{DEFAULT_QUEUE_KEY}.corrupt.")]
        assert len(quarantined) == 1
        assert kv._data[quarantined[0]] == "{not json"
        assert [t.ticket_id for t in await store.list_all()] == ["a"]

    async def test_invalid_records_are_skipped_but_kept(self, kv, clock):
        kv._data[DEFAULT_QUEUE_KEY] = json.dumps(
            [
                {"ticketId": "good", "payload": {}, "createdAt": 1, "status": "pending"},
                {"ticketId": "bad", "createdAt": "yesterday"},
                "garbage",
            ]
        )
        store = JsonTicketStore(kv, clock=clock)

        assert [t.ticket_id for t in await store.list_all()] == ["good"]

        await store.mark_synced("good", 1, "inv-1")

        records = stored(kv)
        assert len(records) == 3
        assert records[1] == {"ticketId": "bad", "createdAt": "yesterday"}
        assert records[2] == "garbage"

    async def test_undecodable_file_is_quarantined_and_replaced(self, tmp_path, clock):
        kv = FileKeyValueStore(tmp_path)
        kv.path_for(DEFAULT_QUEUE_KEY).write_bytes(b'[{"ticketId":"x\xff\xfe"}]')
        store = JsonTicketStore(kv, clock=clock)

        assert await store.list_all() == []
        results = [await store.insert(f"t{i}", {"total": i}) for i in range(3)]

        assert all(r.ok for r in results)
        assert len(await store.list_pending()) == 3
        quarantined = list(tmp_path.glob(f"{DEFAULT_QUEUE_KEY}.corrupt.*"))
        assert len(quarantined) == 1
        assert quarantined[0].read_text(encoding="utf-8") == '[{"ticketId":"x\\xff\\xfe"}]'

    async def test_unreadable_backend_reads_as_empty(self, store, kv):
        await store.insert("a", {})
        kv.fail_reads = True

        assert await store.list_all() == []

    async def test_unreadable_backend_refuses_writes(self, store, kv):
        await store.insert("a", {})
        kv.fail_reads = True

        result = await store.insert("b", {})

        assert not result.ok
        assert isinstance(result.error, StorageReadError)
        kv.fail_reads = False
        assert [t.ticket_id for t in await store.list_all()] == ["a"]

    async def test_custom_key(self, kv, clock):
        store = JsonTicketStore(kv, key="register_2_queue", clock=clock)
        await store.insert("a", {})
        assert "register_2_queue" in kv.keys()
