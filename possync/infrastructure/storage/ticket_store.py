"""
Ticket queue persisted as one JSON array in a key-value store.

Every mutation is a single read-modify-write under a lock. Reads fail
open: an unreadable or corrupted queue is reported as empty instead of
crashing the register.
"""

import asyncio
import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from possync.config import get_logger
from possync.core.entities.ticket import Ticket, TicketStatus
from possync.core.exceptions import (
    DuplicateTicketError,
    StorageCorruptError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from possync.core.interfaces import IKeyValueStore, ITicketStore, WriteResult
from possync.core.services.ticket_ids import now_ms

logger = get_logger(__name__)

DEFAULT_QUEUE_KEY = "pos_offline_queue_v1"

RecordMutation = Callable[[dict[str, Any]], bool]


@dataclass
class _QueueState:
    """Raw queue contents as last read from storage."""

    records: list[Any]
    corrupt_blob: str | None = None
    read_error: StorageError | None = None


class JsonTicketStore(ITicketStore):
    """
    Durable ticket queue.

    Records that fail validation are hidden from queries but written back
    untouched, so a single bad record never costs the rest of the queue.
    """

    def __init__(
        self,
        kv_store: IKeyValueStore,
        key: str = DEFAULT_QUEUE_KEY,
        clock: Callable[[], int] | None = None,
    ):
        self._kv = kv_store
        self.key = key
        self._clock = clock or now_ms
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_all(self) -> list[Ticket]:
        state = await self._load()
        return self._parse(state.records)

    async def list_pending(self) -> list[Ticket]:
        return [t for t in await self.list_all() if t.status == TicketStatus.PENDING]

    async def get(self, ticket_id: str) -> Ticket | None:
        for ticket in await self.list_all():
            if ticket.ticket_id == ticket_id:
                return ticket
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def insert(self, ticket_id: str, payload: dict[str, Any]) -> WriteResult:
        async with self._lock:
            state = await self._load()
            if state.read_error is not None:
                return WriteResult.failure(state.read_error)

            if self._find(state.records, ticket_id) is not None:
                logger.error("ticket_duplicate_insert", ticket_id=ticket_id)
                return WriteResult.failure(DuplicateTicketError(ticket_id))

            ticket = Ticket(ticket_id=ticket_id, payload=payload, created_at=self._clock())
            # Newest first for display; sync order comes from created_at
            records = [ticket.to_record(), *state.records]
            return await self._save(records, state)

    async def mark_synced(
        self, ticket_id: str, invoice_no: int, invoice_id: str
    ) -> WriteResult:
        def mutate(record: dict[str, Any]) -> bool:
            if record.get("status") == TicketStatus.SYNCED.value:
                logger.warning("ticket_already_synced", ticket_id=ticket_id)
                return False
            record["status"] = TicketStatus.SYNCED.value
            record["invoiceNo"] = invoice_no
            record["invoiceId"] = str(invoice_id)
            record.pop("lastError", None)
            return True

        return await self._update(ticket_id, mutate)

    async def mark_error(self, ticket_id: str, message: str) -> WriteResult:
        def mutate(record: dict[str, Any]) -> bool:
            if record.get("status") == TicketStatus.SYNCED.value:
                logger.warning("ticket_error_after_sync_ignored", ticket_id=ticket_id)
                return False
            record["status"] = TicketStatus.ERROR.value
            record["lastError"] = message
            record.pop("invoiceNo", None)
            record.pop("invoiceId", None)
            return True

        return await self._update(ticket_id, mutate)

    async def record_attempt(self, ticket_id: str) -> WriteResult:
        def mutate(record: dict[str, Any]) -> bool:
            record["attempts"] = int(record.get("attempts") or 0) + 1
            record["lastAttemptAt"] = self._clock()
            return True

        return await self._update(ticket_id, mutate)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _update(self, ticket_id: str, mutate: RecordMutation) -> WriteResult:
        async with self._lock:
            state = await self._load()
            if state.read_error is not None:
                return WriteResult.failure(state.read_error)

            index = self._find(state.records, ticket_id)
            if index is None:
                logger.debug("ticket_update_missing", ticket_id=ticket_id)
                return WriteResult.success()

            record = dict(state.records[index])
            if not mutate(record):
                return WriteResult.success()

            records = list(state.records)
            records[index] = record
            return await self._save(records, state)

    async def _load(self) -> _QueueState:
        try:
            raw = await self._kv.get(self.key)
        except StorageCorruptError as e:
            logger.error("ticket_queue_corrupted", key=self.key, error=e.message)
            return _QueueState(records=[], corrupt_blob=e.blob)
        except StorageError as e:
            logger.error("ticket_queue_unreadable", key=self.key, error=e.message)
            return _QueueState(records=[], read_error=e)
        except Exception as e:
            logger.exception("ticket_queue_unreadable", key=self.key, error=str(e))
            return _QueueState(records=[], read_error=StorageReadError(self.key, str(e)))

        if raw is None or not raw.strip():
            return _QueueState(records=[])

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error("ticket_queue_corrupted", key=self.key, error=str(e))
            return _QueueState(records=[], corrupt_blob=raw)

        if not isinstance(data, list):
            logger.error(
                "ticket_queue_corrupted",
                key=self.key,
                error=f"expected a JSON array, got {type(data).__name__}",
            )
            return _QueueState(records=[], corrupt_blob=raw)

        return _QueueState(records=data)

    async def _save(self, records: list[Any], state: _QueueState) -> WriteResult:
        try:
            if state.corrupt_blob is not None:
                quarantine_key = f"{self.key}.corrupt.{self._clock()}"
                await self._kv.set(quarantine_key, state.corrupt_blob)
                logger.warning("ticket_queue_quarantined", key=quarantine_key)
            await self._kv.set(self.key, json.dumps(records, separators=(",", ":")))
        except StorageError as e:
            logger.error("ticket_queue_write_failed", key=self.key, error=e.message)
            return WriteResult.failure(e)
        except Exception as e:
            logger.exception("ticket_queue_write_failed", key=self.key, error=str(e))
            return WriteResult.failure(StorageWriteError(self.key, str(e)))
        return WriteResult.success()

    @staticmethod
    def _find(records: list[Any], ticket_id: str) -> int | None:
        for index, record in enumerate(records):
            if isinstance(record, dict) and record.get("ticketId") == ticket_id:
                return index
        return None

    def _parse(self, records: list[Any]) -> list[Ticket]:
        tickets: list[Ticket] = []
        for record in records:
            try:
                tickets.append(Ticket.model_validate(record))
            except PydanticValidationError as e:
                ticket_id = record.get("ticketId") if isinstance(record, dict) else None
                logger.warning(
                    "ticket_record_invalid",
                    ticket_id=ticket_id,
                    errors=e.error_count(),
                )
        return tickets
