"""Storage infrastructure implementations."""

from possync.infrastructure.storage.file_store import FileKeyValueStore
from possync.infrastructure.storage.memory_store import MemoryKeyValueStore
from possync.infrastructure.storage.sqlite import QueueDatabase, SQLiteKeyValueStore
from possync.infrastructure.storage.ticket_store import DEFAULT_QUEUE_KEY, JsonTicketStore

__all__ = [
    # Key-value backends
    "MemoryKeyValueStore",
    "FileKeyValueStore",
    "SQLiteKeyValueStore",
    "QueueDatabase",
    # Ticket queue
    "JsonTicketStore",
    "DEFAULT_QUEUE_KEY",
]
