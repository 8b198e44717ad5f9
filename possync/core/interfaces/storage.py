"""
Abstract interfaces for local persistence.

Defines the raw key-value capability and the ticket queue built on it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from possync.core.entities.ticket import Ticket
from possync.core.exceptions import StorageError


@dataclass
class WriteResult:
    """Outcome of a queue mutation; failures are returned, not raised."""

    ok: bool = True
    error: StorageError | None = None

    @classmethod
    def success(cls) -> "WriteResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: StorageError) -> "WriteResult":
        return cls(ok=False, error=error)


class IKeyValueStore(ABC):
    """
    Persistent string blob storage keyed by name.

    Implementations: MemoryKeyValueStore, FileKeyValueStore, SQLiteKeyValueStore
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """
        Read the blob stored under key.

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Replace the blob stored under key.

        Raises:
            StorageWriteError: If the backend cannot be written
        """
        pass


class ITicketStore(ABC):
    """Interface for the durable local ticket queue."""

    @abstractmethod
    async def insert(self, ticket_id: str, payload: dict[str, Any]) -> WriteResult:
        """Store a new pending ticket stamped with the current time."""
        pass

    @abstractmethod
    async def list_pending(self) -> list[Ticket]:
        """List pending tickets. Callers sort by created_at."""
        pass

    @abstractmethod
    async def list_all(self) -> list[Ticket]:
        """List every ticket, most recent first."""
        pass

    @abstractmethod
    async def get(self, ticket_id: str) -> Ticket | None:
        """Get a ticket by ID."""
        pass

    @abstractmethod
    async def mark_synced(
        self, ticket_id: str, invoice_no: int, invoice_id: str
    ) -> WriteResult:
        """Record the server invoice for a ticket. Missing ticket is a no-op."""
        pass

    @abstractmethod
    async def mark_error(self, ticket_id: str, message: str) -> WriteResult:
        """Record a failed late commit. Missing ticket is a no-op."""
        pass

    @abstractmethod
    async def record_attempt(self, ticket_id: str) -> WriteResult:
        """Count a submission attempt for a ticket."""
        pass
