"""
Domain exceptions for the POS sync terminal.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class PosSyncError(Exception):
    """Base exception for all terminal errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(PosSyncError):
    """Base exception for storage operations."""

    pass


class StorageReadError(StorageError):
    """Persistent storage could not be read."""

    def __init__(self, key: str, error: str):
        super().__init__(
            f"Failed to read '{key}': {error}",
            code="STORAGE_READ_ERROR",
            details={"key": key, "error": error},
        )


class StorageCorruptError(StorageReadError):
    """Stored data exists but cannot be decoded.

    ``blob`` holds a lossless text rendering of the raw bytes.
    """

    def __init__(self, key: str, error: str, blob: str):
        super().__init__(key, error)
        self.code = "STORAGE_CORRUPT"
        self.blob = blob


class StorageWriteError(StorageError):
    """Persistent storage could not be written."""

    def __init__(self, key: str, error: str):
        super().__init__(
            f"Failed to write '{key}': {error}",
            code="STORAGE_WRITE_ERROR",
            details={"key": key, "error": error},
        )


class DuplicateTicketError(StorageError):
    """A ticket with the same ID is already queued."""

    def __init__(self, ticket_id: str):
        super().__init__(
            f"Ticket already exists: {ticket_id}",
            code="DUPLICATE_TICKET",
            details={"ticket_id": ticket_id},
        )


class TicketNotFoundError(StorageError):
    """Ticket not found in the local queue."""

    def __init__(self, ticket_id: str):
        super().__init__(
            f"Ticket not found: {ticket_id}",
            code="TICKET_NOT_FOUND",
            details={"ticket_id": ticket_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Submission Exceptions
class SubmissionError(PosSyncError):
    """Base exception for sale submission to the server."""

    pass


class NetworkFailureError(SubmissionError):
    """The request never reached the server or no response came back."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            f"Network failure posting to {url}: {reason}",
            code="NETWORK_FAILURE",
            details={"url": url, "reason": reason},
        )
        self.reason = reason


class ServerRejectionError(SubmissionError):
    """The server responded but declined the sale."""

    def __init__(self, status_code: int, body: str, ticket_id: str | None = None):
        super().__init__(
            f"Server rejected sale (HTTP {status_code})",
            code="SERVER_REJECTION",
            details={
                "status_code": status_code,
                "ticket_id": ticket_id,
                "body_preview": body[:200],
            },
        )
        self.status_code = status_code
        self.body = body


class InvalidServerResponseError(ServerRejectionError):
    """The server accepted the request but the response lacks an invoice."""

    def __init__(self, status_code: int, body: str, reason: str):
        super().__init__(status_code, body)
        self.code = "INVALID_SERVER_RESPONSE"
        self.message = f"Invalid sale response: {reason}"
        self.details["reason"] = reason


# Sync Exceptions
class SyncError(PosSyncError):
    """Base exception for queue synchronization."""

    pass


class SyncUnavailableError(SyncError):
    """A manual sync cannot start right now."""

    def __init__(self, reason: str):
        super().__init__(
            f"Sync unavailable: {reason}",
            code="SYNC_UNAVAILABLE",
            details={"reason": reason},
        )
        self.reason = reason


# Validation Exceptions
class ValidationError(PosSyncError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class ConfigurationError(PosSyncError):
    """Configuration error."""

    pass
