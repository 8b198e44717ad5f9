"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from possync.core.entities.ticket import TicketStatus


class InvoiceRefResponse(BaseModel):
    """Authoritative invoice issued by the server."""

    invoice_no: int = Field(..., description="Official invoice number")
    id: str = Field(..., description="Server invoice ID")


class SubmitSaleResponse(BaseModel):
    """Outcome of a sale submission."""

    ticket_id: str = Field(..., description="Client-generated ticket ID")
    status: Literal["confirmed", "queued"] = Field(
        ..., description="confirmed when the server issued an invoice"
    )
    label: str = Field(..., description="Document number shown on the receipt")
    invoice: InvoiceRefResponse | None = Field(
        default=None, description="Server invoice, when confirmed"
    )
    persisted: bool = Field(
        default=True,
        description="False when a queued sale could not be written locally",
    )
    receipt: str = Field(..., description="Fixed-width text receipt")


class TicketResponse(BaseModel):
    """A queued ticket."""

    ticket_id: str
    label: str
    status: TicketStatus
    created_at: int = Field(..., description="Epoch milliseconds")
    total: float
    attempts: int = 0
    last_attempt_at: int | None = None
    last_error: str | None = None
    invoice_no: int | None = None
    invoice_id: str | None = None
    payload: dict[str, Any] | None = Field(
        default=None, description="Stored sale payload (detail view only)"
    )


class TicketListResponse(BaseModel):
    """List of queued tickets."""

    tickets: list[TicketResponse]
    total: int


class SyncReportResponse(BaseModel):
    """Outcome of one sync pass."""

    trigger: str
    attempted: int = 0
    synced: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    halted: bool = False
    skipped: bool = False
    reason: str | None = None
    remaining: int = 0
    started_at: int = 0
    finished_at: int = 0


class StorageAlertResponse(BaseModel):
    """Operator-visible storage failure."""

    code: str
    message: str
    raised_at: int


class SyncStatusResponse(BaseModel):
    """Queue counts and sync availability."""

    pending: int
    synced: int
    errors: int
    total: int
    online: bool
    syncing: bool
    can_sync: bool
    tickets: list[TicketResponse] = Field(default_factory=list)
    alerts: list[StorageAlertResponse] = Field(default_factory=list)
    last_report: SyncReportResponse | None = None
    refreshed_at: int = 0


class ConnectivityResponse(BaseModel):
    """Connectivity state after an update."""

    online: bool
    changed: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    terminal_id: str
    online: bool


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. TICKET_NOT_FOUND)
    - message: human-readable description
    - details: structured context from the exception
    - hint: suggested recovery action
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    details: dict[str, Any] = Field(default_factory=dict, description="Additional details")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
