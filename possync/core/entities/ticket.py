"""Queued ticket domain entities."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TicketStatus(str, Enum):
    """Sync state of a queued sale."""

    PENDING = "pending"
    SYNCED = "synced"
    ERROR = "error"


class Ticket(BaseModel):
    """
    A locally durable record of one sale attempt.

    Serialized with camelCase keys so the stored queue layout stays
    compatible with the register front-end.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=False)

    ticket_id: str = Field(..., alias="ticketId", min_length=1)
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: int = Field(..., alias="createdAt")  # ms epoch
    status: TicketStatus = TicketStatus.PENDING
    last_error: str | None = Field(default=None, alias="lastError")
    invoice_no: int | None = Field(default=None, alias="invoiceNo")
    invoice_id: str | None = Field(default=None, alias="invoiceId")
    attempts: int = 0
    last_attempt_at: int | None = Field(default=None, alias="lastAttemptAt")

    @model_validator(mode="after")
    def check_status_fields(self) -> "Ticket":
        """Invoice fields belong to synced tickets, errors to failed ones."""
        has_invoice = self.invoice_no is not None and self.invoice_id is not None
        if self.status == TicketStatus.SYNCED and not has_invoice:
            raise ValueError("synced ticket requires invoiceNo and invoiceId")
        if self.status != TicketStatus.SYNCED and (
            self.invoice_no is not None or self.invoice_id is not None
        ):
            raise ValueError(f"{self.status.value} ticket cannot carry invoice fields")
        if self.status != TicketStatus.ERROR and self.last_error is not None:
            raise ValueError(f"{self.status.value} ticket cannot carry lastError")
        return self

    @property
    def is_pending(self) -> bool:
        return self.status == TicketStatus.PENDING

    @property
    def is_synced(self) -> bool:
        return self.status == TicketStatus.SYNCED

    @property
    def is_error(self) -> bool:
        return self.status == TicketStatus.ERROR

    @property
    def total(self) -> float:
        """Sale total carried in the payload, 0.0 when missing."""
        try:
            return float(self.payload.get("total") or 0.0)
        except (TypeError, ValueError):
            return 0.0

    def to_record(self) -> dict[str, Any]:
        """Serialize to the stored queue record layout."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
