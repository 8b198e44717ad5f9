"""Sale domain entities."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SaleLine(BaseModel):
    """A single line item rung up at the register."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    product_name: str = Field(..., alias="productName")
    product_id: str | int | None = Field(default=None, alias="productId")
    quantity: float = Field(..., gt=0)
    price: float  # unit price, pricing is computed upstream

    @property
    def line_total(self) -> float:
        return self.quantity * self.price


class Sale(BaseModel):
    """
    A completed sale as handed over by the register UI.

    Totals arrive precomputed; unknown keys are kept so the server
    receives exactly what the register produced.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    items: list[SaleLine] = Field(default_factory=list)
    total: float
    customer_name: str | None = Field(default=None, alias="customerName")
    customer_id: str | int | None = Field(default=None, alias="customerId")
    payment_method: str = Field(default="Cash", alias="paymentMethod")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), alias="createdAt"
    )
    notes: str | None = None

    def to_payload(self, ticket_id: str) -> dict[str, Any]:
        """Build the wire payload with the ticket ID embedded."""
        payload = self.model_dump(by_alias=True, exclude_none=True, mode="json")
        payload["ticketId"] = ticket_id
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Sale":
        """Rebuild a sale from a queued payload."""
        data = {k: v for k, v in payload.items() if k != "ticketId"}
        return cls.model_validate(data)


class Invoice(BaseModel):
    """Authoritative invoice reference issued by the server."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    invoice_no: int
    id: str


class SaleConfirmation(BaseModel):
    """Successful response of the sale endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    invoice: Invoice
    ticket_id: str | None = Field(default=None, alias="ticketId")


class SaleResult(BaseModel):
    """What the cashier gets back after completing a sale."""

    ticket_id: str
    invoice: Invoice | None = None
    queued: bool = False
    persisted: bool = True  # False when the queue write failed
    sale: Sale | None = None

    @property
    def is_confirmed(self) -> bool:
        return self.invoice is not None

    @property
    def is_provisional(self) -> bool:
        return self.invoice is None
