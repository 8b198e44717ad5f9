"""
Receipt rendering.

Builds one receipt document for both confirmed and provisional sales; only
the document number and the provisional notice differ between the two.
"""

import textwrap
from dataclasses import dataclass, field
from datetime import datetime

from pydantic import ValidationError as PydanticValidationError

from possync.config import get_settings
from possync.config.settings import ReceiptSettings
from possync.core.entities.sale import Invoice, Sale, SaleResult
from possync.core.entities.ticket import Ticket
from possync.core.exceptions import ValidationError
from possync.core.services.ticket_ids import ticket_suffix

PROVISIONAL_TITLE = "PROVISIONAL TICKET"
PROVISIONAL_MESSAGE = "Official invoice number will be assigned upon sync."


def document_label(ticket_id: str | None, invoice_no: int | None) -> str:
    """Document number shown to staff and customers."""
    if invoice_no is not None:
        return f"Invoice #{invoice_no}"
    if ticket_id:
        return f"Ticket {ticket_suffix(ticket_id)}"
    return "Ticket TBD"


@dataclass
class ReceiptLine:
    """A printed line item."""

    name: str
    quantity: float
    unit_price: float
    line_total: float


@dataclass
class ReceiptDocument:
    """Layout-independent receipt content."""

    label: str
    is_provisional: bool
    issued_at: datetime
    total: float
    payment_method: str
    customer_name: str | None = None
    ticket_id: str | None = None
    header_lines: list[str] = field(default_factory=list)
    lines: list[ReceiptLine] = field(default_factory=list)
    notice_lines: list[str] = field(default_factory=list)
    footer_lines: list[str] = field(default_factory=list)
    currency_symbol: str = "$"

    def money(self, amount: float) -> str:
        return f"{self.currency_symbol}{amount:.2f}"


class ReceiptRenderer:
    """Builds receipt documents and renders them as fixed-width text."""

    def __init__(self, settings: ReceiptSettings | None = None):
        self._settings = settings or get_settings().receipt

    def build(
        self,
        sale: Sale,
        ticket_id: str | None = None,
        invoice: Invoice | None = None,
    ) -> ReceiptDocument:
        """Build a receipt for a sale, confirmed when invoice is given."""
        settings = self._settings
        is_provisional = invoice is None

        header = [settings.store_name, *settings.address_lines]
        if settings.phone:
            header.append(f"Phone: {settings.phone}")

        return ReceiptDocument(
            label=document_label(ticket_id, invoice.invoice_no if invoice else None),
            is_provisional=is_provisional,
            issued_at=sale.created_at,
            total=sale.total,
            payment_method=sale.payment_method or "Cash",
            customer_name=sale.customer_name,
            ticket_id=ticket_id,
            header_lines=header,
            lines=[
                ReceiptLine(
                    name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.price,
                    line_total=item.line_total,
                )
                for item in sale.items
            ],
            notice_lines=[PROVISIONAL_TITLE, PROVISIONAL_MESSAGE] if is_provisional else [],
            footer_lines=list(settings.footer_lines),
            currency_symbol=settings.currency_symbol,
        )

    def build_from_result(self, result: SaleResult) -> ReceiptDocument:
        """Build a receipt for the outcome of a sale submission."""
        if result.sale is None:
            raise ValidationError("sale", "sale result carries no sale content")
        return self.build(result.sale, result.ticket_id, result.invoice)

    def build_from_ticket(self, ticket: Ticket) -> ReceiptDocument:
        """Build a (re)print receipt from a queued ticket."""
        try:
            sale = Sale.from_payload(ticket.payload)
        except PydanticValidationError as e:
            raise ValidationError("payload", f"ticket payload is not a sale: {e.error_count()} errors")

        invoice = None
        if ticket.is_synced and ticket.invoice_no is not None and ticket.invoice_id:
            invoice = Invoice(invoice_no=ticket.invoice_no, id=ticket.invoice_id)
        return self.build(sale, ticket.ticket_id, invoice)

    def render_text(self, doc: ReceiptDocument) -> str:
        """Render a receipt as fixed-width text for line printers."""
        width = self._settings.width
        rule = "-" * width
        out: list[str] = [line.center(width).rstrip() for line in doc.header_lines]
        out.append("=" * width)

        out.append(_columns("Date:", doc.issued_at.strftime("%Y-%m-%d %H:%M"), width))
        out.append(_columns("Receipt:", doc.label, width))
        if doc.customer_name:
            out.append(_columns("Customer:", doc.customer_name, width))
        out.append(_columns("Payment:", doc.payment_method, width))

        out.append(rule)
        for line in doc.lines:
            out.append(_columns(line.name, doc.money(line.line_total), width))
            out.append(f"  {line.quantity:g} x {doc.money(line.unit_price)}")
        out.append(rule)
        out.append(_columns("TOTAL:", doc.money(doc.total), width))

        if doc.notice_lines:
            out.append(rule)
            for notice in doc.notice_lines:
                for wrapped in textwrap.wrap(notice, width):
                    out.append(wrapped.center(width).rstrip())

        out.append("")
        for footer in doc.footer_lines:
            out.append(footer.center(width).rstrip())

        return "\n".join(out) + "\n"

    def render_sale(
        self,
        sale: Sale,
        ticket_id: str | None = None,
        invoice: Invoice | None = None,
    ) -> str:
        """Build and render in one step."""
        return self.render_text(self.build(sale, ticket_id, invoice))


def _columns(left: str, right: str, width: int) -> str:
    """Left and right aligned text on one line; the left side is truncated."""
    room = width - len(right) - 1
    if room < 1:
        return f"{left} {right}"
    if len(left) > room:
        left = left[: max(room - 1, 0)] + "~"
    return left + " " * (width - len(left) - len(right)) + right
