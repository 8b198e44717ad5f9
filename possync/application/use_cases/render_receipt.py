"""Render Receipt Use Case: reprint a queued ticket as text or PDF."""

from dataclasses import dataclass
from typing import Literal

from possync.config import get_logger
from possync.core.exceptions import TicketNotFoundError
from possync.core.interfaces import ITicketStore
from possync.core.services import ReceiptRenderer
from possync.infrastructure.pdf import IReceiptPdfRenderer

logger = get_logger(__name__)

ReceiptFormat = Literal["text", "pdf"]


@dataclass
class RenderedReceipt:
    """Receipt content ready to be served."""

    content: str | bytes
    media_type: str
    filename: str


class RenderReceiptUseCase:
    """Rebuild the receipt of a stored ticket."""

    def __init__(
        self,
        ticket_store: ITicketStore,
        receipts: ReceiptRenderer,
        pdf_renderer: IReceiptPdfRenderer,
    ):
        self._store = ticket_store
        self._receipts = receipts
        self._pdf = pdf_renderer

    async def execute(self, ticket_id: str, fmt: ReceiptFormat = "text") -> RenderedReceipt:
        """
        Render the receipt of one ticket.

        Raises:
            TicketNotFoundError: If no ticket has this ID
            ValidationError: If the stored payload is not a sale
        """
        ticket = await self._store.get(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)

        doc = self._receipts.build_from_ticket(ticket)
        logger.info("receipt_rendered", ticket_id=ticket_id, format=fmt, label=doc.label)

        if fmt == "pdf":
            return RenderedReceipt(
                content=self._pdf.render(doc),
                media_type="application/pdf",
                filename=f"receipt-{ticket_id}.pdf",
            )
        return RenderedReceipt(
            content=self._receipts.render_text(doc),
            media_type="text/plain; charset=utf-8",
            filename=f"receipt-{ticket_id}.txt",
        )
