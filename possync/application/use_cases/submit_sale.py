"""Submit Sale Use Case: commit online or queue, then print."""

from dataclasses import dataclass

from possync.application.dto.requests import SubmitSaleRequest
from possync.application.dto.responses import InvoiceRefResponse, SubmitSaleResponse
from possync.config import get_logger
from possync.core.entities.sale import Sale, SaleLine, SaleResult
from possync.core.services import ReceiptRenderer, SaleSubmissionService

logger = get_logger(__name__)


@dataclass
class SubmitSaleResult:
    """Result of a sale submission with its printed receipt."""

    result: SaleResult
    label: str
    receipt: str


class SubmitSaleUseCase:
    """Hand a completed sale to the submission service and render the receipt."""

    def __init__(self, service: SaleSubmissionService, receipts: ReceiptRenderer):
        self._service = service
        self._receipts = receipts

    @staticmethod
    def to_sale(request: SubmitSaleRequest) -> Sale:
        return Sale(
            items=[
                SaleLine(
                    product_name=item.product_name,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price=item.price,
                )
                for item in request.items
            ],
            total=request.total,
            customer_name=request.customer_name,
            customer_id=request.customer_id,
            payment_method=request.payment_method,
            notes=request.notes,
        )

    async def execute(self, request: SubmitSaleRequest) -> SubmitSaleResult:
        """Execute the sale submission."""
        logger.info("submit_sale_started", items=len(request.items), total=request.total)

        result = await self._service.submit_sale(self.to_sale(request))
        doc = self._receipts.build_from_result(result)

        logger.info(
            "submit_sale_complete",
            ticket_id=result.ticket_id,
            confirmed=result.is_confirmed,
            persisted=result.persisted,
        )
        return SubmitSaleResult(
            result=result,
            label=doc.label,
            receipt=self._receipts.render_text(doc),
        )

    def to_response(self, outcome: SubmitSaleResult) -> SubmitSaleResponse:
        """Convert result to response DTO."""
        result = outcome.result
        invoice = None
        if result.invoice is not None:
            invoice = InvoiceRefResponse(
                invoice_no=result.invoice.invoice_no,
                id=result.invoice.id,
            )
        return SubmitSaleResponse(
            ticket_id=result.ticket_id,
            status="confirmed" if result.is_confirmed else "queued",
            label=outcome.label,
            invoice=invoice,
            persisted=result.persisted,
            receipt=outcome.receipt,
        )
