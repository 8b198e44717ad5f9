"""Sale submission and ticket endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Response, status

from possync.api.dependencies import (
    get_manage_sync_use_case,
    get_render_receipt_use_case,
    get_submit_sale_use_case,
)
from possync.application.dto.requests import SubmitSaleRequest
from possync.application.dto.responses import (
    ErrorResponse,
    SubmitSaleResponse,
    TicketListResponse,
    TicketResponse,
)
from possync.application.use_cases import (
    ManageSyncUseCase,
    RenderReceiptUseCase,
    SubmitSaleUseCase,
)
from possync.core.entities.ticket import TicketStatus

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.post(
    "",
    response_model=SubmitSaleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        202: {"model": SubmitSaleResponse, "description": "Sale queued, provisional ticket issued"},
    },
)
async def submit_sale(
    request: SubmitSaleRequest,
    response: Response,
    use_case: SubmitSaleUseCase = Depends(get_submit_sale_use_case),
) -> SubmitSaleResponse:
    """
    Submit a completed sale.

    Returns 201 with the official invoice when the server committed the
    sale, or 202 with a provisional ticket when it was queued locally.
    """
    result = await use_case.execute(request)
    if not result.result.is_confirmed:
        response.status_code = status.HTTP_202_ACCEPTED
    return use_case.to_response(result)


@router.get("/tickets", response_model=TicketListResponse)
async def list_tickets(
    ticket_status: TicketStatus | None = Query(default=None, alias="status"),
    use_case: ManageSyncUseCase = Depends(get_manage_sync_use_case),
) -> TicketListResponse:
    """List queued tickets, most recent first."""
    return await use_case.list_tickets(ticket_status)


@router.get(
    "/tickets/{ticket_id}",
    response_model=TicketResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_ticket(
    ticket_id: str,
    use_case: ManageSyncUseCase = Depends(get_manage_sync_use_case),
) -> TicketResponse:
    """Get one ticket with its stored payload."""
    return await use_case.get_ticket(ticket_id)


@router.get(
    "/tickets/{ticket_id}/receipt",
    responses={
        200: {"content": {"text/plain": {}, "application/pdf": {}}},
        404: {"model": ErrorResponse, "description": "Ticket not found"},
    },
)
async def get_ticket_receipt(
    ticket_id: str,
    format: Literal["text", "pdf"] = "text",
    use_case: RenderReceiptUseCase = Depends(get_render_receipt_use_case),
) -> Response:
    """Reprint a ticket receipt; it shows the invoice number once synced."""
    receipt = await use_case.execute(ticket_id, format)
    return Response(
        content=receipt.content,
        media_type=receipt.media_type,
        headers={"Content-Disposition": f'inline; filename="{receipt.filename}"'},
    )
