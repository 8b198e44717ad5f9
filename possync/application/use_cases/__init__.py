"""Application use cases."""

from possync.application.use_cases.manage_sync import (
    ManageSyncUseCase,
    report_to_response,
    snapshot_to_response,
    ticket_to_response,
)
from possync.application.use_cases.render_receipt import (
    RenderedReceipt,
    RenderReceiptUseCase,
)
from possync.application.use_cases.submit_sale import SubmitSaleResult, SubmitSaleUseCase

__all__ = [
    "SubmitSaleUseCase",
    "SubmitSaleResult",
    "RenderReceiptUseCase",
    "RenderedReceipt",
    "ManageSyncUseCase",
    "ticket_to_response",
    "report_to_response",
    "snapshot_to_response",
]
