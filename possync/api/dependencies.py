"""
Dependency injection for FastAPI.

Provides the terminal and its use cases to route handlers.
"""

from fastapi import Depends, Request

from possync.application.services import Terminal, get_terminal
from possync.application.use_cases import (
    ManageSyncUseCase,
    RenderReceiptUseCase,
    SubmitSaleUseCase,
)


def get_app_terminal(request: Request) -> Terminal:
    """The terminal given to create_app, else the global one."""
    return getattr(request.app.state, "terminal", None) or get_terminal()


def get_submit_sale_use_case(
    terminal: Terminal = Depends(get_app_terminal),
) -> SubmitSaleUseCase:
    return SubmitSaleUseCase(terminal.service, terminal.receipts)


def get_render_receipt_use_case(
    terminal: Terminal = Depends(get_app_terminal),
) -> RenderReceiptUseCase:
    return RenderReceiptUseCase(
        terminal.ticket_store,
        terminal.receipts,
        terminal.pdf_renderer,
    )


def get_manage_sync_use_case(
    terminal: Terminal = Depends(get_app_terminal),
) -> ManageSyncUseCase:
    return ManageSyncUseCase(
        terminal.reporter,
        terminal.ticket_store,
        manual_probe=terminal.manual_connectivity,
    )
