"""
Application layer - Use cases, DTOs, and terminal wiring.

API handlers and the CLI reach the core services only through here.
"""

from possync.application.services import (
    Terminal,
    build_terminal,
    get_terminal,
    reset_terminal,
    set_terminal,
)
from possync.application.use_cases import (
    ManageSyncUseCase,
    RenderReceiptUseCase,
    SubmitSaleUseCase,
)

__all__ = [
    "Terminal",
    "build_terminal",
    "get_terminal",
    "set_terminal",
    "reset_terminal",
    "SubmitSaleUseCase",
    "RenderReceiptUseCase",
    "ManageSyncUseCase",
]
