"""Core domain entities."""

from possync.core.entities.sale import (
    Invoice,
    Sale,
    SaleConfirmation,
    SaleLine,
    SaleResult,
)
from possync.core.entities.ticket import Ticket, TicketStatus

__all__ = [
    # Ticket entities
    "Ticket",
    "TicketStatus",
    # Sale entities
    "Sale",
    "SaleLine",
    "Invoice",
    "SaleConfirmation",
    "SaleResult",
]
