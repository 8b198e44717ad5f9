"""Data transfer objects."""

from possync.application.dto.requests import (
    ConnectivityRequest,
    SaleItemRequest,
    SubmitSaleRequest,
)
from possync.application.dto.responses import (
    ConnectivityResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceRefResponse,
    StorageAlertResponse,
    SubmitSaleResponse,
    SyncReportResponse,
    SyncStatusResponse,
    TicketListResponse,
    TicketResponse,
)

__all__ = [
    # Requests
    "SaleItemRequest",
    "SubmitSaleRequest",
    "ConnectivityRequest",
    # Responses
    "InvoiceRefResponse",
    "SubmitSaleResponse",
    "TicketResponse",
    "TicketListResponse",
    "SyncReportResponse",
    "StorageAlertResponse",
    "SyncStatusResponse",
    "ConnectivityResponse",
    "HealthResponse",
    "ErrorResponse",
]
