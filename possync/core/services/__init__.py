"""Core domain services."""

from possync.core.services.network_watcher import NetworkWatcher
from possync.core.services.receipt_renderer import (
    PROVISIONAL_MESSAGE,
    PROVISIONAL_TITLE,
    ReceiptDocument,
    ReceiptLine,
    ReceiptRenderer,
    document_label,
)
from possync.core.services.sale_submission import SaleSubmissionService, SyncReport
from possync.core.services.sync_status import (
    StorageAlert,
    SyncStatusReporter,
    SyncStatusSnapshot,
    TicketBadge,
)
from possync.core.services.ticket_ids import (
    generate_ticket_id,
    now_ms,
    ticket_suffix,
    ticket_timestamp,
)

__all__ = [
    "SaleSubmissionService",
    "SyncReport",
    "NetworkWatcher",
    "SyncStatusReporter",
    "SyncStatusSnapshot",
    "TicketBadge",
    "StorageAlert",
    "ReceiptRenderer",
    "ReceiptDocument",
    "ReceiptLine",
    "document_label",
    "PROVISIONAL_TITLE",
    "PROVISIONAL_MESSAGE",
    "generate_ticket_id",
    "now_ms",
    "ticket_suffix",
    "ticket_timestamp",
]
