"""
Sync status reporting for operators.

Aggregates the queue into counts and per-ticket badges, gates the manual
"sync now" trigger and keeps storage alerts visible.
"""

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

from possync.config import get_logger
from possync.core.entities.ticket import Ticket, TicketStatus
from possync.core.exceptions import StorageError, SyncUnavailableError
from possync.core.interfaces import IConnectivityProbe, ITicketStore
from possync.core.services.receipt_renderer import document_label
from possync.core.services.sale_submission import SaleSubmissionService, SyncReport
from possync.core.services.ticket_ids import now_ms

logger = get_logger(__name__)


@dataclass
class TicketBadge:
    """One row of the operator ticket list."""

    ticket_id: str
    label: str
    status: TicketStatus
    created_at: int
    total: float
    attempts: int = 0
    last_error: str | None = None
    invoice_no: int | None = None


@dataclass
class StorageAlert:
    """A queue write failure that may mean data loss."""

    code: str
    message: str
    raised_at: int


@dataclass
class SyncStatusSnapshot:
    """Point-in-time view of the queue."""

    pending: int = 0
    synced: int = 0
    errors: int = 0
    total: int = 0
    online: bool = False
    syncing: bool = False
    can_sync: bool = False
    tickets: list[TicketBadge] = field(default_factory=list)
    alerts: list[StorageAlert] = field(default_factory=list)
    last_report: SyncReport | None = None
    refreshed_at: int = 0


def _badge(ticket: Ticket) -> TicketBadge:
    invoice_no = ticket.invoice_no if ticket.is_synced else None
    return TicketBadge(
        ticket_id=ticket.ticket_id,
        label=document_label(ticket.ticket_id, invoice_no),
        status=ticket.status,
        created_at=ticket.created_at,
        total=ticket.total,
        attempts=ticket.attempts,
        last_error=ticket.last_error,
        invoice_no=invoice_no,
    )


class SyncStatusReporter:
    """Operator view over the ticket queue with a guarded manual sync."""

    def __init__(
        self,
        ticket_store: ITicketStore,
        service: SaleSubmissionService,
        connectivity: IConnectivityProbe,
        alert_history: int = 20,
        clock: Callable[[], int] | None = None,
    ):
        self._store = ticket_store
        self._service = service
        self._connectivity = connectivity
        self._clock = clock or now_ms
        self._alerts: deque[StorageAlert] = deque(maxlen=alert_history)
        self._last_report: SyncReport | None = None
        self._snapshot: SyncStatusSnapshot | None = None

    @property
    def snapshot(self) -> SyncStatusSnapshot | None:
        """Last computed snapshot, None before the first refresh."""
        return self._snapshot

    @property
    def last_report(self) -> SyncReport | None:
        return self._last_report

    @property
    def alerts(self) -> list[StorageAlert]:
        return list(self._alerts)

    def record_alert(self, error: StorageError) -> None:
        """Keep a storage failure visible to the operator."""
        self._alerts.append(
            StorageAlert(code=error.code, message=error.message, raised_at=self._clock())
        )
        logger.critical("storage_alert", code=error.code, error=error.message)

    async def refresh(self) -> SyncStatusSnapshot:
        """Recompute counts and badges from the queue."""
        tickets = await self._store.list_all()
        pending = await self._store.list_pending()

        synced = sum(1 for t in tickets if t.is_synced)
        errors = sum(1 for t in tickets if t.is_error)
        online = self._connectivity.is_online()
        syncing = self._service.is_syncing

        self._snapshot = SyncStatusSnapshot(
            pending=len(pending),
            synced=synced,
            errors=errors,
            total=len(tickets),
            online=online,
            syncing=syncing,
            can_sync=online and not syncing and len(pending) > 0,
            tickets=[_badge(t) for t in tickets],
            alerts=self.alerts,
            last_report=self._last_report,
            refreshed_at=self._clock(),
        )
        return self._snapshot

    async def sync_now(self) -> SyncReport:
        """
        Run a manual sync pass.

        Raises:
            SyncUnavailableError: When offline, already syncing or nothing is pending
        """
        self._ensure_can_start()
        if not await self._store.list_pending():
            raise SyncUnavailableError("nothing_pending")
        return await self._finish(await self._service.sync_queued_sales(trigger="manual"))

    async def retry_failed(self) -> SyncReport:
        """Re-attempt every failed ticket."""
        self._ensure_can_start()
        return await self._finish(await self._service.retry_failed())

    async def retry_ticket(self, ticket_id: str) -> SyncReport:
        """Re-attempt one ticket."""
        self._ensure_can_start()
        return await self._finish(await self._service.retry_ticket(ticket_id))

    async def on_auto_sync(self, report: SyncReport) -> None:
        """Watcher listener: refresh after an automatic pass."""
        if not report.skipped:
            self._last_report = report
        await self.refresh()

    def _ensure_can_start(self) -> None:
        if not self._connectivity.is_online():
            raise SyncUnavailableError("offline")
        if self._service.is_syncing:
            raise SyncUnavailableError("in_progress")

    async def _finish(self, report: SyncReport) -> SyncReport:
        if report.skipped and report.reason == "in_progress":
            raise SyncUnavailableError("in_progress")
        if not report.skipped:
            self._last_report = report
        await self.refresh()
        return report
