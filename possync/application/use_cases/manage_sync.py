"""Manage Sync Use Case: operator status, manual sync and retries."""

from possync.application.dto.responses import (
    ConnectivityResponse,
    StorageAlertResponse,
    SyncReportResponse,
    SyncStatusResponse,
    TicketListResponse,
    TicketResponse,
)
from possync.config import get_logger
from possync.core.entities.ticket import Ticket, TicketStatus
from possync.core.exceptions import SyncUnavailableError, TicketNotFoundError
from possync.core.interfaces import ITicketStore
from possync.core.services import (
    SyncReport,
    SyncStatusReporter,
    SyncStatusSnapshot,
    TicketBadge,
    document_label,
)
from possync.infrastructure.connectivity import ManualConnectivityProbe

logger = get_logger(__name__)


def ticket_to_response(ticket: Ticket, include_payload: bool = False) -> TicketResponse:
    invoice_no = ticket.invoice_no if ticket.is_synced else None
    return TicketResponse(
        ticket_id=ticket.ticket_id,
        label=document_label(ticket.ticket_id, invoice_no),
        status=ticket.status,
        created_at=ticket.created_at,
        total=ticket.total,
        attempts=ticket.attempts,
        last_attempt_at=ticket.last_attempt_at,
        last_error=ticket.last_error,
        invoice_no=invoice_no,
        invoice_id=ticket.invoice_id,
        payload=ticket.payload if include_payload else None,
    )


def badge_to_response(badge: TicketBadge) -> TicketResponse:
    return TicketResponse(
        ticket_id=badge.ticket_id,
        label=badge.label,
        status=badge.status,
        created_at=badge.created_at,
        total=badge.total,
        attempts=badge.attempts,
        last_error=badge.last_error,
        invoice_no=badge.invoice_no,
    )


def report_to_response(report: SyncReport) -> SyncReportResponse:
    return SyncReportResponse(
        trigger=report.trigger,
        attempted=report.attempted,
        synced=list(report.synced),
        failed=list(report.failed),
        halted=report.halted,
        skipped=report.skipped,
        reason=report.reason,
        remaining=report.remaining,
        started_at=report.started_at,
        finished_at=report.finished_at,
    )


def snapshot_to_response(snapshot: SyncStatusSnapshot) -> SyncStatusResponse:
    return SyncStatusResponse(
        pending=snapshot.pending,
        synced=snapshot.synced,
        errors=snapshot.errors,
        total=snapshot.total,
        online=snapshot.online,
        syncing=snapshot.syncing,
        can_sync=snapshot.can_sync,
        tickets=[badge_to_response(b) for b in snapshot.tickets],
        alerts=[
            StorageAlertResponse(code=a.code, message=a.message, raised_at=a.raised_at)
            for a in snapshot.alerts
        ],
        last_report=(
            report_to_response(snapshot.last_report) if snapshot.last_report else None
        ),
        refreshed_at=snapshot.refreshed_at,
    )


class ManageSyncUseCase:
    """Operator-facing queue operations."""

    def __init__(
        self,
        reporter: SyncStatusReporter,
        ticket_store: ITicketStore,
        manual_probe: ManualConnectivityProbe | None = None,
    ):
        self._reporter = reporter
        self._store = ticket_store
        self._manual_probe = manual_probe

    async def status(self) -> SyncStatusResponse:
        return snapshot_to_response(await self._reporter.refresh())

    async def sync_now(self) -> SyncReportResponse:
        """Run a manual pass. Raises SyncUnavailableError when not possible."""
        return report_to_response(await self._reporter.sync_now())

    async def retry_failed(self) -> SyncReportResponse:
        return report_to_response(await self._reporter.retry_failed())

    async def retry_ticket(self, ticket_id: str) -> SyncReportResponse:
        return report_to_response(await self._reporter.retry_ticket(ticket_id))

    async def list_tickets(self, status: TicketStatus | None = None) -> TicketListResponse:
        tickets = await self._store.list_all()
        if status is not None:
            tickets = [t for t in tickets if t.status == status]
        return TicketListResponse(
            tickets=[ticket_to_response(t) for t in tickets],
            total=len(tickets),
        )

    async def get_ticket(self, ticket_id: str) -> TicketResponse:
        ticket = await self._store.get(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)
        return ticket_to_response(ticket, include_payload=True)

    def set_connectivity(self, online: bool) -> ConnectivityResponse:
        """
        Push the register's network state.

        Raises:
            SyncUnavailableError: When connectivity is probed over HTTP
        """
        if self._manual_probe is None:
            raise SyncUnavailableError("probe_not_manual")
        changed = self._manual_probe.set_online(online)
        logger.info("connectivity_set", online=online, changed=changed)
        return ConnectivityResponse(online=online, changed=changed)
