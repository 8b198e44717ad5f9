"""
Sale submission service.

Single entry point for a completed sale: commit it online when possible,
otherwise queue it durably, and drain the queue in creation order later.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

from possync.config import get_logger
from possync.core.entities.sale import Sale, SaleResult
from possync.core.entities.ticket import Ticket
from possync.core.exceptions import (
    NetworkFailureError,
    ServerRejectionError,
    StorageError,
    TicketNotFoundError,
)
from possync.core.interfaces import (
    IConnectivityProbe,
    ISaleGateway,
    ITicketStore,
    WriteResult,
)
from possync.core.services.ticket_ids import generate_ticket_id, now_ms

logger = get_logger(__name__)

AlertSink = Callable[[StorageError], None]

DEFAULT_SYNC_ERROR = "sync failed"


@dataclass
class SyncReport:
    """Outcome of one drain pass over the queue."""

    trigger: str = "manual"
    attempted: int = 0
    synced: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    halted: bool = False  # stopped early on a network failure
    skipped: bool = False  # nothing was sent because the pass could not start
    reason: str | None = None
    remaining: int = 0  # tickets of this pass left untouched
    started_at: int = 0
    finished_at: int = 0


def _sync_order(ticket: Ticket) -> tuple[int, str]:
    return (ticket.created_at, ticket.ticket_id)


class SaleSubmissionService:
    """
    Orchestrates online commits, queue fallback and queue draining.

    Drain passes are non-reentrant: a pass requested while another is in
    flight is reported as skipped instead of re-sending in-flight tickets.
    """

    def __init__(
        self,
        ticket_store: ITicketStore,
        gateway: ISaleGateway,
        connectivity: IConnectivityProbe,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], int] | None = None,
        alert_sink: AlertSink | None = None,
    ):
        self._store = ticket_store
        self._gateway = gateway
        self._connectivity = connectivity
        self._id_factory = id_factory or generate_ticket_id
        self._clock = clock or now_ms
        self._alert_sink = alert_sink
        self._syncing = False

    @property
    def is_syncing(self) -> bool:
        return self._syncing

    def set_alert_sink(self, sink: AlertSink | None) -> None:
        """Route storage write failures to an operator-visible sink."""
        self._alert_sink = sink

    async def submit_sale(self, sale: Sale) -> SaleResult:
        """
        Make a completed sale durable and, if possible, official.

        Never raises for network, server or storage problems: the cashier
        always receives either a confirmed invoice or a provisional ticket.
        """
        ticket_id = self._id_factory()
        payload = sale.to_payload(ticket_id)

        if self._connectivity.is_online():
            try:
                confirmation = await self._gateway.post_sale(payload, ticket_id)
            except NetworkFailureError as e:
                logger.warning(
                    "sale_submit_network_failure",
                    ticket_id=ticket_id,
                    reason=e.reason,
                )
            except ServerRejectionError as e:
                logger.warning(
                    "sale_submit_rejected",
                    ticket_id=ticket_id,
                    status_code=e.status_code,
                    error=e.message,
                )
            except Exception as e:
                logger.exception(
                    "sale_submit_unexpected_error",
                    ticket_id=ticket_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
            else:
                logger.info(
                    "sale_confirmed",
                    ticket_id=ticket_id,
                    invoice_no=confirmation.invoice.invoice_no,
                )
                return SaleResult(
                    ticket_id=ticket_id,
                    invoice=confirmation.invoice,
                    sale=sale,
                )
        else:
            logger.info("sale_submit_offline", ticket_id=ticket_id)

        result = await self._store.insert(ticket_id, payload)
        self._check_write(result, "insert", ticket_id)

        logger.info("sale_queued", ticket_id=ticket_id, persisted=result.ok)
        return SaleResult(
            ticket_id=ticket_id,
            queued=True,
            persisted=result.ok,
            sale=sale,
        )

    async def sync_queued_sales(self, trigger: str = "manual") -> SyncReport:
        """
        Drain pending tickets oldest first.

        Stops at the first network failure; a server rejection marks that
        ticket as failed and the pass moves on.
        """
        if self._syncing:
            return self._skipped(trigger, "in_progress")

        self._syncing = True
        try:
            pending = await self._store.list_pending()
            return await self._drain(sorted(pending, key=_sync_order), trigger)
        finally:
            self._syncing = False

    async def retry_ticket(self, ticket_id: str) -> SyncReport:
        """
        Re-attempt a single ticket.

        Raises:
            TicketNotFoundError: If the ticket is not queued
        """
        if self._syncing:
            return self._skipped("retry", "in_progress")

        self._syncing = True
        try:
            ticket = await self._store.get(ticket_id)
            if ticket is None:
                raise TicketNotFoundError(ticket_id)
            if ticket.is_synced:
                return self._skipped("retry", "already_synced")
            return await self._drain([ticket], "retry")
        finally:
            self._syncing = False

    async def retry_failed(self) -> SyncReport:
        """Re-attempt every ticket in error state, oldest first."""
        if self._syncing:
            return self._skipped("retry_failed", "in_progress")

        self._syncing = True
        try:
            tickets = await self._store.list_all()
            failed = sorted((t for t in tickets if t.is_error), key=_sync_order)
            return await self._drain(failed, "retry_failed")
        finally:
            self._syncing = False

    async def _drain(self, tickets: list[Ticket], trigger: str) -> SyncReport:
        report = SyncReport(trigger=trigger, started_at=self._clock())
        logger.info("sync_pass_started", trigger=trigger, tickets=len(tickets))

        for index, ticket in enumerate(tickets):
            if not await self._submit_ticket(ticket, report):
                report.halted = True
                report.remaining = len(tickets) - index - 1
                logger.warning(
                    "sync_pass_halted",
                    trigger=trigger,
                    ticket_id=ticket.ticket_id,
                    remaining=report.remaining,
                )
                break

        report.finished_at = self._clock()
        logger.info(
            "sync_pass_complete",
            trigger=trigger,
            attempted=report.attempted,
            synced=len(report.synced),
            failed=len(report.failed),
            halted=report.halted,
        )
        return report

    async def _submit_ticket(self, ticket: Ticket, report: SyncReport) -> bool:
        """Send one queued ticket. Returns False when the pass must stop."""
        ticket_id = ticket.ticket_id
        self._check_write(await self._store.record_attempt(ticket_id), "record_attempt", ticket_id)
        report.attempted += 1

        try:
            confirmation = await self._gateway.post_sale(ticket.payload, ticket_id)
        except NetworkFailureError as e:
            result = await self._store.mark_error(ticket_id, e.message)
            self._check_write(result, "mark_error", ticket_id)
            report.failed.append(ticket_id)
            return False
        except ServerRejectionError as e:
            message = e.body.strip() or DEFAULT_SYNC_ERROR
            result = await self._store.mark_error(ticket_id, message)
            self._check_write(result, "mark_error", ticket_id)
            report.failed.append(ticket_id)
            logger.warning(
                "ticket_sync_rejected",
                ticket_id=ticket_id,
                status_code=e.status_code,
            )
            return True
        except Exception as e:
            logger.exception("ticket_sync_failed_unexpected", ticket_id=ticket_id)
            result = await self._store.mark_error(ticket_id, str(e) or type(e).__name__)
            self._check_write(result, "mark_error", ticket_id)
            report.failed.append(ticket_id)
            return True

        invoice = confirmation.invoice
        result = await self._store.mark_synced(ticket_id, invoice.invoice_no, invoice.id)
        self._check_write(result, "mark_synced", ticket_id)
        report.synced.append(ticket_id)
        logger.info("ticket_synced", ticket_id=ticket_id, invoice_no=invoice.invoice_no)
        return True

    def _skipped(self, trigger: str, reason: str) -> SyncReport:
        logger.info("sync_pass_skipped", trigger=trigger, reason=reason)
        now = self._clock()
        return SyncReport(
            trigger=trigger,
            skipped=True,
            reason=reason,
            started_at=now,
            finished_at=now,
        )

    def _check_write(self, result: WriteResult, operation: str, ticket_id: str) -> None:
        """Escalate a failed queue write; never raise into the sale flow."""
        if result.ok or result.error is None:
            return
        logger.error(
            "ticket_store_write_failed",
            operation=operation,
            ticket_id=ticket_id,
            error=result.error.message,
            code=result.error.code,
        )
        if self._alert_sink is not None:
            self._alert_sink(result.error)
