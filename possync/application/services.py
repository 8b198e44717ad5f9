"""
Terminal wiring for dependency injection.

Builds the infrastructure implementations selected by settings and wires
them to the core services. The API and the CLI obtain everything through
get_terminal(); the core layer never touches this module.
"""

from dataclasses import dataclass

from possync.config import Settings, get_logger, get_settings
from possync.core.interfaces import IConnectivityProbe, IKeyValueStore, ISaleGateway
from possync.core.services import (
    NetworkWatcher,
    ReceiptRenderer,
    SaleSubmissionService,
    SyncStatusReporter,
)
from possync.infrastructure.connectivity import (
    HttpConnectivityProbe,
    ManualConnectivityProbe,
)
from possync.infrastructure.http import HttpSaleGateway
from possync.infrastructure.pdf import Fpdf2ReceiptRenderer
from possync.infrastructure.storage import (
    QueueDatabase,
    FileKeyValueStore,
    JsonTicketStore,
    MemoryKeyValueStore,
    SQLiteKeyValueStore,
)

logger = get_logger(__name__)


@dataclass
class Terminal:
    """All collaborators of one register, wired together."""

    settings: Settings
    kv_store: IKeyValueStore
    ticket_store: JsonTicketStore
    gateway: ISaleGateway
    connectivity: IConnectivityProbe
    service: SaleSubmissionService
    reporter: SyncStatusReporter
    watcher: NetworkWatcher
    receipts: ReceiptRenderer
    pdf_renderer: Fpdf2ReceiptRenderer
    database: QueueDatabase | None = None

    @property
    def manual_connectivity(self) -> ManualConnectivityProbe | None:
        """The probe when connectivity is pushed in by the host, else None."""
        if isinstance(self.connectivity, ManualConnectivityProbe):
            return self.connectivity
        return None

    async def start(self) -> None:
        """Open storage, start watching connectivity and take a first snapshot."""
        if isinstance(self.kv_store, SQLiteKeyValueStore):
            await self.kv_store.ensure_schema()
        self.watcher.start()
        if isinstance(self.connectivity, HttpConnectivityProbe):
            self.connectivity.start()
        snapshot = await self.reporter.refresh()
        if snapshot.online and snapshot.pending:
            # Queue left over from a previous run; no transition will fire for it
            self.watcher.trigger("startup")
        logger.info(
            "terminal_started",
            backend=self.settings.queue.backend,
            probe=self.settings.connectivity.probe,
            online=self.connectivity.is_online(),
        )

    async def stop(self) -> None:
        """Stop background work and release storage."""
        await self.watcher.aclose()
        if isinstance(self.connectivity, HttpConnectivityProbe):
            await self.connectivity.stop()
        if self.database is not None:
            await self.database.close()
        logger.info("terminal_stopped")


def _build_kv_store(settings: Settings) -> tuple[IKeyValueStore, QueueDatabase | None]:
    queue = settings.queue
    if queue.backend == "memory":
        return MemoryKeyValueStore(), None
    if queue.backend == "sqlite":
        database = QueueDatabase(queue.db_path, busy_timeout=queue.busy_timeout)
        return SQLiteKeyValueStore(database), database
    return FileKeyValueStore(queue.data_dir), None


def _build_connectivity(settings: Settings) -> IConnectivityProbe:
    if settings.connectivity.probe == "manual":
        return ManualConnectivityProbe(initial=settings.connectivity.assume_online)
    return HttpConnectivityProbe(settings.server, settings.connectivity)


def build_terminal(
    settings: Settings | None = None,
    gateway: ISaleGateway | None = None,
    connectivity: IConnectivityProbe | None = None,
    kv_store: IKeyValueStore | None = None,
) -> Terminal:
    """
    Wire a terminal from settings.

    Args:
        settings: Settings to use, defaults to the global settings
        gateway: Optional sale gateway override
        connectivity: Optional connectivity probe override
        kv_store: Optional key-value backend override

    Returns:
        A terminal that still has to be started
    """
    settings = settings or get_settings()

    database = None
    if kv_store is None:
        kv_store, database = _build_kv_store(settings)
    connectivity = connectivity or _build_connectivity(settings)
    gateway = gateway or HttpSaleGateway(settings.server)

    ticket_store = JsonTicketStore(kv_store, key=settings.queue.storage_key)
    service = SaleSubmissionService(ticket_store, gateway, connectivity)
    reporter = SyncStatusReporter(
        ticket_store,
        service,
        connectivity,
        alert_history=settings.sync.alert_history,
    )
    service.set_alert_sink(reporter.record_alert)

    watcher = NetworkWatcher(
        connectivity,
        service,
        enabled=settings.sync.auto_sync_on_reconnect,
        max_attempts=settings.sync.max_auto_attempts,
        backoff_initial=settings.sync.backoff_initial,
        backoff_max=settings.sync.backoff_max,
    )
    watcher.add_listener(reporter.on_auto_sync)

    return Terminal(
        settings=settings,
        kv_store=kv_store,
        ticket_store=ticket_store,
        gateway=gateway,
        connectivity=connectivity,
        service=service,
        reporter=reporter,
        watcher=watcher,
        receipts=ReceiptRenderer(settings.receipt),
        pdf_renderer=Fpdf2ReceiptRenderer(),
        database=database,
    )


# Singleton terminal instance
_terminal: Terminal | None = None


def get_terminal() -> Terminal:
    """Get or create the global terminal."""
    global _terminal
    if _terminal is None:
        _terminal = build_terminal()
    return _terminal


def set_terminal(terminal: Terminal | None) -> None:
    """Replace the global terminal (for testing)."""
    global _terminal
    _terminal = terminal


def reset_terminal() -> None:
    """Drop the global terminal so the next call rebuilds it."""
    set_terminal(None)
