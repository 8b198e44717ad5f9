"""
Network state watcher.

Drains the queue automatically whenever the device comes back online.
"""

import asyncio
from collections.abc import Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from possync.config import get_logger
from possync.core.interfaces import IConnectivityProbe
from possync.core.services.sale_submission import SaleSubmissionService, SyncReport

logger = get_logger(__name__)

SyncListener = Callable[[SyncReport], Awaitable[None]]


class NetworkWatcher:
    """
    Subscribes to connectivity transitions and triggers sync passes.

    Auto-sync runs fire-and-forget: failures are logged and the tickets
    simply stay pending for the next trigger. When a pass halts on a
    network failure while the probe still reports online, it is retried
    with exponential backoff up to max_attempts passes.
    """

    def __init__(
        self,
        connectivity: IConnectivityProbe,
        service: SaleSubmissionService,
        enabled: bool = True,
        max_attempts: int = 1,
        backoff_initial: float = 2.0,
        backoff_max: float = 60.0,
    ):
        self._connectivity = connectivity
        self._service = service
        self.enabled = enabled
        self._max_attempts = max(1, max_attempts)
        self._backoff_initial = backoff_initial
        self._backoff_max = backoff_max
        self._listeners: list[SyncListener] = []
        self._tasks: set[asyncio.Task] = set()
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def running(self) -> bool:
        return self._unsubscribe is not None

    def add_listener(self, listener: SyncListener) -> None:
        """Call listener with the report of every automatic pass."""
        self._listeners.append(listener)

    def start(self) -> None:
        """Begin watching connectivity transitions."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._connectivity.subscribe(self._on_transition)
        logger.info("network_watcher_started", online=self._connectivity.is_online())

    def stop(self) -> None:
        """Stop watching. Passes already running are left to finish."""
        if self._unsubscribe is None:
            return
        self._unsubscribe()
        self._unsubscribe = None
        logger.info("network_watcher_stopped")

    async def wait_idle(self) -> None:
        """Wait until no automatic pass is running."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Stop watching and cancel running passes."""
        self.stop()
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def trigger(self, trigger: str = "online") -> asyncio.Task | None:
        """Schedule an automatic pass now, e.g. at startup with a backlog."""
        if not self.enabled:
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("auto_sync_skipped_no_event_loop", trigger=trigger)
            return None

        task = loop.create_task(self._auto_sync(trigger))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _on_transition(self, online: bool) -> None:
        logger.info("connectivity_changed", online=online)
        if online:
            self.trigger("online")

    async def _auto_sync(self, trigger: str) -> None:
        try:
            report = await self._sync_with_backoff(trigger)
        except Exception as e:
            logger.exception("auto_sync_failed", error=str(e), error_type=type(e).__name__)
            return

        for listener in list(self._listeners):
            try:
                await listener(report)
            except Exception as e:
                logger.exception("auto_sync_listener_failed", error=str(e))

    async def _sync_with_backoff(self, trigger: str) -> SyncReport:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(
                multiplier=self._backoff_initial,
                min=self._backoff_initial,
                max=self._backoff_max,
            ),
            retry=retry_if_result(self._should_retry),
            before_sleep=self._log_retry,
            retry_error_callback=lambda state: state.outcome.result(),
        )
        return await retrying(self._service.sync_queued_sales, trigger=trigger)

    def _should_retry(self, report: SyncReport) -> bool:
        return report.halted and self._connectivity.is_online()

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "auto_sync_backoff",
            attempt=retry_state.attempt_number,
            sleep=retry_state.next_action.sleep if retry_state.next_action else None,
        )
