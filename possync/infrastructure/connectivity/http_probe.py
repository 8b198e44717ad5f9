"""
Connectivity probe that polls the server health endpoint.

Any HTTP answer below 500 means the server is reachable; transport errors
and 5xx answers mean offline.
"""

import asyncio
import contextlib

import httpx

from possync.config import get_logger, get_settings
from possync.config.settings import ConnectivitySettings, ServerSettings
from possync.infrastructure.connectivity.base import BaseConnectivityProbe

logger = get_logger(__name__)


class HttpConnectivityProbe(BaseConnectivityProbe):
    """Background poller reporting online/offline transitions."""

    def __init__(
        self,
        server: ServerSettings | None = None,
        settings: ConnectivitySettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        server = server or get_settings().server
        settings = settings or get_settings().connectivity
        super().__init__(initial=settings.assume_online)
        self.url = f"{server.base_url.rstrip('/')}/{settings.health_path.lstrip('/')}"
        self.poll_interval = settings.poll_interval
        self.timeout = settings.timeout
        self._transport = transport
        self._task: asyncio.Task | None = None

    async def check_once(self) -> bool:
        """Probe the server once and publish the result."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.url)
            online = response.status_code < 500
        except httpx.HTTPError as e:
            logger.debug("connectivity_probe_failed", url=self.url, error=str(e))
            online = False
        self._update(online)
        return online

    async def _poll(self) -> None:
        while True:
            await self.check_once()
            await asyncio.sleep(self.poll_interval)

    def start(self) -> None:
        """Start polling on the running event loop."""
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.get_running_loop().create_task(self._poll())
        logger.info("connectivity_probe_started", url=self.url, interval=self.poll_interval)

    async def stop(self) -> None:
        """Stop polling."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("connectivity_probe_stopped")
