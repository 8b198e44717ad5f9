"""
HTTP client for the central sale endpoint.

Every request carries the ticket ID as its Idempotency-Key so a retried
submission can never create a second invoice upstream.
"""

import asyncio
import time
from collections.abc import Callable
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from possync.config import get_logger, get_settings
from possync.config.settings import ServerSettings
from possync.core.entities.sale import SaleConfirmation
from possync.core.exceptions import (
    InvalidServerResponseError,
    NetworkFailureError,
    ServerRejectionError,
)
from possync.core.interfaces import ISaleGateway

logger = get_logger(__name__)

TokenProvider = Callable[[], str | None]


class HttpSaleGateway(ISaleGateway):
    """
    Posts sales with httpx.

    Transport problems (DNS, refused connection, timeouts) surface as
    NetworkFailureError; any response outside 2xx as ServerRejectionError.
    """

    def __init__(
        self,
        settings: ServerSettings | None = None,
        token_provider: TokenProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = settings or get_settings().server
        self.url = settings.sale_url
        self.timeout = settings.timeout
        self._token_provider = token_provider or (lambda: settings.api_token)
        self._transport = transport

    def _headers(self, ticket_id: str) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Idempotency-Key": ticket_id,
        }
        token = self._token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _send(self, body: dict[str, Any], ticket_id: str) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.post(self.url, json=body, headers=self._headers(ticket_id))

    async def post_sale(self, payload: dict[str, Any], ticket_id: str) -> SaleConfirmation:
        """Submit a sale and return the server confirmation."""
        body = {**payload, "ticketId": ticket_id}
        start_time = time.time()

        try:
            # Hard deadline on top of httpx's per-phase timeouts
            response = await asyncio.wait_for(
                self._send(body, ticket_id), timeout=self.timeout + 1
            )
        except TimeoutError:
            raise NetworkFailureError(self.url, f"no response within {self.timeout}s")
        except httpx.TimeoutException as e:
            raise NetworkFailureError(self.url, f"timeout: {type(e).__name__}")
        except httpx.TransportError as e:
            raise NetworkFailureError(self.url, str(e) or type(e).__name__)
        except httpx.HTTPError as e:
            # e.g. a body that fails Content-Encoding decoding; retried like an outage
            raise NetworkFailureError(self.url, f"{type(e).__name__}: {e}")

        elapsed_ms = int((time.time() - start_time) * 1000)

        if not response.is_success:
            logger.warning(
                "sale_post_rejected",
                ticket_id=ticket_id,
                status=response.status_code,
                elapsed_ms=elapsed_ms,
            )
            raise ServerRejectionError(response.status_code, response.text, ticket_id)

        try:
            data = response.json()
        except ValueError:
            raise InvalidServerResponseError(
                response.status_code, response.text, "body is not JSON"
            )

        try:
            confirmation = SaleConfirmation.model_validate(data)
        except PydanticValidationError:
            raise InvalidServerResponseError(
                response.status_code,
                response.text,
                "missing invoice.invoice_no or invoice.id",
            )

        logger.info(
            "sale_posted",
            ticket_id=ticket_id,
            invoice_no=confirmation.invoice.invoice_no,
            elapsed_ms=elapsed_ms,
        )
        return confirmation
