"""Abstract interface for the central sale server."""

from abc import ABC, abstractmethod
from typing import Any

from possync.core.entities.sale import SaleConfirmation


class ISaleGateway(ABC):
    """
    Client for the server's sale submission endpoint.

    Implementations: HttpSaleGateway
    """

    @abstractmethod
    async def post_sale(self, payload: dict[str, Any], ticket_id: str) -> SaleConfirmation:
        """
        Submit a sale using ticket_id as the idempotency key.

        Returns:
            SaleConfirmation with the server invoice

        Raises:
            NetworkFailureError: No response reached the terminal
            ServerRejectionError: The server answered with a non-success response
        """
        pass
