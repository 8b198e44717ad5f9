"""HTTP clients for the central server."""

from possync.infrastructure.http.sale_gateway import HttpSaleGateway

__all__ = ["HttpSaleGateway"]
