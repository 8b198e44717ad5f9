"""Infrastructure layer implementations."""

from possync.infrastructure import connectivity, http, pdf, storage

__all__ = ["storage", "http", "connectivity", "pdf"]
