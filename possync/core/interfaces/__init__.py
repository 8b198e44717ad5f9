"""Core interfaces (ports) for dependency injection."""

from possync.core.interfaces.connectivity import ConnectivityListener, IConnectivityProbe
from possync.core.interfaces.gateway import ISaleGateway
from possync.core.interfaces.storage import IKeyValueStore, ITicketStore, WriteResult

__all__ = [
    # Storage interfaces
    "IKeyValueStore",
    "ITicketStore",
    "WriteResult",
    # Server interfaces
    "ISaleGateway",
    # Connectivity interfaces
    "IConnectivityProbe",
    "ConnectivityListener",
]
