"""Abstract interface for the device connectivity signal."""

from abc import ABC, abstractmethod
from collections.abc import Callable

ConnectivityListener = Callable[[bool], None]


class IConnectivityProbe(ABC):
    """
    Current online state plus transition notifications.

    Implementations: ManualConnectivityProbe, HttpConnectivityProbe
    """

    @abstractmethod
    def is_online(self) -> bool:
        """Whether the device currently believes it can reach the server."""
        pass

    @abstractmethod
    def subscribe(self, listener: ConnectivityListener) -> Callable[[], None]:
        """
        Register a transition listener.

        The listener receives the new state on every online/offline change.

        Returns:
            Callable that removes the listener
        """
        pass
