"""Shared listener bookkeeping for connectivity probes."""

from collections.abc import Callable

from possync.config import get_logger
from possync.core.interfaces import ConnectivityListener, IConnectivityProbe

logger = get_logger(__name__)


class BaseConnectivityProbe(IConnectivityProbe):
    """Holds the current state and notifies listeners on changes only."""

    def __init__(self, initial: bool = True):
        self._online = initial
        self._listeners: list[ConnectivityListener] = []

    def is_online(self) -> bool:
        return self._online

    def subscribe(self, listener: ConnectivityListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _update(self, online: bool) -> bool:
        """Record a new state. Returns True when it was a transition."""
        if online == self._online:
            return False
        self._online = online
        logger.info("connectivity_transition", online=online)
        for listener in list(self._listeners):
            try:
                listener(online)
            except Exception as e:
                logger.exception("connectivity_listener_failed", error=str(e))
        return True
