"""Connectivity probe driven by the host application."""

from possync.infrastructure.connectivity.base import BaseConnectivityProbe


class ManualConnectivityProbe(BaseConnectivityProbe):
    """
    State is pushed in from outside.

    Used when the register shell already knows its network state, and in
    tests to simulate outages.
    """

    def set_online(self, online: bool) -> bool:
        """Set the state. Returns True when listeners were notified."""
        return self._update(online)
