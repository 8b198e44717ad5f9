"""Connectivity probe implementations."""

from possync.infrastructure.connectivity.base import BaseConnectivityProbe
from possync.infrastructure.connectivity.http_probe import HttpConnectivityProbe
from possync.infrastructure.connectivity.manual import ManualConnectivityProbe

__all__ = [
    "BaseConnectivityProbe",
    "HttpConnectivityProbe",
    "ManualConnectivityProbe",
]
