"""Offline-resilient point-of-sale sale submission."""

__version__ = "1.0.0"
