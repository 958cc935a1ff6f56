"""High-level client API."""

from .client import AltaDataClient

__all__ = ["AltaDataClient"]
