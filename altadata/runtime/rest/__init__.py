"""REST runtime abstractions."""

from .transport import RESTTransport

__all__ = ["RESTTransport"]
