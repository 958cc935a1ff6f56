"""Custom exception hierarchy."""

from __future__ import annotations


class DataError(Exception):
    """Base exception for all library errors."""

    pass


class InvalidArgumentError(DataError, ValueError):
    """A query parameter failed local validation.

    Raised synchronously while a query is being built (non-positive limit,
    unknown sort direction, empty value list). Never reaches the network layer.
    """

    pass


class TransportError(DataError):
    """An HTTP exchange could not be completed.

    Covers connection failures, timeouts and non-success status codes. The
    underlying exception, if any, is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class MalformedPageError(DataError):
    """A page body could not be decoded into well-formed records."""

    def __init__(self, message: str, fragment: str, offset: int | None = None) -> None:
        super().__init__(message)
        self.fragment = fragment
        self.offset = offset


class FetchCancelledError(DataError):
    """A paginated fetch was cancelled before its next page request."""

    def __init__(self, message: str, pages_fetched: int = 0) -> None:
        super().__init__(message)
        self.pages_fetched = pages_fetched
