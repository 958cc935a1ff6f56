"""Runtime: page decoding, pagination and REST transport."""

from .decoder import Record, RecordDecoder, strip_array
from .pagination import FetchResult, PaginatedFetcher
from .rest import RESTTransport

__all__ = [
    "Record",
    "RecordDecoder",
    "strip_array",
    "FetchResult",
    "PaginatedFetcher",
    "RESTTransport",
]
