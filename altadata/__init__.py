"""AltaData - Client for the AltaData paginated tabular-data API."""

from .api import AltaDataClient
from .config import DATA_API_URL, SUBSCRIPTION_API_URL, UNBOUNDED
from .core import (
    DataError,
    FetchCancelledError,
    FilterCondition,
    FilterOperator,
    InvalidArgumentError,
    MalformedPageError,
    Query,
    QueryBuilder,
    SortDirection,
    SortSpec,
    TransportError,
    query,
)
from .runtime import FetchResult, PaginatedFetcher, RecordDecoder, RESTTransport
from .utils import HTTPClient

__version__ = "0.1.0"

__all__ = [
    # Client
    "AltaDataClient",
    # Query model
    "Query",
    "QueryBuilder",
    "query",
    "FilterCondition",
    "FilterOperator",
    "SortDirection",
    "SortSpec",
    # Runtime
    "RecordDecoder",
    "PaginatedFetcher",
    "FetchResult",
    "RESTTransport",
    "HTTPClient",
    # Exceptions
    "DataError",
    "InvalidArgumentError",
    "TransportError",
    "MalformedPageError",
    "FetchCancelledError",
    # Constants
    "DATA_API_URL",
    "SUBSCRIPTION_API_URL",
    "UNBOUNDED",
]
