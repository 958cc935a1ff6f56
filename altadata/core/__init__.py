"""Core components."""

from .enums import FilterOperator, SortDirection
from .exceptions import (
    DataError,
    FetchCancelledError,
    InvalidArgumentError,
    MalformedPageError,
    TransportError,
)
from .query import FilterCondition, Query, QueryBuilder, SortSpec, query

__all__ = [
    "FilterOperator",
    "SortDirection",
    "DataError",
    "InvalidArgumentError",
    "TransportError",
    "MalformedPageError",
    "FetchCancelledError",
    "FilterCondition",
    "SortSpec",
    "Query",
    "QueryBuilder",
    "query",
]
