"""Pagination layer for walking the data API's page cursor.

Architecture:
    - definitions.py: FetchResult returned by a fetch
    - fetcher.py: PaginatedFetcher, the page loop and limit enforcement
    - telemetry.py: Structured logging for pages and fetches
"""

from __future__ import annotations

from .definitions import FetchResult
from .fetcher import PageFetch, PaginatedFetcher

__all__ = [
    "FetchResult",
    "PageFetch",
    "PaginatedFetcher",
]
