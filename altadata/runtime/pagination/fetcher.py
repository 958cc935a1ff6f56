"""Paginated fetch engine.

This module provides the PaginatedFetcher class that walks the API's page
cursor for a Query, decodes every page, enforces the record limit and
returns the aggregated records.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from time import perf_counter
from typing import Any

from ...core.exceptions import FetchCancelledError
from ...core.query import Query
from ..decoder import RecordDecoder
from .definitions import FetchResult
from .telemetry import log_fetch_complete, log_fetch_started, log_page_error, log_page_fetched

PageFetch = Callable[[int], Awaitable[str]]


class PaginatedFetcher:
    """Drives the page loop for one query at a time.

    Pages are requested strictly one after another starting at page 1. An
    empty page ends pagination. When the query is bounded, a running counter
    that starts at 1 is increased by each page's record count, and paging
    stops as soon as that counter exceeds the limit. The aggregate is then
    cut down to exactly ``limit`` records.

    The fetcher holds no per-fetch state, so one instance can serve
    concurrent fetches.
    """

    def __init__(self, decoder: RecordDecoder | None = None, *, max_pages: int | None = None) -> None:
        """Initialize the fetcher.

        Args:
            decoder: Page decoder (default: a fresh RecordDecoder)
            max_pages: Optional hard cap on page requests per fetch
        """
        if max_pages is not None and max_pages < 1:
            raise ValueError("max_pages must be greater than 0")
        self._decoder = decoder or RecordDecoder()
        self._max_pages = max_pages

    async def execute(
        self,
        query: Query,
        fetch_page: PageFetch,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> FetchResult:
        """Fetch every page the query needs and aggregate the records.

        Args:
            query: Query to materialize
            fetch_page: Async function that takes a one-based page number and
                returns the raw response body for that page
            cancel_event: When set, the fetch aborts before its next page request

        Returns:
            FetchResult with the limit-truncated records and page counts

        Raises:
            TransportError: If a page request fails
            MalformedPageError: If a page body cannot be decoded
            FetchCancelledError: If cancel_event is set before a page request
        """
        limit = query.limit if query.is_bounded else None
        log_fetch_started(product_code=query.product_code, limit=limit)

        started = perf_counter()
        records: list[dict[str, Any]] = []
        page = 1
        pages_fetched = 0
        # Starts at 1, not 0: paging stops once collected + 1 exceeds the limit
        total_size = 1

        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise FetchCancelledError(
                    f"fetch of {query.product_code} cancelled before page {page}",
                    pages_fetched=pages_fetched,
                )
            if self._max_pages is not None and pages_fetched >= self._max_pages:
                break

            page_start = perf_counter()
            try:
                body = await fetch_page(page)
                page_records = self._decoder.decode_body(body)
            except Exception as e:
                log_page_error(
                    product_code=query.product_code,
                    page=page,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise
            pages_fetched += 1

            if not page_records:
                break

            records.extend(page_records)
            log_page_fetched(
                product_code=query.product_code,
                page=page,
                records=len(page_records),
                total_records=len(records),
                latency_ms=(perf_counter() - page_start) * 1000.0,
            )

            if limit is not None:
                total_size += len(page_records)
                if total_size > limit:
                    break

            page += 1

        result = FetchResult(
            records=records[:limit] if limit is not None else records,
            pages_fetched=pages_fetched,
            total_records=len(records),
            truncated=limit is not None and len(records) > limit,
        )

        log_fetch_complete(
            product_code=query.product_code,
            result=result,
            total_latency_ms=(perf_counter() - started) * 1000.0,
        )
        return result

    async def fetch(
        self,
        query: Query,
        fetch_page: PageFetch,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch and return only the records (see ``execute``)."""
        result = await self.execute(query, fetch_page, cancel_event=cancel_event)
        return result.records
