"""AltaDataClient facade for the AltaData data API.

The client owns the API key, the base URLs and the REST transport. It hands
out Query values, serializes them into page URLs and delegates the page loop
to PaginatedFetcher.

Architecture:
    This module implements the Facade pattern over three collaborators:
    - Query: what to fetch (built by the caller through ``get_data``)
    - PaginatedFetcher: how pages are walked, decoded and truncated
    - RESTTransport: how a single page is requested

Design Decisions:
    - Transport injection allows testing without the network
    - Context manager pattern ensures the HTTP session is closed
    - The client keeps no per-fetch state; concurrent fetches are independent

See Also:
    - Query: The immutable request model
    - PaginatedFetcher: The pagination state machine
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

from ..config import DATA_API_URL, DEFAULT_TIMEOUT, SUBSCRIPTION_API_URL
from ..core.query import Query, query
from ..runtime.decoder import RecordDecoder
from ..runtime.pagination import FetchResult, PaginatedFetcher
from ..runtime.rest import RESTTransport

logger = logging.getLogger(__name__)


class AltaDataClient:
    """Entry point for retrieving AltaData products.

    Example:
        >>> async with AltaDataClient(api_key) as client:
        ...     q = (
        ...         client.get_data("co_10_jhucs_03", limit=50)
        ...         .sort_by("reported_date", "desc")
        ...         .filter_eq("province_state", "Alabama")
        ...         .select_columns(["reported_date", "province_state", "confirmed"])
        ...     )
        ...     rows = await client.fetch(q)
    """

    def __init__(
        self,
        api_key: str,
        *,
        data_api_url: str = DATA_API_URL,
        subscription_api_url: str = SUBSCRIPTION_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: RESTTransport | None = None,
        fetcher: PaginatedFetcher | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: AltaData API key
            data_api_url: Data API base URL, ending with ``/``
            subscription_api_url: Subscription listing endpoint
            timeout: Total timeout per HTTP request in seconds
            transport: Optional transport (created and owned if not provided)
            fetcher: Optional PaginatedFetcher (default: a fresh one)
        """
        if not api_key:
            raise ValueError("api_key is required")
        self._api_key = api_key
        self.data_api_url = data_api_url
        self.subscription_api_url = subscription_api_url
        self._owns_transport = transport is None
        self._transport = transport or RESTTransport(timeout=timeout)
        self._decoder = RecordDecoder()
        self._fetcher = fetcher or PaginatedFetcher(self._decoder)
        self._closed = False

    @property
    def api_key(self) -> str:
        return self._api_key

    # --- Data retrieval -----------------------------------------------------

    def get_data(self, product_code: str, limit: int | None = None) -> Query:
        """Start a query for a data product.

        Args:
            product_code: Data product code
            limit: Number of rows to retrieve, or None for all of them

        Returns:
            Query to refine with sort, filter and select calls

        Raises:
            InvalidArgumentError: If limit is given and less than 1
        """
        return query(product_code, limit)

    def page_url(self, q: Query, page: int) -> str:
        """Request URL for one page of ``q``."""
        return q.build_url(self.data_api_url, self._api_key, page)

    async def fetch_result(
        self,
        q: Query,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> FetchResult:
        """Fetch a query and return records with pagination details."""

        async def fetch_page(page: int) -> str:
            return await self._transport.get(self.page_url(q, page))

        return await self._fetcher.execute(q, fetch_page, cancel_event=cancel_event)

    async def fetch(
        self,
        q: Query,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch a query with the configuration given before.

        Args:
            q: Query returned by ``get_data`` and its chained calls
            cancel_event: When set, the fetch aborts before its next page request

        Returns:
            Records in API order, at most ``q.limit`` of them when bounded

        Raises:
            TransportError: If any page request fails
            MalformedPageError: If any page cannot be decoded
            FetchCancelledError: If cancel_event is set mid-fetch
        """
        result = await self.fetch_result(q, cancel_event=cancel_event)
        return result.records

    # --- Single-page reads --------------------------------------------------

    async def list_subscription(self) -> list[dict[str, Any]]:
        """Retrieve the caller's subscription info."""
        url = f"{self.subscription_api_url}?api_key={quote(self._api_key, safe='')}"
        body = await self._transport.get(url)
        subscriptions = self._decoder.decode_body(body)
        logger.debug("subscriptions_listed", extra={"count": len(subscriptions)})
        return subscriptions

    async def get_header(self, product_code: str) -> set[str]:
        """Column names of a product, taken from the first record of page 1.

        Returns an empty set when the product has no rows.
        """
        body = await self._transport.get(self.page_url(query(product_code), 1))
        records = self._decoder.decode_body(body)
        if not records:
            return set()
        return set(records[0].keys())

    # --- Lifecycle ----------------------------------------------------------

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._closed:
            return
        if self._owns_transport:
            await self._transport.close()
        self._closed = True

    async def __aenter__(self) -> AltaDataClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
