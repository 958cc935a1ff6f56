"""Structured logging for paginated fetches.

Each helper logs a fixed event name with its fields in ``extra`` so log
handlers can pick them up without parsing the message.
"""

from __future__ import annotations

import logging

from ...utils.http import redact
from .definitions import FetchResult

logger = logging.getLogger(__name__)


def log_fetch_started(*, product_code: str, limit: int | None) -> None:
    """Log the start of a fetch.

    Args:
        product_code: Data product code
        limit: Record limit, or None when unbounded
    """
    logger.info(
        "fetch_started",
        extra={
            "product_code": product_code,
            "limit": limit,
        },
    )


def log_page_fetched(
    *,
    product_code: str,
    page: int,
    records: int,
    total_records: int,
    latency_ms: float | None = None,
) -> None:
    """Log one decoded page.

    Args:
        product_code: Data product code
        page: One-based page number
        records: Records decoded from this page
        total_records: Records accumulated so far, this page included
        latency_ms: Request plus decode latency in milliseconds
    """
    logger.info(
        "page_fetched",
        extra={
            "product_code": product_code,
            "page": page,
            "records": records,
            "total_records": total_records,
            "latency_ms": latency_ms,
        },
    )


def log_fetch_complete(
    *,
    product_code: str,
    result: FetchResult,
    total_latency_ms: float | None = None,
) -> None:
    logger.info(
        "fetch_complete",
        extra={
            "product_code": product_code,
            "pages_fetched": result.pages_fetched,
            "total_records": result.total_records,
            "returned_records": len(result.records),
            "truncated": result.truncated,
            "total_latency_ms": total_latency_ms,
        },
    )


def log_page_error(
    *,
    product_code: str,
    page: int,
    error_type: str,
    error_message: str,
) -> None:
    """Log a failed page request or decode.

    Args:
        product_code: Data product code
        page: One-based page number that failed
        error_type: Exception class name (e.g. "TransportError")
        error_message: Exception message, logged with any API key masked
    """
    logger.error(
        "page_error",
        extra={
            "product_code": product_code,
            "page": page,
            "error_type": error_type,
            "error_message": redact(error_message),
        },
    )
