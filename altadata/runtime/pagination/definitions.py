"""Pagination result structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class FetchResult:
    """Result of a paginated fetch.

    Attributes:
        records: Records in page order, truncated to the query limit
        pages_fetched: Number of page requests issued, including the empty
            page that ended pagination
        total_records: Records collected before truncation
        truncated: Whether records beyond the limit were dropped
    """

    records: list[dict[str, Any]] = field(default_factory=list)
    pages_fetched: int = 0
    total_records: int = 0
    truncated: bool = False
