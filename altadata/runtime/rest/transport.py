"""REST transport used by the data API client."""

from __future__ import annotations

from ...config import ACCEPT_HEADER, DEFAULT_TIMEOUT
from ...utils.http import HTTPClient


class RESTTransport:
    """Issues one GET per request with the fixed JSON accept header.

    The body is returned untouched; decoding belongs to RecordDecoder.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._http = HTTPClient(timeout=timeout)

    async def get(self, url: str) -> str:
        return await self._http.get_text(url, headers=dict(ACCEPT_HEADER))

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> RESTTransport:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
