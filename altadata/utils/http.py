"""HTTP client helper."""

from __future__ import annotations

import asyncio
import logging
import re

import aiohttp
from yarl import URL

from ..config import DEFAULT_TIMEOUT
from ..core.exceptions import TransportError

logger = logging.getLogger(__name__)

_API_KEY_RE = re.compile(r"(api_key=)[^&\s'\"]*")


def redact(text: str) -> str:
    """Mask every ``api_key=`` value in ``text``."""
    return _API_KEY_RE.sub(r"\1***", text)


class HTTPClient:
    """Async HTTP client wrapper returning response bodies as text."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def get_text(
        self,
        url: str,
        headers: dict[str, str] | None = None,
    ) -> str:
        """GET ``url`` and return the body text.

        The URL must already be percent-encoded; it is sent as-is so that
        escaped separators such as ``%2C`` reach the server unchanged.

        Raises:
            TransportError: On connection failure, timeout or a non-2xx status.
                The message and ``url`` never contain the API key.
        """
        safe_url = redact(url)
        try:
            async with self.session.get(URL(url, encoded=True), headers=headers) as response:
                if response.status >= 400:
                    raise TransportError(
                        f"HTTP {response.status} from data API",
                        status_code=response.status,
                        url=safe_url,
                    )
                return await response.text()
        except aiohttp.ClientError as e:
            raise TransportError(
                f"request failed: {type(e).__name__}: {redact(str(e))}", url=safe_url
            ) from e
        except asyncio.TimeoutError as e:
            raise TransportError("request timed out", url=safe_url) from e

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
