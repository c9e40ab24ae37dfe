"""
CLOB public market-data endpoints.

Builds the book / price / midpoint URLs for a token and probes the price
endpoint to check that the CLOB accepts a token ID.
"""

import asyncio
import logging
from typing import Mapping, Optional
from urllib.parse import urlencode

import aiohttp

logger = logging.getLogger(__name__)


class ClobAPIError(Exception):
    """Transport failure talking to the CLOB."""
    pass


class ClobClient:
    """Read-only client for the CLOB market-data endpoints."""

    DEFAULT_BASE_URL = "https://clob.polymarket.com"

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str = DEFAULT_BASE_URL,
        headers: Optional[Mapping[str, str]] = None,
    ):
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._headers = dict(headers) if headers else None

    def book_url(self, token_id: str) -> str:
        return f"{self._base_url}/book?{urlencode({'token_id': token_id})}"

    def price_url(self, token_id: str, side: str = "buy") -> str:
        return f"{self._base_url}/price?{urlencode({'token_id': token_id, 'side': side})}"

    def midpoint_url(self, token_id: str) -> str:
        return f"{self._base_url}/midpoint?{urlencode({'token_id': token_id})}"

    async def probe_price(self, token_id: str) -> int:
        """
        Request the buy-side price for a token.

        Only the status matters; the body is drained and discarded.

        Returns:
            HTTP status code (200 means the CLOB accepts the token)

        Raises:
            ClobAPIError: on transport failure
        """
        try:
            async with self._session.get(self.price_url(token_id), headers=self._headers) as resp:
                await resp.read()
                return resp.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ClobAPIError(f"Price probe failed: {e}")
