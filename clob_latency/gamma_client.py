"""
Gamma API client for market discovery.

Only the listings query used to find liquid markets is needed here.
"""

import asyncio
import logging
from typing import Mapping, Optional

import aiohttp
import orjson

logger = logging.getLogger(__name__)


class GammaAPIError(Exception):
    """Error from Gamma API."""
    pass


class GammaClient:
    """
    Client for the Polymarket Gamma API.

    Shares the caller's session; the given headers are sent on every request.
    """

    DEFAULT_BASE_URL = "https://gamma-api.polymarket.com"

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str = DEFAULT_BASE_URL,
        headers: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize the Gamma client.

        Args:
            session: HTTP session owned by the caller
            base_url: Gamma API base URL
            headers: Headers sent with every request
        """
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._headers = dict(headers) if headers else None

    async def get_top_events(self, limit: int = 10) -> list[dict]:
        """
        Get open events sorted by 24h volume, most liquid first.

        Args:
            limit: Maximum events to return

        Returns:
            List of event dicts

        Raises:
            GammaAPIError: on non-2xx status, transport failure, or a body
                that is not a non-empty JSON array
        """
        url = f"{self._base_url}/events"
        params = {
            "limit": limit,
            "closed": "false",
            "order": "volume24hr",
            "ascending": "false",
        }

        try:
            async with self._session.get(url, params=params, headers=self._headers) as resp:
                if not 200 <= resp.status < 300:
                    raise GammaAPIError(f"Gamma API returned {resp.status}")
                body = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise GammaAPIError(f"Get events request failed: {e}")

        try:
            events = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise GammaAPIError(f"Gamma API returned malformed JSON: {e}")

        if not isinstance(events, list) or not events:
            raise GammaAPIError("No events found")

        logger.debug(f"Gamma returned {len(events)} events")
        return events
