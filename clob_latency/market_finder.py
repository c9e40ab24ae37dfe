"""
Liquid market finder.

Walks the most-traded open events on Gamma and returns the first one whose
leading outcome token the CLOB accepts. Candidates are probed before they are
committed to, since Gamma lists tokens the CLOB does not always serve.
"""

import logging
from typing import Any, Optional

import orjson

from .clob_client import ClobAPIError, ClobClient
from .errors import DiscoveryError
from .gamma_client import GammaAPIError, GammaClient
from .types import EncodedTokenIds, RawTokenIds, Target, TokenIdsField

logger = logging.getLogger(__name__)


def classify_token_ids(raw: Any) -> Optional[TokenIdsField]:
    """Tag a raw clobTokenIds value by its wire shape, or None if neither."""
    if isinstance(raw, str):
        return EncodedTokenIds(raw)
    if isinstance(raw, list):
        return RawTokenIds(raw)
    return None


def parse_token_ids(raw: Any) -> Optional[list[str]]:
    """
    Normalize clobTokenIds to a list of token ID strings.

    Gamma returns the field either as a JSON array or as a string holding a
    JSON array, e.g. '["123", "456"]'.

    Returns:
        Non-empty list of token IDs, or None when the value is unusable
    """
    field = classify_token_ids(raw)

    if isinstance(field, EncodedTokenIds):
        try:
            values = orjson.loads(field.text)
        except orjson.JSONDecodeError:
            return None
    elif isinstance(field, RawTokenIds):
        values = field.values
    else:
        return None

    if not isinstance(values, list) or not values:
        return None
    return [str(v) for v in values]


class LiquidMarketFinder:
    """
    Finds a liquid market the CLOB will serve.

    Strategy:
    1. Fetch top open events by 24h volume
    2. Take the first market of each event and its first outcome token
    3. Probe the CLOB price endpoint; the first 200 wins
    """

    def __init__(self, gamma: GammaClient, clob: ClobClient, limit: int = 10):
        """
        Initialize the market finder.

        Args:
            gamma: Gamma API client
            clob: CLOB client used for probing
            limit: Number of events to consider
        """
        self._gamma = gamma
        self._clob = clob
        self._limit = limit

    async def find_valid_market(self) -> Target:
        """
        Find the first candidate the CLOB accepts.

        Raises:
            DiscoveryError: if listings cannot be fetched or no candidate
                passes its probe
        """
        logger.info("Discovery: fetching top active markets")

        try:
            events = await self._gamma.get_top_events(limit=self._limit)
        except GammaAPIError as e:
            raise DiscoveryError(str(e)) from e

        for event in events:
            if not isinstance(event, dict):
                continue
            markets = event.get("markets")
            if not isinstance(markets, list) or not markets:
                continue

            market = markets[0]
            if not isinstance(market, dict):
                continue
            token_ids = parse_token_ids(market.get("clobTokenIds"))
            if token_ids is None:
                logger.warning(f"Failed to parse clobTokenIds for {market.get('slug')}")
                continue

            token_id = token_ids[0]
            question = market.get("question") or ""
            logger.info(f"[CANDIDATE] {question}")
            logger.info(f"           ID: {token_id[:15]}...")

            try:
                status = await self._clob.probe_price(token_id)
            except ClobAPIError as e:
                logger.warning(f"           Probe error ({e}). Trying next...")
                continue

            if status == 200:
                logger.info("[TARGET LOCKED] Validated on CLOB.")
                return Target(token_id=token_id, slug=event.get("slug") or "", question=question)

            logger.info(f"           Probe Failed ({status}). Trying next...")

        raise DiscoveryError("Could not find any market that responds to CLOB probes.")
