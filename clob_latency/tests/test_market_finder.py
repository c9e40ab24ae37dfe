"""Tests for market_finder.py - token ID parsing and liquid market discovery."""

import pytest
from unittest.mock import AsyncMock

from clob_latency.clob_client import ClobAPIError, ClobClient
from clob_latency.errors import DiscoveryError
from clob_latency.gamma_client import GammaAPIError, GammaClient
from clob_latency.market_finder import LiquidMarketFinder, classify_token_ids, parse_token_ids
from clob_latency.types import EncodedTokenIds, RawTokenIds, Target

from .conftest import make_event


class TestParseTokenIds:
    """Tests for the clobTokenIds normalization."""

    def test_classify_string(self):
        assert classify_token_ids('["a"]') == EncodedTokenIds('["a"]')

    def test_classify_list(self):
        assert classify_token_ids(["a"]) == RawTokenIds(["a"])

    def test_classify_other(self):
        assert classify_token_ids(None) is None
        assert classify_token_ids(12) is None

    def test_native_array(self):
        assert parse_token_ids(["yes_token", "no_token"]) == ["yes_token", "no_token"]

    def test_encoded_array(self):
        assert parse_token_ids('["abc123"]') == ["abc123"]

    def test_encoded_array_two_outcomes(self):
        assert parse_token_ids('["111", "222"]') == ["111", "222"]

    def test_malformed_string(self):
        assert parse_token_ids("not json") is None

    def test_encoded_non_array(self):
        assert parse_token_ids('"abc"') is None

    def test_empty(self):
        assert parse_token_ids([]) is None
        assert parse_token_ids("[]") is None

    def test_missing(self):
        assert parse_token_ids(None) is None


class TestLiquidMarketFinder:
    """Tests for LiquidMarketFinder with mocked clients."""

    @pytest.fixture
    def mock_gamma(self):
        return AsyncMock(spec=GammaClient)

    @pytest.fixture
    def mock_clob(self):
        return AsyncMock(spec=ClobClient)

    @pytest.fixture
    def finder(self, mock_gamma, mock_clob):
        return LiquidMarketFinder(mock_gamma, mock_clob, limit=10)

    @pytest.mark.asyncio
    async def test_encoded_string_is_parsed_and_probed(self, finder, mock_gamma, mock_clob):
        """A JSON-encoded id string is decoded before probing."""
        mock_gamma.get_top_events.return_value = [make_event("fed-decision", '["abc123"]', "Fed cut?")]
        mock_clob.probe_price.return_value = 200

        target = await finder.find_valid_market()

        assert target == Target(token_id="abc123", slug="fed-decision", question="Fed cut?")
        mock_clob.probe_price.assert_awaited_once_with("abc123")
        mock_gamma.get_top_events.assert_awaited_once_with(limit=10)

    @pytest.mark.asyncio
    async def test_malformed_ids_skipped(self, finder, mock_gamma, mock_clob):
        mock_gamma.get_top_events.return_value = [
            make_event("broken", "not json"),
            make_event("good", ["tok-good", "tok-other"]),
        ]
        mock_clob.probe_price.return_value = 200

        target = await finder.find_valid_market()

        assert target.slug == "good"
        assert target.token_id == "tok-good"
        mock_clob.probe_price.assert_awaited_once_with("tok-good")

    @pytest.mark.asyncio
    async def test_events_without_markets_skipped(self, finder, mock_gamma, mock_clob):
        mock_gamma.get_top_events.return_value = [
            {"slug": "empty", "markets": []},
            {"slug": "missing"},
            make_event("good", ["tok"]),
        ]
        mock_clob.probe_price.return_value = 200

        target = await finder.find_valid_market()
        assert target.slug == "good"

    @pytest.mark.asyncio
    async def test_non_list_markets_skipped(self, finder, mock_gamma, mock_clob):
        """A markets field of the wrong type is skipped like an empty one."""
        mock_gamma.get_top_events.return_value = [
            {"slug": "dict-markets", "markets": {"k": 1}},
            {"slug": "string-markets", "markets": "0x1"},
            {"slug": "b", "markets": [{"clobTokenIds": ["t"]}]},
        ]
        mock_clob.probe_price.return_value = 200

        target = await finder.find_valid_market()

        assert target.slug == "b"
        assert target.token_id == "t"
        mock_clob.probe_price.assert_awaited_once_with("t")

    @pytest.mark.asyncio
    async def test_null_question_and_slug_become_empty(self, finder, mock_gamma, mock_clob):
        mock_gamma.get_top_events.return_value = [
            {"slug": None, "markets": [{"question": None, "clobTokenIds": ["t"]}]},
        ]
        mock_clob.probe_price.return_value = 200

        target = await finder.find_valid_market()

        assert target == Target(token_id="t", slug="", question="")

    @pytest.mark.asyncio
    async def test_failed_probe_moves_on(self, finder, mock_gamma, mock_clob):
        """Candidates are probed in order until one returns 200."""
        mock_gamma.get_top_events.return_value = [
            make_event("first", ["tok-1"]),
            make_event("second", ["tok-2"]),
            make_event("third", ["tok-3"]),
        ]
        mock_clob.probe_price.side_effect = [404, 200, 200]

        target = await finder.find_valid_market()

        assert target.token_id == "tok-2"
        assert mock_clob.probe_price.await_count == 2

    @pytest.mark.asyncio
    async def test_probe_network_error_moves_on(self, finder, mock_gamma, mock_clob):
        mock_gamma.get_top_events.return_value = [
            make_event("first", ["tok-1"]),
            make_event("second", ["tok-2"]),
        ]
        mock_clob.probe_price.side_effect = [ClobAPIError("reset"), 200]

        target = await finder.find_valid_market()
        assert target.token_id == "tok-2"

    @pytest.mark.asyncio
    async def test_all_probes_fail(self, finder, mock_gamma, mock_clob):
        mock_gamma.get_top_events.return_value = [make_event("a", ["1"]), make_event("b", ["2"])]
        mock_clob.probe_price.return_value = 404

        with pytest.raises(DiscoveryError, match="Could not find any market"):
            await finder.find_valid_market()

    @pytest.mark.asyncio
    async def test_listings_failure(self, finder, mock_gamma, mock_clob):
        mock_gamma.get_top_events.side_effect = GammaAPIError("Gamma API returned 502")

        with pytest.raises(DiscoveryError, match="502"):
            await finder.find_valid_market()
        mock_clob.probe_price.assert_not_awaited()


class TestDiscoveryOverHttp:
    """Discovery against the local fake Gamma and CLOB."""

    @pytest.mark.asyncio
    async def test_listing_query_parameters(self, fake_api, session):
        fake_api.events = [make_event("liquid", '["tok-liquid"]')]
        fake_api.accepted_tokens = {"tok-liquid"}
        finder = LiquidMarketFinder(
            GammaClient(session, fake_api.base_url),
            ClobClient(session, fake_api.base_url),
        )

        target = await finder.find_valid_market()

        assert target.token_id == "tok-liquid"
        path, query = fake_api.calls[0]
        assert path == "/events"
        assert query == {"limit": "10", "closed": "false", "order": "volume24hr", "ascending": "false"}
        assert fake_api.calls[1] == ("/price", {"token_id": "tok-liquid", "side": "buy"})

    @pytest.mark.asyncio
    async def test_listing_http_error(self, fake_api, session):
        fake_api.events_status = 503
        finder = LiquidMarketFinder(GammaClient(session, fake_api.base_url), ClobClient(session, fake_api.base_url))

        with pytest.raises(DiscoveryError, match="503"):
            await finder.find_valid_market()

    @pytest.mark.asyncio
    async def test_listing_malformed_body(self, fake_api, session):
        fake_api.events_body = b"<html>challenge</html>"
        finder = LiquidMarketFinder(GammaClient(session, fake_api.base_url), ClobClient(session, fake_api.base_url))

        with pytest.raises(DiscoveryError, match="malformed"):
            await finder.find_valid_market()

    @pytest.mark.asyncio
    async def test_listing_empty(self, fake_api, session):
        fake_api.events = []
        finder = LiquidMarketFinder(GammaClient(session, fake_api.base_url), ClobClient(session, fake_api.base_url))

        with pytest.raises(DiscoveryError, match="No events"):
            await finder.find_valid_market()
