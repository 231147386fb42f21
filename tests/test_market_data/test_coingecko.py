"""Tests for the CoinGecko client and its response parsers.

All tests patch urllib.request.urlopen to avoid real API calls.
"""

import json
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from promx.config import MarketDataSettings
from promx.exceptions import FetchFailure, ParseFailure
from promx.market_data.coingecko import (
    CoinGeckoClient,
    parse_market_chart,
    parse_simple_prices,
)
from promx.models import RawSample

URLOPEN = "promx.market_data.coingecko.urllib.request.urlopen"

MOCK_MARKET_CHART = {
    "prices": [
        [1704067200000, 42283.58],
        [1704067500000, 42290.11],
        [1704067800000, 42270.0],
    ],
    "market_caps": [],
    "total_volumes": [],
}

MOCK_SIMPLE_PRICES = {
    "bitcoin": {"usd": 64210.5},
    "litecoin": {"usd": 62.66},
    "cardano": {"usd": 0.514},
    "tether": {"usd": 1.0},
}


def _response(payload: object) -> MagicMock:
    """Build a urlopen() return value usable as a context manager."""
    resp = MagicMock()
    resp.read.return_value = json.dumps(payload).encode()
    cm = MagicMock()
    cm.__enter__.return_value = resp
    return cm


@pytest.fixture
def settings() -> MarketDataSettings:
    return MarketDataSettings(base_url="http://provider.test/api/v3/", request_timeout=2.0)


@pytest.fixture
def client(settings: MarketDataSettings) -> CoinGeckoClient:
    return CoinGeckoClient(settings)


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


class TestParseMarketChart:
    """Tests for parse_market_chart."""

    def test_parses_pairs(self) -> None:
        samples = parse_market_chart(MOCK_MARKET_CHART)
        assert samples[0] == RawSample(1704067200000, 42283.58)
        assert len(samples) == 3

    def test_empty_prices(self) -> None:
        assert parse_market_chart({"prices": []}) == []

    def test_integer_prices_become_float(self) -> None:
        samples = parse_market_chart({"prices": [[1, 5]]})
        assert isinstance(samples[0].price, float)

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            [],
            {"error": "rate limited"},
            {"prices": "nope"},
            {"prices": [[1704067200000]]},
            {"prices": [["1704067200000", 1.0]]},
            {"prices": [[1704067200000, None]]},
            {"prices": [[True, 1.0]]},
            {"prices": [[-1, 1.0]]},
            {"prices": [[1704067200000, -0.5]]},
            {"prices": [[float("inf"), 1.0]]},
            {"prices": [[1704067200000, float("nan")]]},
            {"prices": [[1704067200000, float("inf")]]},
            {"prices": [[1704067200000, 10**400]]},
        ],
    )
    def test_malformed_payloads_raise(self, payload: object) -> None:
        with pytest.raises(ParseFailure):
            parse_market_chart(payload)


class TestParseSimplePrices:
    """Tests for parse_simple_prices."""

    def test_parses_all_coins(self) -> None:
        prices = parse_simple_prices(MOCK_SIMPLE_PRICES)
        assert prices == {"bitcoin": 64210.5, "litecoin": 62.66, "cardano": 0.514, "tether": 1.0}

    def test_missing_coin_raises(self) -> None:
        payload = {k: v for k, v in MOCK_SIMPLE_PRICES.items() if k != "tether"}
        with pytest.raises(ParseFailure, match="tether"):
            parse_simple_prices(payload)

    def test_non_finite_price_raises(self) -> None:
        payload = dict(MOCK_SIMPLE_PRICES, bitcoin={"usd": float("nan")})
        with pytest.raises(ParseFailure, match="bitcoin"):
            parse_simple_prices(payload)

    def test_non_numeric_price_raises(self) -> None:
        payload = dict(MOCK_SIMPLE_PRICES, cardano={"usd": "0.5"})
        with pytest.raises(ParseFailure):
            parse_simple_prices(payload)

    def test_not_an_object_raises(self) -> None:
        with pytest.raises(ParseFailure):
            parse_simple_prices(["bitcoin"])


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class TestCoinGeckoClient:
    """Tests for CoinGeckoClient request building and error mapping."""

    def test_fetch_price_history_builds_url(self, client: CoinGeckoClient) -> None:
        with patch(URLOPEN, return_value=_response(MOCK_MARKET_CHART)) as urlopen:
            samples = client.fetch_price_history("litecoin", "6M")

        assert len(samples) == 3
        request = urlopen.call_args[0][0]
        assert request.full_url == (
            "http://provider.test/api/v3/coins/litecoin/market_chart?vs_currency=usd&days=180"
        )
        assert urlopen.call_args[1]["timeout"] == 2.0

    def test_api_key_appended_when_set(self) -> None:
        client = CoinGeckoClient(
            MarketDataSettings(base_url="http://provider.test", api_key="demo-key")  # type: ignore[arg-type]
        )
        with patch(URLOPEN, return_value=_response(MOCK_MARKET_CHART)) as urlopen:
            client.fetch_price_history("bitcoin", "1D")

        assert urlopen.call_args[0][0].full_url.endswith("&x_cg_demo_api_key=demo-key")

    def test_fetch_spot_prices_builds_url(self, client: CoinGeckoClient) -> None:
        with patch(URLOPEN, return_value=_response(MOCK_SIMPLE_PRICES)) as urlopen:
            prices = client.fetch_spot_prices()

        assert prices["bitcoin"] == 64210.5
        assert urlopen.call_args[0][0].full_url == (
            "http://provider.test/api/v3/simple/price"
            "?ids=bitcoin%2Clitecoin%2Ccardano%2Ctether&vs_currencies=usd"
        )

    def test_http_error_is_fetch_failure(self, client: CoinGeckoClient) -> None:
        error = urllib.error.HTTPError("http://provider.test", 429, "Too Many Requests", None, None)
        with patch(URLOPEN, side_effect=error):
            with pytest.raises(FetchFailure, match="429"):
                client.fetch_price_history("bitcoin", "1H")

    def test_network_error_is_fetch_failure(self, client: CoinGeckoClient) -> None:
        with patch(URLOPEN, side_effect=urllib.error.URLError("connection refused")):
            with pytest.raises(FetchFailure):
                client.fetch_spot_prices()

    def test_timeout_is_fetch_failure(self, client: CoinGeckoClient) -> None:
        with patch(URLOPEN, side_effect=TimeoutError("timed out")):
            with pytest.raises(FetchFailure):
                client.fetch_price_history("bitcoin", "1H")

    def test_invalid_json_is_parse_failure(self, client: CoinGeckoClient) -> None:
        cm = _response({})
        cm.__enter__.return_value.read.return_value = b"<html>busy</html>"
        with patch(URLOPEN, return_value=cm):
            with pytest.raises(ParseFailure):
                client.fetch_price_history("bitcoin", "1H")

    def test_strict_unknown_asset_never_hits_network(self, client: CoinGeckoClient) -> None:
        with patch(URLOPEN) as urlopen:
            with pytest.raises(ParseFailure):
                client.fetch_price_history("dogecoin", "1H", strict_assets=True)
        urlopen.assert_not_called()

    @pytest.mark.parametrize(
        "body",
        [
            b'{"prices": [[Infinity, 1.0]]}',
            b'{"prices": [[1704067200000, NaN]]}',
            b'{"prices": [[1704067200000, -Infinity]]}',
        ],
    )
    def test_non_finite_json_tokens_are_parse_failure(self, client: CoinGeckoClient, body: bytes) -> None:
        cm = _response({})
        cm.__enter__.return_value.read.return_value = body
        with patch(URLOPEN, return_value=cm):
            with pytest.raises(ParseFailure):
                client.fetch_price_history("bitcoin", "1D")
