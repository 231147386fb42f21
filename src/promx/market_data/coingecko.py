"""CoinGecko price provider client for price history and spot prices.

Uses urllib.request (stdlib) for the two read-only GET endpoints the
dashboard needs. Calls are blocking; async callers run them through
asyncio.to_thread.

Any non-success status or transport error is raised as FetchFailure and
any unexpected payload shape as ParseFailure, so callers never receive a
partially parsed history.
"""

import json
import math
import urllib.error
import urllib.parse
import urllib.request

import structlog

from promx.config import MarketDataSettings
from promx.exceptions import FetchFailure, ParseFailure
from promx.market_data.windows import history_query
from promx.models import Asset, RawSample, WindowCode

logger = structlog.get_logger(__name__)

# Coins shown in the spot price ticker strip
SPOT_PRICE_IDS: tuple[str, ...] = ("bitcoin", "litecoin", "cardano", "tether")


def _is_number(value: object) -> bool:
    """True for a finite JSON number; json.loads yields inf and nan for Infinity and NaN."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:  # int too large for a float
        return False


def parse_market_chart(payload: object) -> list[RawSample]:
    """Extract ``prices`` pairs from a market_chart response.

    Raises ParseFailure unless every entry is a ``[timestamp_ms, price]``
    pair of finite, non-negative numbers.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("prices"), list):
        raise ParseFailure("market_chart response has no 'prices' list")

    samples = []
    for index, entry in enumerate(payload["prices"]):
        if (
            not isinstance(entry, (list, tuple))
            or len(entry) < 2
            or not _is_number(entry[0])
            or not _is_number(entry[1])
        ):
            raise ParseFailure(f"Malformed price sample at index {index}: {entry!r}")
        timestamp_ms, price = int(entry[0]), float(entry[1])
        if timestamp_ms < 0 or price < 0:
            raise ParseFailure(f"Negative price sample at index {index}: {entry!r}")
        samples.append(RawSample(timestamp_ms=timestamp_ms, price=price))
    return samples


def parse_simple_prices(
    payload: object,
    coin_ids: tuple[str, ...] = SPOT_PRICE_IDS,
    vs_currency: str = "usd",
) -> dict[str, float]:
    """Extract ``{coin_id: price}`` from a simple/price response.

    Every requested coin must be present; a missing coin is a ParseFailure
    rather than a silently absent price.
    """
    if not isinstance(payload, dict):
        raise ParseFailure("simple/price response is not an object")

    prices = {}
    for coin_id in coin_ids:
        quote = payload.get(coin_id)
        if not isinstance(quote, dict) or not _is_number(quote.get(vs_currency)):
            raise ParseFailure(f"simple/price response has no {vs_currency} price for {coin_id}")
        prices[coin_id] = float(quote[vs_currency])
    return prices


class CoinGeckoClient:
    """Blocking client for the CoinGecko v3 public API.

    Args:
        settings: Base URL, optional demo API key, quote currency and timeout.
    """

    def __init__(self, settings: MarketDataSettings) -> None:
        self._settings = settings

    def _build_url(self, path: str, params: dict[str, str]) -> str:
        query = dict(params)
        api_key = self._settings.api_key.get_secret_value()
        if api_key:
            query["x_cg_demo_api_key"] = api_key
        base = self._settings.base_url.rstrip("/")
        return f"{base}{path}?{urllib.parse.urlencode(query)}"

    def _get_json(self, path: str, params: dict[str, str]) -> object:
        url = self._build_url(path, params)
        headers = {"Accept": "application/json", "User-Agent": "PromXDashboard/1.0"}
        req = urllib.request.Request(url, headers=headers)

        try:
            with urllib.request.urlopen(req, timeout=self._settings.request_timeout) as resp:
                body = resp.read()
        except urllib.error.HTTPError as e:
            logger.warning("coingecko_http_error", path=path, status=e.code)
            raise FetchFailure(f"Failed to fetch data: HTTP {e.code}") from e
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            logger.warning("coingecko_fetch_error", path=path, error=str(e))
            raise FetchFailure(f"Failed to fetch data: {e}") from e

        try:
            return json.loads(body)
        except ValueError as e:
            raise ParseFailure(f"Response from {path} is not valid JSON") from e

    def fetch_price_history(
        self,
        asset: str | Asset,
        window: str | WindowCode,
        strict_assets: bool = False,
    ) -> list[RawSample]:
        """Fetch raw (timestamp, price) samples for one asset and window."""
        path, params = history_query(
            window,
            asset,
            vs_currency=self._settings.vs_currency,
            strict_assets=strict_assets,
        )
        samples = parse_market_chart(self._get_json(path, params))
        logger.debug("price_history_fetched", path=path, days=params["days"], samples=len(samples))
        return samples

    def fetch_spot_prices(self, coin_ids: tuple[str, ...] = SPOT_PRICE_IDS) -> dict[str, float]:
        """Fetch the current quote-currency price for each coin id."""
        params = {"ids": ",".join(coin_ids), "vs_currencies": self._settings.vs_currency}
        prices = parse_simple_prices(
            self._get_json("/simple/price", params),
            coin_ids=coin_ids,
            vs_currency=self._settings.vs_currency,
        )
        logger.debug("spot_prices_fetched", coins=len(prices))
        return prices
