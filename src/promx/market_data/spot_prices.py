"""In-memory spot price snapshot for the dashboard ticker strip.

Holds the prices from the last successful refresh. A failed refresh
switches the snapshot into an error state and clears it, so the strip
never shows a mix of fresh and stale quotes.
"""

import asyncio
import time

from promx.exceptions import FetchFailure, ParseFailure
from promx.logging import get_logger
from promx.market_data.coingecko import SPOT_PRICE_IDS, CoinGeckoClient
from promx.market_data.normalizer import format_usd

logger = get_logger(__name__)

# Ticker strip label -> provider coin id
TICKER_SYMBOLS: dict[str, str] = {
    "BTC": "bitcoin",
    "LTC": "litecoin",
    "ADA": "cardano",
    "TRC": "tether",
}


class SpotPriceService:
    """Snapshot of the latest spot prices with explicit ok/error status.

    Refresh is a one-shot operation triggered by the dashboard; there is
    no polling loop and no retry.
    """

    def __init__(self, client: CoinGeckoClient, coin_ids: tuple[str, ...] = SPOT_PRICE_IDS) -> None:
        self._client = client
        self._coin_ids = coin_ids
        self._prices: dict[str, float] = {}
        self._updated_at: float | None = None
        self._error: str | None = None

    @property
    def status(self) -> str:
        if self._error is not None:
            return "error"
        if self._updated_at is None:
            return "loading"
        return "ready"

    @property
    def error(self) -> str | None:
        return self._error

    async def refresh(self) -> None:
        """Replace the snapshot with a fresh fetch, or enter the error state."""
        try:
            prices = await asyncio.to_thread(self._client.fetch_spot_prices, self._coin_ids)
        except (FetchFailure, ParseFailure) as e:
            self._prices = {}
            self._error = str(e)
            self._updated_at = time.time()
            logger.error("spot_price_refresh_failed", error=str(e))
            return

        self._prices = prices
        self._error = None
        self._updated_at = time.time()
        logger.info("spot_prices_refreshed", coins=len(prices))

    def get_price(self, symbol: str) -> float | None:
        """Return the cached USD price for a ticker symbol or coin id."""
        coin_id = TICKER_SYMBOLS.get(symbol, symbol)
        return self._prices.get(coin_id)

    def get_price_age(self) -> float | None:
        """Seconds since the last refresh attempt, or None before the first one."""
        if self._updated_at is None:
            return None
        return time.time() - self._updated_at

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "error": self._error,
            "prices": {
                symbol: {
                    "coin_id": coin_id,
                    "usd": self._prices.get(coin_id),
                    "display": format_usd(self._prices.get(coin_id)),
                }
                for symbol, coin_id in TICKER_SYMBOLS.items()
                if coin_id in self._coin_ids
            },
        }
