"""Market data layer -- price provider client, history normalization, chart and spot price state."""

from promx.market_data.chart_service import ChartService, ChartStatus, ChartView
from promx.market_data.coingecko import CoinGeckoClient
from promx.market_data.normalizer import compute_axis_ticks, normalize
from promx.market_data.spot_prices import SpotPriceService

__all__ = [
    "ChartService",
    "ChartStatus",
    "ChartView",
    "CoinGeckoClient",
    "SpotPriceService",
    "compute_axis_ticks",
    "normalize",
]
