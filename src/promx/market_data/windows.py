"""Pure mapping from (window code, asset) to price-history query parameters."""

from promx.exceptions import ParseFailure
from promx.logging import get_logger
from promx.models import Asset, WindowCode

logger = get_logger(__name__)

# 1H and 3H have no intraday equivalent on the provider; they ask for whole days.
WINDOW_DAYS: dict[WindowCode, int] = {
    WindowCode.ONE_HOUR: 1,
    WindowCode.THREE_HOURS: 3,
    WindowCode.ONE_DAY: 1,
    WindowCode.THREE_MONTHS: 90,
    WindowCode.SIX_MONTHS: 180,
}

DEFAULT_WINDOW_DAYS = 1  # shortest window
FALLBACK_ASSET = Asset.CARDANO


def resolve_window(code: str | WindowCode) -> WindowCode | None:
    """Return the WindowCode for ``code``, or None when unrecognized."""
    try:
        return WindowCode(code)
    except ValueError:
        return None


def window_days(code: str | WindowCode) -> int:
    """Lookback length in days; unrecognized codes get the shortest window."""
    window = resolve_window(code)
    if window is None:
        return DEFAULT_WINDOW_DAYS
    return WINDOW_DAYS[window]


def resolve_asset(symbol: str | Asset, strict: bool = False) -> Asset:
    """Map a user-selected asset symbol to a supported Asset.

    Unrecognized symbols fall back to cardano unless ``strict`` is set,
    in which case ParseFailure is raised.
    """
    try:
        return Asset(symbol)
    except ValueError:
        if strict:
            raise ParseFailure(f"Unsupported asset symbol: {symbol!r}") from None
        logger.warning("unknown_asset_fallback", symbol=str(symbol), fallback=FALLBACK_ASSET.value)
        return FALLBACK_ASSET


def history_query(
    window: str | WindowCode,
    asset: str | Asset,
    vs_currency: str = "usd",
    strict_assets: bool = False,
) -> tuple[str, dict[str, str]]:
    """Return the provider path and query parameters for a history request.

    >>> history_query("3M", "bitcoin")
    ('/coins/bitcoin/market_chart', {'vs_currency': 'usd', 'days': '90'})
    """
    coin = resolve_asset(asset, strict=strict_assets)
    return (
        f"/coins/{coin.value}/market_chart",
        {"vs_currency": vs_currency, "days": str(window_days(window))},
    )
