"""Chart request orchestration: selection, fetch, normalize, last-write-wins.

Each history request is tagged with the (asset, window) selection it was
issued for and a request number. When a response arrives after the user
has made another selection (even one that returns to the same asset and
window), it is discarded instead of overwriting the newer chart. In-flight requests are not cancelled.
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import tzinfo
from enum import Enum

import structlog

from promx.config import ChartSettings
from promx.exceptions import FetchFailure, ParseFailure
from promx.market_data.coingecko import CoinGeckoClient
from promx.market_data.normalizer import normalize
from promx.models import ChartSeries, WindowPolicy

logger = structlog.get_logger(__name__)

ChartTag = tuple[str, str]  # (asset, window) as selected by the user


class ChartStatus(str, Enum):
    """Presentation state of the price chart."""

    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass
class ChartView:
    """What the dashboard renders for the chart panel.

    In the error state ``series`` is always empty; a failed fetch never
    leaves a partial or stale series on screen.
    """

    asset: str
    window: str
    status: ChartStatus = ChartStatus.LOADING
    series: ChartSeries = field(default_factory=ChartSeries)
    error: str | None = None
    updated_at: float | None = None

    @property
    def tag(self) -> ChartTag:
        return (self.asset, self.window)

    def to_dict(self) -> dict:
        return {
            "asset": self.asset,
            "window": self.window,
            "status": self.status.value,
            "error": self.error,
            **self.series.to_dict(),
        }


def policy_from_settings(settings: ChartSettings) -> WindowPolicy:
    """Build the truncation policy configured for the dashboard chart."""
    if settings.truncation == "first_n":
        return WindowPolicy.first_n(settings.first_n)
    return WindowPolicy.full()


class ChartService:
    """Owns the current chart selection and the view built from it.

    Usage:
        service = ChartService(client, settings.chart)
        view = await service.select_and_load("litecoin", "3M")
    """

    def __init__(
        self,
        client: CoinGeckoClient,
        settings: ChartSettings,
        tz: tzinfo | None = None,
    ) -> None:
        self._client = client
        self._settings = settings
        self._policy = policy_from_settings(settings)
        self._tz = tz
        self._view = ChartView(asset=settings.default_asset, window=settings.default_window)
        self._request_seq = 0

    @property
    def selection(self) -> ChartTag:
        return self._view.tag

    @property
    def view(self) -> ChartView:
        return self._view

    @property
    def policy(self) -> WindowPolicy:
        return self._policy

    def select(self, asset: str, window: str) -> ChartTag:
        """Make (asset, window) the current selection and mark the chart loading.

        Returns the tag to pass to load(). Any response for an earlier
        selection is dropped once it arrives.
        """
        self._view = ChartView(asset=asset, window=window, status=ChartStatus.LOADING)
        self._request_seq += 1
        logger.debug("chart_selection_changed", asset=asset, window=window)
        return self._view.tag

    async def load(self, tag: ChartTag | None = None) -> ChartView:
        """Fetch and normalize history for ``tag`` (default: current selection).

        Returns the current view, which is the new one unless the selection
        moved on while the request was in flight.
        """
        if tag is None:
            tag = self.selection
        asset, window = tag
        request_seq = self._request_seq

        try:
            samples = await asyncio.to_thread(
                self._client.fetch_price_history,
                asset,
                window,
                self._settings.strict_assets,
            )
            series = normalize(
                samples,
                self._policy,
                tz=self._tz,
                label_format=self._settings.label_format,
            )
            result = ChartView(
                asset=asset,
                window=window,
                status=ChartStatus.READY,
                series=series,
                updated_at=time.time(),
            )
        except (FetchFailure, ParseFailure) as e:
            logger.warning("chart_load_failed", asset=asset, window=window, error=str(e))
            result = ChartView(
                asset=asset,
                window=window,
                status=ChartStatus.ERROR,
                error=str(e),
                updated_at=time.time(),
            )

        if tag != self.selection or request_seq != self._request_seq:
            logger.info(
                "stale_chart_response_discarded",
                response_for=f"{asset}/{window}",
                current=f"{self.selection[0]}/{self.selection[1]}",
            )
            return self._view

        self._view = result
        logger.info(
            "chart_loaded",
            asset=asset,
            window=window,
            status=result.status.value,
            points=len(result.series.points),
        )
        return result

    async def select_and_load(self, asset: str, window: str) -> ChartView:
        """Select (asset, window) and load it in one step."""
        return await self.load(self.select(asset, window))
