"""JSON API endpoints for chart data, spot prices, transactions and the converter."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from promx.market_data.chart_service import ChartService, ChartStatus

log = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/chart")
async def get_chart(
    request: Request,
    asset: str | None = None,
    window: str | None = None,
    refresh: bool = False,
) -> JSONResponse:
    """Chart view for (asset, window); omitted parameters keep the current selection.

    A new selection (or ``refresh=true``) triggers a fetch. An error view
    is returned with status 200 so the page can render its error state.
    """
    chart_service: ChartService = request.app.state.chart_service
    current_asset, current_window = chart_service.selection
    asset = asset or current_asset
    window = window or current_window

    needs_load = (
        refresh
        or (asset, window) != chart_service.selection
        or chart_service.view.status is ChartStatus.LOADING
    )
    if needs_load:
        view = await chart_service.select_and_load(asset, window)
        if window != current_window:
            await request.app.state.dashboard_state.window_changed()
    else:
        view = chart_service.view

    return JSONResponse(content=view.to_dict())


@router.get("/prices")
async def get_prices(request: Request, refresh: bool = False) -> JSONResponse:
    """Spot prices for the ticker strip; ``refresh=true`` fetches a new snapshot."""
    spot_prices = request.app.state.spot_prices
    if refresh or spot_prices.status == "loading":
        await spot_prices.refresh()
    return JSONResponse(content=spot_prices.to_dict())


@router.get("/transactions")
async def get_transactions(request: Request) -> JSONResponse:
    """Transaction history rows; an unavailable store yields an empty list."""
    store = getattr(request.app.state, "transaction_store", None)
    if store is None:
        return JSONResponse(content=[])

    records = await store.fetch_history()
    return JSONResponse(content=[r.to_dict() for r in records])


@router.get("/conversion")
async def get_conversion(request: Request) -> JSONResponse:
    """Current converter state."""
    return JSONResponse(content=request.app.state.dashboard_state.to_dict())


@router.get("/rates")
async def get_rates(request: Request) -> JSONResponse:
    """The directed rate table, keyed FROM_TO."""
    return JSONResponse(content=request.app.state.dashboard_state.rates.to_dict())
