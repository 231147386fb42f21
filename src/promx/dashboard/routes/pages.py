"""Page routes serving the main dashboard HTML template."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from promx.models import Asset, CurrencySymbol, WindowCode

log = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def dashboard_index(request: Request) -> HTMLResponse:
    """Main dashboard page. Gathers all panels from app.state and renders index.html."""
    templates: Jinja2Templates = request.app.state.templates
    chart_service = request.app.state.chart_service
    spot_prices = request.app.state.spot_prices

    store = getattr(request.app.state, "transaction_store", None)
    transactions = await store.fetch_history() if store is not None else []

    context = {
        "chart": chart_service.view,
        "assets": list(Asset),
        "windows": list(WindowCode),
        "prices": spot_prices.to_dict(),
        "conversion": request.app.state.dashboard_state.conversion,
        "symbols": list(CurrencySymbol),
        "transactions": transactions,
        "error": "",
    }

    return templates.TemplateResponse(request, "index.html", context)
