"""POST endpoints for converter edits, returning the converter.html partial."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from promx.models import CurrencySymbol, Side

log = structlog.get_logger(__name__)

router = APIRouter()


def _render_converter(request: Request, error: str = "") -> HTMLResponse:
    templates: Jinja2Templates = request.app.state.templates
    return templates.TemplateResponse(
        request,
        "partials/converter.html",
        {
            "conversion": request.app.state.dashboard_state.conversion,
            "symbols": list(CurrencySymbol),
            "error": error,
        },
    )


@router.post("/convert", response_class=HTMLResponse)
async def convert_amount(request: Request) -> HTMLResponse:
    """Apply a typed amount to side "a" or "b" and re-render the converter."""
    form = await request.form()
    amount = str(form.get("amount", ""))

    try:
        side = Side(str(form.get("side", "")).lower())
    except ValueError as e:
        log.warning("convert_invalid_side", error=str(e))
        return _render_converter(request, error=f"Invalid value: {e}")

    await request.app.state.dashboard_state.edit_amount(side, amount)
    return _render_converter(request)


@router.post("/currency", response_class=HTMLResponse)
async def choose_currency(request: Request) -> HTMLResponse:
    """Change the currency on one side and re-render the converter."""
    form = await request.form()

    try:
        side = Side(str(form.get("side", "")).lower())
        symbol = CurrencySymbol(str(form.get("symbol", "")).upper())
    except ValueError as e:
        log.warning("currency_select_invalid", error=str(e))
        return _render_converter(request, error=f"Invalid value: {e}")

    await request.app.state.dashboard_state.choose_currency(side, symbol)
    log.info("currency_selected_via_dashboard", side=side.value, symbol=symbol.value)
    return _render_converter(request)
