"""FastAPI dashboard application factory with Jinja2 templates."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from promx.dashboard.routes import actions, api, pages
from promx.market_data.normalizer import format_usd

TEMPLATES_DIR = Path(__file__).parent / "templates"


def _format_thousands(value: Any) -> str:
    """Format a spot price with thousands separators (e.g., '64,210.5')."""
    if value is None:
        return "N/A"
    return f"{value:,}"


def create_dashboard_app(lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI dashboard application.

    Args:
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to wire components onto app.state.

    Returns:
        Configured FastAPI application with templates and routes.
    """
    app = FastAPI(
        title="PromX Crypto Dashboard",
        lifespan=lifespan,
    )

    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.filters["usd"] = format_usd
    templates.env.filters["thousands"] = _format_thousands
    app.state.templates = templates

    app.include_router(pages.router)
    app.include_router(api.router, prefix="/api")
    app.include_router(actions.router, prefix="/actions")

    return app
