"""Entry point for the PromX dashboard.

Wires all components together and serves the FastAPI dashboard with
uvicorn. The lifespan context manager opens the transaction database,
performs the one-shot spot price refresh and the initial chart load,
and closes the database on shutdown.

Component wiring order (in _build_components):
1. AppSettings (configuration)
2. Logging setup
3. CoinGeckoClient (price history + spot prices)
4. ChartService (selection, normalization, last-write-wins)
5. SpotPriceService (ticker strip snapshot)
6. TransactionDatabase / TransactionHistoryStore
7. DashboardState (converter state + rate table)
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from promx.config import AppSettings
from promx.conversion.rates import RateTable
from promx.dashboard.state import DashboardState
from promx.logging import get_logger, setup_logging
from promx.market_data.chart_service import ChartService
from promx.market_data.coingecko import CoinGeckoClient
from promx.market_data.spot_prices import SpotPriceService
from promx.transactions.database import TransactionDatabase
from promx.transactions.store import TransactionHistoryStore


def _build_components(settings: AppSettings) -> dict[str, Any]:
    """Build all dashboard components from settings.

    Does NOT open the transaction database or hit the network; that
    happens in the lifespan.

    Args:
        settings: Application-wide settings.

    Returns:
        Dict mapping component names to instances.
    """
    client = CoinGeckoClient(settings.market_data)
    database = TransactionDatabase(settings.transactions.db_path, settings.transactions.table)

    return {
        "client": client,
        "chart_service": ChartService(client, settings.chart),
        "spot_prices": SpotPriceService(client),
        "transaction_db": database,
        "transaction_store": TransactionHistoryStore(database),
        "dashboard_state": DashboardState(RateTable()),
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage component lifecycle within the FastAPI application.

    On startup: stores components on app.state, connects the transaction
    database and runs the spot price refresh and the first chart load
    concurrently. Neither depends on the other.

    On shutdown: closes the transaction database.
    """
    logger = get_logger("promx.main")
    settings: AppSettings = app.state.settings
    components = app.state.components

    app.state.chart_service = components["chart_service"]
    app.state.spot_prices = components["spot_prices"]
    app.state.dashboard_state = components["dashboard_state"]
    app.state.transaction_store = components["transaction_store"]

    await components["transaction_db"].connect()

    await asyncio.gather(
        components["spot_prices"].refresh(),
        components["chart_service"].select_and_load(
            settings.chart.default_asset, settings.chart.default_window
        ),
    )

    logger.info(
        "lifespan_started",
        asset=settings.chart.default_asset,
        window=settings.chart.default_window,
        truncation=settings.chart.truncation,
    )

    yield

    await components["transaction_db"].close()
    logger.info("promx_dashboard_stopped")


async def run() -> None:
    """Build components and serve the dashboard until interrupted."""
    settings = AppSettings()
    setup_logging(settings.log_level)
    logger = get_logger("promx.main")

    components = _build_components(settings)

    from promx.dashboard.app import create_dashboard_app

    app = create_dashboard_app(lifespan=lifespan)
    app.state.settings = settings
    app.state.components = components

    logger.info(
        "starting_dashboard",
        host=settings.dashboard.host,
        port=settings.dashboard.port,
        price_source=settings.market_data.base_url,
    )

    config = uvicorn.Config(
        app,
        host=settings.dashboard.host,
        port=settings.dashboard.port,
        log_level="warning",  # Suppress uvicorn access logs
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
