"""The single mutable converter state owned by the dashboard.

Route handlers never mutate ConversionState in place: each edit runs a
pure transform from promx.conversion.engine and swaps in the result.
Edits are serialized with an asyncio.Lock so two requests cannot
interleave on the same state.
"""

from __future__ import annotations

import asyncio

import structlog

from promx.conversion import engine
from promx.conversion.rates import RateTable
from promx.models import ConversionState, CurrencySymbol, Side

log = structlog.get_logger(__name__)


class DashboardState:
    """Holds the current ConversionState and the rate table it is computed against."""

    def __init__(self, rates: RateTable | None = None, initial: ConversionState | None = None) -> None:
        self.rates = rates or RateTable()
        self._conversion = initial or ConversionState()
        self._lock = asyncio.Lock()

    @property
    def conversion(self) -> ConversionState:
        return self._conversion

    async def edit_amount(self, side: Side, amount: str) -> ConversionState:
        async with self._lock:
            self._conversion = engine.convert(self._conversion, self.rates, side, amount)
            log.debug(
                "conversion_amount_edited",
                side=side.value,
                no_route=self._conversion.no_route,
            )
            return self._conversion

    async def choose_currency(self, side: Side, symbol: CurrencySymbol) -> ConversionState:
        async with self._lock:
            self._conversion = engine.select_currency(self._conversion, self.rates, side, symbol)
            log.debug("conversion_currency_selected", side=side.value, symbol=symbol.value)
            return self._conversion

    async def window_changed(self) -> ConversionState:
        async with self._lock:
            self._conversion = engine.recompute(self._conversion, self.rates)
            return self._conversion

    def to_dict(self) -> dict:
        return self._conversion.to_dict()
