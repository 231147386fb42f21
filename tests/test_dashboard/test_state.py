"""Tests for DashboardState, the converter state holder behind the routes."""

import asyncio

import pytest

from promx.conversion.rates import RateTable
from promx.dashboard.state import DashboardState
from promx.models import ConversionState, CurrencySymbol, Side


class TestDashboardState:
    def test_defaults(self) -> None:
        state = DashboardState()
        assert state.conversion == ConversionState()
        assert len(state.rates) == 12

    @pytest.mark.asyncio
    async def test_edit_amount_replaces_state(self, rate_table: RateTable) -> None:
        state = DashboardState(rate_table)
        before = state.conversion

        await state.choose_currency(Side.B, CurrencySymbol.LTC)
        after = await state.edit_amount(Side.A, "2")

        assert after is state.conversion
        assert after.amount_b == "2049.620000"
        assert before.amount_b == ""

    @pytest.mark.asyncio
    async def test_window_changed_keeps_derived_amount(self, rate_table: RateTable) -> None:
        state = DashboardState(rate_table)
        await state.choose_currency(Side.B, CurrencySymbol.TRC)
        await state.edit_amount(Side.B, "100")

        result = await state.window_changed()

        # 100 TRC * 0.000012
        assert result.amount_a == "0.001200"
        assert result.last_edited is Side.B

    @pytest.mark.asyncio
    async def test_concurrent_edits_are_serialized(self, rate_table: RateTable) -> None:
        """The final state reflects one complete edit, never a mix of two."""
        state = DashboardState(rate_table)
        await state.choose_currency(Side.B, CurrencySymbol.ADA)

        await asyncio.gather(
            state.edit_amount(Side.A, "1"),
            state.edit_amount(Side.B, "1000"),
        )

        final = state.conversion
        assert final.last_edited is Side.B
        assert final.amount_b == "1000"
        # 1000 ADA * 0.000008
        assert final.amount_a == "0.008000"

    def test_to_dict(self) -> None:
        data = DashboardState().to_dict()
        assert data["symbol_a"] == "BTC"
        assert data["display_asset_b"] == "https://assets.coingecko.com/coins/images/1/small/bitcoin.png"
        assert data["no_route"] is False
