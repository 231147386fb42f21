"""Shared test fixtures for the PromX dashboard."""

from datetime import timezone

import pytest

from promx.config import AppSettings, ChartSettings, MarketDataSettings
from promx.conversion.rates import RateTable
from promx.models import RawSample

# 2024-01-01 00:00:00 UTC
BASE_TS_MS = 1_704_067_200_000
FIVE_MINUTES_MS = 5 * 60 * 1000


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults (local provider URL, deterministic labels)."""
    return AppSettings(
        log_level="DEBUG",
        market_data=MarketDataSettings(
            base_url="http://provider.test/api/v3",
            request_timeout=1.0,
        ),
        chart=ChartSettings(label_format="%H:%M"),
    )


@pytest.fixture
def utc() -> timezone:
    return timezone.utc


@pytest.fixture
def raw_samples() -> list[RawSample]:
    """Twenty samples, five minutes apart, prices 100.0 .. 109.5 in 0.5 steps."""
    return [
        RawSample(timestamp_ms=BASE_TS_MS + i * FIVE_MINUTES_MS, price=100.0 + i * 0.5)
        for i in range(20)
    ]


@pytest.fixture
def rate_table() -> RateTable:
    """The shipped directed rate table."""
    return RateTable()
