"""Custom exceptions for the PromX dashboard.

Market-data and conversion errors live here so the provider client,
the chart service and the conversion engine can share them without
importing each other.
"""


class DashboardError(Exception):
    """Base exception for all dashboard errors."""


class FetchFailure(DashboardError):
    """Raised when an external source answers with a non-success status or is unreachable."""


class ParseFailure(DashboardError):
    """Raised when an external response does not have the expected shape."""


class NoRoute(DashboardError):
    """Raised when no directed rate exists for a currency pair."""

    def __init__(self, from_symbol: str, to_symbol: str) -> None:
        super().__init__(f"No conversion rate from {from_symbol} to {to_symbol}")
        self.from_symbol = from_symbol
        self.to_symbol = to_symbol
