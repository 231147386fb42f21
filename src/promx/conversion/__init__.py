"""Currency pair conversion -- fixed directed rate table and the bidirectional converter."""

from promx.conversion.engine import convert, parse_amount, recompute, select_currency
from promx.conversion.rates import DEFAULT_RATES, RateTable

__all__ = [
    "DEFAULT_RATES",
    "RateTable",
    "convert",
    "parse_amount",
    "recompute",
    "select_currency",
]
