"""Pair conversion engine: derive one side of a currency pair from the other.

Every function here is a pure state transition: it takes a
ConversionState and returns a new one. The side the user typed into
last is authoritative and keeps its text verbatim (including text that
is still being typed and does not parse yet). The other side is always
recomputed from it: never edited directly and never left holding a
value computed from an old amount or an old symbol.
"""

import math
import re
from dataclasses import replace

from promx.conversion.rates import RateTable
from promx.exceptions import NoRoute
from promx.models import ConversionState, CurrencySelection, CurrencySymbol, Side

CONVERSION_DECIMALS = 6

_DECIMAL_RE = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)$")


def parse_amount(text: str) -> float | None:
    """Parse a typed non-negative decimal, or return None for anything else.

    Empty, negative, exponent and otherwise malformed input all give None,
    as do digit strings too long to fit a finite float.
    """
    stripped = text.strip()
    if not _DECIMAL_RE.match(stripped):
        return None
    value = float(stripped)
    return value if math.isfinite(value) else None


def format_amount(value: float) -> str:
    """Fixed-point display string with 6 decimals."""
    return f"{value:.{CONVERSION_DECIMALS}f}"


def _derive(state: ConversionState, table: RateTable) -> ConversionState:
    """Recompute the non-authoritative side from the authoritative one."""
    source = state.last_edited
    target = source.other
    amount = parse_amount(state.amount(source))

    derived = ""
    no_route = False
    if amount is not None:
        try:
            rate = table.rate(state.selection(source).symbol, state.selection(target).symbol)
        except NoRoute:
            no_route = True
        else:
            converted = amount * rate
            if math.isfinite(converted):
                derived = format_amount(converted)

    if target is Side.A:
        return replace(state, amount_a=derived, no_route=no_route)
    return replace(state, amount_b=derived, no_route=no_route)


def convert(
    state: ConversionState,
    table: RateTable,
    edited_side: Side,
    new_amount: str,
) -> ConversionState:
    """Apply a user edit to one side and derive the other.

    >>> table = RateTable()
    >>> state = ConversionState(side_b=CurrencySelection.of(CurrencySymbol.LTC))
    >>> convert(state, table, Side.A, "2").amount_b
    '2049.620000'
    """
    if edited_side is Side.A:
        state = replace(state, amount_a=new_amount, last_edited=Side.A)
    else:
        state = replace(state, amount_b=new_amount, last_edited=Side.B)
    return _derive(state, table)


def select_currency(
    state: ConversionState,
    table: RateTable,
    side: Side,
    symbol: CurrencySymbol,
) -> ConversionState:
    """Change the currency on one side and re-derive from the authoritative side."""
    selection = CurrencySelection.of(symbol)
    if side is Side.A:
        state = replace(state, side_a=selection)
    else:
        state = replace(state, side_b=selection)
    return _derive(state, table)


def recompute(state: ConversionState, table: RateTable) -> ConversionState:
    """Re-derive without any edit, e.g. after the chart window changes."""
    return _derive(state, table)
