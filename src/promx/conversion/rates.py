"""Fixed directed exchange rates between converter currencies.

Rates are directed: rate(A, B) * rate(B, A) is not assumed to be 1 and
the shipped table is deliberately left non-reciprocal. A pair may also
be missing entirely; there is no chaining through a third currency.
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from promx.exceptions import NoRoute
from promx.models import CurrencySymbol

RateKey = tuple[CurrencySymbol, CurrencySymbol]

BTC = CurrencySymbol.BTC
LTC = CurrencySymbol.LTC
ADA = CurrencySymbol.ADA
TRC = CurrencySymbol.TRC

DEFAULT_RATES: dict[RateKey, float] = {
    (BTC, LTC): 1024.81,
    (BTC, ADA): 124921.92,
    (BTC, TRC): 84639.89,
    (LTC, BTC): 0.00097,
    (LTC, ADA): 121.69,
    (LTC, TRC): 82.45,
    (ADA, BTC): 0.000008,
    (ADA, LTC): 0.0082,
    (ADA, TRC): 0.68,
    (TRC, BTC): 0.000012,
    (TRC, LTC): 0.012,
    (TRC, ADA): 1.48,
}


class RateTable(Mapping[RateKey, float]):
    """Immutable mapping of (from, to) currency pairs to positive multipliers."""

    def __init__(self, rates: Mapping[RateKey, float] | None = None) -> None:
        rates = DEFAULT_RATES if rates is None else rates
        checked: dict[RateKey, float] = {}
        for (from_symbol, to_symbol), rate in rates.items():
            key = (CurrencySymbol(from_symbol), CurrencySymbol(to_symbol))
            if rate <= 0:
                raise ValueError(f"Rate for {key[0].value}->{key[1].value} must be positive, got {rate}")
            checked[key] = float(rate)
        self._rates = MappingProxyType(checked)

    def __getitem__(self, key: RateKey) -> float:
        return self._rates[key]

    def __iter__(self) -> Iterator[RateKey]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def rate(self, from_symbol: CurrencySymbol, to_symbol: CurrencySymbol) -> float:
        """Return the directed rate, raising NoRoute when the pair is absent."""
        try:
            return self._rates[(from_symbol, to_symbol)]
        except KeyError:
            raise NoRoute(from_symbol.value, to_symbol.value) from None

    def to_dict(self) -> dict[str, float]:
        return {f"{a.value}_{b.value}": rate for (a, b), rate in self._rates.items()}
