"""Shared data models for the PromX dashboard.

Market data is carried as float: prices come from the provider as JSON
numbers and are only ever rounded for display (2 places for prices and
axis ticks, 6 places for conversions).
"""

from dataclasses import dataclass, field
from enum import Enum


class Asset(str, Enum):
    """Assets with a selectable price-history chart (provider coin ids)."""

    BITCOIN = "bitcoin"
    LITECOIN = "litecoin"
    CARDANO = "cardano"


class WindowCode(str, Enum):
    """Lookback window selector shown as chart range buttons."""

    ONE_HOUR = "1H"
    THREE_HOURS = "3H"
    ONE_DAY = "1D"
    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"


class CurrencySymbol(str, Enum):
    """Currencies offered by the converter."""

    BTC = "BTC"
    LTC = "LTC"
    ADA = "ADA"
    TRC = "TRC"  # Tether


class Side(str, Enum):
    """One half of a conversion pair."""

    A = "a"
    B = "b"

    @property
    def other(self) -> "Side":
        return Side.B if self is Side.A else Side.A


class TruncationKind(str, Enum):
    """How much of a fetched history is kept for display."""

    FULL = "full"
    FIRST_N = "first_n"


@dataclass(frozen=True)
class WindowPolicy:
    """Truncation policy applied by the normalizer.

    FULL keeps every sample; FIRST_N keeps the first ``n`` samples in
    provider order.
    """

    kind: TruncationKind = TruncationKind.FULL
    n: int | None = None

    def __post_init__(self) -> None:
        if self.kind is TruncationKind.FIRST_N and (self.n is None or self.n < 0):
            raise ValueError("FIRST_N policy requires a non-negative n")

    @classmethod
    def full(cls) -> "WindowPolicy":
        return cls(TruncationKind.FULL)

    @classmethod
    def first_n(cls, n: int) -> "WindowPolicy":
        return cls(TruncationKind.FIRST_N, n)

    def apply(self, samples: list) -> list:
        if self.kind is TruncationKind.FIRST_N:
            return samples[: self.n]
        return list(samples)


@dataclass(frozen=True)
class RawSample:
    """A single (timestamp, price) sample from the price-history provider."""

    timestamp_ms: int
    price: float


@dataclass(frozen=True)
class ChartPoint:
    """A display-ready chart point: local time-of-day label and price."""

    label: str
    price: float


@dataclass
class ChartSeries:
    """Normalizer output consumed by the chart widget.

    ``ticks`` is empty exactly when ``points`` is empty; the caller must
    not render a price axis in that case.
    """

    points: list[ChartPoint] = field(default_factory=list)
    ticks: list[float] = field(default_factory=list)

    @property
    def latest_price(self) -> float | None:
        """Price of the last point, shown in the chart header."""
        return self.points[-1].price if self.points else None

    def to_dict(self) -> dict:
        return {
            "points": [{"time": p.label, "price": p.price} for p in self.points],
            "ticks": list(self.ticks),
            "latest_price": self.latest_price,
        }


# Icon shown next to each currency in the converter dropdowns
DISPLAY_ASSETS: dict[CurrencySymbol, str] = {
    CurrencySymbol.BTC: "https://assets.coingecko.com/coins/images/1/small/bitcoin.png",
    CurrencySymbol.LTC: "https://assets.coingecko.com/coins/images/2/small/litecoin.png",
    CurrencySymbol.ADA: "https://assets.coingecko.com/coins/images/975/small/cardano.png",
    CurrencySymbol.TRC: "https://assets.coingecko.com/coins/images/325/small/Tether.png",
}


@dataclass(frozen=True)
class CurrencySelection:
    """The currency chosen on one side of the converter."""

    symbol: CurrencySymbol
    display_asset: str

    @classmethod
    def of(cls, symbol: CurrencySymbol) -> "CurrencySelection":
        return cls(symbol=symbol, display_asset=DISPLAY_ASSETS[symbol])


@dataclass(frozen=True)
class ConversionState:
    """Converter state: two selections, two amounts, one authoritative side.

    The side named by ``last_edited`` holds exactly what the user typed;
    the other amount is always derived from it and the rate table.
    ``no_route`` is set when the derivation had a usable amount but the
    directed rate is missing.
    """

    side_a: CurrencySelection = CurrencySelection.of(CurrencySymbol.BTC)
    side_b: CurrencySelection = CurrencySelection.of(CurrencySymbol.BTC)
    amount_a: str = ""
    amount_b: str = ""
    last_edited: Side = Side.A
    no_route: bool = False

    def selection(self, side: Side) -> CurrencySelection:
        return self.side_a if side is Side.A else self.side_b

    def amount(self, side: Side) -> str:
        return self.amount_a if side is Side.A else self.amount_b

    def to_dict(self) -> dict:
        return {
            "symbol_a": self.side_a.symbol.value,
            "symbol_b": self.side_b.symbol.value,
            "display_asset_a": self.side_a.display_asset,
            "display_asset_b": self.side_b.display_asset,
            "amount_a": self.amount_a,
            "amount_b": self.amount_b,
            "last_edited": self.last_edited.value,
            "no_route": self.no_route,
        }


@dataclass
class TransactionRecord:
    """One row of the transaction history table, carried as stored text."""

    date: str
    profit: str
    loss: str
    fee: str
    wallet_address: str

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "profit": self.profit,
            "loss": self.loss,
            "fee": self.fee,
            "wallet_address": self.wallet_address,
        }
