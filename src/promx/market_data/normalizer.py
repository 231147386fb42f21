"""Time-series normalizer: raw price samples to chartable points and axis ticks.

The provider returns samples in chronological order and the normalizer
trusts that order; it does not sort. This is an assumption about the
provider, not something the normalizer guarantees.
"""

from collections.abc import Sequence
from datetime import datetime, tzinfo

from promx.exceptions import ParseFailure
from promx.models import ChartPoint, ChartSeries, RawSample, WindowPolicy

TICK_COUNT = 6
TICK_DECIMALS = 2
DEFAULT_LABEL_FORMAT = "%I:%M %p"


def format_time_label(
    timestamp_ms: int,
    tz: tzinfo | None = None,
    label_format: str = DEFAULT_LABEL_FORMAT,
) -> str:
    """Render a millisecond timestamp as an hour:minute label.

    With ``tz`` None the host's local time zone is used. A timestamp the
    platform cannot represent raises ParseFailure.
    """
    try:
        moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=tz)
    except (ValueError, OverflowError, OSError) as e:
        raise ParseFailure(f"Timestamp out of range: {timestamp_ms}") from e
    return moment.strftime(label_format)


def compute_axis_ticks(prices: Sequence[float]) -> list[float]:
    """Return 6 evenly spaced ticks spanning [min(prices), max(prices)].

    Each tick is rounded to 2 places. The last tick is taken from the
    maximum directly so float error in ``min + 5 * step`` cannot push it
    off the rounded maximum. A flat series yields 6 equal ticks.
    """
    if not prices:
        return []

    low = min(prices)
    high = max(prices)
    step = (high - low) / (TICK_COUNT - 1)

    ticks = [round(low + i * step, TICK_DECIMALS) for i in range(TICK_COUNT - 1)]
    ticks.append(round(high, TICK_DECIMALS))
    return ticks


def normalize(
    raw_samples: Sequence[RawSample],
    policy: WindowPolicy | None = None,
    tz: tzinfo | None = None,
    label_format: str = DEFAULT_LABEL_FORMAT,
) -> ChartSeries:
    """Turn raw samples into a ChartSeries under the given truncation policy.

    Pure: the same samples, policy and time zone always give the same
    series. An empty input gives an empty series with no ticks.
    """
    policy = policy or WindowPolicy.full()
    kept = policy.apply(list(raw_samples))

    points = [
        ChartPoint(
            label=format_time_label(sample.timestamp_ms, tz=tz, label_format=label_format),
            price=sample.price,
        )
        for sample in kept
    ]
    return ChartSeries(points=points, ticks=compute_axis_ticks([p.price for p in points]))


def format_usd(price: float | None) -> str:
    """Format a spot or latest price with 2 decimals, or "N/A" when absent."""
    if price is None:
        return "N/A"
    return f"{price:.2f}"
