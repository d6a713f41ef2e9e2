"""Input data models for the analysis engine: OHLCV candles and market snapshots.

Prices and volumes are floats. Candles are ordered oldest first and are
never mutated by the engine.
"""

import math
from dataclasses import dataclass
from typing import Any, Sequence


def to_num(value: Any, default: float = 0.0) -> float:
    """Coerce a raw value (number or numeric string) to a finite float.

    Exchange payloads deliver prices as strings and occasionally as nulls.
    Callers that prefer coercion over an InvalidInputError run raw values
    through this before building candles.

    Args:
        value: Raw value to convert.
        default: Returned when the value is missing, unparseable or non-finite.

    Returns:
        The value as a float, or ``default``.
    """
    try:
        n = float(value)
    except (TypeError, ValueError):
        return default
    return n if math.isfinite(n) else default


@dataclass(frozen=True)
class Candle:
    """A single OHLCV candle."""

    timestamp: int  # Unix milliseconds, candle open time
    open: float
    high: float
    low: float
    close: float
    volume: float

    @classmethod
    def from_kline(cls, row: Sequence[Any]) -> "Candle":
        """Build a candle from an exchange kline row.

        Rows follow the ``[open_time, open, high, low, close, volume, ...]``
        layout; trailing fields are ignored and numeric strings are coerced
        with :func:`to_num`.
        """
        return cls(
            timestamp=int(to_num(row[0])),
            open=to_num(row[1]),
            high=to_num(row[2]),
            low=to_num(row[3]),
            close=to_num(row[4]),
            volume=to_num(row[5]),
        )


@dataclass(frozen=True)
class AuxiliaryMetrics:
    """Snapshot of market metrics taken once per analysis run."""

    current_price: float = 0.0
    volume_24h: float = 0.0  # Quote currency
    price_change_24h: float = 0.0  # Fraction, 0.01 == +1%
    funding_rate: float = 0.0  # Per funding period
    mark_price: float = 0.0
    open_interest: float = 0.0
