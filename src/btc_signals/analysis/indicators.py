"""Technical indicators over a closing-price series: RSI, MACD and Bollinger Bands.

All functions are total. When the series is too short for the requested
period they return a documented neutral value instead of raising:
RSI 50, MACD 0 and all-zero Bollinger Bands.

The reproduced arithmetic deliberately differs from textbook definitions in
two places:

* RSI averages the first ``period`` deltas of the series (the oldest
  ``period + 1`` prices), not the trailing ones. Callers wanting a recent
  RSI must pass a window already trimmed to the last ``period + 1`` prices.
* MACD is the difference of two simple means, not of two EMAs, and has no
  signal line.
"""

import math
from typing import Sequence

from btc_signals.analysis.models import BollingerBands, IndicatorSet
from btc_signals.config import IndicatorSettings

#: RSI returned when there are fewer than ``period + 1`` prices.
NEUTRAL_RSI = 50.0


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def compute_rsi(prices: Sequence[float], period: int = 14) -> float:
    """Compute the Relative Strength Index over the oldest ``period`` deltas.

    Gains and losses are summed over transitions 1..period starting at the
    beginning of ``prices``, then averaged by ``period``.

    Args:
        prices: Closing prices ordered oldest-first.
        period: Number of deltas to average.

    Returns:
        RSI in [0, 100]. 50 with insufficient data, 100 when there are no
        losses (including a perfectly flat series).
    """
    if len(prices) < period + 1:
        return NEUTRAL_RSI

    gains = 0.0
    losses = 0.0
    for i in range(1, period + 1):
        change = prices[i] - prices[i - 1]
        if change >= 0:
            gains += change
        else:
            losses -= change

    avg_gain = gains / period
    avg_loss = losses / period

    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


def compute_macd(prices: Sequence[float], fast: int = 12, slow: int = 26) -> float:
    """Compute the simplified MACD: mean of the last ``fast`` prices minus mean of the last ``slow``.

    Returns:
        The mean difference, or 0 when fewer than ``slow`` prices exist.
    """
    if len(prices) < slow:
        return 0.0

    fast_mean = _mean(prices[-fast:])
    slow_mean = _mean(prices[-slow:])
    return fast_mean - slow_mean


def compute_bollinger_bands(
    prices: Sequence[float], period: int = 20, k: float = 2.0
) -> BollingerBands:
    """Compute Bollinger Bands over the last ``period`` prices.

    Uses the population standard deviation (divisor ``period``).

    Args:
        prices: Closing prices ordered oldest-first.
        period: Window length for the mean and deviation.
        k: Band width in standard deviations.

    Returns:
        BollingerBands with ``lower <= middle <= upper``, or all zeros when
        fewer than ``period`` prices exist.
    """
    if len(prices) < period:
        return BollingerBands()

    window = prices[-period:]
    middle = _mean(window)
    variance = sum((p - middle) ** 2 for p in window) / period
    sd = math.sqrt(variance)

    return BollingerBands(
        upper=middle + k * sd,
        middle=middle,
        lower=middle - k * sd,
    )


def compute_indicators(
    prices: Sequence[float], settings: IndicatorSettings | None = None
) -> IndicatorSet:
    """Compute RSI, MACD and Bollinger Bands with the configured periods."""
    settings = settings or IndicatorSettings()
    return IndicatorSet(
        rsi=compute_rsi(prices, period=settings.rsi_period),
        macd=compute_macd(prices, fast=settings.macd_fast, slow=settings.macd_slow),
        bollinger=compute_bollinger_bands(
            prices, period=settings.bollinger_period, k=settings.bollinger_k
        ),
    )
