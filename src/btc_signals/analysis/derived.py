"""Small derived market metrics consumed by display and prompt building.

None of these feed back into indicator or pattern computation.
"""

import math
from typing import Sequence

#: Approximate BTC circulating supply used for the market cap estimate.
DEFAULT_CIRCULATING_SUPPLY = 19_700_000


def estimate_market_cap(
    price: float, supply: float = DEFAULT_CIRCULATING_SUPPLY
) -> float:
    """Estimate market cap as price times a fixed circulating supply."""
    return price * supply


def fibonacci_levels(
    price: float, resistance_ratio: float = 1.618, support_ratio: float = 0.618
) -> tuple[float, float]:
    """Return ``(resistance, support)`` price levels scaled from ``price``."""
    return price * resistance_ratio, price * support_ratio


def compute_liquidity_index(volumes: Sequence[float], lookback: int = 10) -> float:
    """Ratio of the latest volume to the mean of the last ``lookback`` volumes.

    With fewer than ``lookback`` samples the mean is taken over the samples
    available, not a fixed ``lookback``, so ``[100, 200]`` gives 200 / 150.

    Returns:
        The ratio, or 0 when there are no volumes or the mean is zero.
    """
    window = volumes[-lookback:]
    if not window:
        return 0.0
    avg = sum(window) / len(window)
    if avg == 0:
        return 0.0
    return volumes[-1] / avg


def pct_change(a: float, b: float) -> float:
    """Fractional change from ``a`` to ``b``. 0 when ``a`` is zero."""
    if not a:
        return 0.0
    return (b - a) / a


def compute_zscore(values: Sequence[float]) -> float:
    """Z-score of the last finite value against all finite values.

    Uses the population standard deviation, floored at 1e-9 so a flat
    series scores 0 instead of dividing by zero.

    Returns:
        The z-score, or 0 with fewer than three finite values.
    """
    xs = [v for v in values if math.isfinite(v)]
    if len(xs) < 3:
        return 0.0
    mean = sum(xs) / len(xs)
    sd = math.sqrt(sum((x - mean) ** 2 for x in xs) / len(xs)) or 1e-9
    return (xs[-1] - mean) / sd
