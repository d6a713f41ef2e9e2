"""Momentum "physics" model over closing prices.

Treats the mean percent change per candle as a velocity and its change
between two consecutive windows as an acceleration. Force uses the current
price as a mass proxy and wave frequency is just velocity rescaled. This is
a naming metaphor, not a physical simulation.

Window sizes and energy thresholds are fixed properties of the model.
"""

from typing import Sequence

from btc_signals.analysis.models import EnergyLevel, PhysicsMetrics

#: Minimum number of prices before any physics metric is computed.
MIN_HISTORY = 20

#: Prices per velocity window.
WINDOW = 12

_HIGH_ENERGY_VELOCITY = 0.05
_MEDIUM_ENERGY_VELOCITY = 0.02


def compute_velocity(window: Sequence[float]) -> float:
    """Mean successive percent change within ``window``.

    Each term is ``(p[i] - p[i-1]) / p[i-1]``. A term whose prior price is
    zero contributes 0. The sum is divided by ``len(window) - 1``.

    Returns:
        Mean percent change per step, 0 for fewer than two prices.
    """
    if len(window) < 2:
        return 0.0

    total = 0.0
    for prev, price in zip(window, window[1:]):
        if prev != 0:
            total += (price - prev) / prev
    return total / (len(window) - 1)


def classify_energy(velocity: float) -> EnergyLevel:
    """Classify momentum energy from absolute velocity."""
    speed = abs(velocity)
    if speed > _HIGH_ENERGY_VELOCITY:
        return EnergyLevel.HIGH
    elif speed > _MEDIUM_ENERGY_VELOCITY:
        return EnergyLevel.MEDIUM
    return EnergyLevel.LOW


def compute_momentum_physics(prices: Sequence[float]) -> PhysicsMetrics:
    """Compute velocity, acceleration, force and energy from recent prices.

    ``recent`` is the last 12 prices and ``older`` the 12 before it (fewer
    when the series has between 20 and 23 prices).

    Args:
        prices: Closing prices ordered oldest-first.

    Returns:
        PhysicsMetrics. All zeros with no energy level when fewer than 20
        prices exist.
    """
    if len(prices) < MIN_HISTORY:
        return PhysicsMetrics()

    recent = prices[-WINDOW:]
    older = prices[-2 * WINDOW : -WINDOW]

    velocity = compute_velocity(recent)
    old_velocity = compute_velocity(older)
    acceleration = velocity - old_velocity

    return PhysicsMetrics(
        momentum_velocity=velocity,
        momentum_acceleration=acceleration,
        force_index=acceleration * prices[-1],
        wave_frequency=abs(velocity) * 1000,
        energy_level=classify_energy(velocity),
    )
