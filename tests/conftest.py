"""Shared test fixtures for the market analysis engine."""

import pytest

from btc_signals.config import AppSettings, IndicatorSettings, MarketSettings, PatternSettings
from btc_signals.models import Candle


def _make_candles(
    closes: list[float],
    volumes: list[float] | None = None,
    start_ms: int = 1_700_000_000_000,
    interval_ms: int = 300_000,  # 5 minutes
) -> list[Candle]:
    """Create candles with the given closes and volumes.

    Open/high/low mirror the close since only closes and volumes feed the
    analysis. Volumes default to a constant 1000.
    """
    if volumes is None:
        volumes = [1000.0] * len(closes)
    return [
        Candle(
            timestamp=start_ms + i * interval_ms,
            open=c,
            high=c,
            low=c,
            close=c,
            volume=v,
        )
        for i, (c, v) in enumerate(zip(closes, volumes))
    ]


@pytest.fixture
def make_candles():
    """Return the candle factory so tests can build windows inline."""
    return _make_candles


@pytest.fixture
def app_settings() -> AppSettings:
    """Return AppSettings with default sub-settings and debug logging."""
    return AppSettings(
        log_level="DEBUG",
        indicators=IndicatorSettings(),
        patterns=PatternSettings(),
        market=MarketSettings(),
    )
