"""Analysis engine composing indicators, physics, patterns and quality.

The AnalysisEngine is the top-level coordinator that:
1. Validates the candle window and auxiliary metrics
2. Computes technical indicators and momentum physics from closing prices
3. Runs the pattern rules over indicators, physics, volumes and funding
4. Summarizes pattern quality and derives display-level metrics
5. Logs the analysis breakdown at INFO level
6. Returns a MarketAnalysis

The engine is a pure function of its inputs and holds no state between
runs, so one instance can serve concurrent callers.
"""

from __future__ import annotations

import math
from dataclasses import fields
from datetime import datetime
from typing import Any, Sequence

from btc_signals.analysis.derived import (
    compute_liquidity_index,
    estimate_market_cap,
    fibonacci_levels,
)
from btc_signals.analysis.indicators import compute_indicators
from btc_signals.analysis.models import (
    EconomicFactors,
    MarketAnalysis,
    TechnicalLevels,
)
from btc_signals.analysis.patterns import PatternInputs, build_rules, detect_patterns
from btc_signals.analysis.physics import compute_momentum_physics
from btc_signals.analysis.quality import summarize_quality
from btc_signals.analysis.stats import PatternStats, record_patterns
from btc_signals.config import AppSettings
from btc_signals.exceptions import InvalidInputError
from btc_signals.logging import get_logger
from btc_signals.models import AuxiliaryMetrics, Candle

logger = get_logger(__name__)


def _is_finite(value: Any) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def validate_inputs(candles: Sequence[Candle], aux: AuxiliaryMetrics) -> None:
    """Reject candles or metrics holding missing or non-finite numbers.

    Only the fields the engine computes on are checked: each candle's close
    and volume, and every auxiliary metric.

    Raises:
        InvalidInputError: Naming the first offending candle index or field.
    """
    for index, candle in enumerate(candles):
        for name in ("close", "volume"):
            value = getattr(candle, name)
            if not _is_finite(value):
                raise InvalidInputError(
                    f"candle[{index}].{name} is not a finite number: {value!r}"
                )

    for f in fields(aux):
        value = getattr(aux, f.name)
        if not _is_finite(value):
            raise InvalidInputError(f"aux.{f.name} is not a finite number: {value!r}")


class AnalysisEngine:
    """Produces a MarketAnalysis from a candle window and a market snapshot.

    Args:
        settings: Indicator periods, pattern thresholds and market constants.
            None = defaults from the environment.
    """

    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings or AppSettings()
        self._rules = build_rules(self._settings.patterns)

    def analyze(
        self, candles: Sequence[Candle], aux: AuxiliaryMetrics
    ) -> MarketAnalysis:
        """Run the full analysis for one candle window.

        Args:
            candles: OHLCV candles ordered oldest-first. May be short or empty;
                indicators then fall back to their neutral values.
            aux: Auxiliary market metrics for this run.

        Returns:
            MarketAnalysis with indicators, physics, patterns and quality.

        Raises:
            InvalidInputError: If a close, volume or metric is missing or non-finite.
        """
        validate_inputs(candles, aux)

        market = self._settings.market
        pattern_settings = self._settings.patterns

        prices = [c.close for c in candles]
        volumes = [c.volume for c in candles]

        indicators = compute_indicators(prices, self._settings.indicators)
        physics = compute_momentum_physics(prices)

        patterns = detect_patterns(
            PatternInputs(
                prices=prices,
                volumes=volumes,
                rsi=indicators.rsi,
                macd=indicators.macd,
                funding_rate=aux.funding_rate,
                physics=physics,
            ),
            self._rules,
        )
        quality = summarize_quality(
            patterns,
            confidence_floor=pattern_settings.confidence_floor,
            neutral_score=pattern_settings.neutral_recognition_score,
        )

        resistance, support = fibonacci_levels(
            aux.current_price,
            resistance_ratio=market.fib_resistance_ratio,
            support_ratio=market.fib_support_ratio,
        )
        technical_levels = TechnicalLevels(
            rsi=indicators.rsi,
            macd=indicators.macd,
            bollinger_upper=indicators.bollinger.upper,
            bollinger_lower=indicators.bollinger.lower,
            fibonacci_resistance=resistance,
            fibonacci_support=support,
        )
        economic_factors = EconomicFactors(
            funding_rate=aux.funding_rate,
            open_interest_change=0.0,
            supply_demand_ratio=abs(physics.momentum_velocity),
            liquidity_index=compute_liquidity_index(
                volumes, lookback=market.liquidity_lookback
            ),
        )

        analysis = MarketAnalysis(
            symbol=market.symbol,
            current_price=aux.current_price,
            market_cap=estimate_market_cap(
                aux.current_price, supply=market.circulating_supply
            ),
            volume_24h=aux.volume_24h,
            funding_rate=aux.funding_rate,
            open_interest=aux.open_interest,
            indicators=indicators,
            physics=physics,
            technical_levels=technical_levels,
            economic_factors=economic_factors,
            patterns=patterns,
            quality=quality,
        )

        logger.info(
            "market_analysis",
            symbol=market.symbol,
            candles=len(candles),
            rsi=round(indicators.rsi, 2),
            macd=round(indicators.macd, 4),
            momentum_velocity=round(physics.momentum_velocity, 6),
            energy_level=physics.energy_level.value if physics.energy_level else None,
            patterns=[p.pattern_name for p in patterns],
            mathematical_confidence=quality.mathematical_confidence,
            pattern_recognition_score=round(quality.pattern_recognition_score, 4),
        )

        return analysis

    def track_patterns(
        self,
        stats: dict[str, PatternStats],
        analysis: MarketAnalysis,
        now: datetime,
    ) -> dict[str, PatternStats]:
        """Fold an analysis's patterns into a caller-held stats table.

        Patterns below ``PatternSettings.min_tracked_accuracy`` are not tracked.
        """
        updated = record_patterns(
            stats,
            analysis.patterns,
            now,
            min_accuracy=self._settings.patterns.min_tracked_accuracy,
        )
        logger.debug(
            "patterns_tracked",
            tracked=sorted(updated.keys() - stats.keys()),
            total=len(updated),
        )
        return updated
