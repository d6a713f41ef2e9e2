"""Market analysis module.

Provides the technical indicators (RSI, simplified MACD, Bollinger Bands),
the momentum physics model, the rule-based pattern detector, the quality
aggregator, derived metric helpers, pattern statistics bookkeeping, and the
AnalysisEngine that composes them into a single MarketAnalysis.
"""

from btc_signals.analysis.derived import (
    compute_liquidity_index,
    compute_zscore,
    estimate_market_cap,
    fibonacci_levels,
    pct_change,
)
from btc_signals.analysis.engine import AnalysisEngine, validate_inputs
from btc_signals.analysis.indicators import (
    compute_bollinger_bands,
    compute_indicators,
    compute_macd,
    compute_rsi,
)
from btc_signals.analysis.models import (
    AnalysisQuality,
    BollingerBands,
    EconomicFactors,
    EnergyLevel,
    IndicatorSet,
    MarketAnalysis,
    PatternRecord,
    PhysicsMetrics,
    TechnicalLevels,
)
from btc_signals.analysis.patterns import (
    PatternInputs,
    PatternRule,
    build_rules,
    detect_patterns,
)
from btc_signals.analysis.physics import (
    classify_energy,
    compute_momentum_physics,
    compute_velocity,
)
from btc_signals.analysis.quality import summarize_quality
from btc_signals.analysis.stats import (
    PatternStats,
    rank_patterns,
    record_patterns,
    rate_pattern_quality,
    update_pattern_stats,
)

__all__ = [
    "AnalysisEngine",
    "AnalysisQuality",
    "BollingerBands",
    "EconomicFactors",
    "EnergyLevel",
    "IndicatorSet",
    "MarketAnalysis",
    "PatternInputs",
    "PatternRecord",
    "PatternRule",
    "PatternStats",
    "PhysicsMetrics",
    "TechnicalLevels",
    "build_rules",
    "classify_energy",
    "compute_bollinger_bands",
    "compute_indicators",
    "compute_liquidity_index",
    "compute_macd",
    "compute_momentum_physics",
    "compute_rsi",
    "compute_velocity",
    "compute_zscore",
    "detect_patterns",
    "estimate_market_cap",
    "fibonacci_levels",
    "pct_change",
    "rank_patterns",
    "record_patterns",
    "rate_pattern_quality",
    "summarize_quality",
    "update_pattern_stats",
    "validate_inputs",
]
