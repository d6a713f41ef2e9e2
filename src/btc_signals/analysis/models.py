"""Analysis output data models.

Every structure here is derived from the candles and auxiliary metrics of a
single run: built at analysis start, consumed by the next stage, and handed
to the caller at the end. Nothing carries state across runs.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class EnergyLevel(str, Enum):
    """Momentum energy classification from absolute velocity."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class BollingerBands:
    """Bollinger Bands over the trailing window. All zero when history is short."""

    upper: float = 0.0
    middle: float = 0.0
    lower: float = 0.0


@dataclass(frozen=True)
class IndicatorSet:
    """Classical technical indicators for one run."""

    rsi: float  # 0-100
    macd: float  # Simple-mean difference, not EMA MACD
    bollinger: BollingerBands


@dataclass(frozen=True)
class PhysicsMetrics:
    """Momentum "physics" metrics.

    Velocity is the mean percent change per candle and acceleration is the
    change in velocity between two consecutive 12-candle windows. The force
    index uses the current price as a mass proxy. ``energy_level`` is None
    when there is not enough history to compute anything.
    """

    momentum_velocity: float = 0.0
    momentum_acceleration: float = 0.0
    force_index: float = 0.0
    wave_frequency: float = 0.0
    energy_level: EnergyLevel | None = None


@dataclass(frozen=True)
class PatternRecord:
    """One fired pattern rule with its strength and historical constants."""

    pattern_name: str
    strength: float  # 0 to the rule's cap
    frequency: int
    accuracy_rate: float
    mathematical_signature: str  # Human-readable audit string, not parsed


@dataclass(frozen=True)
class AnalysisQuality:
    """Summary of the pattern set for one run."""

    mathematical_confidence: float
    pattern_recognition_score: float
    data_freshness: str = "Real-time"


@dataclass(frozen=True)
class TechnicalLevels:
    """Indicator values and price levels flattened for display and prompting."""

    rsi: float
    macd: float
    bollinger_upper: float
    bollinger_lower: float
    fibonacci_resistance: float
    fibonacci_support: float


@dataclass(frozen=True)
class EconomicFactors:
    """Market-structure factors derived from funding, momentum and volume."""

    funding_rate: float
    open_interest_change: float  # Always 0.0: no open interest history
    supply_demand_ratio: float  # |momentum_velocity|
    liquidity_index: float


@dataclass(frozen=True)
class MarketAnalysis:
    """Complete result of one analysis run."""

    symbol: str
    current_price: float
    market_cap: float
    volume_24h: float
    funding_rate: float
    open_interest: float
    indicators: IndicatorSet
    physics: PhysicsMetrics
    technical_levels: TechnicalLevels
    economic_factors: EconomicFactors
    patterns: list[PatternRecord] = field(default_factory=list)
    quality: AnalysisQuality = field(
        default_factory=lambda: AnalysisQuality(
            mathematical_confidence=0.8, pattern_recognition_score=0.5
        )
    )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready dict (enums rendered as their values)."""
        data = asdict(self)
        energy = self.physics.energy_level
        data["physics"]["energy_level"] = energy.value if energy is not None else None
        return data
