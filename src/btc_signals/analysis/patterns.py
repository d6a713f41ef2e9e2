"""Rule-based pattern detection over indicators, momentum physics and funding.

Each rule is a small record pairing a predicate with a strength formula, a
strength cap, and the rule's historical frequency/accuracy constants. Rules
are independent: detection evaluates every rule in order and emits a record
for each one that fires, so a run yields between zero and four patterns.

Thresholds come from PatternSettings. Caps, frequencies and accuracy rates
belong to the rules themselves.
"""

from dataclasses import dataclass
from typing import Callable, Sequence

from btc_signals.analysis.models import PatternRecord, PhysicsMetrics
from btc_signals.config import PatternSettings


@dataclass(frozen=True)
class PatternInputs:
    """Everything a pattern rule may look at for one run."""

    prices: Sequence[float]
    volumes: Sequence[float]
    rsi: float
    macd: float
    funding_rate: float
    physics: PhysicsMetrics

    @property
    def velocity(self) -> float:
        return self.physics.momentum_velocity

    @property
    def current_volume(self) -> float:
        return self.volumes[-1] if self.volumes else 0.0

    def average_volume(self, lookback: int) -> float:
        """Mean of the last ``lookback`` volumes, current sample included."""
        window = self.volumes[-lookback:]
        if not window:
            return 0.0
        return sum(window) / len(window)


@dataclass(frozen=True)
class PatternRule:
    """A single detection rule.

    ``score`` is the raw strength; ``evaluate`` clamps it into [0, cap].
    """

    name: str
    predicate: Callable[[PatternInputs], bool]
    score: Callable[[PatternInputs], float]
    signature: Callable[[PatternInputs], str]
    cap: float
    frequency: int
    accuracy_rate: float

    def evaluate(self, inputs: PatternInputs) -> PatternRecord | None:
        """Return a PatternRecord if the rule fires, None otherwise."""
        if not self.predicate(inputs):
            return None
        strength = max(0.0, min(self.cap, self.score(inputs)))
        return PatternRecord(
            pattern_name=self.name,
            strength=strength,
            frequency=self.frequency,
            accuracy_rate=self.accuracy_rate,
            mathematical_signature=self.signature(inputs),
        )


def _sign(x: float) -> int:
    if x > 0:
        return 1
    elif x < 0:
        return -1
    return 0


def build_rules(settings: PatternSettings | None = None) -> list[PatternRule]:
    """Build the ordered list of pattern rules with the configured thresholds.

    Args:
        settings: Rule thresholds. Defaults to PatternSettings().

    Returns:
        The four rules in a fixed order: RSI divergence, volume breakout,
        funding extreme, MACD confluence.
    """
    s = settings or PatternSettings()

    def volume_ratio(i: PatternInputs) -> float:
        avg = i.average_volume(s.volume_lookback)
        return i.current_volume / avg if avg > 0 else 0.0

    def volume_breakout(i: PatternInputs) -> bool:
        avg = i.average_volume(s.volume_lookback)
        if avg <= 0:
            return False
        return (
            i.current_volume > avg * s.volume_spike_ratio
            and abs(i.velocity) > s.breakout_min_velocity
        )

    return [
        PatternRule(
            name="RSI_Bearish_Divergence",
            predicate=lambda i: i.rsi > s.rsi_overbought and i.velocity < 0,
            score=lambda i: (i.rsi - s.rsi_overbought) / 30 + 0.5,
            signature=lambda i: (
                f"RSI({i.rsi:.1f}) > {s.rsi_overbought:g} && "
                f"MomentumVel({i.velocity:.4f}) < 0"
            ),
            cap=0.95,
            frequency=23,
            accuracy_rate=0.847,
        ),
        PatternRule(
            name="High_Volume_Momentum_Breakout",
            predicate=volume_breakout,
            score=lambda i: volume_ratio(i) - 1 + abs(i.velocity) * 10,
            signature=lambda i: (
                f"Vol({volume_ratio(i):.2f}x) && "
                f"|MomVel|({abs(i.velocity):.4f}) > {s.breakout_min_velocity:g}"
            ),
            cap=0.98,
            frequency=18,
            accuracy_rate=0.823,
        ),
        PatternRule(
            name="Funding_Rate_Extreme",
            predicate=lambda i: abs(i.funding_rate) > s.funding_extreme,
            score=lambda i: abs(i.funding_rate) * 2000,
            signature=lambda i: (
                f"|FundingRate|({abs(i.funding_rate):.6f}) > {s.funding_extreme:g}"
            ),
            cap=0.92,
            frequency=31,
            accuracy_rate=0.791,
        ),
        PatternRule(
            name="MACD_Momentum_Confluence",
            predicate=lambda i: (
                abs(i.macd) > s.macd_min_magnitude and _sign(i.macd) == _sign(i.velocity)
            ),
            score=lambda i: abs(i.macd) / 100 + abs(i.velocity) * 5,
            signature=lambda i: f"MACD({i.macd:.2f}) && MomVel same sign",
            cap=0.89,
            frequency=45,
            accuracy_rate=0.812,
        ),
    ]


def detect_patterns(
    inputs: PatternInputs, rules: list[PatternRule] | None = None
) -> list[PatternRecord]:
    """Evaluate every rule against ``inputs`` and collect the ones that fire.

    Args:
        inputs: Indicator, physics, funding and volume inputs for one run.
        rules: Rules to evaluate. Defaults to build_rules() with default settings.

    Returns:
        Records for each firing rule, in rule order. Empty if none fire.
    """
    if rules is None:
        rules = build_rules()

    patterns: list[PatternRecord] = []
    for rule in rules:
        record = rule.evaluate(inputs)
        if record is not None:
            patterns.append(record)
    return patterns
