"""Tests for rule-based pattern detection.

Tests verify each rule's fire condition, strength formula and cap,
signature text, rule independence, and threshold injection.
"""

import pytest

from btc_signals.analysis.models import PhysicsMetrics
from btc_signals.analysis.patterns import PatternInputs, build_rules, detect_patterns
from btc_signals.config import PatternSettings

_CAPS = {
    "RSI_Bearish_Divergence": 0.95,
    "High_Volume_Momentum_Breakout": 0.98,
    "Funding_Rate_Extreme": 0.92,
    "MACD_Momentum_Confluence": 0.89,
}


def _inputs(
    rsi: float = 50.0,
    macd: float = 0.0,
    funding_rate: float = 0.0,
    velocity: float = 0.0,
    volumes: list[float] | None = None,
) -> PatternInputs:
    """Build PatternInputs with quiet defaults: no rule fires."""
    return PatternInputs(
        prices=[100.0] * 30,
        volumes=[1000.0] * 30 if volumes is None else volumes,
        rsi=rsi,
        macd=macd,
        funding_rate=funding_rate,
        physics=PhysicsMetrics(momentum_velocity=velocity),
    )


def _names(inputs: PatternInputs) -> list[str]:
    return [p.pattern_name for p in detect_patterns(inputs)]


class TestRsiBearishDivergence:
    """Tests for RSI_Bearish_Divergence."""

    def test_fires_on_overbought_with_negative_velocity(self) -> None:
        """RSI 76 and falling momentum: strength 6/30 + 0.5 = 0.7."""
        [record] = detect_patterns(_inputs(rsi=76.0, velocity=-0.001))
        assert record.pattern_name == "RSI_Bearish_Divergence"
        assert record.strength == pytest.approx(0.7)
        assert record.frequency == 23
        assert record.accuracy_rate == 0.847
        assert record.mathematical_signature == (
            "RSI(76.0) > 70 && MomentumVel(-0.0010) < 0"
        )

    def test_strength_capped(self) -> None:
        """RSI 85 would score 1.0 and is capped at 0.95."""
        [record] = detect_patterns(_inputs(rsi=85.0, velocity=-0.001))
        assert record.strength == 0.95

    def test_zero_velocity_does_not_fire(self) -> None:
        """Velocity must be strictly negative."""
        assert _names(_inputs(rsi=90.0, velocity=0.0)) == []

    def test_rsi_at_threshold_does_not_fire(self) -> None:
        """RSI must be strictly above 70."""
        assert _names(_inputs(rsi=70.0, velocity=-0.01)) == []


class TestHighVolumeMomentumBreakout:
    """Tests for High_Volume_Momentum_Breakout."""

    def test_fires_on_volume_spike_with_momentum(self) -> None:
        """Volume 200 over a last-10 mean of 110 with velocity 0.004."""
        volumes = [100.0] * 9 + [200.0]
        [record] = detect_patterns(_inputs(velocity=0.004, volumes=volumes))

        assert record.pattern_name == "High_Volume_Momentum_Breakout"
        assert record.strength == pytest.approx(200 / 110 - 1 + 0.04)
        assert record.frequency == 18
        assert record.accuracy_rate == 0.823
        assert record.mathematical_signature == (
            "Vol(1.82x) && |MomVel|(0.0040) > 0.003"
        )

    def test_average_includes_current_sample(self) -> None:
        """Last-10 mean includes the spike: 300 vs mean 120 is a 2.5x ratio."""
        volumes = [50.0] * 20 + [100.0] * 9 + [300.0]
        [record] = detect_patterns(_inputs(velocity=-0.004, volumes=volumes))
        assert record.mathematical_signature.startswith("Vol(2.50x)")
        assert record.strength == 0.98

    def test_small_velocity_does_not_fire(self) -> None:
        """|velocity| must exceed 0.003."""
        volumes = [100.0] * 9 + [300.0]
        assert _names(_inputs(velocity=0.003, volumes=volumes)) == []

    def test_modest_volume_does_not_fire(self) -> None:
        """Ratio below 1.5 does not fire."""
        volumes = [100.0] * 9 + [150.0]
        assert _names(_inputs(velocity=0.01, volumes=volumes)) == []

    def test_no_volumes_does_not_fire(self) -> None:
        """Empty or all-zero volume history cannot fire."""
        assert _names(_inputs(velocity=0.01, volumes=[])) == []
        assert _names(_inputs(velocity=0.01, volumes=[0.0] * 10)) == []


class TestFundingRateExtreme:
    """Tests for Funding_Rate_Extreme."""

    @pytest.mark.parametrize("rate", [0.001, -0.001, 0.0006])
    def test_fires_on_extreme_funding(self, rate: float) -> None:
        """Any |rate| above 5 bps fires; 2000x scaling always hits the cap."""
        [record] = detect_patterns(_inputs(funding_rate=rate))
        assert record.pattern_name == "Funding_Rate_Extreme"
        assert record.strength == 0.92
        assert record.frequency == 31
        assert record.accuracy_rate == 0.791

    def test_signature(self) -> None:
        """Signature shows |rate| with six decimals."""
        [record] = detect_patterns(_inputs(funding_rate=-0.001))
        assert record.mathematical_signature == "|FundingRate|(0.001000) > 0.0005"

    @pytest.mark.parametrize("rate", [0.0, 0.0005, -0.0004])
    def test_moderate_funding_does_not_fire(self, rate: float) -> None:
        """|rate| at or below 5 bps does not fire."""
        assert _names(_inputs(funding_rate=rate)) == []

    def test_uncapped_strength_with_lower_threshold(self) -> None:
        """Injected threshold lets a small rate fire below the cap: 0.0002 * 2000."""
        rules = build_rules(PatternSettings(funding_extreme=0.0001))
        [record] = detect_patterns(_inputs(funding_rate=0.0002), rules)
        assert record.strength == pytest.approx(0.4)


class TestMacdMomentumConfluence:
    """Tests for MACD_Momentum_Confluence."""

    def test_fires_when_signs_agree(self) -> None:
        """MACD 60 and positive velocity: 0.6 + 0.001 * 5."""
        [record] = detect_patterns(_inputs(macd=60.0, velocity=0.001))
        assert record.pattern_name == "MACD_Momentum_Confluence"
        assert record.strength == pytest.approx(0.605)
        assert record.frequency == 45
        assert record.accuracy_rate == 0.812
        assert record.mathematical_signature == "MACD(60.00) && MomVel same sign"

    def test_negative_confluence(self) -> None:
        """Both negative also agree."""
        assert _names(_inputs(macd=-60.0, velocity=-0.001)) == ["MACD_Momentum_Confluence"]

    def test_opposite_signs_do_not_fire(self) -> None:
        """Positive MACD with falling momentum does not fire."""
        assert _names(_inputs(macd=60.0, velocity=-0.001)) == []

    def test_zero_velocity_does_not_fire(self) -> None:
        """Zero velocity has no sign to agree with."""
        assert _names(_inputs(macd=60.0, velocity=0.0)) == []

    def test_small_macd_does_not_fire(self) -> None:
        """|MACD| must exceed 50."""
        assert _names(_inputs(macd=50.0, velocity=0.001)) == []

    def test_strength_capped(self) -> None:
        """MACD 200 would score 2.0 and is capped at 0.89."""
        [record] = detect_patterns(_inputs(macd=200.0, velocity=0.001))
        assert record.strength == 0.89


class TestDetectPatterns:
    """Tests for rule composition."""

    def test_quiet_market_emits_nothing(self) -> None:
        """Neutral inputs fire no rule."""
        assert detect_patterns(_inputs()) == []

    def test_all_rules_fire_together(self) -> None:
        """Rules are independent: all four can fire in one run, in rule order."""
        inputs = _inputs(
            rsi=85.0,
            macd=-80.0,
            funding_rate=0.001,
            velocity=-0.004,
            volumes=[100.0] * 9 + [300.0],
        )
        assert _names(inputs) == [
            "RSI_Bearish_Divergence",
            "High_Volume_Momentum_Breakout",
            "Funding_Rate_Extreme",
            "MACD_Momentum_Confluence",
        ]

    def test_build_rules_order_and_constants(self) -> None:
        """Rules carry their caps in a fixed order."""
        rules = build_rules()
        assert [r.name for r in rules] == list(_CAPS)
        assert [r.cap for r in rules] == list(_CAPS.values())

    @pytest.mark.parametrize("rsi", [71.0, 90.0, 100.0])
    @pytest.mark.parametrize("velocity", [-0.5, -0.004, 0.004, 0.5])
    @pytest.mark.parametrize("macd", [-500.0, -51.0, 51.0, 500.0])
    @pytest.mark.parametrize("funding_rate", [-0.01, 0.0006, 0.05])
    def test_strength_within_cap(
        self, rsi: float, velocity: float, macd: float, funding_rate: float
    ) -> None:
        """Strength is never negative and never exceeds the rule's cap."""
        inputs = _inputs(
            rsi=rsi,
            macd=macd,
            funding_rate=funding_rate,
            velocity=velocity,
            volumes=[100.0] * 9 + [1000.0],
        )
        for record in detect_patterns(inputs):
            assert 0.0 <= record.strength <= _CAPS[record.pattern_name]

    def test_injected_thresholds(self) -> None:
        """Stricter thresholds from settings suppress rules that fire by default."""
        settings = PatternSettings(rsi_overbought=90.0, macd_min_magnitude=100.0)
        inputs = _inputs(rsi=85.0, macd=80.0, velocity=0.001)
        assert detect_patterns(inputs, build_rules(settings)) == []

    def test_custom_threshold_in_signature(self) -> None:
        """Signatures show the configured threshold."""
        rules = build_rules(PatternSettings(rsi_overbought=80.0))
        [record] = detect_patterns(_inputs(rsi=85.0, velocity=-0.001), rules)
        assert record.mathematical_signature.startswith("RSI(85.0) > 80 &&")
        assert record.strength == pytest.approx(5 / 30 + 0.5)
