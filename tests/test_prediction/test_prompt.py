"""Tests for prediction prompt rendering and response parsing."""

import json

import pytest

from btc_signals.analysis.engine import AnalysisEngine
from btc_signals.analysis.models import MarketAnalysis
from btc_signals.models import AuxiliaryMetrics
from btc_signals.prediction.prompt import build_prediction_prompt, parse_prediction_response
from btc_signals.prediction.types import Direction, Horizon


def _response(**overrides) -> dict:
    """A well-formed predictor reply."""
    payload = {
        "predictions": {
            f"horizon_{h}": {
                "direction": "Increase",
                "confidence": 0.85,
                "target_price": 43_000 + i,
                "mathematical_basis": "momentum",
            }
            for i, h in enumerate(["10m", "30m", "1h", "24h"])
        },
        "market_stance": {
            "overall_bias": "Bullish",
            "confidence": 0.82,
            "risk_level": "Low",
            "big_manipulation_detected": False,
        },
        "volatility_metrics": {
            "standard_deviation": 0.01,
            "var_95": 0.02,
            "var_99": 0.03,
            "volatility_regime": "Low",
        },
    }
    payload.update(overrides)
    return payload


class TestParsePredictionResponse:
    def test_parses_well_formed_reply(self) -> None:
        result = parse_prediction_response(json.dumps(_response()), 42_000.0)

        assert result.is_fallback is False
        assert result.predictions[Horizon.TEN_MINUTES].direction == Direction.INCREASE
        assert result.predictions[Horizon.TEN_MINUTES].target_price == 43_000.0
        assert result.predictions[Horizon.ONE_DAY].target_price == 43_003.0
        assert result.market_stance.overall_bias == "Bullish"
        assert result.volatility_metrics.var_99 == 0.03

    def test_missing_stance_uses_neutral_defaults(self) -> None:
        payload = _response()
        del payload["market_stance"]
        del payload["volatility_metrics"]

        result = parse_prediction_response(json.dumps(payload), 42_000.0)

        assert result.is_fallback is False
        assert result.market_stance.overall_bias == "Neutral"
        assert result.volatility_metrics.volatility_regime == "Medium"

    @pytest.mark.parametrize(
        "content",
        [
            "not json at all",
            "",
            "[]",
            json.dumps({"predictions": {}}),
            json.dumps(_response(predictions={"horizon_10m": {"direction": "Up"}})),
        ],
    )
    def test_malformed_reply_falls_back(self, content: str) -> None:
        result = parse_prediction_response(content, 42_000.0)

        assert result.is_fallback is True
        assert result.predictions[Horizon.ONE_HOUR].target_price == 42_000.0

    def test_invalid_direction_falls_back(self) -> None:
        payload = _response()
        payload["predictions"]["horizon_1h"]["direction"] = "Sideways"
        result = parse_prediction_response(json.dumps(payload), 1.0)
        assert result.is_fallback is True

    def test_target_price_too_large_for_float_falls_back(self) -> None:
        """A JSON integer beyond float range overflows and yields the fallback."""
        content = json.dumps(_response()).replace(
            '"target_price": 43000', '"target_price": 1' + "0" * 400, 1
        )
        assert "0" * 400 in content

        result = parse_prediction_response(content, 42_000.0)

        assert result.is_fallback is True
        assert result.predictions[Horizon.TEN_MINUTES].target_price == 42_000.0


class TestBuildPredictionPrompt:
    @pytest.fixture
    def analysis(self, app_settings, make_candles) -> MarketAnalysis:
        return AnalysisEngine(app_settings).analyze(
            make_candles([100.0] * 30),
            AuxiliaryMetrics(current_price=42_000.5, funding_rate=0.001, volume_24h=3.5e9),
        )

    def test_renders_market_values(self, analysis: MarketAnalysis) -> None:
        prompt = build_prediction_prompt(analysis)

        assert "Price: $42000.5" in prompt
        assert "RSI: 100.0" in prompt
        assert "MACD: 0.00" in prompt
        assert "Funding: 10.00 bps" in prompt
        assert "Momentum: 0.000%" in prompt
        assert "Volume 24h: $3.50B" in prompt
        assert "Detected 1 patterns." in prompt

    def test_includes_response_format(self, analysis: MarketAnalysis) -> None:
        prompt = build_prediction_prompt(analysis)
        assert '"horizon_24h"' in prompt
        assert '"volatility_regime"' in prompt
