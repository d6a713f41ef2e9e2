"""Prediction prompt rendering and response parsing.

build_prediction_prompt() turns a MarketAnalysis into the request text for a
narrative predictor; parse_prediction_response() turns the predictor's JSON
reply back into a PredictionSet, falling back to the neutral prediction on
any malformed content.
"""

from __future__ import annotations

import json
from typing import Any

from btc_signals.analysis.models import MarketAnalysis
from btc_signals.logging import get_logger
from btc_signals.prediction.predictor import fallback_prediction
from btc_signals.prediction.types import (
    Direction,
    Horizon,
    HorizonPrediction,
    MarketStance,
    PredictionSet,
    VolatilityMetrics,
)

logger = get_logger(__name__)

_RESPONSE_FORMAT = """{
  "predictions": {
    "horizon_10m": {"direction": "Increase|Decrease|Flat", "confidence": 0.XX, "target_price": XXXX, "mathematical_basis": "reason"},
    "horizon_30m": {"direction": "Increase|Decrease|Flat", "confidence": 0.XX, "target_price": XXXX, "mathematical_basis": "reason"},
    "horizon_1h": {"direction": "Increase|Decrease|Flat", "confidence": 0.XX, "target_price": XXXX, "mathematical_basis": "reason"},
    "horizon_24h": {"direction": "Increase|Decrease|Flat", "confidence": 0.XX, "target_price": XXXX, "mathematical_basis": "reason"}
  },
  "market_stance": {
    "overall_bias": "Bullish|Bearish|Neutral",
    "confidence": 0.XX,
    "risk_level": "Low|Medium|High",
    "big_manipulation_detected": true|false
  },
  "volatility_metrics": {
    "standard_deviation": 0.XX,
    "var_95": 0.XX,
    "var_99": 0.XX,
    "volatility_regime": "Low|Medium|High"
  }
}"""


def build_prediction_prompt(analysis: MarketAnalysis) -> str:
    """Render the prediction request text for a completed analysis.

    Funding is shown in basis points, momentum velocity in percent and
    24h volume in billions.
    """
    return (
        "Analyze Bitcoin market with mathematical precision. Current data:\n"
        f"Price: ${analysis.current_price}\n"
        f"RSI: {analysis.indicators.rsi:.1f}\n"
        f"MACD: {analysis.indicators.macd:.2f}\n"
        f"Funding: {analysis.funding_rate * 10000:.2f} bps\n"
        f"Momentum: {analysis.physics.momentum_velocity * 100:.3f}%\n"
        f"Volume 24h: ${analysis.volume_24h / 1e9:.2f}B\n"
        "\n"
        f"Detected {len(analysis.patterns)} patterns. Provide predictions for "
        "10m, 30m, 1h, 24h with confidence >80% only.\n"
        "Use mathematical reasoning. Be emotionless.\n"
        "\n"
        f"Format: {_RESPONSE_FORMAT}"
    )


def _parse_horizon(raw: dict[str, Any]) -> HorizonPrediction:
    return HorizonPrediction(
        direction=Direction(raw["direction"]),
        confidence=float(raw["confidence"]),
        target_price=float(raw["target_price"]),
        mathematical_basis=str(raw.get("mathematical_basis", "")),
    )


def _parse_payload(payload: dict[str, Any]) -> PredictionSet:
    raw_predictions = payload["predictions"]
    predictions = {
        horizon: _parse_horizon(raw_predictions[f"horizon_{horizon.value}"])
        for horizon in Horizon
    }

    stance = payload.get("market_stance") or {}
    volatility = payload.get("volatility_metrics") or {}
    defaults_stance = MarketStance()
    defaults_vol = VolatilityMetrics()

    return PredictionSet(
        predictions=predictions,
        market_stance=MarketStance(
            overall_bias=str(stance.get("overall_bias", defaults_stance.overall_bias)),
            confidence=float(stance.get("confidence", defaults_stance.confidence)),
            risk_level=str(stance.get("risk_level", defaults_stance.risk_level)),
            big_manipulation_detected=bool(
                stance.get(
                    "big_manipulation_detected",
                    defaults_stance.big_manipulation_detected,
                )
            ),
        ),
        volatility_metrics=VolatilityMetrics(
            standard_deviation=float(
                volatility.get("standard_deviation", defaults_vol.standard_deviation)
            ),
            var_95=float(volatility.get("var_95", defaults_vol.var_95)),
            var_99=float(volatility.get("var_99", defaults_vol.var_99)),
            volatility_regime=str(
                volatility.get("volatility_regime", defaults_vol.volatility_regime)
            ),
        ),
    )


def parse_prediction_response(content: str, current_price: float) -> PredictionSet:
    """Parse a predictor's JSON reply into a PredictionSet.

    All four horizons must be present with a valid direction, confidence and
    target price. Stance and volatility fields are optional and default to
    the neutral values.

    Args:
        content: Raw reply text, expected to be a JSON object.
        current_price: Target price for the fallback prediction.

    Returns:
        The parsed PredictionSet, or fallback_prediction(current_price) if
        the reply is malformed. Never raises.
    """
    try:
        payload = json.loads(content)
        return _parse_payload(payload)
    except (
        json.JSONDecodeError,
        KeyError,
        TypeError,
        ValueError,
        AttributeError,
        OverflowError,
    ) as e:
        logger.warning(
            "prediction_response_unparseable",
            error=str(e),
            content_preview=str(content)[:200],
        )
        return fallback_prediction(current_price)
