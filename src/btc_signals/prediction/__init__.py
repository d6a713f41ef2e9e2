"""Prediction interface for narrative predictors consuming a MarketAnalysis.

Provides the Predictor contract, the neutral fallback prediction, prompt
rendering and response parsing, and prediction log entry validation.
"""

from btc_signals.prediction.predictor import (
    FallbackPredictor,
    Predictor,
    fallback_prediction,
)
from btc_signals.prediction.prompt import (
    build_prediction_prompt,
    parse_prediction_response,
)
from btc_signals.prediction.types import (
    Direction,
    Horizon,
    HorizonPrediction,
    MarketStance,
    PredictionLogEntry,
    PredictionSet,
    VolatilityMetrics,
)

__all__ = [
    "Direction",
    "FallbackPredictor",
    "Horizon",
    "HorizonPrediction",
    "MarketStance",
    "PredictionLogEntry",
    "PredictionSet",
    "Predictor",
    "VolatilityMetrics",
    "build_prediction_prompt",
    "fallback_prediction",
    "parse_prediction_response",
]
