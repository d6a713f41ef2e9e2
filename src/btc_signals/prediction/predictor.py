"""Abstract predictor interface and the neutral fallback predictor.

Narrative predictors (for example a language-model client) live outside
this package and implement Predictor. Whatever goes wrong inside them, the
contract is to return a PredictionSet; fallback_prediction() is the
documented neutral answer to return instead of raising.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from btc_signals.analysis.models import MarketAnalysis
from btc_signals.prediction.types import (
    Direction,
    Horizon,
    HorizonPrediction,
    MarketStance,
    PredictionSet,
    VolatilityMetrics,
)

_FALLBACK_BASIS = "Insufficient data for high confidence prediction"


def fallback_prediction(current_price: float) -> PredictionSet:
    """Neutral prediction: Flat at 50% confidence on every horizon.

    Args:
        current_price: Used as the target price for every horizon.

    Returns:
        PredictionSet with ``is_fallback=True``.
    """
    return PredictionSet(
        predictions={
            horizon: HorizonPrediction(
                direction=Direction.FLAT,
                confidence=0.5,
                target_price=current_price,
                mathematical_basis=_FALLBACK_BASIS,
            )
            for horizon in Horizon
        },
        market_stance=MarketStance(),
        volatility_metrics=VolatilityMetrics(),
        is_fallback=True,
    )


class Predictor(ABC):
    """Abstract base class for horizon predictors."""

    @abstractmethod
    async def predict(self, analysis: MarketAnalysis) -> PredictionSet:
        """Produce horizon predictions for a completed analysis.

        Implementations must not raise for bad upstream responses; return
        fallback_prediction(analysis.current_price) instead.
        """
        ...


class FallbackPredictor(Predictor):
    """Predictor that always returns the neutral fallback."""

    async def predict(self, analysis: MarketAnalysis) -> PredictionSet:
        return fallback_prediction(analysis.current_price)
