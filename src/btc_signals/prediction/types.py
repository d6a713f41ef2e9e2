"""Prediction data types shared by predictor implementations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from btc_signals.exceptions import InvalidInputError
from btc_signals.models import to_num


class Horizon(str, Enum):
    """Prediction horizons."""

    TEN_MINUTES = "10m"
    THIRTY_MINUTES = "30m"
    ONE_HOUR = "1h"
    ONE_DAY = "24h"


class Direction(str, Enum):
    """Predicted price direction over a horizon."""

    INCREASE = "Increase"
    DECREASE = "Decrease"
    FLAT = "Flat"


#: Labels accepted when logging a prediction. "No Signal" marks a skipped horizon.
VALID_LABELS = frozenset({d.value for d in Direction} | {"No Signal"})


@dataclass(frozen=True)
class HorizonPrediction:
    """Direction call for one horizon."""

    direction: Direction
    confidence: float  # 0-1
    target_price: float
    mathematical_basis: str


@dataclass(frozen=True)
class MarketStance:
    """Overall market read accompanying the horizon predictions."""

    overall_bias: str = "Neutral"  # Bullish, Bearish or Neutral
    confidence: float = 0.5
    risk_level: str = "Medium"  # Low, Medium or High
    big_manipulation_detected: bool = False


@dataclass(frozen=True)
class VolatilityMetrics:
    """Volatility estimates accompanying the horizon predictions."""

    standard_deviation: float = 0.025
    var_95: float = 0.05
    var_99: float = 0.08
    volatility_regime: str = "Medium"  # Low, Medium or High


@dataclass(frozen=True)
class PredictionSet:
    """Predictions for every horizon plus stance and volatility."""

    predictions: dict[Horizon, HorizonPrediction]
    market_stance: MarketStance = field(default_factory=MarketStance)
    volatility_metrics: VolatilityMetrics = field(default_factory=VolatilityMetrics)
    is_fallback: bool = False


@dataclass(frozen=True)
class PredictionLogEntry:
    """A validated prediction outcome record ready for storage by the caller."""

    ts: datetime
    symbol: str
    horizon: Horizon
    label: str
    confidence: float
    score: float
    probs: dict[str, float]
    gate_passed: bool
    pattern_hash: str
    features: dict[str, Any]

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> PredictionLogEntry:
        """Validate a raw prediction payload and fill in defaults.

        Args:
            payload: Decoded request body. ``horizon`` and ``label`` are required.

        Returns:
            The validated entry. ``ts`` may be an ISO string or epoch
            milliseconds; naive values are taken as UTC. It defaults to now.

        Raises:
            InvalidInputError: If the horizon, label or timestamp is invalid.
        """
        try:
            horizon = Horizon(payload.get("horizon"))
        except ValueError:
            raise InvalidInputError(f"Invalid horizon: {payload.get('horizon')!r}") from None

        label = payload.get("label")
        if label not in VALID_LABELS:
            raise InvalidInputError(f"Invalid label: {label!r}")

        raw_ts = payload.get("ts")
        if not raw_ts:
            ts = datetime.now(timezone.utc)
        elif isinstance(raw_ts, (int, float)) and not isinstance(raw_ts, bool):
            # Epoch milliseconds
            try:
                ts = datetime.fromtimestamp(raw_ts / 1000, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                raise InvalidInputError(f"Invalid timestamp: {raw_ts!r}") from None
        else:
            try:
                ts = datetime.fromisoformat(str(raw_ts).replace("Z", "+00:00"))
            except ValueError:
                raise InvalidInputError(f"Invalid timestamp: {raw_ts!r}") from None
            if ts.tzinfo is None:
                ts = ts.replace(tzinfo=timezone.utc)

        return cls(
            ts=ts,
            symbol=payload.get("symbol") or "BTCUSDT",
            horizon=horizon,
            label=label,
            confidence=to_num(payload.get("confidence")),
            score=to_num(payload.get("score")),
            probs=payload.get("probs") or {"increase": 0.0, "flat": 1.0, "decrease": 0.0},
            gate_passed=bool(payload.get("gate_passed", False)),
            pattern_hash=payload.get("pattern_hash") or "unknown",
            features=payload.get("features") or {"note": "no features provided"},
        )
