"""Configuration system using pydantic-settings with environment variable loading.

Every tunable the engine reads (indicator periods, pattern rule thresholds,
supply estimate) lives here so that tests and callers can inject overrides
instead of patching module constants.
"""

from typing import Literal

from pydantic import PositiveInt, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IndicatorSettings(BaseSettings):
    """Technical indicator periods and band width."""

    model_config = SettingsConfigDict(env_prefix="INDICATOR_")

    rsi_period: PositiveInt = 14
    macd_fast: PositiveInt = 12
    macd_slow: PositiveInt = 26
    bollinger_period: PositiveInt = 20
    bollinger_k: float = 2.0  # Band width in standard deviations

    @model_validator(mode="after")
    def _fast_not_slower_than_slow(self) -> "IndicatorSettings":
        if self.macd_fast > self.macd_slow:
            raise ValueError("macd_fast must not exceed macd_slow")
        return self


class PatternSettings(BaseSettings):
    """Pattern rule thresholds and quality aggregation defaults.

    Strength caps, frequencies and accuracy rates are properties of each rule
    and are not configurable here. All fields configurable via PATTERN_
    environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="PATTERN_")

    # RSI_Bearish_Divergence
    rsi_overbought: float = 70.0

    # High_Volume_Momentum_Breakout
    volume_lookback: PositiveInt = 10  # Trailing samples, current one included
    volume_spike_ratio: float = 1.5
    breakout_min_velocity: float = 0.003

    # Funding_Rate_Extreme
    funding_extreme: float = 0.0005  # 5 bps per funding period

    # MACD_Momentum_Confluence
    macd_min_magnitude: float = 50.0

    # Quality aggregation
    confidence_floor: float = 0.8
    neutral_recognition_score: float = 0.5

    # Pattern statistics tracking
    min_tracked_accuracy: float = 0.8


class MarketSettings(BaseSettings):
    """Market constants used by the derived-metrics helpers."""

    model_config = SettingsConfigDict(env_prefix="MARKET_")

    symbol: str = "BTCUSDT"
    circulating_supply: float = 19_700_000  # Approximate, not live supply data
    fib_resistance_ratio: float = 1.618
    fib_support_ratio: float = 0.618
    liquidity_lookback: PositiveInt = 10


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"  # LOG_FORMAT
    indicators: IndicatorSettings = IndicatorSettings()
    patterns: PatternSettings = PatternSettings()
    market: MarketSettings = MarketSettings()

    @field_validator("log_format", mode="before")
    @classmethod
    def _lowercase_log_format(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value
