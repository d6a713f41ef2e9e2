"""Market analysis engine for BTC candle windows."""

__version__ = "0.1.0"
