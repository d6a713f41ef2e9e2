"""Custom exceptions for the market analysis engine.

Short or empty history is never an error: every computation degrades to a
documented neutral value. Only inputs that cannot be computed on at all
(missing or non-finite numbers) are surfaced.
"""


class EngineError(Exception):
    """Base exception for all engine errors."""


class InvalidInputError(EngineError):
    """Raised when an input value is missing or non-finite."""
