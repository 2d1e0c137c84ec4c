"""
Shared exception types for the intelligence analytics engine.
Insufficient data is never an error; malformed input is.
"""


class IntelligenceError(Exception):
    """Base class for analytics engine errors."""
    pass


class EmptyInputError(IntelligenceError):
    """Raised when a calculation receives an empty sequence."""
    pass


class InvalidInputError(IntelligenceError, ValueError):
    """Raised when input has the wrong shape or contains invalid values."""
    pass
