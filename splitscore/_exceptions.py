"""
_exceptions.py
==============
Exception types raised by splitscore.

Every exception carries a short ``message`` and an optional ``suggestion``
telling the caller how to fix the input.  ``str(exc)`` shows both.

Saturated distances are caught inside the matrix builders and reported once
per matrix; invalid symbols and cancellation always propagate to the caller.
"""

from typing import Optional


class SplitsError(Exception):
    """Base exception for splitscore errors."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.full_message)

    @property
    def full_message(self) -> str:
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


class InvalidCharacterError(SplitsError, ValueError):
    """Raised when a character state is not part of the alphabet."""

    def __init__(self, taxon: int, position: int, symbol: str):
        super().__init__(
            message=(
                f"Position {position} for taxon {taxon} is the invalid "
                f"character {symbol!r}"
            ),
            suggestion=(
                "Check the datatype and symbol list of the matrix, or declare "
                "the symbol as gap or missing."
            ),
        )
        self.taxon = taxon
        self.position = position
        self.symbol = symbol


class SaturatedDistanceError(SplitsError, ArithmeticError):
    """Raised when a corrected distance is undefined for the observed divergence."""

    def __init__(self, message: str = "Distance is saturated"):
        super().__init__(message=message)


class CanceledError(SplitsError):
    """Raised by a progress listener once the user requested cancellation."""

    def __init__(self, message: str = "Computation canceled"):
        super().__init__(message=message)


class NotApplicableError(SplitsError, ValueError):
    """Raised when a transform is applied to data it cannot handle."""

    def __init__(self, transform: str, reason: str):
        super().__init__(
            message=f"{transform} is not applicable: {reason}",
            suggestion="Check is_applicable() before calling apply().",
        )
        self.transform = transform
        self.reason = reason


class ModelError(SplitsError, ValueError):
    """Raised for invalid substitution model parameters."""
