"""
Compensation engine exceptions.

Errors raised by the engine itself. Structural parameter errors
(spillover width, upline depth) are plain ValueError.
"""

from typing import Any


class CompensationError(Exception):
    """Base class for compensation engine errors."""
    pass


class InvalidAmountError(CompensationError):
    """Raised when a money or volume input is negative, non-finite or unparsable."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class ConfigurationError(CompensationError):
    """Raised when a CompensationConfig is malformed."""
    pass
