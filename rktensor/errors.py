"""Exception types raised by `rktensor`.

Tensor errors carry a human-readable message and subclass the matching
builtin (`ValueError`, `TypeError`, `IndexError`) so callers can catch either.
"""

from __future__ import annotations


class TensorError(Exception):
    """Base tensor error. Also used directly as the message-carrying catch-all."""

    default_message = "Tensor error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)

    @property
    def message(self) -> str:
        return str(self.args[0])


class ShapeMismatchError(TensorError, ValueError):
    default_message = "Shape mismatch"


class InvalidTypeError(TensorError, TypeError):
    # Reserved for representation-level type errors.
    default_message = "Invalid tensor type"


class UnsafeOperationError(TensorError):
    # Reserved for operations that would bypass bounds checks.
    default_message = "Unsafe operation attempted"


class OutOfBoundsError(TensorError, IndexError):
    default_message = "Index out of bounds"


class ConfigurationError(ValueError):
    """Raised when a conversion pipeline is assembled from invalid parts."""


class IncompatibleStrategiesError(ConfigurationError):
    """Raised for a (normalization, data type) pair that is not registered as compatible."""


__all__ = [
    "ConfigurationError",
    "IncompatibleStrategiesError",
    "InvalidTypeError",
    "OutOfBoundsError",
    "ShapeMismatchError",
    "TensorError",
    "UnsafeOperationError",
]
