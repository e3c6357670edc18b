"""
Error taxonomy for simulation and replication.

All failures are structural, never transient: nothing here is retried.
Each error subclasses the closest builtin so callers that only know
``ValueError`` / ``TypeError`` still catch them.
"""

import numbers


class PricingError(Exception):
    """Base class for all pricing and hedging failures."""

    pass


class InvalidParameterError(PricingError, ValueError):
    """Raised when a model, contract or run parameter is out of range."""

    pass


class DegenerateTimeStepError(PricingError, ArithmeticError):
    """Raised when remaining time or step count reaches zero in nested re-pricing."""

    pass


class UnsupportedOperationError(PricingError, TypeError):
    """Raised when a payoff form is invoked on a variant that does not support it."""

    pass


class SimulationCancelledError(PricingError):
    """Raised when a running simulation observes a cancellation request."""

    pass


def require_positive(name: str, value: float) -> None:
    """Raise InvalidParameterError unless ``value > 0``."""
    if not value > 0:
        raise InvalidParameterError(f"CRITICAL: {name} must be > 0, got {value}")


def require_count(name: str, value: int) -> None:
    """Raise InvalidParameterError unless ``value`` is an integer >= 1."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameterError(f"CRITICAL: {name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidParameterError(f"CRITICAL: {name} must be > 0, got {value}")
