"""
Black-Scholes market snapshot.

[T1] Risk-neutral GBM: dS = (r - q)S dt + σS dW

The model is an immutable value. Finite-difference bumps build new
instances; a shared model is never mutated.
"""

from dataclasses import dataclass, replace

import numpy as np

from exotic_pricing.errors import InvalidParameterError, require_positive


@dataclass(frozen=True)
class MarketModel:
    """
    Market parameters for lognormal diffusion.

    Attributes
    ----------
    spot : float
        Current spot price
    rate : float
        Risk-free rate (annualized, continuous, decimal)
    volatility : float
        Volatility (annualized, decimal)
    dividend : float
        Continuous dividend yield (annualized, decimal)
    """

    spot: float
    rate: float
    volatility: float
    dividend: float = 0.0

    def __post_init__(self) -> None:
        """Validate parameters."""
        require_positive("spot", self.spot)
        require_positive("volatility", self.volatility)
        if not np.isfinite(self.rate):
            raise InvalidParameterError(f"CRITICAL: rate must be finite, got {self.rate}")
        if not self.dividend >= 0:
            raise InvalidParameterError(
                f"CRITICAL: dividend must be >= 0, got {self.dividend}"
            )

    @property
    def drift(self) -> float:
        """Risk-neutral log drift: r - q - σ²/2."""
        return self.rate - self.dividend - 0.5 * self.volatility**2

    def discount_factor(self, horizon: float) -> float:
        """Discount factor exp(-r·T)."""
        return float(np.exp(-self.rate * horizon))

    def with_spot(self, spot: float) -> "MarketModel":
        """Return a copy of the model at a different spot."""
        return replace(self, spot=spot)

    def bumped(self, epsilon: float) -> "MarketModel":
        """Return a copy with spot shifted by ``epsilon`` (may be negative)."""
        return replace(self, spot=self.spot + epsilon)
