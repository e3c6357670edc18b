"""
Base classes for contract payoffs.

Contracts form a closed set of variants split by capability:

- TERMINAL variants (vanilla) consume only the terminal price.
- PATH variants (Asian, lookback, barrier) consume the full simulated path.

Calling the wrong form is a programming error and raises
UnsupportedOperationError instead of returning a silently wrong number.

Path convention
---------------
A simulated path stores the initial spot separately from the ``steps``
forward-simulated prices. ``SimulatedPaths.prices`` never contains the
initial spot; ``SimulatedPaths.observed()`` prepends it. Each variant
documents which of the two views it reads.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np

from exotic_pricing.errors import (
    InvalidParameterError,
    UnsupportedOperationError,
    require_positive,
)


class OptionType(Enum):
    """Option type enumeration."""

    CALL = "call"
    PUT = "put"


class PayoffKind(Enum):
    """Which payoff form a contract variant supports."""

    TERMINAL = "terminal"
    PATH = "path"


@dataclass(frozen=True)
class SimulatedPaths:
    """
    Batch of simulated price paths sharing one initial spot.

    Attributes
    ----------
    initial : float
        Spot at t=0 (not part of ``prices``)
    prices : np.ndarray
        Forward-simulated prices, shape (n_paths, n_steps)
    horizon : float
        Simulated time span in years
    """

    initial: float
    prices: np.ndarray
    horizon: float

    def __post_init__(self) -> None:
        """Validate shape."""
        if self.prices.ndim != 2:
            raise InvalidParameterError(
                f"CRITICAL: prices must be 2-D (n_paths, n_steps), got ndim={self.prices.ndim}"
            )
        if self.prices.shape[0] == 0 or self.prices.shape[1] == 0:
            raise InvalidParameterError("CRITICAL: Path cannot be empty")

    @property
    def n_paths(self) -> int:
        """Number of paths."""
        return self.prices.shape[0]

    @property
    def n_steps(self) -> int:
        """Number of forward-simulated prices per path."""
        return self.prices.shape[1]

    @property
    def terminal(self) -> np.ndarray:
        """Terminal prices, shape (n_paths,)."""
        return self.prices[:, -1]

    def observed(self) -> np.ndarray:
        """Prices with the initial spot prepended, shape (n_paths, n_steps + 1)."""
        first = np.full((self.n_paths, 1), self.initial)
        return np.hstack([first, self.prices])

    @classmethod
    def single(
        cls,
        initial: float,
        prices: Sequence[float],
        horizon: float = 1.0,
    ) -> "SimulatedPaths":
        """Wrap one path (e.g. a hedge trajectory) as a batch of size 1."""
        return cls(
            initial=float(initial),
            prices=np.asarray(prices, dtype=float).reshape(1, -1),
            horizon=horizon,
        )


@dataclass(frozen=True)
class ContractVariant(ABC):
    """
    Abstract base for all contracts.

    Attributes
    ----------
    strike : float
        Strike price
    maturity : float
        Time to expiry in years
    option_type : OptionType
        Call or put
    """

    strike: float
    maturity: float
    option_type: OptionType

    def __post_init__(self) -> None:
        """Validate common contract terms."""
        require_positive("strike", self.strike)
        require_positive("maturity", self.maturity)
        if not isinstance(self.option_type, OptionType):
            raise InvalidParameterError(
                f"CRITICAL: option_type must be OptionType, got {self.option_type!r}"
            )

    @property
    @abstractmethod
    def payoff_kind(self) -> PayoffKind:
        """Payoff capability of this variant."""
        pass

    def terminal_payoff(self, terminal: np.ndarray) -> np.ndarray:
        """
        Payoff from terminal prices only.

        Raises
        ------
        UnsupportedOperationError
            For path-dependent variants
        """
        raise UnsupportedOperationError(
            f"terminal_payoff() is not applicable for {type(self).__name__}; "
            f"it requires the full path"
        )

    def path_payoff(self, paths: SimulatedPaths) -> np.ndarray:
        """
        Payoff from full simulated paths.

        Raises
        ------
        UnsupportedOperationError
            For terminal-only variants
        """
        raise UnsupportedOperationError(
            f"path_payoff() is not applicable for {type(self).__name__}; "
            f"it only uses the terminal price"
        )

    def intrinsic(self, prices: np.ndarray) -> np.ndarray:
        """[T1] max(S - K, 0) for calls, max(K - S, 0) for puts, elementwise."""
        if self.option_type == OptionType.CALL:
            return np.maximum(prices - self.strike, 0.0)
        else:
            return np.maximum(self.strike - prices, 0.0)

    def describe(self) -> str:
        """Short human-readable label."""
        return f"{type(self).__name__}({self.option_type.value}, K={self.strike}, T={self.maturity})"


def evaluate_payoffs(contract: ContractVariant, paths: SimulatedPaths) -> np.ndarray:
    """
    Evaluate undiscounted payoffs, dispatching on the contract's capability.

    Parameters
    ----------
    contract : ContractVariant
        Any contract variant
    paths : SimulatedPaths
        Simulated paths

    Returns
    -------
    np.ndarray
        Payoffs, shape (n_paths,)
    """
    kind = contract.payoff_kind
    if kind == PayoffKind.TERMINAL:
        return contract.terminal_payoff(paths.terminal)
    elif kind == PayoffKind.PATH:
        return contract.path_payoff(paths)
    raise UnsupportedOperationError(f"Unknown payoff kind {kind!r} for {contract.describe()}")
