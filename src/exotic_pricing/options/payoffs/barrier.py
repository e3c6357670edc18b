"""
Barrier options and the barrier crossing detector.

Crossing rule, applied to each consecutive pair (prev, curr) of the
observed path (initial spot included):

[T1] Up directions:   TOUCHED when prev < B and curr >= B
[T1] Down directions: TOUCHED when prev > B and curr <= B

TOUCHED is absorbing. The touch is inclusive on ``curr`` and strict on
``prev``: a path that starts exactly on the level has not crossed it.

Gating:
- Knock-out (UP_AND_OUT, DOWN_AND_OUT) pays only if never TOUCHED.
- Knock-in (UP_AND_IN, DOWN_AND_IN) pays only if TOUCHED.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from exotic_pricing.errors import InvalidParameterError, require_positive
from exotic_pricing.options.payoffs.base import (
    ContractVariant,
    PayoffKind,
    SimulatedPaths,
)
from exotic_pricing.options.payoffs.vanilla import VanillaOption


class BarrierDirection(Enum):
    """Barrier direction and knock type."""

    UP_AND_OUT = "up_and_out"
    DOWN_AND_OUT = "down_and_out"
    UP_AND_IN = "up_and_in"
    DOWN_AND_IN = "down_and_in"

    @property
    def is_up(self) -> bool:
        """True for barriers crossed from below."""
        return self in (BarrierDirection.UP_AND_OUT, BarrierDirection.UP_AND_IN)

    @property
    def is_knock_out(self) -> bool:
        """True when touching the barrier voids the contract."""
        return self in (BarrierDirection.UP_AND_OUT, BarrierDirection.DOWN_AND_OUT)


class CrossingState(Enum):
    """State of the crossing detector."""

    NOT_TOUCHED = "not_touched"
    TOUCHED = "touched"


def is_crossing(prev: float, curr: float, level: float, direction: BarrierDirection) -> bool:
    """Transition predicate for one consecutive pair of prices."""
    if direction.is_up:
        return prev < level and curr >= level
    return prev > level and curr <= level


class BarrierCrossingDetector:
    """
    Incremental crossing state machine.

    Fed one price at a time so the hedge simulator can read the running
    state after every step.

    Examples
    --------
    >>> detector = BarrierCrossingDetector(100.0, BarrierDirection.UP_AND_OUT, initial=95.0)
    >>> detector.observe(100.0)
    <CrossingState.TOUCHED: 'touched'>
    """

    def __init__(self, level: float, direction: BarrierDirection, initial: float):
        require_positive("barrier level", level)
        self.level = level
        self.direction = direction
        self._last = initial
        self._state = CrossingState.NOT_TOUCHED
        self._touched_at: Optional[int] = None
        self._n_observed = 0

    @property
    def state(self) -> CrossingState:
        """Current crossing state."""
        return self._state

    @property
    def touched(self) -> bool:
        """Whether the barrier has been crossed so far."""
        return self._state == CrossingState.TOUCHED

    @property
    def touched_at(self) -> Optional[int]:
        """1-based index of the observation that crossed, if any."""
        return self._touched_at

    def observe(self, price: float) -> CrossingState:
        """Consume the next path price and return the updated state."""
        self._n_observed += 1
        if self._state == CrossingState.NOT_TOUCHED and is_crossing(
            self._last, price, self.level, self.direction
        ):
            self._state = CrossingState.TOUCHED
            self._touched_at = self._n_observed
        self._last = price
        return self._state

    def pays(self) -> bool:
        """Gating verdict for the current state."""
        if self.direction.is_knock_out:
            return not self.touched
        return self.touched


def crossed(observed: np.ndarray, level: float, direction: BarrierDirection) -> np.ndarray:
    """
    Vectorised crossing verdict for a batch of observed paths.

    Parameters
    ----------
    observed : np.ndarray
        Paths including the initial spot, shape (n_paths, n_steps + 1)
    level : float
        Barrier level
    direction : BarrierDirection
        Barrier direction

    Returns
    -------
    np.ndarray
        Boolean array, True where the path crossed, shape (n_paths,)
    """
    prev = observed[:, :-1]
    curr = observed[:, 1:]
    if direction.is_up:
        hits = (prev < level) & (curr >= level)
    else:
        hits = (prev > level) & (curr <= level)
    return hits.any(axis=1)


@dataclass(frozen=True)
class BarrierOption(ContractVariant):
    """
    Single-barrier knock-in / knock-out option on a vanilla payoff.

    Attributes
    ----------
    level : float
        Barrier level
    direction : BarrierDirection
        Up/down and in/out
    """

    level: float
    direction: BarrierDirection

    def __post_init__(self) -> None:
        super().__post_init__()
        require_positive("barrier level", self.level)
        if not isinstance(self.direction, BarrierDirection):
            raise InvalidParameterError(
                f"CRITICAL: direction must be BarrierDirection, got {self.direction!r}"
            )

    @property
    def payoff_kind(self) -> PayoffKind:
        return PayoffKind.PATH

    def path_payoff(self, paths: SimulatedPaths) -> np.ndarray:
        touched = crossed(paths.observed(), self.level, self.direction)
        active = ~touched if self.direction.is_knock_out else touched
        return np.where(active, self.intrinsic(paths.terminal), 0.0)

    def vanilla(self) -> VanillaOption:
        """The ungated vanilla contract with the same terms."""
        return VanillaOption(
            strike=self.strike, maturity=self.maturity, option_type=self.option_type
        )

    def detector(self, initial: float) -> BarrierCrossingDetector:
        """Fresh incremental detector starting at ``initial``."""
        return BarrierCrossingDetector(self.level, self.direction, initial)

    def check_start(self, spot: float) -> None:
        """
        Reject a contract whose barrier sits exactly on the starting spot.

        Raises
        ------
        InvalidParameterError
            If level == spot
        """
        if self.level == spot:
            raise InvalidParameterError(
                f"CRITICAL: barrier level must differ from spot at start, got {self.level}"
            )
