"""
Finite-difference delta by nested Monte Carlo re-pricing.

[T1] Δ ≈ (V(S + ε) - V(S - ε)) / (2ε),  ε = bump_fraction · S

Both bumped prices are estimated on the same random stream (common
random numbers), so the difference reflects the bump and not sampling
noise between two independent runs.

This is the dominant cost of a hedge simulation: one estimate costs
2 · n_paths · steps simulated path-steps. ``workload`` reports that
number before any work is done.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from exotic_pricing.config.settings import SETTINGS
from exotic_pricing.errors import InvalidParameterError, require_count, require_positive
from exotic_pricing.market import MarketModel
from exotic_pricing.options.payoffs.barrier import BarrierOption, is_crossing
from exotic_pricing.options.payoffs.base import ContractVariant
from exotic_pricing.options.simulation.monte_carlo import MonteCarloPricer, check_remaining
from exotic_pricing.options.simulation.workers import SeedLike

logger = logging.getLogger(__name__)


class DeltaMethod(Enum):
    """How the hedge simulator obtains deltas."""

    FINITE_DIFFERENCE = "finite_difference"
    ANALYTIC = "analytic"  # Black-Scholes, vanilla contracts only


@dataclass(frozen=True)
class DeltaEstimate:
    """
    Result of one finite-difference delta estimate.

    Attributes
    ----------
    delta : float
        Estimated delta
    price_up : float
        Price at S + ε
    price_down : float
        Price at S - ε
    epsilon : float
        Absolute bump size
    """

    delta: float
    price_up: float
    price_down: float
    epsilon: float


class FiniteDifferenceDelta:
    """
    Central finite-difference delta estimator.

    Parameters
    ----------
    pricer : MonteCarloPricer, optional
        Engine used for the nested re-pricings
    n_paths : int, optional
        Trials per re-pricing (default from SETTINGS)
    bump_fraction : float, optional
        Relative bump ε/S (default from SETTINGS)
    """

    def __init__(
        self,
        pricer: Optional[MonteCarloPricer] = None,
        n_paths: Optional[int] = None,
        bump_fraction: Optional[float] = None,
    ):
        config = SETTINGS.hedge
        self.pricer = pricer if pricer is not None else MonteCarloPricer()
        self.n_paths = n_paths if n_paths is not None else config.n_paths
        self.bump_fraction = bump_fraction if bump_fraction is not None else config.bump_fraction

        require_count("n_paths", self.n_paths)
        require_positive("bump_fraction", self.bump_fraction)
        if self.bump_fraction >= 1:
            raise InvalidParameterError(
                f"CRITICAL: bump_fraction must be < 1, got {self.bump_fraction}"
            )

    def workload(self, steps: int) -> int:
        """Simulated path-steps one estimate with ``steps`` Monte Carlo steps costs."""
        return 2 * self.n_paths * steps

    def estimate(
        self,
        model: MarketModel,
        contract: ContractVariant,
        steps: int,
        horizon: float,
        seed: SeedLike = None,
    ) -> DeltaEstimate:
        """
        Estimate delta at ``model.spot`` with ``horizon`` years remaining.

        Parameters
        ----------
        model : MarketModel
            Market at the current spot
        contract : ContractVariant
            Contract to re-price
        steps : int
            Monte Carlo steps for each re-pricing
        horizon : float
            Remaining time to maturity
        seed : SeedLike, optional
            Shared by both re-pricings; falls back to the pricer seed, then to
            one fresh entropy draw

        Raises
        ------
        DegenerateTimeStepError
            If ``steps`` or ``horizon`` is not positive
        """
        if seed is None:
            seed = self.pricer.seed if self.pricer.seed is not None else np.random.SeedSequence()

        epsilon = self.bump_fraction * model.spot
        up_model = model.bumped(epsilon)
        down_model = model.bumped(-epsilon)

        if self.pricer.n_workers > 1:
            with ThreadPoolExecutor(max_workers=2) as executor:
                up_future = executor.submit(
                    self._bumped_price, model.spot, up_model, contract, steps, horizon, seed
                )
                down_future = executor.submit(
                    self._bumped_price, model.spot, down_model, contract, steps, horizon, seed
                )
                price_up = up_future.result()
                price_down = down_future.result()
        else:
            price_up = self._bumped_price(model.spot, up_model, contract, steps, horizon, seed)
            price_down = self._bumped_price(model.spot, down_model, contract, steps, horizon, seed)

        delta = (price_up - price_down) / (2 * epsilon)
        logger.debug(
            f"delta S={model.spot:.4f} T={horizon:.4f} steps={steps}: "
            f"({price_up:.6f} - {price_down:.6f}) / {2 * epsilon:.4f} = {delta:.6f}"
        )
        return DeltaEstimate(
            delta=delta, price_up=price_up, price_down=price_down, epsilon=epsilon
        )

    def _bumped_price(
        self,
        spot: float,
        bumped: MarketModel,
        contract: ContractVariant,
        steps: int,
        horizon: float,
        seed: SeedLike,
    ) -> float:
        # A bump that crosses a barrier is itself a touch: knock-outs are
        # void and knock-ins become the vanilla contract.
        if isinstance(contract, BarrierOption) and is_crossing(
            spot, bumped.spot, contract.level, contract.direction
        ):
            if contract.direction.is_knock_out:
                check_remaining(steps, horizon)
                return 0.0
            contract = contract.vanilla()

        return self.pricer.reprice(bumped, contract, self.n_paths, steps, horizon, seed).price
