"""
Self-financing delta-hedge replication cost.

Simulates one trajectory of the underlying and runs a discrete delta
hedge against it, re-estimating delta at every rebalancing date.

State machine over steps 0..N-1, terminal at N, dt = T/N:

1. Step i > 0: advance spot by one GBM increment, feed the crossing detector.
2. Delta: knocked-out barrier → 0; knocked-in barrier → vanilla delta;
   otherwise finite difference with T - i·dt remaining and N - i
   nested Monte Carlo steps.
3. Rebalance: cash += (Δ_i - Δ_{i-1}) · S_i, with Δ_{-1} = 0.
4. Carry: cash *= exp(r·dt); dividends on the held shares reduce cash.
5. Step N: last move to maturity, then settle

   terminal_cost = cash - Δ_{N-1} · S_T + payoff

   where payoff is the realised (barrier-gated) payoff of the path.
   ``cost`` is terminal_cost discounted to t=0.

[T1] cost → Black-Scholes price as N → ∞ for a vanilla contract.

See: Hull (2021) Ch. 19 - Delta hedging
See: Derman & Kamal (1999) - discrete hedging error ~ 1/√N
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from exotic_pricing.config.settings import SETTINGS
from exotic_pricing.errors import InvalidParameterError, require_count
from exotic_pricing.market import MarketModel
from exotic_pricing.options.hedging.greeks import DeltaMethod, FiniteDifferenceDelta
from exotic_pricing.options.payoffs.barrier import (
    BarrierCrossingDetector,
    BarrierOption,
    CrossingState,
)
from exotic_pricing.options.payoffs.base import (
    ContractVariant,
    SimulatedPaths,
    evaluate_payoffs,
)
from exotic_pricing.options.payoffs.vanilla import VanillaOption
from exotic_pricing.options.pricing.black_scholes import analytic_delta
from exotic_pricing.options.simulation.gbm import advance_spot
from exotic_pricing.options.simulation.monte_carlo import MonteCarloPricer, check_remaining
from exotic_pricing.options.simulation.workers import (
    CancellationToken,
    ProgressCallback,
    SeedLike,
    spawn_streams,
)

logger = logging.getLogger(__name__)


@dataclass
class HedgeState:
    """
    Mutable state of one hedge run. Never shared between runs.

    Attributes
    ----------
    step : int
        Current rebalancing index
    spot : float
        Current spot
    delta : float
        Shares held after the last rebalance
    cash : float
        Net financing balance (positive = amount funded)
    crossing : CrossingState, optional
        Barrier state, None for non-barrier contracts
    path : list[float]
        Observed spots so far, initial spot first
    """

    step: int
    spot: float
    delta: float = 0.0
    cash: float = 0.0
    crossing: Optional[CrossingState] = None
    path: list[float] = field(default_factory=list)


@dataclass(frozen=True)
class HedgeResult:
    """
    Outcome of one hedge run.

    Attributes
    ----------
    cost : float
        Replication cost discounted to t=0
    terminal_cost : float
        cash - Δ·S_T + payoff, at maturity
    payoff : float
        Realised gated payoff
    final_spot : float
        S_T
    final_delta : float
        Shares held into maturity
    cash : float
        Cash balance at maturity before settlement
    barrier_touched : bool, optional
        Terminal crossing state for barrier contracts
    path : np.ndarray
        Observed path, initial spot first, shape (steps + 1,)
    deltas : np.ndarray
        Delta chosen at each rebalancing step, shape (steps,)
    n_repricings : int
        Nested Monte Carlo pricings performed
    """

    cost: float
    terminal_cost: float
    payoff: float
    final_spot: float
    final_delta: float
    cash: float
    barrier_touched: Optional[bool]
    path: np.ndarray
    deltas: np.ndarray
    n_repricings: int


def estimate_hedge_workload(steps: int, n_paths: int) -> int:
    """
    Simulated path-steps spent on nested re-pricing by one hedge run.

    Step i re-prices twice with N - i Monte Carlo steps, so the total is
    2 · n_paths · (N + (N-1) + ... + 1) = n_paths · N · (N + 1).

    >>> estimate_hedge_workload(steps=100, n_paths=10_000)
    101000000
    """
    require_count("steps", steps)
    require_count("n_paths", n_paths)
    return n_paths * steps * (steps + 1)


class DeltaHedgeSimulator:
    """
    Delta-hedge replication simulator.

    Parameters
    ----------
    n_paths : int, optional
        Trials per nested re-pricing (default from SETTINGS)
    bump_fraction : float, optional
        Relative spot bump for finite differences (default from SETTINGS)
    delta_method : DeltaMethod, default FINITE_DIFFERENCE
        ANALYTIC uses Black-Scholes deltas and requires a vanilla contract
    seed : int or SeedSequence, optional
        Seeds both the hedge trajectory and the nested pricings
    pricer : MonteCarloPricer, optional
        Engine for nested pricings (controls threads and chunking); when
        both are given its ``cancel`` must be the simulator's token
    cancel : CancellationToken, optional
        Checked between steps and between nested Monte Carlo chunks
    progress : ProgressCallback, optional
        Called with (steps_done, steps_total) after each rebalance

    Examples
    --------
    >>> from exotic_pricing.options.payoffs.vanilla import vanilla_call
    >>> model = MarketModel(spot=100, rate=0.05, volatility=0.2)
    >>> sim = DeltaHedgeSimulator(n_paths=2_000, seed=3)
    >>> cost = sim.hedge_cost(model, vanilla_call(100, 1.0), steps=10)
    """

    def __init__(
        self,
        n_paths: Optional[int] = None,
        bump_fraction: Optional[float] = None,
        delta_method: DeltaMethod = DeltaMethod.FINITE_DIFFERENCE,
        seed: SeedLike = None,
        pricer: Optional[MonteCarloPricer] = None,
        cancel: Optional[CancellationToken] = None,
        progress: Optional[ProgressCallback] = None,
    ):
        if pricer is not None and cancel is not None and pricer.cancel is not cancel:
            raise InvalidParameterError(
                "CRITICAL: pricer must share the simulator's cancellation token"
            )
        self.cancel = cancel
        self.pricer = pricer if pricer is not None else MonteCarloPricer(cancel=cancel)
        self.estimator = FiniteDifferenceDelta(
            pricer=self.pricer, n_paths=n_paths, bump_fraction=bump_fraction
        )
        self.delta_method = delta_method
        self.seed = seed if seed is not None else SETTINGS.simulation.seed
        self.progress = progress

    @property
    def n_paths(self) -> int:
        """Trials per nested re-pricing."""
        return self.estimator.n_paths

    def workload(self, steps: int) -> int:
        """Nested path-steps a run over ``steps`` costs (0 for analytic deltas)."""
        if self.delta_method == DeltaMethod.ANALYTIC:
            return 0
        return estimate_hedge_workload(steps, self.n_paths)

    def hedge_cost(self, model: MarketModel, contract: ContractVariant, steps: int) -> float:
        """
        Replication cost of ``contract`` hedged over ``steps`` rebalancing dates.

        Returns
        -------
        float
            Cost discounted to t=0
        """
        return self.simulate(model, contract, steps).cost

    def simulate(
        self, model: MarketModel, contract: ContractVariant, steps: int
    ) -> HedgeResult:
        """
        Run one hedge simulation and return the full record.

        Raises
        ------
        InvalidParameterError
            Bad step count, barrier on spot, or analytic deltas on a non-vanilla contract
        DegenerateTimeStepError
            If a nested re-pricing would see no remaining time
        SimulationCancelledError
            If ``cancel`` fires
        """
        require_count("steps", steps)
        if isinstance(contract, BarrierOption):
            contract.check_start(model.spot)
        if self.delta_method == DeltaMethod.ANALYTIC and not isinstance(contract, VanillaOption):
            raise InvalidParameterError(
                f"CRITICAL: analytic deltas need a vanilla contract, got {contract.describe()}"
            )

        maturity = contract.maturity
        dt = maturity / steps
        path_stream, nested_stream = spawn_streams(self.seed, 2)
        path_rng = np.random.default_rng(path_stream)
        step_seeds = nested_stream.spawn(steps)

        detector = contract.detector(model.spot) if isinstance(contract, BarrierOption) else None
        state = HedgeState(
            step=0,
            spot=model.spot,
            crossing=detector.state if detector is not None else None,
            path=[model.spot],
        )
        deltas = np.zeros(steps)
        n_repricings = 0

        logger.info(
            f"Hedging {contract.describe()} over {steps} steps "
            f"({self.workload(steps):,} nested path-steps)"
        )

        for i in range(steps):
            if self.cancel is not None:
                self.cancel.raise_if_cancelled("hedge simulation")

            state.step = i
            if i > 0:
                self._advance(model, state, detector, dt, path_rng)

            remaining_steps = steps - i
            remaining = maturity - i * dt
            new_delta, repriced = self._delta(
                model.with_spot(state.spot),
                contract,
                detector,
                remaining_steps,
                remaining,
                step_seeds[i],
            )
            n_repricings += repriced

            # Rebalance from the position held since the previous step
            state.cash += (new_delta - state.delta) * state.spot
            state.delta = new_delta
            state.cash *= np.exp(model.rate * dt)
            state.cash -= state.delta * state.spot * (np.exp(model.dividend * dt) - 1.0)
            deltas[i] = new_delta

            logger.debug(
                f"step {i}: S={state.spot:.4f} delta={new_delta:.6f} cash={state.cash:.4f}"
            )
            if self.progress is not None:
                self.progress(i + 1, steps)

        state.step = steps
        self._advance(model, state, detector, dt, path_rng)

        observed = np.asarray(state.path)
        realised = SimulatedPaths.single(observed[0], observed[1:], horizon=maturity)
        payoff = float(evaluate_payoffs(contract, realised)[0])

        terminal_cost = state.cash - state.delta * state.spot + payoff
        cost = terminal_cost * model.discount_factor(maturity)

        logger.info(
            f"Settled {contract.describe()}: S_T={state.spot:.4f} payoff={payoff:.4f} "
            f"cost={cost:.4f}"
        )

        return HedgeResult(
            cost=float(cost),
            terminal_cost=float(terminal_cost),
            payoff=payoff,
            final_spot=state.spot,
            final_delta=state.delta,
            cash=float(state.cash),
            barrier_touched=detector.touched if detector is not None else None,
            path=observed,
            deltas=deltas,
            n_repricings=n_repricings,
        )

    def _advance(
        self,
        model: MarketModel,
        state: HedgeState,
        detector: Optional[BarrierCrossingDetector],
        dt: float,
        rng: np.random.Generator,
    ) -> None:
        state.spot = advance_spot(model, state.spot, dt, rng)
        state.path.append(state.spot)
        if detector is not None:
            state.crossing = detector.observe(state.spot)

    def _delta(
        self,
        model: MarketModel,
        contract: ContractVariant,
        detector: Optional[BarrierCrossingDetector],
        remaining_steps: int,
        remaining: float,
        seed: np.random.SeedSequence,
    ) -> tuple[float, int]:
        """Delta for the current step and the number of nested pricings it took."""
        check_remaining(remaining_steps, remaining)

        if isinstance(contract, BarrierOption) and detector is not None and detector.touched:
            if contract.direction.is_knock_out:
                return 0.0, 0
            contract = contract.vanilla()

        if self.delta_method == DeltaMethod.ANALYTIC:
            return analytic_delta(model, contract, remaining), 0

        estimate = self.estimator.estimate(model, contract, remaining_steps, remaining, seed)
        return estimate.delta, 2


def hedge_cost(
    model: MarketModel,
    contract: ContractVariant,
    steps: int,
    n_paths: Optional[int] = None,
    seed: SeedLike = None,
) -> float:
    """
    Convenience function: replication cost with finite-difference deltas.

    Parameters
    ----------
    model : MarketModel
        Market parameters
    contract : ContractVariant
        Contract to replicate
    steps : int
        Rebalancing dates
    n_paths : int, optional
        Trials per nested re-pricing
    seed : int, optional
        Random seed

    Returns
    -------
    float
        Replication cost discounted to t=0
    """
    return DeltaHedgeSimulator(n_paths=n_paths, seed=seed).hedge_cost(model, contract, steps)
