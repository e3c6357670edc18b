"""
Monte Carlo pricing engine for vanilla and path-dependent contracts.

For each of ``n_paths`` independent trials: simulate a GBM path, evaluate
the contract's payoff (barrier payoffs gated by the crossing detector),
then return exp(-r·T) · mean(payoffs).

[T1] Unbiased for the discounted risk-neutral expectation;
standard error shrinks as 1/√N.

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

from exotic_pricing.config.settings import SETTINGS
from exotic_pricing.errors import (
    DegenerateTimeStepError,
    require_count,
    require_positive,
)
from exotic_pricing.market import MarketModel
from exotic_pricing.options.payoffs.barrier import BarrierOption
from exotic_pricing.options.payoffs.base import ContractVariant, evaluate_payoffs
from exotic_pricing.options.simulation.gbm import simulate_paths
from exotic_pricing.options.simulation.workers import (
    CancellationToken,
    ProgressCallback,
    SeedLike,
    plan_chunks,
    run_chunks,
    spawn_streams,
)

logger = logging.getLogger(__name__)


def check_remaining(steps: int, horizon: float) -> None:
    """
    Guard nested re-pricing against a vanished time grid.

    Raises
    ------
    DegenerateTimeStepError
        If fewer than one step or no time remains
    """
    if steps < 1 or not horizon > 0:
        raise DegenerateTimeStepError(
            f"CRITICAL: nested re-pricing needs remaining steps >= 1 and horizon > 0, "
            f"got steps={steps}, horizon={horizon}"
        )


@dataclass(frozen=True)
class MCResult:
    """
    Monte Carlo pricing result.

    Attributes
    ----------
    price : float
        Contract price (discounted expected payoff)
    standard_error : float
        Standard error of the estimate
    confidence_interval : tuple[float, float]
        95% confidence interval
    n_paths : int
        Number of paths used
    payoffs : np.ndarray
        Individual path payoffs (undiscounted)
    discount_factor : float
        Discount factor used
    """

    price: float
    standard_error: float
    confidence_interval: tuple[float, float]
    n_paths: int
    payoffs: np.ndarray
    discount_factor: float

    @property
    def relative_error(self) -> float:
        """Relative standard error (SE / price)."""
        if abs(self.price) < 1e-10:
            return float("inf")
        return self.standard_error / abs(self.price)

    @property
    def ci_width(self) -> float:
        """Width of 95% confidence interval."""
        return self.confidence_interval[1] - self.confidence_interval[0]


class MonteCarloPricer:
    """
    Monte Carlo pricing engine.

    Parameters
    ----------
    seed : int or SeedSequence, optional
        Root seed for reproducibility (default from SETTINGS)
    antithetic : bool, default False
        Use antithetic variates within each chunk
    chunk_size : int, optional
        Trials per independent random stream (default from SETTINGS)
    n_workers : int, optional
        Threads used to run chunks (default from SETTINGS)
    cancel : CancellationToken, optional
        Checked between chunks
    progress : ProgressCallback, optional
        Called with (chunks_done, chunks_total)

    Examples
    --------
    >>> from exotic_pricing.options.payoffs.vanilla import vanilla_call
    >>> pricer = MonteCarloPricer(seed=42)
    >>> model = MarketModel(spot=100, rate=0.05, volatility=0.20)
    >>> result = pricer.price_detailed(model, vanilla_call(100, 1.0), n_paths=50_000, steps=1)
    >>> print(f"Price: {result.price:.4f} ± {result.standard_error:.4f}")
    """

    def __init__(
        self,
        seed: SeedLike = None,
        antithetic: bool = False,
        chunk_size: Optional[int] = None,
        n_workers: Optional[int] = None,
        cancel: Optional[CancellationToken] = None,
        progress: Optional[ProgressCallback] = None,
    ):
        config = SETTINGS.simulation
        self.seed = seed if seed is not None else config.seed
        self.antithetic = antithetic
        self.chunk_size = chunk_size if chunk_size is not None else config.chunk_size
        self.n_workers = n_workers if n_workers is not None else config.n_workers
        self.cancel = cancel
        self.progress = progress

        require_count("chunk_size", self.chunk_size)
        require_count("n_workers", self.n_workers)

    def price(
        self,
        model: MarketModel,
        contract: ContractVariant,
        n_paths: int,
        steps: int,
        horizon: Optional[float] = None,
    ) -> float:
        """
        Price a contract.

        Parameters
        ----------
        model : MarketModel
            Market parameters
        contract : ContractVariant
            Any contract variant
        n_paths : int
            Number of trials
        steps : int
            Time steps per path
        horizon : float, optional
            Pricing horizon; defaults to ``contract.maturity``

        Returns
        -------
        float
            Discounted mean payoff
        """
        return self.price_detailed(model, contract, n_paths, steps, horizon).price

    def price_detailed(
        self,
        model: MarketModel,
        contract: ContractVariant,
        n_paths: int,
        steps: int,
        horizon: Optional[float] = None,
        seed: SeedLike = None,
    ) -> MCResult:
        """
        Price a contract and return full statistics.

        Raises
        ------
        InvalidParameterError
            For non-positive counts or horizon, or a barrier level equal to spot
        """
        horizon = contract.maturity if horizon is None else horizon
        require_count("n_paths", n_paths)
        require_count("steps", steps)
        require_positive("horizon", horizon)
        if isinstance(contract, BarrierOption):
            contract.check_start(model.spot)

        return self._run(model, contract, n_paths, steps, horizon, seed)

    def reprice(
        self,
        model: MarketModel,
        contract: ContractVariant,
        n_paths: int,
        steps: int,
        horizon: float,
        seed: SeedLike = None,
    ) -> MCResult:
        """
        Nested re-pricing over a remaining horizon.

        Used inside delta estimation. Unlike ``price_detailed`` it accepts a
        bumped spot that lands exactly on a barrier level.

        Raises
        ------
        DegenerateTimeStepError
            If the remaining step count or horizon is not positive
        """
        check_remaining(steps, horizon)
        require_count("n_paths", n_paths)
        return self._run(model, contract, n_paths, steps, horizon, seed)

    def _run(
        self,
        model: MarketModel,
        contract: ContractVariant,
        n_paths: int,
        steps: int,
        horizon: float,
        seed: SeedLike,
    ) -> MCResult:
        sizes = plan_chunks(n_paths, self.chunk_size)
        streams = spawn_streams(seed if seed is not None else self.seed, len(sizes))

        def _chunk(size: int, rng: np.random.Generator) -> np.ndarray:
            paths = simulate_paths(model, size, steps, horizon, rng, self.antithetic)
            return evaluate_payoffs(contract, paths)

        chunks = run_chunks(
            _chunk,
            sizes,
            streams,
            n_workers=self.n_workers,
            cancel=self.cancel,
            progress=self.progress,
        )
        payoffs = np.concatenate(chunks)

        result = self._compute_result(model, horizon, payoffs)
        logger.debug(
            f"{contract.describe()} S={model.spot:.4f} T={horizon:.4f} "
            f"paths={n_paths} steps={steps}: {result.price:.6f} ± {result.standard_error:.6f}"
        )
        return result

    def _compute_result(
        self, model: MarketModel, horizon: float, payoffs: np.ndarray
    ) -> MCResult:
        """
        Compute MC result from undiscounted payoffs.
        """
        df = model.discount_factor(horizon)

        mean_payoff = payoffs.mean()
        if len(payoffs) > 1:
            se = payoffs.std(ddof=1) / np.sqrt(len(payoffs))
        else:
            se = 0.0

        price = float(df * mean_payoff)
        se_price = float(df * se)

        # 95% confidence interval (z = 1.96)
        ci_lower = price - 1.96 * se_price
        ci_upper = price + 1.96 * se_price

        return MCResult(
            price=price,
            standard_error=se_price,
            confidence_interval=(ci_lower, ci_upper),
            n_paths=len(payoffs),
            payoffs=payoffs,
            discount_factor=df,
        )


def price(
    model: MarketModel,
    contract: ContractVariant,
    n_paths: int,
    steps: int,
    horizon: Optional[float] = None,
    seed: SeedLike = None,
) -> float:
    """
    Convenience function: price a contract with a default engine.

    Examples
    --------
    >>> from exotic_pricing.options.payoffs.path_dependent import AsianOption
    >>> from exotic_pricing.options.payoffs.base import OptionType
    >>> model = MarketModel(spot=100, rate=0.05, volatility=0.2)
    >>> asian = AsianOption(strike=100, maturity=1.0, option_type=OptionType.CALL)
    >>> p = price(model, asian, n_paths=10_000, steps=50, seed=1)
    """
    return MonteCarloPricer(seed=seed).price(model, contract, n_paths, steps, horizon)


def convergence_analysis(
    model: MarketModel,
    contract: ContractVariant,
    steps: int,
    reference_price: Optional[float] = None,
    path_counts: tuple[int, ...] = (1_000, 5_000, 10_000, 50_000, 100_000),
    seed: int = 42,
) -> pd.DataFrame:
    """
    Tabulate price and standard error against the number of paths.

    [T1] Standard error should scale as 1/√N, i.e. ``se * sqrt(n)`` is
    roughly constant down the table.

    Parameters
    ----------
    model : MarketModel
        Market parameters
    contract : ContractVariant
        Contract to price
    steps : int
        Time steps per path
    reference_price : float, optional
        Analytical price; adds error columns when given
    path_counts : tuple[int, ...]
        Number of paths to test
    seed : int
        Random seed

    Returns
    -------
    pd.DataFrame
        One row per path count
    """
    pricer = MonteCarloPricer(seed=seed)
    rows = []
    for n in path_counts:
        result = pricer.price_detailed(model, contract, n, steps)
        row = {
            "n_paths": n,
            "mc_price": result.price,
            "standard_error": result.standard_error,
            "scaled_error": result.standard_error * np.sqrt(n),
        }
        if reference_price is not None:
            row["absolute_error"] = abs(result.price - reference_price)
            row["within_ci"] = (
                result.confidence_interval[0] <= reference_price <= result.confidence_interval[1]
            )
        rows.append(row)

    return pd.DataFrame(rows)


def estimate_convergence_rate(table: pd.DataFrame, column: str = "standard_error") -> float:
    """
    Estimate convergence rate from a convergence table.

    [T1] Theory predicts rate = -0.5 (error ~ 1/√N).

    Returns
    -------
    float
        Slope of log(column) against log(n_paths)
    """
    log_n = np.log(table["n_paths"].to_numpy(dtype=float))
    log_error = np.log(table[column].to_numpy(dtype=float) + 1e-12)
    slope, _ = np.polyfit(log_n, log_error, 1)
    return float(slope)
