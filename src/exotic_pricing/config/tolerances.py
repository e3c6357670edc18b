"""
Centralized tolerance framework for Monte Carlo pricing tests and checks.

All tolerances are derived from precision requirements, not ad hoc tuning.

Tolerance Tiers:
    Tier 1 (Analytical): Machine-precision achievable, deterministic results
    Tier 3 (Stochastic): CLT-derived, path-dependent calculations
    Tier 4 (Replication): Discrete hedging error

References:
    [T1] Glasserman (2003) Ch. 3-4 - Monte Carlo error bounds
    [T1] Derman & Kamal (1999) - discrete hedging error ~ 1/√N
"""

from typing import Final

import numpy as np

# =============================================================================
# Tier 1: Analytical Tolerances (Deterministic)
# =============================================================================

#: No-arbitrage bounds and exact identities on a shared random stream
ANTI_PATTERN_TOLERANCE: Final[float] = 1e-10

#: Finite-difference delta against its own bumped prices and across thread counts
GREEKS_NUMERICAL_TOLERANCE: Final[float] = 1e-8


# =============================================================================
# Tier 3: Stochastic Tolerances (CLT-Derived)
# =============================================================================


def mc_tolerance(n_paths: int, sigma: float = 0.20, confidence: float = 3.0) -> float:
    """
    Calculate CLT-derived Monte Carlo tolerance.

    [T1] Standard error of MC estimate is σ/√N.
    3σ gives 99.7% confidence interval.

    Parameters
    ----------
    n_paths : int
        Number of Monte Carlo paths
    sigma : float
        Estimated relative volatility of the payoff (default 0.20)
    confidence : float
        Number of standard deviations (default 3 for 99.7% CI)

    Returns
    -------
    float
        Relative tolerance for MC vs analytical comparison

    Examples
    --------
    >>> round(mc_tolerance(10_000), 4)
    0.006
    """
    return confidence * sigma / np.sqrt(n_paths)


#: MC tolerance for 10,000 paths: 3 * 0.20 / sqrt(10000) ≈ 0.006
MC_10K_TOLERANCE: Final[float] = 0.006

#: MC tolerance for 100,000 paths, conservative for path-dependent payoffs
MC_100K_TOLERANCE: Final[float] = 0.01

#: Far-barrier knock-out vs Black-Scholes (end-to-end acceptance)
BARRIER_VS_BS_TOLERANCE: Final[float] = 0.02

#: Standard-error scaling check: SE ratio within 20% of √(N2/N1)
SE_SCALING_TOLERANCE: Final[float] = 0.20


# =============================================================================
# Tier 4: Replication Tolerances
# =============================================================================

#: Averaged hedge cost vs Black-Scholes with analytical deltas
HEDGE_ANALYTIC_TOLERANCE: Final[float] = 0.05

#: Averaged hedge cost vs Black-Scholes with nested Monte Carlo deltas
HEDGE_NESTED_MC_TOLERANCE: Final[float] = 0.25


TOLERANCE_REGISTRY: dict[str, float] = {
    "anti_pattern": ANTI_PATTERN_TOLERANCE,
    "greeks_numerical": GREEKS_NUMERICAL_TOLERANCE,
    "mc_10k": MC_10K_TOLERANCE,
    "mc_100k": MC_100K_TOLERANCE,
    "barrier_vs_bs": BARRIER_VS_BS_TOLERANCE,
    "se_scaling": SE_SCALING_TOLERANCE,
    "hedge_analytic": HEDGE_ANALYTIC_TOLERANCE,
    "hedge_nested_mc": HEDGE_NESTED_MC_TOLERANCE,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
