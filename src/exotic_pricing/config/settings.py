"""
Frozen configuration settings for simulation and replication.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
Tolerances live in config/tolerances.py.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _resolve_seed() -> Optional[int]:
    """
    Resolve the default random seed.

    Priority:
    1. EXOTIC_PRICING_SEED environment variable (if set)
    2. Default: None (fresh OS entropy per run)
    """
    env_seed = os.environ.get("EXOTIC_PRICING_SEED")
    if env_seed:
        return int(env_seed)
    return None


def _resolve_workers() -> int:
    """
    Resolve the default worker count for chunked Monte Carlo.

    EXOTIC_PRICING_WORKERS overrides; default 1 keeps runs single-threaded.
    """
    env_workers = os.environ.get("EXOTIC_PRICING_WORKERS")
    if env_workers:
        return max(1, int(env_workers))
    return 1


# =============================================================================
# Monte Carlo Configuration
# =============================================================================

@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable Monte Carlo configuration.

    Attributes
    ----------
    n_paths : int
        Default number of Monte Carlo trials
    n_steps : int
        Default number of time steps per path
    chunk_size : int
        Trials per independent random stream / work item
    seed : int, optional
        Root seed. Override with EXOTIC_PRICING_SEED.
    n_workers : int
        Threads used for chunks. Override with EXOTIC_PRICING_WORKERS.
    """

    n_paths: int = 10_000  # [T3] Front-end default
    n_steps: int = 100
    chunk_size: int = 8_192
    seed: Optional[int] = field(default_factory=_resolve_seed)
    n_workers: int = field(default_factory=_resolve_workers)


# =============================================================================
# Delta Hedging Configuration
# =============================================================================

@dataclass(frozen=True)
class HedgeConfig:
    """
    Immutable delta-hedging configuration.

    Attributes
    ----------
    bump_fraction : float
        Relative spot bump ε/S for central differences
    n_paths : int
        Trials per nested re-pricing
    """

    bump_fraction: float = 0.01  # [T1] ε = 1% of spot
    n_paths: int = 10_000


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from exotic_pricing.config.settings import SETTINGS
    >>> SETTINGS.simulation.n_paths
    10000
    """

    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    hedge: HedgeConfig = field(default_factory=HedgeConfig)


# Singleton instance - import this
SETTINGS = Settings()
