"""
Monte Carlo simulation for contract pricing.

Provides:
- GBM path generation with explicit random streams
- Chunked, optionally threaded trial execution with cancellation
- Monte Carlo pricing engine
- Convergence analysis tools
"""

from exotic_pricing.options.simulation.gbm import (
    advance_spot,
    simulate_path,
    simulate_paths,
    validate_gbm_simulation,
)
from exotic_pricing.options.simulation.monte_carlo import (
    MCResult,
    MonteCarloPricer,
    convergence_analysis,
    estimate_convergence_rate,
    price,
)
from exotic_pricing.options.simulation.workers import (
    CancellationToken,
    plan_chunks,
    run_chunks,
    spawn_streams,
)

__all__ = [
    # GBM
    "advance_spot",
    "simulate_path",
    "simulate_paths",
    "validate_gbm_simulation",
    # Monte Carlo
    "MCResult",
    "MonteCarloPricer",
    "convergence_analysis",
    "estimate_convergence_rate",
    "price",
    # Workers
    "CancellationToken",
    "plan_chunks",
    "run_chunks",
    "spawn_streams",
]
