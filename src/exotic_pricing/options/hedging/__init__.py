"""
Delta-hedge replication.

Provides:
- Finite-difference delta estimation by nested Monte Carlo
- Discrete self-financing delta-hedge simulator
"""

from exotic_pricing.options.hedging.delta_hedge import (
    DeltaHedgeSimulator,
    HedgeResult,
    HedgeState,
    estimate_hedge_workload,
    hedge_cost,
)
from exotic_pricing.options.hedging.greeks import (
    DeltaEstimate,
    DeltaMethod,
    FiniteDifferenceDelta,
)

__all__ = [
    # Hedge simulator
    "DeltaHedgeSimulator",
    "HedgeResult",
    "HedgeState",
    "estimate_hedge_workload",
    "hedge_cost",
    # Greeks
    "DeltaEstimate",
    "DeltaMethod",
    "FiniteDifferenceDelta",
]
