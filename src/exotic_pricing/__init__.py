"""
exotic-pricing: Monte Carlo pricing and delta-hedge replication of exotic options.

Quick Start
-----------
>>> from exotic_pricing import MarketModel, BarrierOption, BarrierDirection, OptionType, price
>>> model = MarketModel(spot=100.0, rate=0.05, volatility=0.20)
>>> contract = BarrierOption(
...     strike=100.0, maturity=1.0, option_type=OptionType.CALL,
...     level=120.0, direction=BarrierDirection.UP_AND_OUT,
... )
>>> value = price(model, contract, n_paths=10_000, steps=100, seed=42)

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Market
# =============================================================================
from exotic_pricing.market import MarketModel

# =============================================================================
# Contracts
# =============================================================================
from exotic_pricing.options.payoffs.base import (
    ContractVariant,
    OptionType,
    PayoffKind,
    SimulatedPaths,
    evaluate_payoffs,
)
from exotic_pricing.options.payoffs.vanilla import VanillaOption, vanilla_call, vanilla_put
from exotic_pricing.options.payoffs.path_dependent import AsianOption, LookbackOption
from exotic_pricing.options.payoffs.barrier import (
    BarrierCrossingDetector,
    BarrierDirection,
    BarrierOption,
    CrossingState,
)

# =============================================================================
# Pricing
# =============================================================================
from exotic_pricing.options.simulation import (
    CancellationToken,
    MCResult,
    MonteCarloPricer,
    price,
)
from exotic_pricing.options.pricing import analytic_price

# =============================================================================
# Hedging
# =============================================================================
from exotic_pricing.options.hedging import (
    DeltaHedgeSimulator,
    DeltaMethod,
    HedgeResult,
    estimate_hedge_workload,
    hedge_cost,
)

# =============================================================================
# Configuration & Errors
# =============================================================================
from exotic_pricing.config.settings import SETTINGS
from exotic_pricing.errors import (
    DegenerateTimeStepError,
    InvalidParameterError,
    PricingError,
    SimulationCancelledError,
    UnsupportedOperationError,
)

__all__ = [
    "__version__",
    # Market
    "MarketModel",
    # Contracts
    "ContractVariant",
    "OptionType",
    "PayoffKind",
    "SimulatedPaths",
    "evaluate_payoffs",
    "VanillaOption",
    "vanilla_call",
    "vanilla_put",
    "AsianOption",
    "LookbackOption",
    "BarrierCrossingDetector",
    "BarrierDirection",
    "BarrierOption",
    "CrossingState",
    # Pricing
    "CancellationToken",
    "MCResult",
    "MonteCarloPricer",
    "price",
    "analytic_price",
    # Hedging
    "DeltaHedgeSimulator",
    "DeltaMethod",
    "HedgeResult",
    "estimate_hedge_workload",
    "hedge_cost",
    # Configuration & Errors
    "SETTINGS",
    "DegenerateTimeStepError",
    "InvalidParameterError",
    "PricingError",
    "SimulationCancelledError",
    "UnsupportedOperationError",
]
