"""
Centralized pytest fixtures for the exotic-pricing test suite.

This module provides shared fixtures used across all test categories:
- unit/
- properties/
- validation/
- integration/
- smoke/

Fixture Categories:
1. Tolerances - Tiered tolerance settings
2. Market Models - Standard market conditions
3. Contracts - One representative contract per variant
4. Random Streams - Reproducible generators
"""

from dataclasses import dataclass

import numpy as np
import pytest

from exotic_pricing.market import MarketModel
from exotic_pricing.options.payoffs.barrier import BarrierDirection, BarrierOption
from exotic_pricing.options.payoffs.base import OptionType
from exotic_pricing.options.payoffs.path_dependent import AsianOption, LookbackOption
from exotic_pricing.options.payoffs.vanilla import VanillaOption

# =============================================================================
# TOLERANCE TIERS
# =============================================================================

@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.

    Derived from precision requirements, not ad hoc.
    See: exotic_pricing/config/tolerances.py
    """

    # Exact identities on a shared random stream
    anti_pattern: float = 1e-10

    # Library precision
    validation: float = 1e-6

    # Monte Carlo vs analytical: Accounts for stochastic variance
    mc_100k_paths: float = 0.01  # 1%
    barrier_vs_bs: float = 0.02  # 2%


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# MARKET MODELS
# =============================================================================

@pytest.fixture
def market() -> MarketModel:
    """Standard ATM market: S=100, r=5%, σ=20%, no dividend."""
    return MarketModel(spot=100.0, rate=0.05, volatility=0.20)


@pytest.fixture
def dividend_market() -> MarketModel:
    """Standard market with a 2% dividend yield."""
    return MarketModel(spot=100.0, rate=0.05, volatility=0.20, dividend=0.02)


# =============================================================================
# CONTRACTS
# =============================================================================

@pytest.fixture
def atm_call() -> VanillaOption:
    """1-year ATM vanilla call."""
    return VanillaOption(strike=100.0, maturity=1.0, option_type=OptionType.CALL)


@pytest.fixture
def atm_put() -> VanillaOption:
    """1-year ATM vanilla put."""
    return VanillaOption(strike=100.0, maturity=1.0, option_type=OptionType.PUT)


@pytest.fixture
def asian_call() -> AsianOption:
    """1-year ATM arithmetic Asian call."""
    return AsianOption(strike=100.0, maturity=1.0, option_type=OptionType.CALL)


@pytest.fixture
def lookback_call() -> LookbackOption:
    """1-year ATM fixed-strike lookback call."""
    return LookbackOption(strike=100.0, maturity=1.0, option_type=OptionType.CALL)


@pytest.fixture
def up_and_out_call() -> BarrierOption:
    """1-year ATM up-and-out call with barrier at 120."""
    return BarrierOption(
        strike=100.0,
        maturity=1.0,
        option_type=OptionType.CALL,
        level=120.0,
        direction=BarrierDirection.UP_AND_OUT,
    )


@pytest.fixture
def up_and_in_call() -> BarrierOption:
    """1-year ATM up-and-in call with barrier at 120."""
    return BarrierOption(
        strike=100.0,
        maturity=1.0,
        option_type=OptionType.CALL,
        level=120.0,
        direction=BarrierDirection.UP_AND_IN,
    )


# =============================================================================
# RANDOM STREAMS
# =============================================================================

@pytest.fixture
def reproducible_rng() -> np.random.Generator:
    """Provide a reproducible numpy random generator."""
    return np.random.default_rng(seed=42)
