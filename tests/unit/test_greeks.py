"""
Tests for finite-difference delta - options/hedging/greeks.py.

[T1] Δ ≈ (V(S + ε) - V(S - ε)) / (2ε),  ε = 0.01 · S
"""

import numpy as np
import pytest

from exotic_pricing.config.tolerances import GREEKS_NUMERICAL_TOLERANCE
from exotic_pricing.errors import DegenerateTimeStepError, InvalidParameterError
from exotic_pricing.market import MarketModel
from exotic_pricing.options.hedging.greeks import DeltaEstimate, FiniteDifferenceDelta
from exotic_pricing.options.payoffs.barrier import BarrierDirection, BarrierOption
from exotic_pricing.options.payoffs.base import OptionType
from exotic_pricing.options.payoffs.vanilla import VanillaOption
from exotic_pricing.options.pricing.black_scholes import analytic_delta
from exotic_pricing.options.simulation.monte_carlo import MonteCarloPricer


class TestConstruction:
    """Estimator settings."""

    def test_defaults(self) -> None:
        estimator = FiniteDifferenceDelta()
        assert estimator.n_paths == 10_000
        assert estimator.bump_fraction == 0.01

    @pytest.mark.parametrize("bump", [0.0, -0.01, 1.0, 2.0])
    def test_bad_bump(self, bump: float) -> None:
        with pytest.raises(InvalidParameterError):
            FiniteDifferenceDelta(bump_fraction=bump)

    def test_bad_n_paths(self) -> None:
        with pytest.raises(InvalidParameterError):
            FiniteDifferenceDelta(n_paths=0)

    def test_workload(self) -> None:
        assert FiniteDifferenceDelta(n_paths=1_000).workload(50) == 100_000


class TestVanillaDelta:
    """Finite difference against Black-Scholes."""

    def test_close_to_analytic(self, market: MarketModel, atm_call: VanillaOption) -> None:
        estimator = FiniteDifferenceDelta(n_paths=100_000)
        estimate = estimator.estimate(market, atm_call, steps=1, horizon=1.0, seed=42)
        assert isinstance(estimate, DeltaEstimate)
        assert estimate.epsilon == pytest.approx(1.0)
        assert estimate.delta == pytest.approx(analytic_delta(market, atm_call, 1.0), abs=0.02)

    def test_put_negative(self, market: MarketModel, atm_put: VanillaOption) -> None:
        estimate = FiniteDifferenceDelta(n_paths=20_000).estimate(market, atm_put, 1, 1.0, seed=1)
        assert -1.0 <= estimate.delta < 0.0

    def test_common_random_numbers(self, market: MarketModel, atm_call: VanillaOption) -> None:
        """Same seed → identical estimate; price_up > price_down for a call."""
        estimator = FiniteDifferenceDelta(n_paths=5_000)
        a = estimator.estimate(market, atm_call, 10, 1.0, seed=3)
        b = estimator.estimate(market, atm_call, 10, 1.0, seed=3)
        assert a == b
        assert a.price_up > a.price_down

    def test_threaded_matches_sequential(
        self, market: MarketModel, atm_call: VanillaOption
    ) -> None:
        sequential = FiniteDifferenceDelta(pricer=MonteCarloPricer(n_workers=1), n_paths=4_000)
        threaded = FiniteDifferenceDelta(pricer=MonteCarloPricer(n_workers=2), n_paths=4_000)
        assert sequential.estimate(market, atm_call, 5, 1.0, seed=8).delta == pytest.approx(
            threaded.estimate(market, atm_call, 5, 1.0, seed=8).delta,
            abs=GREEKS_NUMERICAL_TOLERANCE,
        )

    def test_delta_from_bumped_prices(self, market: MarketModel, atm_call: VanillaOption) -> None:
        estimate = FiniteDifferenceDelta(n_paths=2_000).estimate(market, atm_call, 5, 1.0, seed=6)
        expected = (estimate.price_up - estimate.price_down) / (2 * estimate.epsilon)
        assert estimate.delta == pytest.approx(expected, abs=GREEKS_NUMERICAL_TOLERANCE)

    def test_degenerate_horizon(self, market: MarketModel, atm_call: VanillaOption) -> None:
        with pytest.raises(DegenerateTimeStepError):
            FiniteDifferenceDelta(n_paths=100).estimate(market, atm_call, 0, 1.0, seed=1)
        with pytest.raises(DegenerateTimeStepError):
            FiniteDifferenceDelta(n_paths=100).estimate(market, atm_call, 5, 0.0, seed=1)


class TestBarrierBumps:
    """A bump that crosses the barrier counts as a touch."""

    def _contract(self, direction: BarrierDirection) -> BarrierOption:
        return BarrierOption(
            strike=100.0,
            maturity=1.0,
            option_type=OptionType.CALL,
            level=110.0,
            direction=direction,
        )

    def test_knock_out_up_bump_is_void(self) -> None:
        """Spot 109.5, ε = 1.095: S + ε crosses 110, so V(S + ε) = 0."""
        model = MarketModel(spot=109.5, rate=0.05, volatility=0.2)
        estimate = FiniteDifferenceDelta(n_paths=2_000).estimate(
            model, self._contract(BarrierDirection.UP_AND_OUT), 10, 0.5, seed=1
        )
        assert estimate.price_up == 0.0
        assert estimate.price_down > 0.0
        assert estimate.delta < 0.0

    def test_knock_in_up_bump_is_vanilla(self) -> None:
        model = MarketModel(spot=109.5, rate=0.05, volatility=0.2)
        contract = self._contract(BarrierDirection.UP_AND_IN)
        estimate = FiniteDifferenceDelta(n_paths=2_000).estimate(model, contract, 10, 0.5, seed=1)

        vanilla_up = MonteCarloPricer().reprice(
            model.bumped(estimate.epsilon), contract.vanilla(), 2_000, 10, 0.5, seed=1
        )
        assert estimate.price_up == pytest.approx(vanilla_up.price)

    def test_knock_out_void_still_checks_grid(self) -> None:
        model = MarketModel(spot=109.5, rate=0.05, volatility=0.2)
        with pytest.raises(DegenerateTimeStepError):
            FiniteDifferenceDelta(n_paths=100).estimate(
                model, self._contract(BarrierDirection.UP_AND_OUT), 0, 0.5, seed=1
            )


class TestUnseededEstimates:
    """Without an explicit seed both bumps still share one stream."""

    def test_falls_back_to_pricer_seed(self, market: MarketModel, atm_call: VanillaOption) -> None:
        estimator = FiniteDifferenceDelta(pricer=MonteCarloPricer(seed=21), n_paths=2_000)
        assert estimator.estimate(market, atm_call, 1, 1.0) == estimator.estimate(
            market, atm_call, 1, 1.0, seed=21
        )

    def test_spread_matches_seeded(self, market: MarketModel, atm_call: VanillaOption) -> None:
        """Fresh entropy per estimate, but common random numbers within each."""
        estimator = FiniteDifferenceDelta(n_paths=2_000)
        seeded = [estimator.estimate(market, atm_call, 1, 1.0, seed=s).delta for s in range(20)]
        unseeded = [estimator.estimate(market, atm_call, 1, 1.0).delta for _ in range(20)]

        assert np.std(unseeded) < 5 * np.std(seeded)
        assert np.mean(unseeded) == pytest.approx(analytic_delta(market, atm_call, 1.0), abs=0.03)
