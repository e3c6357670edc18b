"""
Tests for contract payoffs - options/payoffs/.

Tests correctness of:
- Terminal/path capability split
- Vanilla, Asian and lookback payoffs
- Path convention (initial spot excluded from Asian average,
  included in lookback extremum)
"""

import numpy as np
import pytest

from exotic_pricing.errors import InvalidParameterError, UnsupportedOperationError
from exotic_pricing.options.payoffs.barrier import BarrierDirection, BarrierOption
from exotic_pricing.options.payoffs.base import (
    OptionType,
    PayoffKind,
    SimulatedPaths,
    evaluate_payoffs,
)
from exotic_pricing.options.payoffs.path_dependent import AsianOption, LookbackOption
from exotic_pricing.options.payoffs.vanilla import VanillaOption, vanilla_call, vanilla_put


class TestSimulatedPaths:
    """Tests for the shared path container."""

    def test_observed_prepends_initial(self) -> None:
        paths = SimulatedPaths.single(100.0, [101.0, 102.0])
        np.testing.assert_array_equal(paths.observed(), [[100.0, 101.0, 102.0]])
        np.testing.assert_array_equal(paths.prices, [[101.0, 102.0]])

    def test_shape_properties(self) -> None:
        paths = SimulatedPaths(initial=100.0, prices=np.ones((3, 5)), horizon=1.0)
        assert paths.n_paths == 3
        assert paths.n_steps == 5
        assert paths.terminal.shape == (3,)

    def test_rejects_one_dimensional(self) -> None:
        with pytest.raises(InvalidParameterError, match="2-D"):
            SimulatedPaths(initial=100.0, prices=np.ones(5), horizon=1.0)

    def test_rejects_empty(self) -> None:
        with pytest.raises(InvalidParameterError, match="empty"):
            SimulatedPaths(initial=100.0, prices=np.ones((1, 0)), horizon=1.0)


class TestContractValidation:
    """Common contract terms are validated."""

    @pytest.mark.parametrize("strike", [0.0, -10.0])
    def test_strike_positive(self, strike: float) -> None:
        with pytest.raises(InvalidParameterError, match="strike must be > 0"):
            VanillaOption(strike=strike, maturity=1.0, option_type=OptionType.CALL)

    def test_maturity_positive(self) -> None:
        with pytest.raises(InvalidParameterError, match="maturity must be > 0"):
            AsianOption(strike=100.0, maturity=0.0, option_type=OptionType.CALL)

    def test_option_type_checked(self) -> None:
        with pytest.raises(InvalidParameterError, match="option_type"):
            LookbackOption(strike=100.0, maturity=1.0, option_type="call")  # type: ignore[arg-type]

    def test_frozen(self, atm_call: VanillaOption) -> None:
        with pytest.raises(AttributeError):
            atm_call.strike = 90.0  # type: ignore[misc]


class TestCapabilitySplit:
    """Calling the wrong payoff form fails loudly."""

    def test_vanilla_is_terminal(self, atm_call: VanillaOption) -> None:
        assert atm_call.payoff_kind == PayoffKind.TERMINAL

    @pytest.mark.parametrize("fixture", ["asian_call", "lookback_call", "up_and_out_call"])
    def test_path_variants(self, fixture: str, request: pytest.FixtureRequest) -> None:
        contract = request.getfixturevalue(fixture)
        assert contract.payoff_kind == PayoffKind.PATH
        with pytest.raises(UnsupportedOperationError, match="requires the full path"):
            contract.terminal_payoff(np.array([100.0]))

    def test_vanilla_path_payoff_unsupported(self, atm_call: VanillaOption) -> None:
        paths = SimulatedPaths.single(100.0, [105.0])
        with pytest.raises(UnsupportedOperationError, match="only uses the terminal price"):
            atm_call.path_payoff(paths)

    def test_unsupported_is_type_error(self, asian_call: AsianOption) -> None:
        with pytest.raises(TypeError):
            asian_call.terminal_payoff(np.array([100.0]))


class TestVanillaPayoffs:
    """[T1] max(S_T - K, 0) and max(K - S_T, 0)."""

    def test_call(self) -> None:
        payoffs = vanilla_call(100.0, 1.0).terminal_payoff(np.array([80.0, 100.0, 125.0]))
        np.testing.assert_allclose(payoffs, [0.0, 0.0, 25.0])

    def test_put(self) -> None:
        payoffs = vanilla_put(100.0, 1.0).terminal_payoff(np.array([80.0, 100.0, 125.0]))
        np.testing.assert_allclose(payoffs, [20.0, 0.0, 0.0])

    def test_evaluate_dispatch_uses_last_price(self, atm_call: VanillaOption) -> None:
        paths = SimulatedPaths.single(100.0, [150.0, 90.0, 110.0])
        assert evaluate_payoffs(atm_call, paths)[0] == pytest.approx(10.0)


class TestAsianPayoffs:
    """Arithmetic average of the forward prices, initial spot excluded."""

    def test_call_on_average(self, asian_call: AsianOption) -> None:
        paths = SimulatedPaths.single(100.0, [100.0, 110.0, 120.0])
        assert evaluate_payoffs(asian_call, paths)[0] == pytest.approx(10.0)

    def test_initial_spot_excluded(self) -> None:
        """A very low initial spot must not drag the average down."""
        asian = AsianOption(strike=100.0, maturity=1.0, option_type=OptionType.CALL)
        paths = SimulatedPaths.single(1.0, [110.0, 110.0])
        assert evaluate_payoffs(asian, paths)[0] == pytest.approx(10.0)

    def test_put(self) -> None:
        asian = AsianOption(strike=100.0, maturity=1.0, option_type=OptionType.PUT)
        paths = SimulatedPaths.single(100.0, [90.0, 80.0])
        assert evaluate_payoffs(asian, paths)[0] == pytest.approx(15.0)


class TestLookbackPayoffs:
    """Extremum over the observed path, initial spot included."""

    def test_call_on_maximum(self, lookback_call: LookbackOption) -> None:
        paths = SimulatedPaths.single(100.0, [130.0, 90.0, 95.0])
        assert evaluate_payoffs(lookback_call, paths)[0] == pytest.approx(30.0)

    def test_put_on_minimum(self) -> None:
        lookback = LookbackOption(strike=100.0, maturity=1.0, option_type=OptionType.PUT)
        paths = SimulatedPaths.single(100.0, [110.0, 70.0, 120.0])
        assert evaluate_payoffs(lookback, paths)[0] == pytest.approx(30.0)

    def test_initial_spot_included(self) -> None:
        """A path that only falls still sees S_0 as its maximum."""
        lookback = LookbackOption(strike=90.0, maturity=1.0, option_type=OptionType.CALL)
        paths = SimulatedPaths.single(100.0, [95.0, 85.0, 80.0])
        assert evaluate_payoffs(lookback, paths)[0] == pytest.approx(10.0)

    def test_dominates_vanilla(self, lookback_call: LookbackOption, atm_call: VanillaOption) -> None:
        rng = np.random.default_rng(0)
        prices = 100.0 * np.exp(np.cumsum(rng.normal(0, 0.02, size=(50, 20)), axis=1))
        paths = SimulatedPaths(initial=100.0, prices=prices, horizon=1.0)
        assert np.all(
            evaluate_payoffs(lookback_call, paths) >= evaluate_payoffs(atm_call, paths)
        )


class TestBarrierContract:
    """Barrier contract construction and helpers."""

    def test_level_positive(self) -> None:
        with pytest.raises(InvalidParameterError, match="barrier level must be > 0"):
            BarrierOption(
                strike=100.0,
                maturity=1.0,
                option_type=OptionType.CALL,
                level=0.0,
                direction=BarrierDirection.UP_AND_OUT,
            )

    def test_direction_checked(self) -> None:
        with pytest.raises(InvalidParameterError, match="direction"):
            BarrierOption(
                strike=100.0,
                maturity=1.0,
                option_type=OptionType.CALL,
                level=120.0,
                direction="up_and_out",  # type: ignore[arg-type]
            )

    def test_vanilla_equivalent(self, up_and_out_call: BarrierOption) -> None:
        vanilla = up_and_out_call.vanilla()
        assert isinstance(vanilla, VanillaOption)
        assert vanilla.strike == 100.0
        assert vanilla.option_type == OptionType.CALL

    def test_check_start_rejects_level_on_spot(self, up_and_out_call: BarrierOption) -> None:
        with pytest.raises(InvalidParameterError, match="must differ from spot"):
            up_and_out_call.check_start(120.0)
        up_and_out_call.check_start(100.0)
