"""
Tests for GBM path generation - options/simulation/gbm.py.

[T1] S(t+dt) = S(t) * exp((r - q - σ²/2)dt + σ√dt * Z)
[T1] E[S(T)] = S(0) * exp((r-q)*T)
"""

import numpy as np
import pytest
from scipy import stats

from exotic_pricing.errors import InvalidParameterError
from exotic_pricing.market import MarketModel
from exotic_pricing.options.simulation.gbm import (
    advance_spot,
    simulate_path,
    simulate_paths,
    validate_gbm_simulation,
)

#: Significance level for statistical tests
SIGNIFICANCE_LEVEL: float = 0.01


class TestSimulatePath:
    """Tests for single-path generation."""

    def test_returns_exactly_steps_prices(self, market: MarketModel) -> None:
        path = simulate_path(market, 12, 1.0, np.random.default_rng(1))
        assert path.shape == (12,)
        assert np.all(path > 0)

    def test_reproducible(self, market: MarketModel) -> None:
        a = simulate_path(market, 50, 1.0, np.random.default_rng(7))
        b = simulate_path(market, 50, 1.0, np.random.default_rng(7))
        np.testing.assert_array_equal(a, b)

    @pytest.mark.parametrize("steps", [0, -1])
    def test_rejects_non_positive_steps(self, market: MarketModel, steps: int) -> None:
        with pytest.raises(InvalidParameterError, match="steps must be > 0"):
            simulate_path(market, steps, 1.0, np.random.default_rng(0))

    def test_rejects_non_positive_horizon(self, market: MarketModel) -> None:
        with pytest.raises(InvalidParameterError, match="horizon must be > 0"):
            simulate_path(market, 10, 0.0, np.random.default_rng(0))

    def test_matches_batch_scheme(self, market: MarketModel) -> None:
        """One-path batch and single path consume the stream identically."""
        single = simulate_path(market, 20, 1.0, np.random.default_rng(3))
        batch = simulate_paths(market, 1, 20, 1.0, np.random.default_rng(3))
        np.testing.assert_allclose(single, batch.prices[0])


class TestSimulatePaths:
    """Tests for batch generation."""

    def test_shape_and_initial(self, market: MarketModel) -> None:
        paths = simulate_paths(market, 100, 10, 1.0, np.random.default_rng(0))
        assert paths.prices.shape == (100, 10)
        assert paths.initial == 100.0
        assert paths.horizon == 1.0

    def test_antithetic_pairs(self, market: MarketModel) -> None:
        """[T1] Antithetic log-returns mirror around the drift."""
        paths = simulate_paths(market, 10, 5, 1.0, np.random.default_rng(0), antithetic=True)
        log_ret = np.diff(np.log(paths.observed()), axis=1)
        drift = market.drift * 0.2
        np.testing.assert_allclose(log_ret[:5] - drift, -(log_ret[5:] - drift), atol=1e-12)

    def test_antithetic_odd_count(self, market: MarketModel) -> None:
        paths = simulate_paths(market, 7, 3, 1.0, np.random.default_rng(0), antithetic=True)
        assert paths.n_paths == 7

    def test_terminal_mean(self, dividend_market: MarketModel) -> None:
        """[T1] E[S(T)] = S(0) * exp((r-q)T)."""
        paths = simulate_paths(dividend_market, 100_000, 4, 1.0, np.random.default_rng(42))
        expected = 100.0 * np.exp(0.03)
        se = paths.terminal.std() / np.sqrt(100_000)
        assert abs(paths.terminal.mean() - expected) < 4 * se

    def test_log_returns_normal(self, market: MarketModel) -> None:
        """Per-step log-returns are normal with variance σ²dt."""
        paths = simulate_paths(market, 5_000, 10, 1.0, np.random.default_rng(11))
        log_ret = np.diff(np.log(paths.observed()), axis=1)[:, 0]
        standardised = (log_ret - market.drift * 0.1) / (market.volatility * np.sqrt(0.1))
        _, p_value = stats.kstest(standardised, "norm")
        assert p_value > SIGNIFICANCE_LEVEL


class TestAdvanceSpot:
    """Tests for one incremental move."""

    def test_positive_float(self, market: MarketModel) -> None:
        spot = advance_spot(market, 100.0, 0.01, np.random.default_rng(0))
        assert isinstance(spot, float)
        assert spot > 0

    def test_uses_normal_increment(self, market: MarketModel) -> None:
        rng = np.random.default_rng(5)
        z = np.random.default_rng(5).standard_normal()
        expected = 100.0 * np.exp(market.drift * 0.25 + market.volatility * 0.5 * z)
        assert advance_spot(market, 100.0, 0.25, rng) == pytest.approx(expected)

    def test_rejects_zero_dt(self, market: MarketModel) -> None:
        with pytest.raises(InvalidParameterError):
            advance_spot(market, 100.0, 0.0, np.random.default_rng(0))


class TestValidateGBM:
    """Moment validation helper."""

    def test_passes(self, dividend_market: MarketModel) -> None:
        result = validate_gbm_simulation(dividend_market, n_paths=50_000)
        assert result["validation_passed"]
        assert result["variance_error_pct"] < 3.0
