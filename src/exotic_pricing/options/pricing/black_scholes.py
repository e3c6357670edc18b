"""
Black-Scholes reference pricing for vanilla contracts.

Closed-form oracle used to validate the Monte Carlo engine, to supply
analytical deltas to the hedge simulator for vanilla contracts, and to
print an analytic price beside Monte Carlo results on the command line.

References
----------
[T1] Black, F., & Scholes, M. (1973). The pricing of options and corporate liabilities.
[T1] Hull, J. C. (2018). Options, Futures, and Other Derivatives (10th ed.).
"""

from typing import Optional

import numpy as np
from scipy import stats

from exotic_pricing.errors import InvalidParameterError
from exotic_pricing.market import MarketModel
from exotic_pricing.options.payoffs.base import OptionType
from exotic_pricing.options.payoffs.vanilla import VanillaOption


def _calculate_d1_d2(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
) -> tuple[float, float]:
    """
    Calculate d1 and d2 parameters.

    [T1] d1 = (ln(S/K) + (r - q + σ²/2)T) / (σ√T)
    [T1] d2 = d1 - σ√T
    """
    vol_sqrt_t = volatility * np.sqrt(time_to_expiry)

    d1 = (
        np.log(spot / strike) + (rate - dividend + 0.5 * volatility**2) * time_to_expiry
    ) / vol_sqrt_t

    d2 = d1 - vol_sqrt_t

    return d1, d2


def black_scholes_call(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
) -> float:
    """
    Price European call option using Black-Scholes.

    [T1] C = S*e^(-qT)*N(d1) - K*e^(-rT)*N(d2)

    Examples
    --------
    >>> round(black_scholes_call(100, 100, 0.05, 0.0, 0.20, 1.0), 4)
    10.4506
    """
    _validate_inputs(spot, strike, volatility, time_to_expiry)

    if time_to_expiry == 0:
        return max(spot - strike, 0.0)

    d1, d2 = _calculate_d1_d2(spot, strike, rate, dividend, volatility, time_to_expiry)

    call_price = (
        spot * np.exp(-dividend * time_to_expiry) * stats.norm.cdf(d1)
        - strike * np.exp(-rate * time_to_expiry) * stats.norm.cdf(d2)
    )

    return float(call_price)


def black_scholes_put(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
) -> float:
    """
    Price European put option using Black-Scholes.

    [T1] P = K*e^(-rT)*N(-d2) - S*e^(-qT)*N(-d1)
    """
    _validate_inputs(spot, strike, volatility, time_to_expiry)

    if time_to_expiry == 0:
        return max(strike - spot, 0.0)

    d1, d2 = _calculate_d1_d2(spot, strike, rate, dividend, volatility, time_to_expiry)

    put_price = (
        strike * np.exp(-rate * time_to_expiry) * stats.norm.cdf(-d2)
        - spot * np.exp(-dividend * time_to_expiry) * stats.norm.cdf(-d1)
    )

    return float(put_price)


def black_scholes_delta(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
) -> float:
    """
    Analytical delta.

    [T1] Delta (call) = e^(-qT) * N(d1)
    [T1] Delta (put) = -e^(-qT) * N(-d1)
    """
    _validate_inputs(spot, strike, volatility, time_to_expiry)

    if time_to_expiry == 0:
        if option_type == OptionType.CALL:
            return 1.0 if spot > strike else 0.0
        return -1.0 if spot < strike else 0.0

    d1, _ = _calculate_d1_d2(spot, strike, rate, dividend, volatility, time_to_expiry)
    exp_div = np.exp(-dividend * time_to_expiry)

    if option_type == OptionType.CALL:
        return float(exp_div * stats.norm.cdf(d1))
    else:
        return float(-exp_div * stats.norm.cdf(-d1))


def analytic_price(
    model: MarketModel, contract: VanillaOption, horizon: Optional[float] = None
) -> float:
    """
    Black-Scholes price of a vanilla contract under a market model.

    Parameters
    ----------
    model : MarketModel
        Market parameters
    contract : VanillaOption
        Vanilla call or put
    horizon : float, optional
        Time to expiry; defaults to ``contract.maturity``
    """
    if not isinstance(contract, VanillaOption):
        raise InvalidParameterError(
            f"CRITICAL: analytic pricing only covers vanilla contracts, got {contract.describe()}"
        )
    t = contract.maturity if horizon is None else horizon
    pricer = black_scholes_call if contract.option_type == OptionType.CALL else black_scholes_put
    return pricer(model.spot, contract.strike, model.rate, model.dividend, model.volatility, t)


def analytic_delta(model: MarketModel, contract: VanillaOption, horizon: float) -> float:
    """Black-Scholes delta of a vanilla contract with ``horizon`` years left."""
    return black_scholes_delta(
        model.spot,
        contract.strike,
        model.rate,
        model.dividend,
        model.volatility,
        horizon,
        contract.option_type,
    )


def _validate_inputs(
    spot: float,
    strike: float,
    volatility: float,
    time_to_expiry: float,
) -> None:
    """Validate Black-Scholes inputs."""
    if spot <= 0:
        raise InvalidParameterError(f"CRITICAL: spot must be > 0, got {spot}")
    if strike <= 0:
        raise InvalidParameterError(f"CRITICAL: strike must be > 0, got {strike}")
    if volatility <= 0:
        raise InvalidParameterError(f"CRITICAL: volatility must be > 0, got {volatility}")
    if time_to_expiry < 0:
        raise InvalidParameterError(
            f"CRITICAL: time_to_expiry must be >= 0, got {time_to_expiry}"
        )
