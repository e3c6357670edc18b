#!/usr/bin/env python3
"""
Exotic Option Pricing Demo - Barrier, Asian and Lookback.

This example prices one contract of every variant on the same market and
random seed, and checks the vanilla price against Black-Scholes.

Key Concepts:
- All variants share one Monte Carlo engine and one path convention
- Knock-in + knock-out = vanilla on shared paths
- Asian < vanilla < lookback for the same strike

Usage:
    python examples/01_price_exotics.py          # Full demo
    python examples/01_price_exotics.py --ci     # CI mode (fewer paths)
"""

import argparse

from exotic_pricing import (
    AsianOption,
    BarrierDirection,
    BarrierOption,
    LookbackOption,
    MarketModel,
    MonteCarloPricer,
    OptionType,
    VanillaOption,
    analytic_price,
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Exotic option pricing demo")
    parser.add_argument("--ci", action="store_true", help="CI mode: fewer paths")
    args = parser.parse_args()

    n_paths = 10_000 if args.ci else 200_000
    steps = 50

    market = MarketModel(spot=100.0, rate=0.05, volatility=0.20)
    terms = {"strike": 100.0, "maturity": 1.0, "option_type": OptionType.CALL}
    contracts = [
        VanillaOption(**terms),
        AsianOption(**terms),
        LookbackOption(**terms),
        BarrierOption(level=120.0, direction=BarrierDirection.UP_AND_OUT, **terms),
        BarrierOption(level=120.0, direction=BarrierDirection.UP_AND_IN, **terms),
    ]

    pricer = MonteCarloPricer(seed=42)

    print("=" * 72)
    print(f"Market: S={market.spot}, r={market.rate:.2%}, σ={market.volatility:.2%}")
    print(f"Paths: {n_paths:,}, steps: {steps}")
    print("=" * 72)

    prices = {}
    for contract in contracts:
        result = pricer.price_detailed(market, contract, n_paths=n_paths, steps=steps)
        prices[contract] = result.price
        print(f"{contract.describe():<45} {result.price:>9.4f} ± {result.standard_error:.4f}")

    vanilla, _, _, knock_out, knock_in = contracts
    print("-" * 72)
    print(f"Black-Scholes vanilla:                        {analytic_price(market, vanilla):>9.4f}")
    print(f"Knock-out + knock-in:                         {prices[knock_out] + prices[knock_in]:>9.4f}")


if __name__ == "__main__":
    main()
