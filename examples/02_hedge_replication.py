#!/usr/bin/env python3
"""
Delta-Hedge Replication Demo.

This example replicates a vanilla call by discrete delta hedging and
shows the replication cost approaching the Black-Scholes price as the
number of rebalancing dates grows, then hedges a barrier option with
nested Monte Carlo deltas.

Key Concepts:
- Hedging error shrinks roughly as 1/√N
- Nested re-pricing costs n_paths · N · (N + 1) path-steps per run

Usage:
    python examples/02_hedge_replication.py          # Full demo
    python examples/02_hedge_replication.py --ci     # CI mode (fewer runs)
"""

import argparse
import logging

import numpy as np

from exotic_pricing import (
    BarrierDirection,
    BarrierOption,
    DeltaHedgeSimulator,
    DeltaMethod,
    MarketModel,
    OptionType,
    analytic_price,
    estimate_hedge_workload,
    vanilla_call,
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Delta-hedge replication demo")
    parser.add_argument("--ci", action="store_true", help="CI mode: fewer runs")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    runs = 5 if args.ci else 50
    market = MarketModel(spot=100.0, rate=0.05, volatility=0.20)
    call = vanilla_call(100.0, 1.0)
    bs = analytic_price(market, call)

    print("=" * 60)
    print(f"Black-Scholes price: {bs:.4f}")
    print(f"{'steps':>8} {'mean cost':>12} {'rmse':>10}")
    for steps in (10, 50, 250):
        costs = np.array([
            DeltaHedgeSimulator(delta_method=DeltaMethod.ANALYTIC, seed=s).hedge_cost(market, call, steps)
            for s in range(runs)
        ])
        rmse = np.sqrt(np.mean((costs - bs) ** 2))
        print(f"{steps:>8} {costs.mean():>12.4f} {rmse:>10.4f}")

    barrier = BarrierOption(
        strike=100.0, maturity=1.0, option_type=OptionType.CALL,
        level=125.0, direction=BarrierDirection.UP_AND_OUT,
    )
    steps, n_paths = 12, 2_000
    print("=" * 60)
    print(f"Barrier hedge: {barrier.describe()}")
    print(f"Nested workload: {estimate_hedge_workload(steps, n_paths):,} path-steps")
    result = DeltaHedgeSimulator(n_paths=n_paths, seed=1).simulate(market, barrier, steps)
    print(f"Cost: {result.cost:.4f}  touched: {result.barrier_touched}  payoff: {result.payoff:.4f}")


if __name__ == "__main__":
    main()
