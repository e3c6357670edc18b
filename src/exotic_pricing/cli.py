"""
Command line front end.

Usage:
    exotic-pricing price --style barrier --barrier 120 --direction up_and_out
    exotic-pricing price --style asian --type put --paths 50000
    exotic-pricing hedge --style vanilla --steps 50 --paths 2000 --analytic-delta

Builds a market model and one contract from flags, then prints the Monte
Carlo price (with the Black-Scholes price alongside for vanilla contracts)
or one hedge replication cost.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from exotic_pricing import __version__
from exotic_pricing.config.settings import SETTINGS
from exotic_pricing.errors import InvalidParameterError, PricingError
from exotic_pricing.market import MarketModel
from exotic_pricing.options.hedging.delta_hedge import DeltaHedgeSimulator
from exotic_pricing.options.hedging.greeks import DeltaMethod
from exotic_pricing.options.payoffs.barrier import BarrierDirection, BarrierOption
from exotic_pricing.options.payoffs.base import ContractVariant, OptionType
from exotic_pricing.options.payoffs.path_dependent import AsianOption, LookbackOption
from exotic_pricing.options.payoffs.vanilla import VanillaOption
from exotic_pricing.options.pricing.black_scholes import analytic_price
from exotic_pricing.options.simulation.monte_carlo import MonteCarloPricer

STYLES = ("vanilla", "asian", "lookback", "barrier")


def build_parser() -> argparse.ArgumentParser:
    """Argument parser with ``price`` and ``hedge`` subcommands."""
    parser = argparse.ArgumentParser(
        prog="exotic-pricing",
        description="Monte Carlo pricing and delta-hedge replication of exotic options",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v info, -vv debug")

    common = argparse.ArgumentParser(add_help=False)
    market = common.add_argument_group("market")
    market.add_argument("--spot", type=float, default=100.0, help="Spot price")
    market.add_argument("--rate", type=float, default=0.05, help="Risk-free rate")
    market.add_argument("--vol", type=float, default=0.20, help="Volatility")
    market.add_argument("--dividend", type=float, default=0.0, help="Dividend yield")

    contract = common.add_argument_group("contract")
    contract.add_argument("--strike", type=float, default=100.0, help="Strike price")
    contract.add_argument("--maturity", type=float, default=1.0, help="Maturity in years")
    contract.add_argument(
        "--type", dest="option_type", choices=[t.value for t in OptionType], default="call"
    )
    contract.add_argument("--style", choices=STYLES, default="vanilla")
    contract.add_argument("--barrier", type=float, help="Barrier level (barrier style)")
    contract.add_argument(
        "--direction",
        choices=[d.value for d in BarrierDirection],
        default=BarrierDirection.UP_AND_OUT.value,
    )

    run = common.add_argument_group("simulation")
    run.add_argument("--paths", type=int, default=SETTINGS.simulation.n_paths)
    run.add_argument("--steps", type=int, default=SETTINGS.simulation.n_steps)
    run.add_argument("--seed", type=int, default=SETTINGS.simulation.seed)
    run.add_argument("--workers", type=int, default=SETTINGS.simulation.n_workers)

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("price", parents=[common], help="Monte Carlo price")
    hedge = subparsers.add_parser("hedge", parents=[common], help="Delta-hedge replication cost")
    hedge.add_argument(
        "--analytic-delta",
        action="store_true",
        help="Black-Scholes deltas instead of nested Monte Carlo (vanilla only)",
    )
    return parser


def build_contract(args: argparse.Namespace) -> ContractVariant:
    """Contract described by the parsed flags."""
    terms = {
        "strike": args.strike,
        "maturity": args.maturity,
        "option_type": OptionType(args.option_type),
    }
    if args.style == "vanilla":
        return VanillaOption(**terms)
    if args.style == "asian":
        return AsianOption(**terms)
    if args.style == "lookback":
        return LookbackOption(**terms)
    if args.barrier is None:
        raise InvalidParameterError("CRITICAL: --barrier is required for barrier style")
    return BarrierOption(level=args.barrier, direction=BarrierDirection(args.direction), **terms)


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _run_price(model: MarketModel, contract: ContractVariant, args: argparse.Namespace) -> None:
    pricer = MonteCarloPricer(seed=args.seed, n_workers=args.workers)
    result = pricer.price_detailed(model, contract, n_paths=args.paths, steps=args.steps)

    print(f"Contract:       {contract.describe()}")
    print(f"MC price:       {result.price:.4f}")
    print(f"Std error:      {result.standard_error:.4f}")
    print(f"95% CI:         [{result.confidence_interval[0]:.4f}, {result.confidence_interval[1]:.4f}]")
    if isinstance(contract, VanillaOption):
        print(f"Black-Scholes:  {analytic_price(model, contract):.4f}")


def _run_hedge(model: MarketModel, contract: ContractVariant, args: argparse.Namespace) -> None:
    method = DeltaMethod.ANALYTIC if args.analytic_delta else DeltaMethod.FINITE_DIFFERENCE
    simulator = DeltaHedgeSimulator(
        n_paths=args.paths,
        delta_method=method,
        seed=args.seed,
        pricer=MonteCarloPricer(n_workers=args.workers),
    )
    result = simulator.simulate(model, contract, steps=args.steps)

    print(f"Contract:       {contract.describe()}")
    print(f"Hedge cost:     {result.cost:.4f}")
    print(f"Final spot:     {result.final_spot:.4f}")
    print(f"Payoff:         {result.payoff:.4f}")
    if result.barrier_touched is not None:
        print(f"Barrier hit:    {'yes' if result.barrier_touched else 'no'}")
    if isinstance(contract, VanillaOption):
        print(f"Black-Scholes:  {analytic_price(model, contract):.4f}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Entry point for the ``exotic-pricing`` console script.

    Returns
    -------
    int
        0 on success, 2 when inputs are rejected or the simulation fails
    """
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        model = MarketModel(
            spot=args.spot, rate=args.rate, volatility=args.vol, dividend=args.dividend
        )
        contract = build_contract(args)
        if args.command == "price":
            _run_price(model, contract, args)
        else:
            _run_hedge(model, contract, args)
    except PricingError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
