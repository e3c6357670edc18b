"""
Asian and lookback payoffs (fixed strike).

[T1] Asian: payoff on the arithmetic mean of the forward-simulated prices.
[T1] Lookback call: max(max(S) - K, 0); put: max(K - min(S), 0).

The Asian average excludes the initial spot. The lookback extremum
includes it, so a path that only falls never gives a call less than
max(S_0 - K, 0).
"""

from dataclasses import dataclass

import numpy as np

from exotic_pricing.options.payoffs.base import (
    ContractVariant,
    OptionType,
    PayoffKind,
    SimulatedPaths,
)


@dataclass(frozen=True)
class AsianOption(ContractVariant):
    """Arithmetic-average Asian option."""

    @property
    def payoff_kind(self) -> PayoffKind:
        return PayoffKind.PATH

    def path_payoff(self, paths: SimulatedPaths) -> np.ndarray:
        average = paths.prices.mean(axis=1)
        return self.intrinsic(average)


@dataclass(frozen=True)
class LookbackOption(ContractVariant):
    """Fixed-strike lookback option on the running extremum."""

    @property
    def payoff_kind(self) -> PayoffKind:
        return PayoffKind.PATH

    def path_payoff(self, paths: SimulatedPaths) -> np.ndarray:
        observed = paths.observed()
        if self.option_type == OptionType.CALL:
            extremum = observed.max(axis=1)
        else:
            extremum = observed.min(axis=1)
        return self.intrinsic(extremum)
