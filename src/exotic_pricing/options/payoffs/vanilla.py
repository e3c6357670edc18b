"""
Vanilla European payoffs.

[T1] Call payoff: max(S_T - K, 0)
[T1] Put payoff: max(K - S_T, 0)
"""

from dataclasses import dataclass

import numpy as np

from exotic_pricing.options.payoffs.base import ContractVariant, OptionType, PayoffKind


@dataclass(frozen=True)
class VanillaOption(ContractVariant):
    """
    Vanilla European option; reads only the terminal price.

    Examples
    --------
    >>> call = VanillaOption(strike=100.0, maturity=1.0, option_type=OptionType.CALL)
    >>> call.terminal_payoff(np.array([90.0, 110.0]))
    array([ 0., 10.])
    """

    @property
    def payoff_kind(self) -> PayoffKind:
        return PayoffKind.TERMINAL

    def terminal_payoff(self, terminal: np.ndarray) -> np.ndarray:
        return self.intrinsic(np.asarray(terminal, dtype=float))


def vanilla_call(strike: float, maturity: float) -> VanillaOption:
    """Convenience constructor for a vanilla call."""
    return VanillaOption(strike=strike, maturity=maturity, option_type=OptionType.CALL)


def vanilla_put(strike: float, maturity: float) -> VanillaOption:
    """Convenience constructor for a vanilla put."""
    return VanillaOption(strike=strike, maturity=maturity, option_type=OptionType.PUT)
