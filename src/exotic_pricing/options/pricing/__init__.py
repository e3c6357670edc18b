"""
Analytical reference pricing.

Provides:
- Black-Scholes price and delta for vanilla contracts
"""

from exotic_pricing.options.pricing.black_scholes import (
    analytic_delta,
    analytic_price,
    black_scholes_call,
    black_scholes_delta,
    black_scholes_put,
)

__all__ = [
    "analytic_delta",
    "analytic_price",
    "black_scholes_call",
    "black_scholes_delta",
    "black_scholes_put",
]
