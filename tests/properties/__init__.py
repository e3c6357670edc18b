"""
Property-based testing using Hypothesis.

This package contains property tests that verify mathematical invariants
hold across randomly generated inputs.

Modules:
    test_payoff_properties: Pathwise payoff invariants (non-negativity, dominance)
    test_mc_properties: Monte Carlo price bounds and parity
    test_detector_properties: Crossing state machine invariants
"""
