"""Fixed-point primitives for the CDP engine.

This package provides:
- display: WAD/RAY/RAD arithmetic that never raises (division by zero -> 0)
- checked: strict arithmetic that raises on overflow, underflow and x/0
- rpow: DSS rate exponentiation, bit-identical to the contracts
- Wad/Ray/Rad: scale-tagged values that reject cross-scale arithmetic
"""

from cdp_engine.math.fixed_point import Rad, Ray, Wad
from cdp_engine.math.rpow import ArithmeticInvariantViolated, rpow

__all__ = ["Wad", "Ray", "Rad", "rpow", "ArithmeticInvariantViolated"]
