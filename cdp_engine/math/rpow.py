"""Rate exponentiation matching the DSS Jug/Pot `_rpow` exactly.

rpow(x, n) computes x^n for a RAY-scaled base using binary exponentiation
with round-half-up after every multiplication. Rate accumulators on-chain are
produced by this exact routine, so the result must be bit-identical, not just
close: a rounding difference shows up as drift in projected debt and APY.

The contract works on 256-bit words and reverts when an intermediate product
or rounding sum wraps. Python ints never wrap, so each guard is expressed as
an explicit uint256 bound; crossing it raises ArithmeticInvariantViolated.
"""

from __future__ import annotations

from cdp_engine.constants import HALF_RAY, RAY, UINT256_MAX

__all__ = [
    "ArithmeticInvariantViolated",
    "rpow",
]


class ArithmeticInvariantViolated(ArithmeticError):
    """An intermediate value of rpow left the uint256 range.

    On-chain this is a revert. For realistic per-second rates and elapsed
    times it cannot happen.
    """

    pass


def _checked_product(a: int, b: int, label: str) -> int:
    product = a * b
    # The contract's wrap check: product / b == a
    if b != 0 and (product // b != a or product > UINT256_MAX):
        raise ArithmeticInvariantViolated(f"rpow: overflow in {label} ({a} * {b})")
    return product


def _checked_round(value: int, label: str) -> int:
    rounded = value + HALF_RAY
    if rounded > UINT256_MAX:
        raise ArithmeticInvariantViolated(f"rpow: overflow in {label} + half")
    return rounded // RAY


def rpow(x: int, n: int) -> int:
    """Compute x^n in RAY precision, bit-identical to DSS `_rpow(x, n, RAY)`.

    Args:
        x: Base, RAY-scaled (e.g. a per-second rate like 1.000000000627...e27)
        n: Exponent (typically elapsed seconds)

    Returns:
        x^n as a RAY-scaled int. rpow(0, 0) == RAY and rpow(0, n>0) == 0.

    Raises:
        ValueError: If x or n is negative
        ArithmeticInvariantViolated: If an intermediate value exceeds uint256
    """
    if x < 0 or n < 0:
        raise ValueError(f"rpow requires non-negative operands, got x={x}, n={n}")

    if x == 0:
        return RAY if n == 0 else 0

    z = RAY if n % 2 == 0 else x
    n //= 2
    while n > 0:
        xx = _checked_product(x, x, "x*x")
        x = _checked_round(xx, "x*x")

        if n % 2 == 1:
            zx = _checked_product(z, x, "z*x")
            z = _checked_round(zx, "z*x")

        n //= 2

    return z
