"""Display-safe fixed-point arithmetic (WAD, RAY, RAD).

These functions mirror the DSS math helpers used by the dashboard. They never
raise on degenerate input: division by zero returns 0 so that read-only views
keep rendering when on-chain state is stale or empty. Code that must fail
loudly uses cdp_engine.math.checked instead.

Values are plain ints scaled by 10^18 (WAD), 10^27 (RAY) or 10^45 (RAD).
Division results are truncated toward zero, like the EVM.
"""

from __future__ import annotations

from cdp_engine.constants import RAD, RAY, WAD

__all__ = [
    "div_trunc",
    # WAD
    "wad_mul",
    "wad_div",
    "wad_add",
    "wad_sub",
    # RAY
    "ray_mul",
    "ray_div",
    "ray_add",
    "ray_sub",
    # RAD
    "rad_mul",
    "rad_div",
    "rad_add",
    "rad_sub",
    # Helpers
    "percent_of",
    "round_down",
    "round_up",
]


def div_trunc(a: int, b: int) -> int:
    """a / b rounded toward zero, the way the Vat and Jug divide.

    Every fixed-point division in the engine goes through here. Quantities
    are unsigned on-chain, but display math subtracts freely (accrued fees,
    headroom), so a negative intermediate must truncate like the contracts
    would rather than floor: div_trunc(-7, 3) == -2 where -7 // 3 == -3.

    Raises:
        ZeroDivisionError: On b == 0. Callers that want the dashboard's
            "0 on x/0" behaviour check the divisor first.
    """
    if b == 0:
        raise ZeroDivisionError(f"div_trunc: {a} / 0")
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def _mul(a: int, b: int, one: int) -> int:
    return div_trunc(a * b, one)


def _div(a: int, b: int, one: int) -> int:
    if b == 0:
        return 0
    return div_trunc(a * one, b)


# =============================================================================
# WAD (18 decimals)
# =============================================================================


def wad_mul(a: int, b: int) -> int:
    """(a * b) / 10^18, truncated toward zero."""
    return _mul(a, b, WAD)


def wad_div(a: int, b: int) -> int:
    """(a * 10^18) / b, truncated toward zero. Returns 0 when b == 0."""
    return _div(a, b, WAD)


def wad_add(a: int, b: int) -> int:
    return a + b


def wad_sub(a: int, b: int) -> int:
    """a - b. The result may be negative (e.g. a deficit)."""
    return a - b


# =============================================================================
# RAY (27 decimals)
# =============================================================================


def ray_mul(a: int, b: int) -> int:
    """(a * b) / 10^27, truncated toward zero."""
    return _mul(a, b, RAY)


def ray_div(a: int, b: int) -> int:
    """(a * 10^27) / b, truncated toward zero. Returns 0 when b == 0."""
    return _div(a, b, RAY)


def ray_add(a: int, b: int) -> int:
    return a + b


def ray_sub(a: int, b: int) -> int:
    return a - b


# =============================================================================
# RAD (45 decimals)
# =============================================================================


def rad_mul(a: int, b: int) -> int:
    """(a * b) / 10^45, truncated toward zero."""
    return _mul(a, b, RAD)


def rad_div(a: int, b: int) -> int:
    """(a * 10^45) / b, truncated toward zero. Returns 0 when b == 0."""
    return _div(a, b, RAD)


def rad_add(a: int, b: int) -> int:
    return a + b


def rad_sub(a: int, b: int) -> int:
    return a - b


# =============================================================================
# Percentages and rounding
# =============================================================================


def percent_of(amount: int, percent: int, base: int = 100) -> int:
    """amount * percent / base, truncated. Returns 0 when base == 0."""
    if base == 0:
        return 0
    return div_trunc(amount * percent, base)


def round_down(value: int, precision: int) -> int:
    """Round value toward zero to a multiple of precision.

    Raises:
        ValueError: If precision is not positive
    """
    if precision <= 0:
        raise ValueError(f"Precision must be positive, got {precision}")
    return div_trunc(value, precision) * precision


def round_up(value: int, precision: int) -> int:
    """Round value up to a multiple of precision.

    Raises:
        ValueError: If precision is not positive
    """
    if precision <= 0:
        raise ValueError(f"Precision must be positive, got {precision}")
    remainder = value % precision
    if remainder == 0:
        return value
    return value + (precision - remainder)
