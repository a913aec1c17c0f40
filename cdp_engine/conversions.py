"""Unit conversions between fixed-point scales and token decimals.

Scale conversions are one named function per ordered pair so that the
direction of truncation is obvious at every call site:
- Up (WAD -> RAY -> RAD) multiplies and is lossless
- Down (RAD -> RAY -> WAD) divides and truncates toward zero

Token-decimal conversions follow the same rule: scaling up to more decimals
is exact, scaling down truncates.
"""

from __future__ import annotations

from cdp_engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from cdp_engine.constants import (
    BPS_BASE,
    PERCENT_BASE,
    RAY,
    RAY_RAD_RATIO,
    WAD_DECIMALS,
    WAD_RAD_RATIO,
    WAD_RAY_RATIO,
)
from cdp_engine.math.display import div_trunc

__all__ = [
    # Scale pairs
    "wad_to_ray",
    "wad_to_rad",
    "ray_to_rad",
    "ray_to_wad",
    "rad_to_wad",
    "rad_to_ray",
    # Token decimals
    "convert_decimals",
    "to_wad",
    "from_wad",
    "token_to_wad",
    "wad_to_token",
    # Rates and percentages
    "bps_to_ray",
    "ray_to_bps",
    "percent_to_ray",
    "ray_to_percent",
    "bps_to_percent",
    "percent_to_bps",
]


# =============================================================================
# Scale conversions
# =============================================================================


def wad_to_ray(wad: int) -> int:
    return wad * WAD_RAY_RATIO


def wad_to_rad(wad: int) -> int:
    return wad * WAD_RAD_RATIO


def ray_to_rad(ray: int) -> int:
    return ray * RAY_RAD_RATIO


def ray_to_wad(ray: int) -> int:
    """Truncates the 9 least significant digits."""
    return div_trunc(ray, WAD_RAY_RATIO)


def rad_to_wad(rad: int) -> int:
    """Truncates the 27 least significant digits."""
    return div_trunc(rad, WAD_RAD_RATIO)


def rad_to_ray(rad: int) -> int:
    """Truncates the 18 least significant digits."""
    return div_trunc(rad, RAY_RAD_RATIO)


# =============================================================================
# Token decimals
# =============================================================================


def convert_decimals(amount: int, from_decimals: int, to_decimals: int) -> int:
    """Convert an amount between token decimal precisions.

    Args:
        amount: Amount in from_decimals precision
        from_decimals: Source decimals (e.g. 6 for USDC)
        to_decimals: Target decimals

    Returns:
        Amount in to_decimals precision. Scaling down truncates toward zero.

    Raises:
        ValueError: If either decimal count is negative
    """
    if from_decimals < 0 or to_decimals < 0:
        raise ValueError(
            f"Decimals must be non-negative, got {from_decimals} -> {to_decimals}"
        )
    if from_decimals == to_decimals:
        return amount
    if from_decimals < to_decimals:
        return amount * 10 ** (to_decimals - from_decimals)
    return div_trunc(amount, 10 ** (from_decimals - to_decimals))


def to_wad(amount: int, source_decimals: int) -> int:
    """Normalize a token amount to 18 decimals."""
    return convert_decimals(amount, source_decimals, WAD_DECIMALS)


def from_wad(amount: int, target_decimals: int) -> int:
    """Denormalize a WAD amount to target_decimals.

    Exact inverse of to_wad only for amounts produced by to_wad; any digits
    below the target precision are truncated.
    """
    return convert_decimals(amount, WAD_DECIMALS, target_decimals)


def token_to_wad(amount: int, symbol: str, config: EngineConfig | None = None) -> int:
    """Normalize a token amount to WAD using the configured token decimals.

    Unknown symbols are treated as 18-decimal tokens.
    """
    config = config or DEFAULT_ENGINE_CONFIG
    return to_wad(amount, config.decimals_for(symbol))


def wad_to_token(wad: int, symbol: str, config: EngineConfig | None = None) -> int:
    """Convert a WAD amount to the token's native decimals (truncating)."""
    config = config or DEFAULT_ENGINE_CONFIG
    return from_wad(wad, config.decimals_for(symbol))


# =============================================================================
# Rates and percentages
# =============================================================================


def bps_to_ray(bps: int) -> int:
    """Basis points to a RAY fraction (10,000 bps == RAY)."""
    return div_trunc(bps * RAY, BPS_BASE)


def ray_to_bps(ray: int) -> int:
    return div_trunc(ray * BPS_BASE, RAY)


def percent_to_ray(percent: int) -> int:
    """Whole percent to a RAY fraction (100% == RAY)."""
    return div_trunc(percent * RAY, PERCENT_BASE)


def ray_to_percent(ray: int) -> int:
    return div_trunc(ray * PERCENT_BASE, RAY)


def bps_to_percent(bps: int) -> int:
    return div_trunc(bps, PERCENT_BASE)


def percent_to_bps(percent: int) -> int:
    return percent * PERCENT_BASE
