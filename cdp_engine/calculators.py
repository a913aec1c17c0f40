"""CDP calculators.

Pure functions deriving vault metrics from raw on-chain state. Every input
and output is an already-scaled int (WAD unless noted); nothing is cached
and nothing is mutated.

Degenerate inputs (no debt, zero price, zero ratio) return documented
sentinel values instead of raising, so the read-only dashboard keeps working
on stale or empty state.
"""

from __future__ import annotations

from enum import Enum

from cdp_engine.constants import BPS_BASE, RAY, WAD
from cdp_engine.conversions import rad_to_wad, ray_to_wad
from cdp_engine.math.display import div_trunc, ray_mul, wad_div, wad_mul

__all__ = [
    "Scale",
    "collateral_ratio",
    "liquidation_price",
    "max_mint",
    "max_withdraw",
    "health_factor",
    "accrued_fees",
    "total_debt",
    "normalized_debt",
    "dsr_earnings",
    "auction_price",
    "liquidation_penalty",
    "is_position_safe",
    "required_collateral",
    "collateral_value",
]


class Scale(str, Enum):
    """Fixed-point scale of an argument."""

    WAD = "wad"
    RAY = "ray"
    RAD = "rad"


_TO_WAD = {
    Scale.WAD: lambda value: value,
    Scale.RAY: ray_to_wad,
    Scale.RAD: rad_to_wad,
}


def collateral_ratio(collateral: int, price: int, debt: int) -> int:
    """Collateral ratio: (collateral * price) / debt.

    Args:
        collateral: Locked collateral (WAD)
        price: Collateral price (WAD)
        debt: Total debt (WAD)

    Returns:
        Ratio in WAD (1.5 * WAD == 150%). Returns 0 when debt == 0: this is a
        "no position" sentinel, not infinity, and callers must special-case it.
    """
    if debt == 0:
        return 0
    return wad_div(wad_mul(collateral, price), debt)


def liquidation_price(collateral: int, debt: int, liquidation_ratio: int) -> int:
    """Price at which the vault hits the liquidation ratio.

    Formula: (debt * liquidation_ratio) / collateral, all WAD.
    Returns 0 when no collateral is locked.
    """
    if collateral == 0:
        return 0
    return wad_div(wad_mul(debt, liquidation_ratio), collateral)


def max_mint(
    collateral: int,
    price: int,
    liquidation_ratio: int,
    current_debt: int,
    debt_ceiling: int = 0,
    total_ilk_debt: int = 0,
    *,
    ceiling_scale: Scale = Scale.WAD,
) -> int:
    """Maximum additional debt that can be drawn.

    The collateral headroom is (collateral * price) / liquidation_ratio minus
    the current debt. When a debt ceiling is given, the remaining room under
    the ceiling also applies and the smaller of the two is returned.

    Args:
        collateral: Locked collateral (WAD)
        price: Collateral price (WAD)
        liquidation_ratio: Liquidation ratio (WAD)
        current_debt: Vault debt (WAD)
        debt_ceiling: Ilk debt ceiling, 0 to ignore (scale per ceiling_scale)
        total_ilk_debt: Total ilk debt (scale per ceiling_scale)
        ceiling_scale: Scale of debt_ceiling and total_ilk_debt. Both are
            converted to WAD with the named truncating conversion. The Vat
            stores `line` in RAD, so callers passing raw state use Scale.RAD.

    Returns:
        Mintable amount in WAD, never negative. 0 when liquidation_ratio == 0.
    """
    if liquidation_ratio == 0:
        return 0

    max_from_collateral = wad_div(wad_mul(collateral, price), liquidation_ratio)
    available_from_collateral = max(0, max_from_collateral - current_debt)

    if debt_ceiling == 0:
        return available_from_collateral

    to_wad = _TO_WAD[Scale(ceiling_scale)]
    available_from_ceiling = max(0, to_wad(debt_ceiling) - to_wad(total_ilk_debt))

    return min(available_from_collateral, available_from_ceiling)


def max_withdraw(collateral: int, debt: int, price: int, liquidation_ratio: int) -> int:
    """Maximum collateral that can be freed while staying at the ratio.

    Returns all collateral when there is no debt, 0 when the price is 0 or
    the vault is already at or below the liquidation ratio.
    """
    if debt == 0:
        return collateral
    if price == 0:
        return 0

    required = wad_div(wad_mul(debt, liquidation_ratio), price)
    if collateral <= required:
        return 0
    return collateral - required


def health_factor(collateral_ratio: int, liquidation_ratio: int) -> int:
    """collateral_ratio / liquidation_ratio in WAD.

    - > WAD: safe margin
    - == WAD: exactly at the liquidation threshold
    - < WAD: eligible for liquidation

    A zero liquidation ratio is treated as "always healthy" and returns WAD.
    """
    if liquidation_ratio == 0:
        return WAD
    return wad_div(collateral_ratio, liquidation_ratio)


def accrued_fees(normalized_debt: int, rate: int) -> int:
    """Stability fees accrued on top of normalized debt (WAD).

    Args:
        normalized_debt: Vault art (WAD)
        rate: Accumulated ilk rate (RAY)
    """
    if rate <= RAY:
        return 0
    return ray_mul(normalized_debt, rate) - normalized_debt


def total_debt(normalized_debt: int, rate: int) -> int:
    """Debt owed including fees: art * rate / RAY (WAD)."""
    return ray_mul(normalized_debt, rate)


def normalized_debt(total_debt: int, rate: int) -> int:
    """Inverse of total_debt: total_debt * RAY / rate (WAD).

    The numerator is WAD and the divisor is RAY, so this is written out
    instead of going through ray_div. Returns 0 when rate == 0.
    """
    if rate == 0:
        return 0
    return div_trunc(total_debt * RAY, rate)


def dsr_earnings(deposit: int, current_chi: int, initial_chi: int) -> int:
    """Savings earned between two chi snapshots (WAD).

    Args:
        deposit: Deposited amount (WAD)
        current_chi: Current Pot accumulator (RAY)
        initial_chi: Accumulator at deposit time (RAY)
    """
    if current_chi <= initial_chi:
        return 0
    return ray_mul(deposit, current_chi) - ray_mul(deposit, initial_chi)


def auction_price(start_price: int, elapsed_seconds: int, duration_seconds: int) -> int:
    """Linear Dutch-auction price (RAY).

    price = start_price * (duration - elapsed) / duration

    This is the linear decrease curve. Exponential (rpow-based) curves used by
    other abacus contracts are not equivalent and are not covered here.
    Returns 0 once the auction has expired or when duration is not positive.
    """
    if duration_seconds <= 0 or elapsed_seconds >= duration_seconds:
        return 0
    remaining = duration_seconds - elapsed_seconds
    return div_trunc(start_price * remaining, duration_seconds)


def liquidation_penalty(debt: int, penalty_bps: int) -> int:
    """Penalty charged on liquidation: debt * bps / 10,000 (WAD)."""
    return div_trunc(debt * penalty_bps, BPS_BASE)


def is_position_safe(collateral_ratio: int, liquidation_ratio: int) -> bool:
    return collateral_ratio >= liquidation_ratio


def required_collateral(debt: int, price: int, liquidation_ratio: int) -> int:
    """Collateral needed to back debt at the liquidation ratio (WAD).

    Returns 0 when the price is 0.
    """
    if price == 0:
        return 0
    return wad_div(wad_mul(debt, liquidation_ratio), price)


def collateral_value(collateral: int, price: int) -> int:
    """Collateral value in the price's quote unit (WAD)."""
    return wad_mul(collateral, price)
