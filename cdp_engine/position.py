"""Vault position snapshots derived from raw on-chain state.

The raw models mirror what an RPC client reads from the contracts:
- UrnState: Vat.urns(ilk, usr) -> (ink, art)
- IlkState: Vat.ilks(ilk) -> (Art, rate, spot, line, dust)
- SpotterIlk: Spotter.ilks(ilk) -> (pip, mat)

build_position combines them into a read-only CdpPosition. Every scale
change is made explicit with Wad/Ray/Rad conversions, so nothing RAY or RAD
reaches a WAD calculator unconverted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any

import structlog
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from cdp_engine import calculators
from cdp_engine.calculators import Scale
from cdp_engine.constants import RAY, UINT256_MAX
from cdp_engine.math.fixed_point import Rad, Ray, Wad

logger = structlog.get_logger()

__all__ = [
    "Uint256",
    "UrnState",
    "IlkState",
    "SpotterIlk",
    "CdpPosition",
    "build_position",
    "AdjustmentError",
    "AdjustmentCheck",
    "check_adjustment",
]


def validate_uint256(value: Any) -> int:
    """Validate that a value is a uint256, given as int or decimal string.

    Raises:
        ValueError: If value is negative, too large, or not an integer
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 cannot be a bool")

    if isinstance(value, str):
        try:
            value = int(value, 10)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err

    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return value


# 256-bit unsigned integer (int or decimal string in, int out)
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer"),
]


class _RawState(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class UrnState(_RawState):
    """A vault as stored in the Vat."""

    ink: Uint256 = Field(default=0, description="Locked collateral (WAD)")
    art: Uint256 = Field(default=0, description="Normalized debt (WAD)")


class IlkState(_RawState):
    """A collateral type as stored in the Vat."""

    art_total: Uint256 = Field(default=0, alias="Art", description="Total normalized debt (WAD)")
    rate: Uint256 = Field(description="Accumulated stability fee rate (RAY)")
    spot: Uint256 = Field(default=0, description="Price with safety margin, price / mat (RAY)")
    line: Uint256 = Field(default=0, description="Debt ceiling (RAD)")
    dust: Uint256 = Field(default=0, description="Debt floor (RAD)")


class SpotterIlk(_RawState):
    """A collateral type as stored in the Spotter."""

    pip: str | None = Field(default=None, description="Oracle address")
    mat: Uint256 = Field(description="Liquidation ratio (RAY)")


@dataclass(frozen=True)
class CdpPosition:
    """Derived, read-only view of a vault. All amounts in WAD.

    Attributes:
        collateral: Locked collateral (ink)
        normalized_debt: Vault art
        total_debt: art * rate, including accrued fees
        accrued_fees: total_debt - art
        price: Collateral price used for the valuation
        collateral_value: collateral * price
        collateral_ratio: 0 when there is no debt (sentinel, not infinity)
        liquidation_ratio: mat converted to WAD
        liquidation_price: Price at which the vault becomes unsafe
        health_factor: collateral_ratio / liquidation_ratio
        max_mint: Additional debt available (collateral and ceiling bound)
        max_withdraw: Collateral that can be freed
        debt_floor: dust converted to WAD
        has_position: Any collateral or debt present
        is_safe: No debt, or ratio at or above the liquidation ratio
        is_liquidatable: Has debt and is not safe
        is_below_floor: Debt is non-zero but under dust
    """

    collateral: int
    normalized_debt: int
    total_debt: int
    accrued_fees: int
    price: int
    collateral_value: int
    collateral_ratio: int
    liquidation_ratio: int
    liquidation_price: int
    health_factor: int
    max_mint: int
    max_withdraw: int
    debt_floor: int
    has_position: bool
    is_safe: bool
    is_liquidatable: bool
    is_below_floor: bool


def _oracle_price(ilk: IlkState, spotter: SpotterIlk) -> Wad:
    # spot = price / mat, so price = spot * mat (both RAY)
    return Ray(ilk.spot).mul(Ray(spotter.mat)).to_wad()


def build_position(
    urn: UrnState,
    ilk: IlkState,
    spotter: SpotterIlk,
    price: int | None = None,
) -> CdpPosition:
    """Derive a CdpPosition from raw vault, ilk and spotter state.

    Args:
        urn: Vault state
        ilk: Collateral type state
        spotter: Spotter state (liquidation ratio)
        price: Oracle price (WAD). Derived from spot * mat when omitted.

    Returns:
        A fresh CdpPosition. Nothing is cached between calls.
    """
    ink = Wad(urn.ink)
    art = Wad(urn.art)
    rate = Ray(ilk.rate)
    mat = Ray(spotter.mat)

    debt = art.ray_scaled(rate)
    debt_rad = art.times_ray(rate)
    ilk_debt_rad = Wad(ilk.art_total).times_ray(rate)
    liquidation_ratio = mat.to_wad()
    oracle_price = Wad(price) if price is not None else _oracle_price(ilk, spotter)
    dust = Rad(ilk.dust)

    if oracle_price.value == 0 and debt.value > 0:
        logger.warning(
            "position_zero_price",
            ink=str(ink.value),
            art=str(art.value),
        )

    ratio = calculators.collateral_ratio(ink.value, oracle_price.value, debt.value)
    has_debt = debt.value > 0
    is_safe = not has_debt or calculators.is_position_safe(ratio, liquidation_ratio.value)

    position = CdpPosition(
        collateral=ink.value,
        normalized_debt=art.value,
        total_debt=debt.value,
        accrued_fees=calculators.accrued_fees(art.value, rate.value),
        price=oracle_price.value,
        collateral_value=calculators.collateral_value(ink.value, oracle_price.value),
        collateral_ratio=ratio,
        liquidation_ratio=liquidation_ratio.value,
        liquidation_price=calculators.liquidation_price(
            ink.value, debt.value, liquidation_ratio.value
        ),
        health_factor=calculators.health_factor(ratio, liquidation_ratio.value),
        max_mint=calculators.max_mint(
            ink.value,
            oracle_price.value,
            liquidation_ratio.value,
            debt.value,
            ilk.line,
            ilk_debt_rad.value,
            ceiling_scale=Scale.RAD,
        ),
        max_withdraw=calculators.max_withdraw(
            ink.value, debt.value, oracle_price.value, liquidation_ratio.value
        ),
        debt_floor=dust.to_wad().value,
        has_position=ink.value > 0 or art.value > 0,
        is_safe=is_safe,
        is_liquidatable=has_debt and not is_safe,
        is_below_floor=Rad(0) < debt_rad < dust,
    )
    logger.debug(
        "position_built",
        collateral=str(position.collateral),
        total_debt=str(position.total_debt),
        health_factor=str(position.health_factor),
        is_safe=position.is_safe,
    )
    return position


# =============================================================================
# Adjustment checks
# =============================================================================


class AdjustmentError(Enum):
    """Reasons a proposed vault change would be rejected."""

    INSUFFICIENT_COLLATERAL = "insufficient_collateral"
    REPAY_EXCEEDS_DEBT = "repay_exceeds_debt"
    UNSAFE_POSITION = "unsafe_position"
    BELOW_DEBT_FLOOR = "below_debt_floor"
    DEBT_CEILING_EXCEEDED = "debt_ceiling_exceeded"


@dataclass(frozen=True)
class AdjustmentCheck:
    """Outcome of check_adjustment.

    Attributes:
        errors: Every rule the change breaks, empty when valid
        position: Position after the change (computed even when invalid)
        normalized_debt_delta: The dart the change corresponds to (WAD)
    """

    position: CdpPosition
    normalized_debt_delta: int
    errors: tuple[AdjustmentError, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _normalized_repayment(amount: int, rate: int) -> int:
    # Ceiling division: repaying the displayed total_debt clears art exactly
    if rate == 0:
        return 0
    return -(-amount * RAY // rate)


def check_adjustment(
    urn: UrnState,
    ilk: IlkState,
    spotter: SpotterIlk,
    collateral_delta: int,
    debt_delta: int,
    price: int | None = None,
) -> AdjustmentCheck:
    """Validate a deposit/withdraw/mint/repay against the Vat's frob rules.

    Args:
        urn: Current vault state
        ilk: Collateral type state
        spotter: Spotter state
        collateral_delta: Collateral to lock (> 0) or free (< 0), WAD
        debt_delta: Debt to draw (> 0) or repay (< 0), WAD, including fees.
            Draws round the normalized amount down, repayments round it up.
        price: Oracle price (WAD), derived from spot * mat when omitted

    Returns:
        AdjustmentCheck listing every violated rule and the resulting position
    """
    errors: list[AdjustmentError] = []

    if debt_delta >= 0:
        dart = calculators.normalized_debt(debt_delta, ilk.rate)
    else:
        dart = -_normalized_repayment(-debt_delta, ilk.rate)

    new_ink = urn.ink + collateral_delta
    new_art = urn.art + dart
    if new_ink < 0:
        errors.append(AdjustmentError.INSUFFICIENT_COLLATERAL)
        new_ink = 0
    if new_art < 0:
        errors.append(AdjustmentError.REPAY_EXCEEDS_DEBT)
        new_art = 0

    new_ilk = ilk.model_copy(update={"art_total": max(0, ilk.art_total + dart)})
    position = build_position(UrnState(ink=new_ink, art=new_art), new_ilk, spotter, price)

    # Risk-increasing changes must leave the vault safe
    risk_increasing = dart > 0 or collateral_delta < 0
    if risk_increasing and not position.is_safe:
        errors.append(AdjustmentError.UNSAFE_POSITION)

    if position.is_below_floor:
        errors.append(AdjustmentError.BELOW_DEBT_FLOOR)

    if dart > 0 and ilk.line > 0:
        new_ilk_debt = Wad(new_ilk.art_total).times_ray(Ray(ilk.rate))
        if new_ilk_debt > Rad(ilk.line):
            errors.append(AdjustmentError.DEBT_CEILING_EXCEEDED)

    if errors:
        logger.debug(
            "adjustment_rejected",
            collateral_delta=str(collateral_delta),
            debt_delta=str(debt_delta),
            errors=[e.value for e in errors],
        )

    return AdjustmentCheck(
        position=position,
        normalized_debt_delta=dart,
        errors=tuple(errors),
    )
