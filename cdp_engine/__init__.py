"""Fixed-point math engine for a multi-collateral CDP stablecoin dashboard."""

from cdp_engine.calculators import (
    Scale,
    accrued_fees,
    auction_price,
    collateral_ratio,
    collateral_value,
    dsr_earnings,
    health_factor,
    is_position_safe,
    liquidation_penalty,
    liquidation_price,
    max_mint,
    max_withdraw,
    normalized_debt,
    required_collateral,
    total_debt,
)
from cdp_engine.constants import RAD, RAY, WAD
from cdp_engine.math import ArithmeticInvariantViolated, Rad, Ray, Wad, rpow
from cdp_engine.position import CdpPosition, build_position, check_adjustment

__version__ = "0.1.0"
__all__ = [
    # Scales
    "WAD",
    "RAY",
    "RAD",
    "Wad",
    "Ray",
    "Rad",
    "Scale",
    # Exponentiation
    "rpow",
    "ArithmeticInvariantViolated",
    # Calculators
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
    # Positions
    "CdpPosition",
    "build_position",
    "check_adjustment",
    "__version__",
]
