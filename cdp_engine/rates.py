"""Rate accumulation and annual-rate projections.

accumulate_rate and accumulate_chi reproduce Jug.drip and Pot.drip so a
dashboard can project the accumulators to "now" without sending a
transaction. They use the checked arithmetic family, like the contracts:
an overflow is a hard failure, never a silently wrong rate.

Annual projections are integer-only. per_second_rate inverts annual_growth
by bisection over rpow, so the rate it returns compounds exactly as the
contracts will compound it.
"""

from __future__ import annotations

import structlog

from cdp_engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from cdp_engine.constants import RAY
from cdp_engine.conversions import ray_to_bps
from cdp_engine.math.checked import W
from cdp_engine.math.display import div_trunc, ray_mul
from cdp_engine.math.rpow import rpow

logger = structlog.get_logger()

__all__ = [
    "accumulate_rate",
    "accumulate_chi",
    "annual_growth",
    "annual_rate_bps",
    "per_second_rate",
    "dsr_balance",
    "pie_for_amount",
]


def accumulate_rate(duty: int, base: int, elapsed_seconds: int, prev_rate: int) -> int:
    """Project an ilk's accumulated rate forward, as Jug.drip does.

    rate = rmul(rpow(base + duty, elapsed), prev_rate)

    Args:
        duty: Per-second ilk stability fee (RAY)
        base: Global per-second base fee (RAY, usually 0)
        elapsed_seconds: now - rho
        prev_rate: Current Vat ilk rate (RAY)

    Returns:
        Projected rate (RAY)

    Raises:
        CheckedArithmeticError: If base + duty or the final product overflows
        ArithmeticInvariantViolated: If rpow overflows
    """
    per_second = W(base) + W(duty)
    multiplier = rpow(per_second.value, elapsed_seconds)
    rate = W(multiplier).rmul(prev_rate).value
    logger.debug(
        "rate_accumulated",
        elapsed_seconds=elapsed_seconds,
        prev_rate=str(prev_rate),
        rate=str(rate),
    )
    return rate


def accumulate_chi(dsr: int, elapsed_seconds: int, prev_chi: int) -> int:
    """Project the savings accumulator forward, as Pot.drip does.

    chi = rmul(rpow(dsr, elapsed), prev_chi)
    """
    multiplier = rpow(dsr, elapsed_seconds)
    chi = W(multiplier).rmul(prev_chi).value
    logger.debug(
        "chi_accumulated",
        elapsed_seconds=elapsed_seconds,
        prev_chi=str(prev_chi),
        chi=str(chi),
    )
    return chi


def annual_growth(rate_per_second: int, seconds: int | None = None) -> int:
    """Growth factor over a year (RAY): rpow(rate, seconds_per_year).

    A 2% APY duty gives roughly 1.02 * RAY.
    """
    if seconds is None:
        seconds = DEFAULT_ENGINE_CONFIG.seconds_per_year
    return rpow(rate_per_second, seconds)


def annual_rate_bps(rate_per_second: int, seconds: int | None = None) -> int:
    """Yearly rate in basis points (truncated). 0 for rates at or below RAY."""
    if rate_per_second <= RAY:
        return 0
    return ray_to_bps(annual_growth(rate_per_second, seconds) - RAY)


def per_second_rate(
    target_growth: int,
    seconds: int | None = None,
    config: EngineConfig | None = None,
) -> int:
    """Smallest per-second rate whose compounded growth reaches a target.

    Finds r >= RAY with rpow(r, seconds) >= target_growth and
    rpow(r - 1, seconds) < target_growth.

    Args:
        target_growth: Desired growth over `seconds` (RAY, e.g. 1.05 * RAY)
        seconds: Compounding window (default: a year of seconds)
        config: Engine configuration (bisection bound)

    Returns:
        Per-second rate (RAY)

    Raises:
        ValueError: If target_growth < RAY, seconds <= 0, or the search does
            not converge within the configured iterations
    """
    config = config or DEFAULT_ENGINE_CONFIG
    if seconds is None:
        seconds = config.seconds_per_year
    if seconds <= 0:
        raise ValueError(f"seconds must be positive, got {seconds}")
    if target_growth < RAY:
        raise ValueError(f"Target growth must be at least RAY, got {target_growth}")
    if target_growth == RAY:
        return RAY

    # Bernoulli: (1 + x)^s >= 1 + s*x, so the answer lies below RAY + (g - 1)/s
    # up to rpow's rounding. Widen until the bracket holds.
    step = div_trunc(target_growth - RAY, seconds) + 2
    lo, hi = RAY, RAY + step
    while rpow(hi, seconds) < target_growth:
        lo, hi = hi, hi + step
        step *= 2

    # Invariant: rpow(lo) < target <= rpow(hi)
    for _ in range(config.rate_search_max_iterations):
        if hi - lo <= 1:
            return hi
        mid = (lo + hi) // 2
        if rpow(mid, seconds) >= target_growth:
            hi = mid
        else:
            lo = mid

    if hi - lo > 1:
        logger.warning(
            "per_second_rate_not_converged",
            target_growth=str(target_growth),
            seconds=seconds,
            lo=str(lo),
            hi=str(hi),
        )
        raise ValueError(f"per_second_rate did not converge for {target_growth}")
    return hi


def dsr_balance(pie: int, chi: int) -> int:
    """Value of Pot shares: pie * chi / RAY (WAD)."""
    return ray_mul(pie, chi)


def pie_for_amount(amount: int, chi: int) -> int:
    """Pot shares bought by amount: amount * RAY / chi (WAD, truncating).

    Returns 0 when chi == 0.
    """
    if chi == 0:
        return 0
    return div_trunc(amount * RAY, chi)
