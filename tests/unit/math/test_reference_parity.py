"""Cross-checks against the word-level reference in tests.helpers.reference_math.

The reference wraps every operation modulo 2^256 and detects overflow the way
the contracts do. cdp_engine uses unbounded ints with explicit bounds. The two
must agree bit for bit, and must fail on the same inputs.
"""

import random

import hypothesis
import hypothesis.strategies
import pytest

from cdp_engine.constants import RAY, SECONDS_PER_YEAR, UINT256_MAX
from cdp_engine.math.checked import (
    AdditionOverflow,
    CheckedArithmeticError,
    MultiplicationOverflow,
    SubtractionUnderflow,
    safe_add,
    safe_mul,
    safe_rmul,
    safe_sub,
)
from cdp_engine.math.rpow import ArithmeticInvariantViolated, rpow
from cdp_engine.rates import accumulate_chi, accumulate_rate
from tests.helpers import DUTY_2PCT
from tests.helpers import reference_math as ref

# Per-second rates up to ~2e-8, i.e. well past any realistic stability fee
MAX_RATE_SPREAD = 2 * 10**19


def _outcome(func, *args):
    """Result of func(*args), or the marker "revert" when it fails."""
    try:
        return func(*args)
    except (ref.EvmRevert, ArithmeticInvariantViolated, CheckedArithmeticError):
        return "revert"


class TestRpowParity:
    """rpow against the reference transcription."""

    def test_seeded_random_pairs(self):
        rng = random.Random(20240101)
        for _ in range(1000):
            x = RAY + rng.randint(0, MAX_RATE_SPREAD)
            n = rng.randint(0, SECONDS_PER_YEAR)
            assert rpow(x, n) == ref.rpow(x, n), (x, n)

    def test_seeded_rates_below_one(self):
        """Decaying rates (x < RAY) as used by exponential auction curves."""
        rng = random.Random(7)
        for _ in range(200):
            x = rng.randint(RAY // 2, RAY)
            n = rng.randint(0, 100_000)
            assert rpow(x, n) == ref.rpow(x, n), (x, n)

    @hypothesis.given(
        x=hypothesis.strategies.integers(min_value=RAY, max_value=RAY + MAX_RATE_SPREAD),
        n=hypothesis.strategies.integers(min_value=0, max_value=SECONDS_PER_YEAR),
    )
    def test_realistic_rates_fuzzing(self, x: int, n: int):
        assert rpow(x, n) == ref.rpow(x, n)

    @hypothesis.given(
        x=hypothesis.strategies.integers(min_value=0, max_value=UINT256_MAX),
        n=hypothesis.strategies.integers(min_value=0, max_value=512),
    )
    def test_full_range_fuzzing(self, x: int, n: int):
        """Over the whole uint256 range, both agree or both revert."""
        assert _outcome(rpow, x, n) == _outcome(ref.rpow, x, n)

    @pytest.mark.parametrize(
        "x, n",
        [
            (2**200, 2),
            (2**120, 3),
            (10**10 * RAY, 100),
            (UINT256_MAX, 2),
        ],
    )
    def test_same_inputs_revert(self, x, n):
        with pytest.raises(ref.EvmRevert):
            ref.rpow(x, n)
        with pytest.raises(ArithmeticInvariantViolated):
            rpow(x, n)


class TestDripParity:
    """Jug.drip / Pot.drip projections."""

    def test_jug_drip(self):
        rng = random.Random(42)
        for _ in range(100):
            duty = RAY + rng.randint(0, 10**19)
            elapsed = rng.randint(0, 2 * SECONDS_PER_YEAR)
            prev_rate = RAY + rng.randint(0, RAY)
            assert accumulate_rate(duty, 0, elapsed, prev_rate) == ref.jug_drip(
                duty, 0, elapsed, prev_rate
            )

    def test_jug_drip_with_base(self):
        base = 10**17
        assert accumulate_rate(DUTY_2PCT, base, 86_400, RAY) == ref.jug_drip(
            DUTY_2PCT, base, 86_400, RAY
        )

    def test_pot_drip(self):
        rng = random.Random(43)
        for _ in range(100):
            dsr = RAY + rng.randint(0, 10**18)
            elapsed = rng.randint(0, SECONDS_PER_YEAR)
            prev_chi = RAY + rng.randint(0, RAY // 10)
            assert accumulate_chi(dsr, elapsed, prev_chi) == ref.pot_drip(
                dsr, elapsed, prev_chi
            )

    def test_drip_overflow_reverts_in_both(self):
        assert _outcome(accumulate_rate, UINT256_MAX, 1, 1, RAY) == "revert"
        assert _outcome(ref.jug_drip, UINT256_MAX, 1, 1, RAY) == "revert"


class TestCheckedParity:
    """Checked add/sub/mul against the contract's wrap checks."""

    @hypothesis.given(
        a=hypothesis.strategies.integers(min_value=0, max_value=UINT256_MAX),
        b=hypothesis.strategies.integers(min_value=0, max_value=UINT256_MAX),
    )
    def test_add(self, a: int, b: int):
        assert _outcome(safe_add, a, b) == _outcome(ref.add, a, b)

    @hypothesis.given(
        a=hypothesis.strategies.integers(min_value=0, max_value=UINT256_MAX),
        b=hypothesis.strategies.integers(min_value=0, max_value=UINT256_MAX),
    )
    def test_sub(self, a: int, b: int):
        assert _outcome(safe_sub, a, b) == _outcome(ref.sub, a, b)

    @hypothesis.given(
        a=hypothesis.strategies.integers(min_value=0, max_value=2**160),
        b=hypothesis.strategies.integers(min_value=0, max_value=2**160),
    )
    def test_mul_and_rmul(self, a: int, b: int):
        assert _outcome(safe_mul, a, b) == _outcome(ref.mul, a, b)
        assert _outcome(safe_rmul, a, b) == _outcome(ref.rmul, a, b)

    def test_error_types(self):
        with pytest.raises(AdditionOverflow):
            safe_add(UINT256_MAX, 1)
        with pytest.raises(SubtractionUnderflow):
            safe_sub(0, 1)
        with pytest.raises(MultiplicationOverflow):
            safe_mul(2**200, 2**100)
