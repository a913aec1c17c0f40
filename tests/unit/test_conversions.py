"""Tests for scale and token-decimal conversions."""

import hypothesis
import hypothesis.strategies
import pytest

from cdp_engine.config import EngineConfig
from cdp_engine.constants import RAD, RAY, WAD
from cdp_engine.conversions import (
    bps_to_percent,
    bps_to_ray,
    convert_decimals,
    from_wad,
    percent_to_bps,
    percent_to_ray,
    rad_to_ray,
    rad_to_wad,
    ray_to_bps,
    ray_to_percent,
    ray_to_rad,
    ray_to_wad,
    to_wad,
    token_to_wad,
    wad_to_rad,
    wad_to_ray,
    wad_to_token,
)


class TestScaleConversions:
    """WAD <-> RAY <-> RAD."""

    def test_up_is_exact(self):
        assert wad_to_ray(WAD) == RAY
        assert wad_to_rad(WAD) == RAD
        assert ray_to_rad(RAY) == RAD

    def test_down_is_exact_for_whole_units(self):
        assert ray_to_wad(RAY) == WAD
        assert rad_to_wad(RAD) == WAD
        assert rad_to_ray(RAD) == RAY

    def test_down_truncates(self):
        assert ray_to_wad(10**9 - 1) == 0
        assert ray_to_wad(RAY + 10**9 - 1) == WAD
        assert rad_to_wad(10**27 - 1) == 0
        assert rad_to_ray(10**18 - 1) == 0

    def test_down_truncates_toward_zero(self):
        assert ray_to_wad(-(10**9) - 1) == -1

    def test_round_trip_up_then_down(self):
        value = 123_456_789_012_345_678
        assert ray_to_wad(wad_to_ray(value)) == value
        assert rad_to_wad(wad_to_rad(value)) == value
        assert rad_to_ray(ray_to_rad(value)) == value

    def test_round_trip_down_then_up_loses_digits(self):
        """Down-then-up is not an identity: the truncated digits are gone."""
        value = RAY + 123
        assert wad_to_ray(ray_to_wad(value)) == RAY


class TestConvertDecimals:
    """Token precision changes."""

    @pytest.mark.parametrize(
        "from_decimals, to_decimals, amount, expected",
        [
            (6, 18, 1_500_000, 1_500_000 * 10**12),
            (8, 18, 1, 10**10),
            (18, 6, 1_500_000 * 10**12, 1_500_000),
            (18, 8, 10**10, 1),
            (6, 8, 1, 100),
            (8, 6, 150, 1),
            (18, 18, 42, 42),
            (6, 6, 42, 42),
        ],
    )
    def test_matrix(self, from_decimals, to_decimals, amount, expected):
        assert convert_decimals(amount, from_decimals, to_decimals) == expected

    def test_scaling_down_truncates(self):
        assert convert_decimals(10**12 - 1, 18, 6) == 0
        assert convert_decimals(-(10**12) - 1, 18, 6) == -1

    def test_negative_decimals_raise(self):
        with pytest.raises(ValueError, match="non-negative"):
            convert_decimals(1, -1, 18)
        with pytest.raises(ValueError):
            convert_decimals(1, 18, -6)

    def test_to_wad_from_wad(self):
        assert to_wad(2 * 10**8, 8) == 2 * WAD
        assert from_wad(2 * WAD, 6) == 2 * 10**6

    @pytest.mark.parametrize("decimals", [6, 8, 18])
    @hypothesis.given(amount=hypothesis.strategies.integers(min_value=0, max_value=10**40))
    def test_up_then_down_round_trips(self, decimals, amount):
        assert from_wad(to_wad(amount, decimals), decimals) == amount

    @pytest.mark.parametrize(
        "decimals, wad_amount, expected",
        [
            (6, WAD + 1, WAD),
            (6, 1_234_567_890_123_456_789, 1_234_567_000_000_000_000),
            (8, WAD + 1, WAD),
            (8, 1_234_567_890_123_456_789, 1_234_567_890_000_000_000),
            (8, 10**10 - 1, 0),
            (18, WAD + 1, WAD + 1),
        ],
    )
    def test_down_then_up_drops_sub_precision_digits(self, decimals, wad_amount, expected):
        """to_wad(from_wad(y)) loses the digits below the token's precision."""
        assert to_wad(from_wad(wad_amount, decimals), decimals) == expected


class TestTokenConversions:
    """Symbol-driven conversions using the token table."""

    def test_known_tokens(self):
        assert token_to_wad(10**8, "WBTC") == WAD
        assert token_to_wad(10**6, "USDC") == WAD
        assert token_to_wad(WAD, "WETH") == WAD

    def test_wad_to_token(self):
        assert wad_to_token(WAD, "USDT") == 10**6
        assert wad_to_token(WAD + 1, "WBTC") == 10**8

    def test_unknown_symbol_defaults_to_18(self):
        assert token_to_wad(5, "UNKNOWN") == 5

    def test_custom_config(self):
        config = EngineConfig(token_decimals={"FOO": 2})
        assert token_to_wad(100, "FOO", config) == WAD
        assert wad_to_token(WAD, "FOO", config) == 100


class TestRateConversions:
    """Basis points and percentages."""

    def test_bps_to_ray(self):
        assert bps_to_ray(10_000) == RAY
        assert bps_to_ray(200) == RAY // 50

    def test_ray_to_bps(self):
        assert ray_to_bps(RAY // 50) == 200
        assert ray_to_bps(RAY // 50 - 1) == 199

    def test_percent(self):
        assert percent_to_ray(150) == 3 * RAY // 2
        assert ray_to_percent(3 * RAY // 2) == 150

    def test_bps_percent(self):
        assert bps_to_percent(250) == 2
        assert percent_to_bps(2) == 200
