"""Unit tests for fixed-point arithmetic."""
from __future__ import annotations

import pytest

from issuance_engine import fixedpoint
from issuance_engine.errors import ArithmeticOverflow
from issuance_engine.fixedpoint import (
    MAX_UINT256,
    PRECISION,
    calculate_health_factor,
    checked,
    liquidation_bonus,
    mul_div,
    normalize_price,
    token_amount,
    usd_value,
)

ONE = 10**18
PRICE_2000 = 2000 * ONE


class TestChecked:
    def test_in_range(self) -> None:
        assert checked(0) == 0
        assert checked(MAX_UINT256) == MAX_UINT256

    def test_overflow_raises(self) -> None:
        with pytest.raises(ArithmeticOverflow):
            checked(MAX_UINT256 + 1)

    def test_negative_raises(self) -> None:
        with pytest.raises(ArithmeticOverflow):
            checked(-1)


class TestMulDiv:
    def test_truncates(self) -> None:
        assert mul_div(10, 1, 3) == 3
        assert mul_div(2, 1, 3) == 0

    def test_product_overflow_raises(self) -> None:
        with pytest.raises(ArithmeticOverflow):
            mul_div(MAX_UINT256, 2, 2)

    def test_zero_denominator(self) -> None:
        with pytest.raises(ZeroDivisionError):
            mul_div(1, 1, 0)


class TestNormalizePrice:
    def test_eight_decimal_feed(self) -> None:
        assert normalize_price(2000 * 10**8, 8) == PRICE_2000
        assert 10**8 * fixedpoint.ADDITIONAL_FEED_PRECISION == PRECISION

    def test_eighteen_decimal_feed_unchanged(self) -> None:
        assert normalize_price(PRICE_2000, 18) == PRICE_2000

    def test_more_than_eighteen_decimals_truncates(self) -> None:
        assert normalize_price(2000 * 10**20 + 99, 20) == PRICE_2000


class TestConversions:
    def test_usd_value(self) -> None:
        assert usd_value(PRICE_2000, 15 * ONE) == 30_000 * ONE

    def test_usd_value_six_decimal_asset(self) -> None:
        assert usd_value(ONE, 1_500_000, asset_decimals=6) == 3 * ONE // 2

    def test_token_amount(self) -> None:
        assert token_amount(PRICE_2000, 100 * ONE) == ONE // 20

    def test_token_amount_rounds_down(self) -> None:
        # 1 wei of USD at $3 buys zero wei
        assert token_amount(3 * ONE, 1) == 0
        assert token_amount(3 * ONE, 10 * ONE) == 3_333_333_333_333_333_333

    def test_linear_in_quantity(self) -> None:
        q = 1_234_567_890_123_456_789
        assert usd_value(PRICE_2000, 2 * q) == 2 * usd_value(PRICE_2000, q)

    @pytest.mark.parametrize("qty", [1, 7, ONE, 3 * ONE + 1, 123_456_789_987_654_321])
    def test_round_trip_within_one_unit(self, qty: int) -> None:
        price = 1_999_999_999_990_000_000_000  # $1999.99999999
        back = token_amount(price, usd_value(price, qty))
        assert qty - 1 <= back <= qty


class TestCalculateHealthFactor:
    def test_zero_debt_is_max(self) -> None:
        assert calculate_health_factor(0, 0) == MAX_UINT256
        assert calculate_health_factor(0, 1_000 * ONE) == MAX_UINT256

    def test_zero_collateral_is_zero(self) -> None:
        assert calculate_health_factor(100 * ONE, 0) == 0

    def test_threshold_applied(self) -> None:
        assert calculate_health_factor(8_000 * ONE, 20_000 * ONE) == 1_250_000_000_000_000_000

    def test_exact_limit(self) -> None:
        assert calculate_health_factor(100 * ONE, 200 * ONE) == PRECISION

    def test_custom_threshold(self) -> None:
        assert calculate_health_factor(100 * ONE, 200 * ONE, threshold_pct=80) == 16 * ONE // 10


class TestLiquidationBonus:
    def test_ten_percent(self) -> None:
        assert liquidation_bonus(2 * ONE) == ONE // 5

    def test_rounds_down(self) -> None:
        assert liquidation_bonus(19) == 1
