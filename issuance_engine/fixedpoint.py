"""Fixed-point integer arithmetic. Pure functions, no I/O.

All values are unsigned integers bounded by 2**256 - 1. Division truncates
(rounds toward zero), which for non-negative operands is round-down.
"""
from __future__ import annotations

from .errors import ArithmeticOverflow

MAX_UINT256 = 2**256 - 1

PRECISION = 10**18
FEED_TARGET_DECIMALS = 18
ADDITIONAL_FEED_PRECISION = 10**10  # 8-decimal feed -> 18 decimals

LIQUIDATION_THRESHOLD = 50  # percent of collateral value that may back debt
LIQUIDATION_BONUS = 10  # percent of seized collateral paid to liquidators
LIQUIDATION_PRECISION = 100
MIN_HEALTH_FACTOR = PRECISION


def checked(value: int) -> int:
    """Return ``value`` if it is a valid uint256, else raise."""
    if value < 0 or value > MAX_UINT256:
        raise ArithmeticOverflow(f"value out of uint256 range: {value}")
    return value


def mul_div(a: int, b: int, denominator: int) -> int:
    """``a * b // denominator`` with range checks on the product and result."""
    if denominator == 0:
        raise ZeroDivisionError("mul_div by zero")
    return checked(checked(a * b) // denominator)


def normalize_price(price: int, decimals: int) -> int:
    """Scale a feed price with ``decimals`` digits to 18-decimal precision."""
    if decimals <= FEED_TARGET_DECIMALS:
        return checked(price * 10 ** (FEED_TARGET_DECIMALS - decimals))
    return price // 10 ** (decimals - FEED_TARGET_DECIMALS)


def usd_value(price18: int, quantity: int, asset_decimals: int = 18) -> int:
    """USD value (18 decimals) of ``quantity`` native units at ``price18``."""
    return mul_div(price18, quantity, 10**asset_decimals)


def token_amount(price18: int, usd: int, asset_decimals: int = 18) -> int:
    """Native quantity worth ``usd`` (18 decimals) at ``price18``. Rounds down."""
    return mul_div(usd, 10**asset_decimals, price18)


def calculate_health_factor(
    debt_minted: int,
    collateral_value_usd: int,
    threshold_pct: int = LIQUIDATION_THRESHOLD,
) -> int:
    """Health factor in 18-decimal fixed point.

    health_factor = (collateral * threshold%) * 1e18 / debt

    Zero debt yields MAX_UINT256; zero adjusted collateral yields 0.
    """
    if debt_minted == 0:
        return MAX_UINT256
    adjusted = mul_div(collateral_value_usd, threshold_pct, LIQUIDATION_PRECISION)
    if adjusted == 0:
        return 0
    return mul_div(adjusted, PRECISION, debt_minted)


def liquidation_bonus(base_quantity: int, bonus_pct: int = LIQUIDATION_BONUS) -> int:
    """Bonus collateral awarded on top of ``base_quantity``."""
    return mul_div(base_quantity, bonus_pct, LIQUIDATION_PRECISION)
