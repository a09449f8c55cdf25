"""Unit tests for data models."""
from __future__ import annotations

import pytest

from issuance_engine.errors import HealthFactorOK, StalePrice
from issuance_engine.models import (
    AccountInfo,
    CollateralDeposited,
    CollateralRedeemed,
    Outcome,
    PriceRound,
    Receipt,
)
from issuance_engine.services import settle


class TestEvents:
    def test_equality(self) -> None:
        assert CollateralDeposited("a", "X", 1) == CollateralDeposited("a", "X", 1)
        assert CollateralRedeemed("a", "b", "X", 1) != CollateralRedeemed("b", "a", "X", 1)

    def test_frozen(self) -> None:
        e = CollateralDeposited("a", "X", 1)
        with pytest.raises(AttributeError):
            e.qty = 2  # type: ignore[misc]


class TestValueObjects:
    def test_price_round_frozen(self) -> None:
        r = PriceRound(price=1, decimals=8, updated_at=0)
        with pytest.raises(AttributeError):
            r.price = 2  # type: ignore[misc]

    def test_account_info(self) -> None:
        info = AccountInfo(debt_minted=5, collateral_value_usd=10)
        assert info.debt_minted == 5
        assert info.collateral_value_usd == 10

    def test_receipt_defaults(self) -> None:
        r = Receipt(operation="mint_stable_unit", account="a")
        assert r.events == ()


class TestOutcome:
    def test_unwrap_ok(self) -> None:
        assert Outcome(ok=True, value=3).unwrap() == 3

    def test_unwrap_error_raises(self) -> None:
        err = StalePrice("old")
        with pytest.raises(StalePrice):
            Outcome(ok=False, error=err).unwrap()

    def test_unwrap_failure_without_error(self) -> None:
        with pytest.raises(RuntimeError, match="no error"):
            Outcome(ok=False).unwrap()

    @pytest.mark.asyncio
    async def test_settle_success(self) -> None:
        async def op() -> int:
            return 7

        outcome = await settle(op())
        assert outcome == Outcome(ok=True, value=7)

    @pytest.mark.asyncio
    async def test_settle_engine_error(self) -> None:
        async def op() -> int:
            raise HealthFactorOK("healthy")

        outcome = await settle(op())
        assert not outcome.ok
        assert isinstance(outcome.error, HealthFactorOK)

    @pytest.mark.asyncio
    async def test_settle_propagates_programming_errors(self) -> None:
        async def op() -> int:
            raise TypeError("bug")

        with pytest.raises(TypeError):
            await settle(op())
