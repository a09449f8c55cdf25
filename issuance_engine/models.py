"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .errors import EngineError


@dataclass(frozen=True)
class PriceRound:
    """One price reading from a feed."""

    price: int
    decimals: int
    updated_at: int


@dataclass(frozen=True)
class AccountInfo:
    """Debt and collateral value (both 18-decimal USD) for an account."""

    debt_minted: int
    collateral_value_usd: int


@dataclass(frozen=True)
class CollateralDeposited:
    account: str
    asset: str
    qty: int


@dataclass(frozen=True)
class CollateralRedeemed:
    redeemed_from: str
    redeemed_to: str
    asset: str
    qty: int


Event = Union[CollateralDeposited, CollateralRedeemed]


@dataclass(frozen=True)
class Receipt:
    """Result of a committed state-changing operation."""

    operation: str
    account: str
    events: tuple[Event, ...] = ()


@dataclass(frozen=True)
class Outcome:
    """Tagged success/error result of an engine call."""

    ok: bool
    value: Any = None
    error: EngineError | None = None

    def unwrap(self) -> Any:
        if not self.ok:
            if self.error is None:
                raise RuntimeError("Failed outcome carries no error")
            raise self.error
        return self.value
