"""Per-account collateral and debt ledger."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..errors import (
    AmountMustBePositive,
    InsufficientCollateral,
    LedgerInvariantError,
)
from ..fixedpoint import checked
from .registry import AssetRegistry

logger = logging.getLogger(__name__)


@dataclass
class Position:
    """Collateral deposited per asset (native units) and stable-unit debt."""

    deposited: dict[str, int] = field(default_factory=dict)
    debt_minted: int = 0

    def copy(self) -> Position:
        return Position(deposited=dict(self.deposited), debt_minted=self.debt_minted)


Snapshot = dict[str, Position]


def _require_positive(amount: int) -> None:
    if amount <= 0:
        raise AmountMustBePositive("Amount must be more than zero", {"amount": amount})


class PositionStore:
    """Owns every account's Position; all mutation goes through this API.

    The store does not check health factors or move tokens; the engine does
    both around each mutation.
    """

    def __init__(self, registry: AssetRegistry) -> None:
        self._registry = registry
        self._positions: dict[str, Position] = {}

    @property
    def registry(self) -> AssetRegistry:
        return self._registry

    def _position(self, account: str) -> Position:
        position = self._positions.get(account)
        if position is None:
            position = self._positions[account] = Position()
        return position

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def accounts(self) -> tuple[str, ...]:
        return tuple(self._positions)

    def collateral_balance(self, account: str, asset: str) -> int:
        position = self._positions.get(account)
        return position.deposited.get(asset, 0) if position else 0

    def debt_of(self, account: str) -> int:
        position = self._positions.get(account)
        return position.debt_minted if position else 0

    def total_collateral(self, asset: str) -> int:
        return sum(p.deposited.get(asset, 0) for p in self._positions.values())

    def total_debt(self) -> int:
        return sum(p.debt_minted for p in self._positions.values())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def deposit(self, account: str, asset: str, qty: int) -> None:
        _require_positive(qty)
        self._registry.feed_of(asset)
        position = self._position(account)
        position.deposited[asset] = checked(position.deposited.get(asset, 0) + qty)

    def withdraw(self, account: str, asset: str, qty: int) -> None:
        _require_positive(qty)
        balance = self.collateral_balance(account, asset)
        if qty > balance:
            raise InsufficientCollateral(
                f"Cannot withdraw {qty} of {asset}; balance is {balance}",
                {"account": account, "asset": asset, "qty": qty, "balance": balance},
            )
        self._position(account).deposited[asset] = balance - qty

    def mint_debt(self, account: str, amount: int) -> None:
        _require_positive(amount)
        position = self._position(account)
        position.debt_minted = checked(position.debt_minted + amount)

    def burn_debt(self, account: str, amount: int) -> None:
        _require_positive(amount)
        position = self._position(account)
        if amount > position.debt_minted:
            raise LedgerInvariantError(
                f"Burning {amount} exceeds debt {position.debt_minted} of {account}"
            )
        position.debt_minted -= amount

    # ------------------------------------------------------------------
    # Transaction support
    # ------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        return {account: p.copy() for account, p in self._positions.items()}

    def restore(self, snapshot: Snapshot) -> None:
        self._positions = {account: p.copy() for account, p in snapshot.items()}
