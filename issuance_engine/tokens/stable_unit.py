"""Reference stable-unit token with capability-gated mint and burn."""
from __future__ import annotations

import logging

from ..errors import (
    AmountMustBePositive,
    BurnAmountExceedsBalance,
    NotZeroAddress,
    Unauthorized,
)
from .memory import InMemoryToken

logger = logging.getLogger(__name__)


class MinterCapability:
    """Opaque proof of mint/burn authority, bound to the holder's account."""

    __slots__ = ("holder",)

    def __init__(self, holder: str) -> None:
        self.holder = holder

    def __repr__(self) -> str:
        return f"MinterCapability(holder={self.holder!r})"


class StableUnitToken(InMemoryToken):
    """ERC-20 shaped stable unit. Only the capability holder may mint or burn.

    The capability is granted exactly once, normally to the engine's custody
    account; burns come out of that account's own balance.
    """

    def __init__(self, symbol: str = "USDS", decimals: int = 18) -> None:
        super().__init__(symbol, decimals)
        self._capability: MinterCapability | None = None

    def grant_minter(self, holder: str) -> MinterCapability:
        if self._capability is not None:
            raise Unauthorized("Minter capability already granted")
        self._capability = MinterCapability(holder)
        logger.info("%s minter capability granted to %s", self.symbol, holder)
        return self._capability

    def _authorize(self, capability: object) -> MinterCapability:
        if self._capability is None or capability is not self._capability:
            raise Unauthorized("Caller does not hold the minter capability")
        return self._capability

    async def mint(self, capability: object, to: str, amount: int) -> bool:
        self._authorize(capability)
        if not to:
            raise NotZeroAddress("Cannot mint to the zero address")
        if amount <= 0:
            raise AmountMustBePositive("Mint amount must be more than zero", {"amount": amount})
        self.mint_to(to, amount)
        return True

    async def burn(self, capability: object, amount: int) -> None:
        cap = self._authorize(capability)
        if amount <= 0:
            raise AmountMustBePositive("Burn amount must be more than zero", {"amount": amount})
        balance = self.balance_of(cap.holder)
        if amount > balance:
            raise BurnAmountExceedsBalance(
                f"Burn amount {amount} exceeds balance {balance}",
                {"amount": amount, "balance": balance},
            )
        self._debit(cap.holder, amount)
        self._total_supply -= amount
