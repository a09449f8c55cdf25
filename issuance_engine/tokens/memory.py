"""In-memory ERC-20 shaped token."""
from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class InMemoryToken:
    """Balances and allowances held in dicts.

    Transfers report failure by returning ``False`` (insufficient balance or
    allowance, non-positive amount) and leave balances untouched.
    """

    def __init__(self, symbol: str, decimals: int = 18) -> None:
        self.symbol = symbol
        self.decimals = decimals
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        self._total_supply = 0

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def total_supply(self) -> int:
        return self._total_supply

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def mint_to(self, account: str, amount: int) -> None:
        """Create ``amount`` out of thin air for ``account`` (test faucet)."""
        self._credit(account, amount)
        self._total_supply += amount

    def _credit(self, account: str, amount: int) -> None:
        self._balances[account] = self._balances.get(account, 0) + amount

    def _debit(self, account: str, amount: int) -> bool:
        balance = self._balances.get(account, 0)
        if amount > balance:
            return False
        self._balances[account] = balance - amount
        return True

    async def approve(self, owner: str, spender: str, amount: int) -> bool:
        self._allowances[(owner, spender)] = amount
        return True

    async def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        if amount <= 0 or not self._debit(sender, amount):
            logger.debug("%s transfer %s -> %s of %d refused", self.symbol, sender, recipient, amount)
            return False
        self._credit(recipient, amount)
        return True

    async def transfer_from(
        self, spender: str, owner: str, recipient: str, amount: int
    ) -> bool:
        allowed = self.allowance(owner, spender)
        if amount <= 0 or amount > allowed or amount > self.balance_of(owner):
            logger.debug(
                "%s transfer_from %s -> %s of %d refused (allowance %d)",
                self.symbol, owner, recipient, amount, allowed,
            )
            return False
        self._allowances[(owner, spender)] = allowed - amount
        self._debit(owner, amount)
        self._credit(recipient, amount)
        return True
