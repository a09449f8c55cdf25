"""Token protocols: ERC-20 shaped balances and capability-gated issuance."""
from typing import Any, Protocol


class Token(Protocol):
    """Fungible token used for collateral custody and stable-unit transfers."""

    def balance_of(self, account: str) -> int: ...

    def total_supply(self) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...

    async def approve(self, owner: str, spender: str, amount: int) -> bool: ...

    async def transfer(self, sender: str, recipient: str, amount: int) -> bool: ...

    async def transfer_from(
        self, spender: str, owner: str, recipient: str, amount: int
    ) -> bool: ...


class IssuanceAuthority(Token, Protocol):
    """The stable-unit token; mint/burn require the minter capability."""

    async def mint(self, capability: Any, to: str, amount: int) -> bool: ...

    async def burn(self, capability: Any, amount: int) -> None: ...
