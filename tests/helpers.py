"""Constants and helpers shared by the test modules."""
from __future__ import annotations

from issuance_engine.tokens import InMemoryToken

NOW = 1_700_000_000
ONE = 10**18
HOURS = 60 * 60

WETH = "0xWETH"
WBTC = "0xWBTC"
WETH_FEED = "feed-eth-usd"
WBTC_FEED = "feed-btc-usd"
ENGINE = "issuance-engine"

USER = "0xUSER"
LIQUIDATOR = "0xLIQUIDATOR"


def usd(dollars: int | float) -> int:
    """Feed price with 8 decimals."""
    return int(dollars * 10**8)


class FakeClock:
    """Manually advanced clock; callable like ``time.time``."""

    def __init__(self, now: int = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return float(self.now)

    def advance(self, seconds: int) -> None:
        self.now += seconds


async def fund(token: InMemoryToken, account: str, amount: int) -> None:
    """Give ``account`` tokens and let the engine pull them."""
    token.mint_to(account, amount)
    await token.approve(account, ENGINE, amount)
