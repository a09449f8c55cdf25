"""Account valuation and health factor; the single solvency gate."""
from __future__ import annotations

import logging

from .. import fixedpoint
from ..errors import HealthFactorBelowMinimum
from ..ledger.positions import PositionStore
from ..oracles.gateway import PriceOracleGateway

logger = logging.getLogger(__name__)


class HealthFactorEngine:
    """Values collateral through the oracle gateway and scores accounts.

    health_factor = (collateral_usd * threshold%) * 1e18 / debt
    """

    def __init__(
        self,
        store: PositionStore,
        gateway: PriceOracleGateway,
        threshold_pct: int = fixedpoint.LIQUIDATION_THRESHOLD,
        min_health_factor: int = fixedpoint.MIN_HEALTH_FACTOR,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self.threshold_pct = threshold_pct
        self.min_health_factor = min_health_factor

    async def account_value(self, account: str) -> int:
        """USD value (18 decimals) of everything ``account`` has deposited.

        Walks the registry's asset list, so a duplicated asset is counted once
        per registration. Assets the account does not hold are not priced.
        """
        total = 0
        for asset in self._store.registry.list_assets():
            qty = self._store.collateral_balance(account, asset)
            if qty == 0:
                continue
            total = fixedpoint.checked(total + await self._gateway.to_usd_value(asset, qty))
        return total

    def calculate(self, debt_minted: int, collateral_value_usd: int) -> int:
        return fixedpoint.calculate_health_factor(
            debt_minted, collateral_value_usd, self.threshold_pct
        )

    async def health_factor(self, account: str) -> int:
        debt = self._store.debt_of(account)
        if debt == 0:
            return fixedpoint.MAX_UINT256
        return self.calculate(debt, await self.account_value(account))

    async def assert_healthy(self, account: str) -> None:
        health = await self.health_factor(account)
        if health <= self.min_health_factor:
            logger.info("Health factor of %s below minimum: %d", account, health)
            raise HealthFactorBelowMinimum(
                f"Health factor {health} of {account} is at or below the minimum",
                {"account": account, "health_factor": health},
            )
