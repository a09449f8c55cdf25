"""Liquidation sizing and ledger-side seizure of unsafe positions."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .. import fixedpoint
from ..errors import BurnExceedsDebt, HealthFactorNotImproved, HealthFactorOK
from ..ledger.positions import PositionStore
from ..oracles.gateway import PriceOracleGateway
from .health import HealthFactorEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Seizure:
    """What a liquidation took from the target and what it repaid."""

    target: str
    asset: str
    debt_covered: int
    base_qty: int
    bonus_qty: int
    start_health: int
    end_health: int

    @property
    def total_seized(self) -> int:
        return self.base_qty + self.bonus_qty


class LiquidationEngine:
    """Applies the ledger half of a liquidation.

    Token movements (collateral to the liquidator, stable unit from the
    liquidator into custody and its burn) are left to the caller, which must
    run this inside a transaction so a failed check leaves no trace.
    """

    def __init__(
        self,
        store: PositionStore,
        gateway: PriceOracleGateway,
        health: HealthFactorEngine,
        bonus_pct: int = fixedpoint.LIQUIDATION_BONUS,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._health = health
        self.bonus_pct = bonus_pct

    async def seize(self, target: str, asset: str, debt_to_cover: int) -> Seizure:
        start_health = await self._health.health_factor(target)
        if start_health >= self._health.min_health_factor:
            raise HealthFactorOK(
                f"Account {target} is not liquidatable",
                {"target": target, "health_factor": start_health},
            )

        debt = self._store.debt_of(target)
        if debt_to_cover > debt:
            raise BurnExceedsDebt(
                f"Cannot cover {debt_to_cover}; {target} owes {debt}",
                {"target": target, "amount": debt_to_cover, "debt": debt},
            )

        base_qty = await self._gateway.from_usd_value(asset, debt_to_cover)
        bonus_qty = fixedpoint.liquidation_bonus(base_qty, self.bonus_pct)

        self._store.withdraw(target, asset, base_qty + bonus_qty)
        self._store.burn_debt(target, debt_to_cover)

        end_health = await self._health.health_factor(target)
        if end_health <= start_health:
            raise HealthFactorNotImproved(
                f"Liquidation did not improve health of {target}",
                {"target": target, "start": start_health, "end": end_health},
            )

        seizure = Seizure(
            target=target,
            asset=asset,
            debt_covered=debt_to_cover,
            base_qty=base_qty,
            bonus_qty=bonus_qty,
            start_health=start_health,
            end_health=end_health,
        )
        logger.debug(
            "Seizing %d (+%d bonus) of %s from %s for %d debt",
            base_qty, bonus_qty, asset, target, debt_to_cover,
        )
        return seizure
