"""Public surface of the issuance engine: deposits, minting and liquidation."""
from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any, AsyncIterator, Awaitable, Callable, Mapping

from .. import fixedpoint
from ..config import EngineConfig, RiskConfig
from ..errors import (
    AmountMustBePositive,
    BurnExceedsDebt,
    EngineError,
    MintFailed,
    ReentrantCall,
    TransferFailed,
    UnsupportedAsset,
)
from ..interfaces.price_source import PriceSource
from ..interfaces.token import IssuanceAuthority, Token
from ..ledger import AssetRegistry, PositionStore, Transaction
from ..models import (
    AccountInfo,
    CollateralDeposited,
    CollateralRedeemed,
    Event,
    Outcome,
    Receipt,
)
from ..oracles.factory import build_price_source
from ..oracles.gateway import PriceOracleGateway
from .health import HealthFactorEngine
from .liquidation import LiquidationEngine

logger = logging.getLogger(__name__)


async def settle(call: Awaitable[Any]) -> Outcome:
    """Await an engine call and return a tagged Outcome instead of raising.

    Only EngineError is captured; programming errors still propagate.
    """
    try:
        value = await call
    except EngineError as e:
        return Outcome(ok=False, error=e)
    return Outcome(ok=True, value=value)


class IssuanceEngine:
    """Collateral-backed issuance of the stable unit.

    Every public operation is serialized behind one lock and runs in a
    Transaction, so it either applies completely or not at all. Calls made
    from inside a running operation (for example by a token's transfer hook)
    are rejected with ReentrantCall.
    """

    def __init__(
        self,
        registry: AssetRegistry,
        price_source: PriceSource,
        stable_unit: IssuanceAuthority,
        capability: Any,
        collateral_tokens: Mapping[str, Token],
        *,
        engine_address: str | None = None,
        risk: RiskConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        risk = risk or RiskConfig()
        missing = [a for a in registry.list_assets() if a not in collateral_tokens]
        if missing:
            raise ValueError(f"No token configured for collateral assets: {missing}")

        self._registry = registry
        self._store = PositionStore(registry)
        self._gateway = PriceOracleGateway(
            registry, price_source, risk.staleness_timeout_seconds, clock
        )
        self._health = HealthFactorEngine(
            self._store, self._gateway, risk.liquidation_threshold, risk.min_health_factor
        )
        self._liquidation = LiquidationEngine(
            self._store, self._gateway, self._health, risk.liquidation_bonus
        )
        self._stable = stable_unit
        self._capability = capability
        self._tokens = dict(collateral_tokens)
        self.address = engine_address or getattr(capability, "holder", "issuance-engine")
        self._risk = risk

        self._lock = asyncio.Lock()
        self._active: ContextVar[bool] = ContextVar(
            f"issuance-engine-{id(self)}-active", default=False
        )
        self._events: list[Event] = []

        logger.info(
            "Issuance engine %s ready with %d collateral assets",
            self.address, len(registry.list_assets()),
        )

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        stable_unit: IssuanceAuthority,
        capability: Any,
        collateral_tokens: Mapping[str, Token],
        *,
        price_source: PriceSource | None = None,
        clock: Callable[[], float] = time.time,
    ) -> IssuanceEngine:
        """Build an engine from loaded config.

        Without ``price_source`` the one named by ``config.price_oracle`` is
        constructed.
        """
        if price_source is None:
            price_source = build_price_source(config.price_oracle, clock)
        registry = AssetRegistry(
            [a.address for a in config.assets],
            [a.feed for a in config.assets],
            [a.decimals for a in config.assets],
        )
        return cls(
            registry,
            price_source,
            stable_unit,
            capability,
            collateral_tokens,
            engine_address=config.engine_address,
            risk=config.risk,
            clock=clock,
        )

    # ------------------------------------------------------------------
    # Guard / transaction plumbing
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _guard(self) -> AsyncIterator[None]:
        if self._active.get():
            raise ReentrantCall("Engine re-entered while an operation is in progress")
        async with self._lock:
            token = self._active.set(True)
            try:
                yield
            finally:
                self._active.reset(token)

    def _commit(self, tx: Transaction, account: str) -> Receipt:
        for event in tx.events:
            logger.info("Event %s", event)
        self._events.extend(tx.events)
        return Receipt(operation=tx.name, account=account, events=tuple(tx.events))

    def _token(self, asset: str) -> Token:
        token = self._tokens.get(asset)
        if token is None:
            raise UnsupportedAsset(f"Asset {asset} is not supported", {"asset": asset})
        return token

    async def _pull(self, tx: Transaction, token: Token, owner: str, amount: int) -> None:
        """Move ``amount`` from ``owner`` into custody (refunded on rollback)."""
        if not await token.transfer_from(self.address, owner, self.address, amount):
            raise TransferFailed(
                f"Transfer of {amount} from {owner} failed", {"owner": owner, "amount": amount}
            )
        tx.on_rollback(
            lambda: token.transfer(self.address, owner, amount), f"refund {owner}"
        )

    async def _push(self, token: Token, recipient: str, amount: int) -> None:
        """Move ``amount`` out of custody. Always the last step of an operation."""
        if not await token.transfer(self.address, recipient, amount):
            raise TransferFailed(
                f"Transfer of {amount} to {recipient} failed",
                {"recipient": recipient, "amount": amount},
            )

    async def _burn_stable(self, tx: Transaction, payer: str, amount: int) -> None:
        """Pull stable units from ``payer`` into custody and destroy them."""
        await self._pull(tx, self._stable, payer, amount)
        await self._stable.burn(self._capability, amount)
        tx.on_rollback(
            lambda: self._stable.mint(self._capability, self.address, amount),
            "re-mint burned stable units",
        )

    def _require_burnable(self, account: str, amount: int) -> None:
        if amount <= 0:
            raise AmountMustBePositive("Amount must be more than zero", {"amount": amount})
        debt = self._store.debt_of(account)
        if amount > debt:
            raise BurnExceedsDebt(
                f"Cannot burn {amount}; {account} owes {debt}",
                {"account": account, "amount": amount, "debt": debt},
            )

    # ------------------------------------------------------------------
    # State-changing operations
    # ------------------------------------------------------------------

    async def deposit_collateral(self, account: str, asset: str, qty: int) -> Receipt:
        async with self._guard():
            async with Transaction(self._store, "deposit_collateral") as tx:
                self._store.deposit(account, asset, qty)
                tx.emit(CollateralDeposited(account, asset, qty))
                await self._pull(tx, self._token(asset), account, qty)
            return self._commit(tx, account)

    async def deposit_and_mint(
        self, account: str, asset: str, qty: int, mint_amount: int
    ) -> Receipt:
        async with self._guard():
            async with Transaction(self._store, "deposit_and_mint") as tx:
                self._store.deposit(account, asset, qty)
                tx.emit(CollateralDeposited(account, asset, qty))
                self._store.mint_debt(account, mint_amount)
                await self._health.assert_healthy(account)
                await self._pull(tx, self._token(asset), account, qty)
                await self._mint(account, mint_amount)
            return self._commit(tx, account)

    async def mint_stable_unit(self, account: str, amount: int) -> Receipt:
        async with self._guard():
            async with Transaction(self._store, "mint_stable_unit") as tx:
                self._store.mint_debt(account, amount)
                await self._health.assert_healthy(account)
                await self._mint(account, amount)
            return self._commit(tx, account)

    async def _mint(self, account: str, amount: int) -> None:
        if not await self._stable.mint(self._capability, account, amount):
            raise MintFailed(f"Minting {amount} to {account} failed", {"amount": amount})

    async def redeem_collateral(self, account: str, asset: str, qty: int) -> Receipt:
        async with self._guard():
            async with Transaction(self._store, "redeem_collateral") as tx:
                token = self._token(asset)
                self._store.withdraw(account, asset, qty)
                tx.emit(CollateralRedeemed(account, account, asset, qty))
                await self._health.assert_healthy(account)
                await self._push(token, account, qty)
            return self._commit(tx, account)

    async def burn_stable_unit(self, account: str, amount: int) -> Receipt:
        async with self._guard():
            async with Transaction(self._store, "burn_stable_unit") as tx:
                self._require_burnable(account, amount)
                self._store.burn_debt(account, amount)
                await self._burn_stable(tx, account, amount)
            return self._commit(tx, account)

    async def redeem_for_stable_unit(
        self, account: str, asset: str, qty: int, burn_amount: int
    ) -> Receipt:
        """Repay ``burn_amount`` of debt, then withdraw ``qty`` of ``asset``."""
        async with self._guard():
            async with Transaction(self._store, "redeem_for_stable_unit") as tx:
                token = self._token(asset)
                self._require_burnable(account, burn_amount)
                self._store.burn_debt(account, burn_amount)
                self._store.withdraw(account, asset, qty)
                tx.emit(CollateralRedeemed(account, account, asset, qty))
                await self._health.assert_healthy(account)
                await self._burn_stable(tx, account, burn_amount)
                await self._push(token, account, qty)
            return self._commit(tx, account)

    async def liquidate(
        self, liquidator: str, asset: str, target: str, debt_to_cover: int
    ) -> Receipt:
        """Repay ``debt_to_cover`` of ``target``'s debt for collateral plus bonus.

        Once the system as a whole is at or below 100% collateralization the
        seized amount can exceed what the target holds, in which case this
        fails with InsufficientCollateral.
        """
        async with self._guard():
            async with Transaction(self._store, "liquidate") as tx:
                token = self._token(asset)
                if debt_to_cover <= 0:
                    raise AmountMustBePositive(
                        "Amount must be more than zero", {"amount": debt_to_cover}
                    )
                seizure = await self._liquidation.seize(target, asset, debt_to_cover)
                tx.emit(CollateralRedeemed(target, liquidator, asset, seizure.total_seized))
                await self._health.assert_healthy(liquidator)
                await self._burn_stable(tx, liquidator, debt_to_cover)
                await self._push(token, liquidator, seizure.total_seized)
            logger.info(
                "Liquidated %s: %d debt covered, %d %s seized (health %d -> %d)",
                target, debt_to_cover, seizure.total_seized, asset,
                seizure.start_health, seizure.end_health,
            )
            return self._commit(tx, liquidator)

    # ------------------------------------------------------------------
    # Read-only operations
    # ------------------------------------------------------------------

    async def health_factor_of(self, account: str) -> int:
        async with self._guard():
            return await self._health.health_factor(account)

    async def account_info(self, account: str) -> AccountInfo:
        async with self._guard():
            return AccountInfo(
                debt_minted=self._store.debt_of(account),
                collateral_value_usd=await self._health.account_value(account),
            )

    async def collateral_value_of(self, account: str) -> int:
        async with self._guard():
            return await self._health.account_value(account)

    async def usd_value(self, asset: str, qty: int) -> int:
        async with self._guard():
            return await self._gateway.to_usd_value(asset, qty)

    async def token_amount_from_usd(self, asset: str, usd_amount: int) -> int:
        async with self._guard():
            return await self._gateway.from_usd_value(asset, usd_amount)

    async def collateral_balance(self, account: str, asset: str) -> int:
        async with self._guard():
            return self._store.collateral_balance(account, asset)

    def list_supported_assets(self) -> tuple[str, ...]:
        return self._registry.list_assets()

    def price_feed_of(self, asset: str) -> str:
        return self._registry.feed_of(asset)

    def calculate_health_factor(self, debt_minted: int, collateral_value_usd: int) -> int:
        return self._health.calculate(debt_minted, collateral_value_usd)

    def liquidation_bonus_pct(self) -> int:
        return self._risk.liquidation_bonus

    def liquidation_threshold_pct(self) -> int:
        return self._risk.liquidation_threshold

    def min_health_factor(self) -> int:
        return self._risk.min_health_factor

    def valuation_precision(self) -> int:
        return fixedpoint.PRECISION

    def additional_feed_precision(self) -> int:
        return fixedpoint.ADDITIONAL_FEED_PRECISION

    @property
    def stable_unit(self) -> IssuanceAuthority:
        return self._stable

    @property
    def events(self) -> tuple[Event, ...]:
        return tuple(self._events)
