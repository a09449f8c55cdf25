"""Freshness checks and USD conversions on top of a price source."""
from __future__ import annotations

import logging
import time
from typing import Callable

from .. import fixedpoint
from ..config import DEFAULT_STALENESS_TIMEOUT
from ..errors import InvalidPrice, StalePrice
from ..interfaces.price_source import PriceSource
from ..ledger.registry import AssetRegistry
from ..models import PriceRound

logger = logging.getLogger(__name__)


def assert_fresh(
    updated_at: int, now: float, timeout: int = DEFAULT_STALENESS_TIMEOUT
) -> None:
    """Raise StalePrice if the reading is older than ``timeout`` seconds."""
    age = now - updated_at
    if age > timeout:
        raise StalePrice(
            f"Price is stale: updated {int(age)}s ago (timeout {timeout}s)",
            {"updated_at": updated_at, "now": int(now), "timeout": timeout},
        )


class PriceOracleGateway:
    """Validated prices and quantity <-> USD conversions for registered assets.

    Every price is checked for positivity and freshness before use; a stale
    feed makes every conversion for its asset fail rather than fall back.
    """

    def __init__(
        self,
        registry: AssetRegistry,
        source: PriceSource,
        timeout: int = DEFAULT_STALENESS_TIMEOUT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._registry = registry
        self._source = source
        self._timeout = timeout
        self._clock = clock

    async def latest_price(self, asset: str) -> PriceRound:
        """Latest positive and fresh price round for ``asset``."""
        feed = self._registry.feed_of(asset)
        round_ = await self._source.latest_round(feed)
        if round_.price <= 0:
            raise InvalidPrice(
                f"Non-positive price {round_.price} for {asset}",
                {"asset": asset, "feed": feed, "price": round_.price},
            )
        assert_fresh(round_.updated_at, self._clock(), self._timeout)
        logger.debug(
            "Price for %s: %d (%d decimals, updated %d)",
            asset, round_.price, round_.decimals, round_.updated_at,
        )
        return round_

    async def price18(self, asset: str) -> int:
        """Latest price for ``asset`` scaled to 18 decimals."""
        round_ = await self.latest_price(asset)
        price = fixedpoint.normalize_price(round_.price, round_.decimals)
        if price == 0:
            raise InvalidPrice(
                f"Price for {asset} truncates to zero at 18 decimals",
                {"asset": asset, "price": round_.price, "decimals": round_.decimals},
            )
        return price

    async def to_usd_value(self, asset: str, quantity: int) -> int:
        price = await self.price18(asset)
        return fixedpoint.usd_value(price, quantity, self._registry.decimals_of(asset))

    async def from_usd_value(self, asset: str, usd_value: int) -> int:
        price = await self.price18(asset)
        return fixedpoint.token_amount(price, usd_value, self._registry.decimals_of(asset))
