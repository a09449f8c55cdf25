"""In-memory price source for tests and simulations."""
from __future__ import annotations

import logging
import time
from typing import Callable

from ..errors import InvalidPrice
from ..models import PriceRound

logger = logging.getLogger(__name__)


class StaticPriceSource:
    """Settable price feeds, keyed by feed reference.

    Prices are raw integers with ``decimals`` digits (8 by default, like most
    USD feeds). ``updated_at`` defaults to the source's clock at update time.
    """

    def __init__(
        self,
        decimals: int = 8,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.decimals = decimals
        self._clock = clock
        self._rounds: dict[str, PriceRound] = {}

    def set_price(self, feed: str, price: int, updated_at: int | None = None) -> None:
        if updated_at is None:
            updated_at = int(self._clock())
        self._rounds[feed] = PriceRound(
            price=price, decimals=self.decimals, updated_at=updated_at
        )
        logger.debug("Static feed %s set to %d at %d", feed, price, updated_at)

    async def latest_round(self, feed: str) -> PriceRound:
        try:
            return self._rounds[feed]
        except KeyError:
            raise InvalidPrice(f"No price set for feed {feed}", {"feed": feed}) from None
