"""Price source protocol."""
from typing import Protocol

from ..models import PriceRound


class PriceSource(Protocol):
    """Abstract interface for reading the latest price of a feed."""

    async def latest_round(self, feed: str) -> PriceRound: ...
