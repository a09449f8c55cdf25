"""Pyth Network price source (Hermes HTTP API)."""
from __future__ import annotations

import logging
import ssl

import aiohttp
import certifi

from ..config import PythConfig
from ..errors import InvalidPrice, OracleUnavailable
from ..models import PriceRound

logger = logging.getLogger(__name__)


def _normalize_feed_id(feed: str) -> str:
    feed = feed.lower()
    return feed[2:] if feed.startswith("0x") else feed


def parse_price_update(item: dict) -> PriceRound:
    """Convert one entry of Hermes' ``parsed`` list into a PriceRound.

    Hermes reports ``price`` as an integer string with an ``expo``, normally
    negative, so the feed decimals are ``-expo``. A positive ``expo`` is folded
    into the price.
    """
    price_data = item.get("price", {})
    price = int(price_data.get("price", 0))
    expo = int(price_data.get("expo", 0))
    publish_time = int(price_data.get("publish_time", 0))
    if expo > 0:
        return PriceRound(price=price * 10**expo, decimals=0, updated_at=publish_time)
    return PriceRound(price=price, decimals=-expo, updated_at=publish_time)


class PythPriceSource:
    """Fetch latest prices from Pyth Network's Hermes service."""

    def __init__(self, config: PythConfig) -> None:
        self.hermes_url = config.hermes_url
        self.request_timeout = config.request_timeout

    async def _fetch(self, feed_ids: list[str]) -> dict[str, PriceRound]:
        query_params = "&".join([f"ids[]={fid}" for fid in feed_ids])
        url = f"{self.hermes_url}?{query_params}"

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)
        timeout = aiohttp.ClientTimeout(total=self.request_timeout)

        try:
            async with aiohttp.ClientSession(connector=connector, timeout=timeout) as session:
                async with session.get(url) as response:
                    if response.status != 200:
                        logger.error(
                            "Error fetching prices from Pyth: HTTP %s", response.status
                        )
                        raise OracleUnavailable(
                            f"Pyth Hermes returned HTTP {response.status}",
                            {"status": response.status},
                        )
                    data = await response.json()
        except (aiohttp.ClientError, OSError) as e:
            logger.error("Error fetching prices from Pyth: %s", e)
            raise OracleUnavailable(f"Pyth Hermes unreachable: {e}") from e
        except ValueError as e:
            logger.error("Pyth Hermes returned invalid JSON: %s", e)
            raise OracleUnavailable(f"Pyth Hermes returned invalid JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("parsed", []), list):
            logger.error("Unexpected Pyth response shape: %r", type(data).__name__)
            raise OracleUnavailable("Unexpected Pyth Hermes response shape")

        rounds: dict[str, PriceRound] = {}
        for item in data.get("parsed", []):
            try:
                rounds[_normalize_feed_id(str(item.get("id", "")))] = parse_price_update(item)
            except (AttributeError, TypeError, ValueError) as e:
                logger.error("Malformed Pyth price update %r: %s", item, e)
                raise OracleUnavailable(f"Malformed Pyth price update: {e}") from e
        return rounds

    async def latest_round(self, feed: str) -> PriceRound:
        """Return the latest round for ``feed``; raises if Hermes omits it."""
        feed_id = _normalize_feed_id(feed)
        rounds = await self._fetch([feed_id])
        if feed_id not in rounds:
            raise InvalidPrice(f"No price returned for feed {feed}", {"feed": feed})
        round_ = rounds[feed_id]
        logger.debug(
            "Pyth %s: price=%d decimals=%d updated_at=%d",
            feed_id, round_.price, round_.decimals, round_.updated_at,
        )
        return round_

