"""Supported collateral assets and their price feeds (fixed at construction)."""
from __future__ import annotations

import logging
from typing import Sequence

from ..errors import LengthMismatch, UnsupportedAsset

logger = logging.getLogger(__name__)


class AssetRegistry:
    """Ordered asset list plus asset -> feed mapping.

    Duplicate asset identifiers are accepted as given: the later feed wins in
    the mapping and the asset appears once per occurrence in ``list_assets``.
    """

    def __init__(
        self,
        assets: Sequence[str],
        feeds: Sequence[str],
        decimals: Sequence[int] | None = None,
    ) -> None:
        if len(assets) != len(feeds):
            raise LengthMismatch(
                "Asset and price feed lists must be the same length",
                {"assets": len(assets), "feeds": len(feeds)},
            )
        if decimals is None:
            decimals = [18] * len(assets)
        elif len(decimals) != len(assets):
            raise LengthMismatch(
                "Asset and decimals lists must be the same length",
                {"assets": len(assets), "decimals": len(decimals)},
            )

        self._assets: tuple[str, ...] = tuple(assets)
        self._feeds: dict[str, str] = {}
        self._decimals: dict[str, int] = {}
        for asset, feed, dec in zip(assets, feeds, decimals):
            self._feeds[asset] = feed
            self._decimals[asset] = dec

        if len(self._feeds) != len(self._assets):
            logger.warning(
                "Asset registry contains duplicate identifiers: %d entries, %d unique",
                len(self._assets), len(self._feeds),
            )

    def is_supported(self, asset: str) -> bool:
        return bool(self._feeds.get(asset))

    def feed_of(self, asset: str) -> str:
        feed = self._feeds.get(asset, "")
        if not feed:
            raise UnsupportedAsset(f"Asset {asset} is not supported", {"asset": asset})
        return feed

    def decimals_of(self, asset: str) -> int:
        if not self.is_supported(asset):
            raise UnsupportedAsset(f"Asset {asset} is not supported", {"asset": asset})
        return self._decimals[asset]

    def list_assets(self) -> tuple[str, ...]:
        return self._assets
