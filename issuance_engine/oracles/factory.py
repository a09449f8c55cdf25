"""Build the configured price source."""
from __future__ import annotations

import logging
import time
from typing import Callable

from ..config import PriceOracleConfig
from ..interfaces.price_source import PriceSource
from .pyth import PythPriceSource
from .static import StaticPriceSource

logger = logging.getLogger(__name__)


def build_price_source(
    config: PriceOracleConfig, clock: Callable[[], float] = time.time
) -> PriceSource:
    """Return a price source for ``config.provider``.

    ``static`` yields an empty StaticPriceSource; prices must be set on it
    before the engine can value anything.
    """
    if config.provider == "pyth":
        logger.info("Using Pyth Hermes price source at %s", config.pyth.hermes_url)
        return PythPriceSource(config.pyth)
    if config.provider == "static":
        logger.info("Using static price source")
        return StaticPriceSource(clock=clock)
    raise ValueError(f"Unknown price oracle provider '{config.provider}'")
