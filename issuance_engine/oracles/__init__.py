"""Price sources and the validating oracle gateway."""
from .factory import build_price_source
from .gateway import PriceOracleGateway, assert_fresh
from .pyth import PythPriceSource
from .static import StaticPriceSource

__all__ = [
    "PriceOracleGateway",
    "PythPriceSource",
    "StaticPriceSource",
    "assert_fresh",
    "build_price_source",
]
