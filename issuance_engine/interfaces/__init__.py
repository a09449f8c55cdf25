"""Protocol interfaces for the engine's external collaborators."""
from .price_source import PriceSource
from .token import IssuanceAuthority, Token

__all__ = ["IssuanceAuthority", "PriceSource", "Token"]
