"""Ledger: asset registry, position store and transactions."""
from .positions import Position, PositionStore
from .registry import AssetRegistry
from .transaction import Transaction

__all__ = ["AssetRegistry", "Position", "PositionStore", "Transaction"]
