"""Token implementations: collateral tokens and the stable unit."""
from .memory import InMemoryToken
from .stable_unit import MinterCapability, StableUnitToken

__all__ = ["InMemoryToken", "MinterCapability", "StableUnitToken"]
