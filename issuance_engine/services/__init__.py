"""Service modules"""
from .engine import IssuanceEngine, settle
from .health import HealthFactorEngine
from .liquidation import LiquidationEngine, Seizure

__all__ = ["HealthFactorEngine", "IssuanceEngine", "LiquidationEngine", "Seizure", "settle"]
