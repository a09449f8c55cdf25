"""Collateral-backed stable-unit issuance engine."""
from .config import EngineConfig, load_config
from .errors import EngineError
from .models import AccountInfo, CollateralDeposited, CollateralRedeemed, Outcome, Receipt
from .services import IssuanceEngine, settle

__all__ = [
    "AccountInfo",
    "CollateralDeposited",
    "CollateralRedeemed",
    "EngineConfig",
    "EngineError",
    "IssuanceEngine",
    "Outcome",
    "Receipt",
    "load_config",
    "settle",
]
