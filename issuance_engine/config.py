"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .fixedpoint import LIQUIDATION_BONUS, LIQUIDATION_THRESHOLD, MIN_HEALTH_FACTOR

logger = logging.getLogger(__name__)

DEFAULT_STALENESS_TIMEOUT = 3 * 60 * 60
ORACLE_PROVIDERS = ("pyth", "static")

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RiskConfig:
    liquidation_threshold: int = LIQUIDATION_THRESHOLD
    liquidation_bonus: int = LIQUIDATION_BONUS
    min_health_factor: int = MIN_HEALTH_FACTOR
    staleness_timeout_seconds: int = DEFAULT_STALENESS_TIMEOUT


@dataclass(frozen=True)
class AssetConfig:
    address: str = ""
    feed: str = ""
    decimals: int = 18


@dataclass(frozen=True)
class PythConfig:
    hermes_url: str = "https://hermes.pyth.network/v2/updates/price/latest"
    request_timeout: int = 10


@dataclass(frozen=True)
class PriceOracleConfig:
    provider: str = "pyth"
    pyth: PythConfig = field(default_factory=PythConfig)


@dataclass(frozen=True)
class EngineConfig:
    engine_address: str = "issuance-engine"
    risk: RiskConfig = field(default_factory=RiskConfig)
    assets: tuple[AssetConfig, ...] = ()
    price_oracle: PriceOracleConfig = field(default_factory=PriceOracleConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_risk(raw: dict[str, Any]) -> RiskConfig:
    return RiskConfig(
        liquidation_threshold=int(raw.get("liquidation_threshold", LIQUIDATION_THRESHOLD)),
        liquidation_bonus=int(raw.get("liquidation_bonus", LIQUIDATION_BONUS)),
        min_health_factor=int(raw.get("min_health_factor", MIN_HEALTH_FACTOR)),
        staleness_timeout_seconds=int(
            raw.get("staleness_timeout_seconds", DEFAULT_STALENESS_TIMEOUT)
        ),
    )


def _build_assets(raw: list[dict[str, Any]]) -> tuple[AssetConfig, ...]:
    assets: list[AssetConfig] = []
    for a in raw:
        assets.append(
            AssetConfig(
                address=str(a.get("address", "")),
                feed=str(a.get("feed", "")),
                decimals=int(a.get("decimals", 18)),
            )
        )
    return tuple(assets)


def _build_price_oracle(raw: dict[str, Any]) -> PriceOracleConfig:
    pyth_raw = raw.get("pyth", {})
    return PriceOracleConfig(
        provider=raw.get("provider", "pyth"),
        pyth=PythConfig(
            hermes_url=pyth_raw.get("hermes_url", PythConfig.hermes_url),
            request_timeout=int(pyth_raw.get("request_timeout", PythConfig.request_timeout)),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> EngineConfig:
    """Load and validate engine configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = EngineConfig(
        engine_address=str(raw.get("engine_address", EngineConfig.engine_address)),
        risk=_build_risk(raw.get("risk", {})),
        assets=_build_assets(raw.get("assets", [])),
        price_oracle=_build_price_oracle(raw.get("price_oracle", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: EngineConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.engine_address:
        raise ValueError("engine_address must not be empty")

    if not cfg.assets:
        raise ValueError("At least one collateral asset must be configured")

    for asset in cfg.assets:
        if not asset.address:
            raise ValueError("Collateral asset has no address")
        if not asset.feed:
            raise ValueError(f"Asset '{asset.address}' has no price feed")
        if asset.decimals < 0:
            raise ValueError(f"Asset '{asset.address}' has negative decimals")

    risk = cfg.risk
    if not 0 < risk.liquidation_threshold <= 100:
        raise ValueError("liquidation_threshold must be in (0, 100]")
    if not 0 <= risk.liquidation_bonus <= 100:
        raise ValueError("liquidation_bonus must be in [0, 100]")
    if risk.min_health_factor <= 0:
        raise ValueError("min_health_factor must be positive")
    if risk.staleness_timeout_seconds <= 0:
        raise ValueError("staleness_timeout_seconds must be positive")

    if cfg.price_oracle.provider not in ORACLE_PROVIDERS:
        raise ValueError(
            f"Unknown price oracle provider '{cfg.price_oracle.provider}'"
        )
