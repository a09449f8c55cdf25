"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from issuance_engine.config import AssetConfig, EngineConfig, RiskConfig
from issuance_engine.ledger import AssetRegistry
from issuance_engine.oracles import StaticPriceSource
from issuance_engine.services import IssuanceEngine
from issuance_engine.tokens import InMemoryToken, MinterCapability, StableUnitToken
from tests.helpers import ENGINE, WBTC, WBTC_FEED, WETH, WETH_FEED, FakeClock, usd


# ---------------------------------------------------------------------------
# Oracle / token fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def prices(clock: FakeClock) -> StaticPriceSource:
    source = StaticPriceSource(decimals=8, clock=clock)
    source.set_price(WETH_FEED, usd(2000))
    source.set_price(WBTC_FEED, usd(1000))
    return source


@pytest.fixture()
def registry() -> AssetRegistry:
    return AssetRegistry([WETH, WBTC], [WETH_FEED, WBTC_FEED])


@pytest.fixture()
def weth() -> InMemoryToken:
    return InMemoryToken("WETH")


@pytest.fixture()
def wbtc() -> InMemoryToken:
    return InMemoryToken("WBTC")


@pytest.fixture()
def stable() -> StableUnitToken:
    return StableUnitToken()


@pytest.fixture()
def capability(stable: StableUnitToken) -> MinterCapability:
    return stable.grant_minter(ENGINE)


@pytest.fixture()
def engine(
    registry: AssetRegistry,
    prices: StaticPriceSource,
    stable: StableUnitToken,
    capability: MinterCapability,
    weth: InMemoryToken,
    wbtc: InMemoryToken,
    clock: FakeClock,
) -> IssuanceEngine:
    return IssuanceEngine(
        registry,
        prices,
        stable,
        capability,
        {WETH: weth, WBTC: wbtc},
        clock=clock,
    )


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_engine_config() -> EngineConfig:
    return EngineConfig(
        engine_address=ENGINE,
        risk=RiskConfig(),
        assets=(
            AssetConfig(address=WETH, feed=WETH_FEED, decimals=18),
            AssetConfig(address=WBTC, feed=WBTC_FEED, decimals=18),
        ),
    )


SAMPLE_YAML = textwrap.dedent("""\
    engine_address: test-engine
    risk:
      liquidation_threshold: 50
      liquidation_bonus: 10
      staleness_timeout_seconds: 10800
    assets:
      - address: "0xWETH"
        feed: "aaa"
        decimals: 18
      - address: "0xUSDC"
        feed: "bbb"
        decimals: 6
    price_oracle:
      provider: pyth
      pyth:
        hermes_url: "https://hermes.example.com"
        request_timeout: 5
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
