"""Unit tests for building the configured price source."""
from __future__ import annotations

import pytest

from issuance_engine.config import PriceOracleConfig, PythConfig
from issuance_engine.oracles import PythPriceSource, StaticPriceSource, build_price_source
from tests.helpers import FakeClock


class TestBuildPriceSource:
    def test_pyth_provider(self) -> None:
        config = PriceOracleConfig(
            provider="pyth",
            pyth=PythConfig(hermes_url="https://hermes.example.com", request_timeout=3),
        )
        source = build_price_source(config)
        assert isinstance(source, PythPriceSource)
        assert source.hermes_url == "https://hermes.example.com"
        assert source.request_timeout == 3

    @pytest.mark.asyncio
    async def test_static_provider_uses_clock(self) -> None:
        clock = FakeClock(now=42)
        source = build_price_source(PriceOracleConfig(provider="static"), clock)
        assert isinstance(source, StaticPriceSource)
        source.set_price("feed", 1)
        assert (await source.latest_round("feed")).updated_at == 42

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValueError, match="Unknown price oracle provider"):
            build_price_source(PriceOracleConfig(provider="chainlink"))
