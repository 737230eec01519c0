"""Tests for ExchangeRegistry resolution and lifecycle."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from marketdash.config import ExchangeSettings
from marketdash.exceptions import UpstreamUnavailable
from marketdash.exchange.ccxt_client import CcxtExchangeClient
from marketdash.exchange.registry import ExchangeRegistry


def _client(name: str) -> MagicMock:
    client = MagicMock()
    client.name = name
    client.connect = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def registry() -> ExchangeRegistry:
    return ExchangeRegistry({"binance": _client("binance"), "kraken": _client("kraken")}, "binance")


class TestResolve:
    """Tests for exchange name resolution."""

    def test_none_resolves_to_primary(self, registry: ExchangeRegistry) -> None:
        name, client = registry.resolve(None)
        assert name == "binance"
        assert client.name == "binance"

    def test_known_name_case_insensitive(self, registry: ExchangeRegistry) -> None:
        name, client = registry.resolve("KRAKEN")
        assert name == "kraken"
        assert client.name == "kraken"

    def test_unknown_name_falls_back_to_primary(self, registry: ExchangeRegistry) -> None:
        assert registry.resolve("mtgox")[0] == "binance"

    def test_primary_must_be_registered(self) -> None:
        with pytest.raises(ValueError):
            ExchangeRegistry({"kraken": _client("kraken")}, "binance")


class TestFromSettings:
    """Tests for building the registry from settings."""

    def test_primary_first_and_deduplicated(self) -> None:
        registry = ExchangeRegistry.from_settings(
            ExchangeSettings(primary="binance", enabled=["kraken", "binance"])
        )
        assert registry.names == ["binance", "kraken"]
        assert registry.primary == "binance"
        assert isinstance(registry.resolve("kraken")[1], CcxtExchangeClient)


class TestLifecycle:
    """Tests for connect_all / close_all."""

    @pytest.mark.asyncio
    async def test_connect_failure_not_fatal(self) -> None:
        failing = _client("binance")
        failing.connect = AsyncMock(side_effect=UpstreamUnavailable("binance: dns"))
        healthy = _client("kraken")
        registry = ExchangeRegistry({"binance": failing, "kraken": healthy}, "binance")

        await registry.connect_all()

        healthy.connect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_all(self, registry: ExchangeRegistry) -> None:
        await registry.close_all()
        for name in registry.names:
            registry.resolve(name)[1].close.assert_awaited_once()
