"""Shared test fixtures for the market analytics service."""

from collections.abc import Callable, Sequence
from unittest.mock import AsyncMock, MagicMock

import pytest

from marketdash.config import ExchangeSettings, FetchSettings
from marketdash.data.models import MS_PER_DAY, Candle
from marketdash.exchange.registry import ExchangeRegistry

START_MS = 1_704_067_200_000  # 2024-01-01T00:00:00Z


def _rows(closes: Sequence[float], start_ms: int, step_ms: int) -> list[list[float]]:
    return [
        [start_ms + i * step_ms, c, c + 1.0, c - 1.0, c, 10.0]
        for i, c in enumerate(closes)
    ]


@pytest.fixture
def fetch_settings() -> FetchSettings:
    """Fetch settings with no inter-page delay."""
    return FetchSettings(page_limit=1000, page_delay=0.0)


@pytest.fixture
def exchange_settings() -> ExchangeSettings:
    """Exchange settings with two enabled venues."""
    return ExchangeSettings(primary="binance", enabled=["binance", "kraken"])


@pytest.fixture
def make_rows() -> Callable[..., list[list[float]]]:
    """Factory for raw ccxt OHLCV rows: high = close + 1, low = close - 1."""

    def _make(
        closes: Sequence[float], start_ms: int = START_MS, step_ms: int = MS_PER_DAY
    ) -> list[list[float]]:
        return _rows(closes, start_ms, step_ms)

    return _make


@pytest.fixture
def make_candles() -> Callable[..., list[Candle]]:
    """Factory for Candle lists matching ``make_rows``."""

    def _make(
        closes: Sequence[float], start_ms: int = START_MS, step_ms: int = MS_PER_DAY
    ) -> list[Candle]:
        return [Candle(*row) for row in _rows(closes, start_ms, step_ms)]

    return _make


@pytest.fixture
def fake_exchange() -> Callable[..., MagicMock]:
    """Factory for a mocked ExchangeClient serving a fixed candle history.

    ``since=None`` returns the newest ``limit`` rows; otherwise rows with
    ``timestamp >= since``, at most ``limit`` of them.
    """

    def _make(rows: Sequence[Sequence[float]], name: str = "binance", ticker: dict | None = None):
        async def fetch_ohlcv(symbol, timeframe="1d", since=None, limit=1000):
            if since is None:
                return [list(r) for r in rows[-limit:]]
            return [list(r) for r in rows if r[0] >= since][:limit]

        client = MagicMock()
        client.name = name
        client.fetch_ohlcv = AsyncMock(side_effect=fetch_ohlcv)
        client.fetch_ticker = AsyncMock(return_value=ticker or {"symbol": "BTC/USDT", "last": 100.0})
        return client

    return _make


@pytest.fixture
def make_registry() -> Callable[..., ExchangeRegistry]:
    """Wrap one mocked client in a registry with it as the primary."""

    def _make(client: MagicMock) -> ExchangeRegistry:
        return ExchangeRegistry({client.name: client}, client.name)

    return _make
