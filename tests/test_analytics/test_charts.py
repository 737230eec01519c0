"""Tests for chart windows, technical overlays and asset stats."""

import pytest

from marketdash.analytics.ohlcv import OhlcvEndpoint, resolve_window
from marketdash.analytics.stats import StatsEndpoint, build_stats, rsi_label
from marketdash.analytics.technicals import (
    OVERLAYS,
    TechnicalsEndpoint,
    build_overlays,
    parse_overlay_names,
)
from marketdash.cache import TTLCache
from marketdash.exceptions import MalformedUpstreamPayload

TICKER = {
    "symbol": "BTC/USDT",
    "last": 65000.0,
    "change": 1200.0,
    "percentage": 1.88,
    "quoteVolume": 2.5e9,
    "high": 66000.0,
    "low": 63000.0,
}


class TestResolveWindow:
    """Tests for chart window lookup."""

    @pytest.mark.parametrize(
        "code, timeframe, limit",
        [
            ("1d", "1h", 24),
            ("1w", "4h", 42),
            ("1m", "4h", 180),
            ("3m", "1d", 90),
            ("6m", "1d", 180),
            ("1y", "1d", 365),
        ],
    )
    def test_known_windows(self, code, timeframe, limit) -> None:
        window = resolve_window(code)
        assert (window.timeframe, window.limit) == (timeframe, limit)

    def test_unknown_falls_back_to_one_month(self) -> None:
        assert resolve_window("5y").code == "1m"
        assert resolve_window(None).code == "1m"


class TestOhlcvEndpoint:
    """Tests for the raw candle endpoint."""

    @pytest.mark.asyncio
    async def test_window_selects_request(self, fake_exchange, make_rows, make_registry, fetch_settings) -> None:
        client = fake_exchange(make_rows([100.0] * 400))
        endpoint = OhlcvEndpoint(make_registry(client), TTLCache(60), fetch_settings)

        candles = await endpoint.get("ETH/USDT", window="1y")

        client.fetch_ohlcv.assert_awaited_once_with("ETH/USDT", "1d", None, 365)
        assert len(candles) == 365
        assert set(candles[0]) == {"timestamp", "open", "high", "low", "close", "volume"}

    @pytest.mark.asyncio
    async def test_equivalent_windows_share_cache(
        self, fake_exchange, make_rows, make_registry, fetch_settings
    ) -> None:
        client = fake_exchange(make_rows([100.0] * 200))
        endpoint = OhlcvEndpoint(make_registry(client), TTLCache(60), fetch_settings)

        await endpoint.get("BTC/USDT")
        await endpoint.get("BTC/USDT", window="bogus")
        await endpoint.get("BTC/USDT", window="1m")

        assert client.fetch_ohlcv.await_count == 1


class TestTechnicals:
    """Tests for overlay selection and computation."""

    def test_default_is_all_overlays(self) -> None:
        assert parse_overlay_names(None) == sorted(OVERLAYS)
        assert parse_overlay_names("") == sorted(OVERLAYS)

    def test_unknown_names_ignored(self) -> None:
        assert parse_overlay_names("RSI, macd,bogus") == ["macd", "rsi"]

    def test_overlays_aligned_with_candles(self, make_candles) -> None:
        candles = make_candles([100.0 + (i % 9) for i in range(80)])
        overlays = build_overlays(candles, ["ma", "rsi", "bollinger", "ichimoku"])
        assert len(overlays["ma"]) == 80
        assert len(overlays["rsi"]) == 80
        assert len(overlays["bollinger"]["upper"]) == 80
        assert len(overlays["ichimoku"]["senkouB"]) == 80

    @pytest.mark.asyncio
    async def test_endpoint_payload(self, fake_exchange, make_rows, make_registry, fetch_settings) -> None:
        client = fake_exchange(make_rows([100.0 + (i % 7) for i in range(300)]))
        endpoint = TechnicalsEndpoint(make_registry(client), TTLCache(60), fetch_settings)

        payload = await endpoint.get("BTC/USDT", window="3m", indicators="macd,ema")

        assert payload["window"] == "3m"
        assert len(payload["candles"]) == 90
        assert set(payload["indicators"]) == {"ema", "macd"}
        assert set(payload["indicators"]["macd"]) == {"macd", "signal", "histogram"}

    @pytest.mark.asyncio
    async def test_indicator_order_shares_cache(
        self, fake_exchange, make_rows, make_registry, fetch_settings
    ) -> None:
        client = fake_exchange(make_rows([100.0] * 200))
        endpoint = TechnicalsEndpoint(make_registry(client), TTLCache(60), fetch_settings)

        await endpoint.get("BTC/USDT", indicators="rsi,ma")
        await endpoint.get("BTC/USDT", indicators="ma, RSI")

        assert client.fetch_ohlcv.await_count == 1


class TestStats:
    """Tests for the asset summary."""

    @pytest.mark.parametrize(
        "value, label",
        [(70.0, "Overbought"), (85.0, "Overbought"), (30.0, "Oversold"), (50.0, "Neutral")],
    )
    def test_rsi_label(self, value, label) -> None:
        assert rsi_label(value) == label

    def test_build_stats(self, make_candles) -> None:
        stats = build_stats("BTC/USDT", TICKER, make_candles([float(i) for i in range(1, 91)]))

        assert stats["price"] == 65000.0
        assert stats["change24h"] == 1200.0
        assert stats["changePercent24h"] == 1.88
        assert stats["volume24h"] == 2.5e9
        assert stats["high24h"] == 66000.0
        assert stats["low24h"] == 63000.0
        assert stats["ma20"] == pytest.approx(80.5)
        assert stats["rsi14"] == pytest.approx(100 - 100 / 101)
        assert stats["rsiLabel"] == "Overbought"
        assert stats["volatility30d"] > 0

    def test_missing_ticker_fields_default_to_zero(self, make_candles) -> None:
        stats = build_stats("BTC/USDT", {"last": None}, make_candles([100.0] * 5))
        assert stats["price"] == 0.0
        assert stats["ma20"] == 0.0
        assert stats["rsi14"] == 0.0
        assert stats["rsiLabel"] == "Oversold"
        assert stats["volatility30d"] == 0.0

    def test_zero_close_in_window(self, make_candles) -> None:
        closes = [100.0] * 60 + [0.0] + [100.0 + (i % 3) for i in range(29)]
        stats = build_stats("BTC/USDT", TICKER, make_candles(closes))
        assert stats["volatility30d"] >= 0

    def test_non_mapping_ticker_rejected(self, make_candles) -> None:
        with pytest.raises(MalformedUpstreamPayload):
            build_stats("BTC/USDT", [65000.0], make_candles([100.0]))

    @pytest.mark.asyncio
    async def test_endpoint(self, fake_exchange, make_rows, make_registry, fetch_settings) -> None:
        client = fake_exchange(make_rows([100.0] * 120), ticker=TICKER)
        endpoint = StatsEndpoint(make_registry(client), TTLCache(60), fetch_settings)

        stats = await endpoint.get("BTC/USDT")

        client.fetch_ticker.assert_awaited_once_with("BTC/USDT")
        client.fetch_ohlcv.assert_awaited_once_with("BTC/USDT", "1d", None, 90)
        assert stats["symbol"] == "BTC/USDT"
        assert stats["ma20"] == pytest.approx(100.0)
