"""Tests for the 200-week moving average heatmap."""

import pytest

from marketdash.analytics.heatmap import HeatmapEndpoint, build_heatmap
from marketdash.cache import TTLCache
from marketdash.data.models import MS_PER_DAY
from marketdash.exceptions import InsufficientData

WEEK_MS = 7 * MS_PER_DAY


class TestBuildHeatmap:
    """Tests for row construction and month-over-month change."""

    def test_rows_start_after_warmup(self, make_candles) -> None:
        candles = make_candles([float(i) for i in range(1, 11)], step_ms=WEEK_MS)
        rows = build_heatmap(candles, period=3)
        assert len(rows) == 8
        assert rows[0].date == "2024-01-15"
        assert rows[0].ma200w == pytest.approx(2.0)
        assert [r.week for r in rows] == list(range(8))

    def test_monthly_change_uses_emitted_rows(self, make_candles) -> None:
        candles = make_candles([100.0, 110.0, 120.0, 130.0, 140.0, 150.0], step_ms=WEEK_MS)
        rows = build_heatmap(candles, period=1)

        assert [r.monthly_change for r in rows[:4]] == [0.0, 0.0, 0.0, 0.0]
        assert rows[4].monthly_change == pytest.approx(40.0)
        assert rows[5].monthly_change == pytest.approx(36.36)

    def test_rounds_to_cents(self, make_candles) -> None:
        candles = make_candles([1.0, 2.0, 2.0], step_ms=WEEK_MS)
        assert build_heatmap(candles, period=3)[0].ma200w == 1.67

    def test_to_dict_keys(self, make_candles) -> None:
        row = build_heatmap(make_candles([5.0], step_ms=WEEK_MS), period=1)[0]
        assert row.to_dict() == {
            "date": "2024-01-01",
            "week": 0,
            "price": 5.0,
            "ma200w": 5.0,
            "monthlyChange": 0.0,
        }


class TestHeatmapEndpoint:
    """Tests for the cached heatmap endpoint."""

    @pytest.fixture
    def endpoint_for(self, fake_exchange, make_rows, make_registry, fetch_settings):
        def _make(count: int):
            client = fake_exchange(make_rows([100.0] * count, step_ms=WEEK_MS))
            endpoint = HeatmapEndpoint(make_registry(client), TTLCache(300), fetch_settings)
            return endpoint, client

        return _make

    @pytest.mark.asyncio
    async def test_returns_rows(self, endpoint_for) -> None:
        endpoint, client = endpoint_for(250)
        rows = await endpoint.get("BTC/USDT")
        assert len(rows) == 51
        client.fetch_ohlcv.assert_awaited_once_with("BTC/USDT", "1w", None, 1000)

    @pytest.mark.asyncio
    async def test_insufficient_history(self, endpoint_for) -> None:
        endpoint, _ = endpoint_for(150)
        with pytest.raises(InsufficientData):
            await endpoint.get("BTC/USDT")

    @pytest.mark.asyncio
    async def test_no_candles(self, endpoint_for) -> None:
        endpoint, _ = endpoint_for(0)
        with pytest.raises(InsufficientData, match="No data available"):
            await endpoint.get("BTC/USDT")

    @pytest.mark.asyncio
    async def test_served_from_cache(self, endpoint_for) -> None:
        endpoint, client = endpoint_for(250)
        first = await endpoint.get("BTC/USDT")
        second = await endpoint.get("BTC/USDT", exchange="unknown-venue")
        assert first is second
        assert client.fetch_ohlcv.await_count == 1
        assert endpoint.cache.get_entry("heatmap:exchange=binance:symbol=BTC/USDT") is not None
