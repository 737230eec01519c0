"""Tests for the Pi-Cycle Top indicator."""

import pytest

from marketdash.analytics.pi_cycle import PiCycleEndpoint, Zone, build_pi_cycle, classify_zone
from marketdash.cache import TTLCache
from marketdash.exceptions import InsufficientData


class TestClassifyZone:
    """Tests for ratio zone thresholds."""

    @pytest.mark.parametrize(
        "ratio, zone",
        [
            (1.0, Zone.TOP),
            (1.2, Zone.TOP),
            (0.75, Zone.BOTTOM),
            (0.5, Zone.BOTTOM),
            (0.9, Zone.NEUTRAL),
            (None, Zone.NEUTRAL),
        ],
    )
    def test_thresholds(self, ratio, zone) -> None:
        assert classify_zone(ratio) is zone


class TestBuildPiCycle:
    """Tests for Pi-Cycle rows."""

    def test_rows_once_both_averages_defined(self, make_candles) -> None:
        rows = build_pi_cycle(make_candles([100.0] * 400))
        assert len(rows) == 51
        assert rows[0].date == "2024-12-15"

    def test_flat_price_is_bottom_zone(self, make_candles) -> None:
        row = build_pi_cycle(make_candles([100.0] * 350))[0]
        assert row.ma111 == 100.0
        assert row.ma350x2 == 200.0
        assert row.ratio == 0.5
        assert row.zone is Zone.BOTTOM
        assert row.to_dict()["zone"] == "bottom"

    def test_parabolic_run_reaches_top(self, make_candles) -> None:
        closes = [100.0] * 300 + [100.0 * 1.03**i for i in range(1, 101)]
        rows = build_pi_cycle(make_candles(closes))
        assert rows[-1].zone is Zone.TOP


class TestPiCycleEndpoint:
    """Tests for the Pi-Cycle endpoint."""

    @pytest.mark.asyncio
    async def test_returns_rows(self, fake_exchange, make_rows, make_registry, fetch_settings) -> None:
        client = fake_exchange(make_rows([100.0] * 1200))
        endpoint = PiCycleEndpoint(make_registry(client), TTLCache(300), fetch_settings)

        rows = await endpoint.get("BTC/USDT")

        client.fetch_ohlcv.assert_awaited_once_with("BTC/USDT", "1d", None, 1000)
        assert len(rows) == 651

    @pytest.mark.asyncio
    async def test_insufficient_history(self, fake_exchange, make_rows, make_registry, fetch_settings) -> None:
        client = fake_exchange(make_rows([100.0] * 349))
        endpoint = PiCycleEndpoint(make_registry(client), TTLCache(300), fetch_settings)

        with pytest.raises(InsufficientData):
            await endpoint.get("BTC/USDT")
