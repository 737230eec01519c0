"""Advanced NVT signal.

NVT = network value (price * issued supply) / 90-day SMA of on-chain USD
transaction volume. Bollinger-style bands over the NVT series mark
overbought (above mean + 2 sigma) and oversold (below mean - 2 sigma) zones.

Price comes from the exchange (paginated daily candles); volume comes from
Blockchain.com. The two sources are fetched concurrently.
"""

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from marketdash.analytics.base import CandleEndpoint, wall_clock_ms
from marketdash.analytics.shaping import round_half_up
from marketdash.analytics.stock_to_flow import supply_and_flow
from marketdash.cache import TTLCache
from marketdash.config import FetchSettings
from marketdash.data.fetcher import CandleFetcher
from marketdash.data.models import (
    Candle,
    TxVolumePoint,
    datetime_to_ms,
    iso_date,
    ms_to_datetime,
    years_before,
)
from marketdash.data.onchain import BlockchainInfoClient
from marketdash.exceptions import InsufficientData
from marketdash.exchange.registry import ExchangeRegistry
from marketdash.indicators import bollinger_bands, sma

TX_MA_WINDOW = 90
BAND_WINDOW = 90
BAND_WIDTH = 2.0
MIN_MERGED_DAYS = 100


class NvtZone(str, Enum):
    OVERBOUGHT = "overbought"
    OVERSOLD = "oversold"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class NetworkDay:
    date: str
    price: float
    tx_volume: float
    market_cap: float


@dataclass(frozen=True)
class NvtPoint:
    date: str
    price: float
    nvt: float
    nvt_mean: float
    upper: float
    lower: float
    zone: NvtZone

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "price": self.price,
            "nvt": self.nvt,
            "nvtMean": self.nvt_mean,
            "upper": self.upper,
            "lower": self.lower,
            "zone": self.zone.value,
        }


def merge_network_days(
    candles: Sequence[Candle], volumes: Sequence[TxVolumePoint]
) -> list[NetworkDay]:
    """Join price and volume by date, forward-filling whichever side is missing.

    Days where either value is still non-positive after filling are skipped.
    """
    prices = {iso_date(c.timestamp): c.close for c in candles}
    tx_volumes = {p.date: p.volume_usd for p in volumes}

    merged: list[NetworkDay] = []
    last_price = 0.0
    last_volume = 0.0
    for date in sorted(prices.keys() | tx_volumes.keys()):
        price = prices.get(date, last_price)
        volume = tx_volumes.get(date, last_volume)
        if price <= 0 or volume <= 0:
            continue
        last_price = price
        last_volume = volume

        supply = supply_and_flow(
            datetime.strptime(date, "%Y-%m-%d").replace(tzinfo=timezone.utc)
        ).stock
        merged.append(
            NetworkDay(date=date, price=price, tx_volume=volume, market_cap=price * supply)
        )
    return merged


def build_nvt(days: Sequence[NetworkDay]) -> list[NvtPoint]:
    """NVT and its bands for every day past the warm-up windows."""
    volume_ma = sma([d.tx_volume for d in days], TX_MA_WINDOW)
    nvt = [
        day.market_cap / ma if ma is not None and ma > 0 else None
        for day, ma in zip(days, volume_ma)
    ]
    # Warm-up gaps count as 0 inside the band windows
    bands = bollinger_bands([v if v is not None else 0.0 for v in nvt], BAND_WINDOW, BAND_WIDTH)

    points: list[NvtPoint] = []
    for day, value, mean, upper, lower in zip(
        days, nvt, bands.middle, bands.upper, bands.lower
    ):
        if value is None or mean is None:
            continue
        lower = max(0.0, lower)
        if value > upper:
            zone = NvtZone.OVERBOUGHT
        elif value < lower:
            zone = NvtZone.OVERSOLD
        else:
            zone = NvtZone.NEUTRAL

        points.append(
            NvtPoint(
                date=day.date,
                price=round_half_up(day.price, 2),
                nvt=round_half_up(value, 2),
                nvt_mean=round_half_up(mean, 2),
                upper=round_half_up(upper, 2),
                lower=round_half_up(lower, 2),
                zone=zone,
            )
        )
    return points


def nvt_payload(points: Sequence[NvtPoint], display_from: str) -> dict:
    """Trim to the display window and summarize the latest point."""
    shown = [p for p in points if p.date >= display_from]
    latest = shown[-1] if shown else None
    return {
        "data": [p.to_dict() for p in shown],
        "latestNVT": latest.nvt if latest else None,
        "latestUpper": latest.upper if latest else None,
        "latestLower": latest.lower if latest else None,
        "latestZone": latest.zone.value if latest else NvtZone.NEUTRAL.value,
    }


class NvtEndpoint(CandleEndpoint):
    """NVT signal with rolling bands, last two years displayed."""

    name = "nvt"

    def __init__(
        self,
        registry: ExchangeRegistry,
        cache: TTLCache,
        settings: FetchSettings,
        onchain: BlockchainInfoClient,
        now_ms: Callable[[], int] = wall_clock_ms,
    ) -> None:
        super().__init__(registry, cache, settings, now_ms)
        self._onchain = onchain

    async def compute(self, fetcher: CandleFetcher, symbol: str) -> dict:
        now_ms = self._now_ms()
        now = ms_to_datetime(now_ms)
        since = years_before(now, self._settings.nvt_lookback_years)

        volume_task = asyncio.create_task(self._onchain.fetch_transaction_volume())
        candle_task = asyncio.create_task(
            fetcher.fetch_since(symbol, "1d", datetime_to_ms(since), now_ms=now_ms)
        )
        try:
            volumes, candles = await asyncio.gather(volume_task, candle_task)
        except BaseException:
            # Stop the surviving fetch so it does not keep paging the exchange
            volume_task.cancel()
            candle_task.cancel()
            await asyncio.gather(volume_task, candle_task, return_exceptions=True)
            raise

        days = merge_network_days(candles, volumes)
        if len(days) < MIN_MERGED_DAYS:
            raise InsufficientData("Insufficient data")

        points = build_nvt(days)
        if not points:
            raise InsufficientData("Could not compute NVT Signal")

        display_from = years_before(now, self._settings.nvt_display_years).strftime("%Y-%m-%d")
        return nvt_payload(points, display_from)
