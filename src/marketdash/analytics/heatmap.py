"""200-week moving average heatmap.

Each emitted row carries the weekly close, the 200-week SMA, and the
month-over-month change of that SMA. "A month ago" is four EMITTED rows
back, not four input candles back; the first four rows compare against
themselves and report 0%.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from marketdash.analytics.base import CandleEndpoint
from marketdash.analytics.shaping import round_half_up
from marketdash.data.fetcher import CandleFetcher
from marketdash.data.models import Candle, iso_date
from marketdash.exceptions import InsufficientData
from marketdash.indicators import sma

MA_PERIOD = 200
MONTH_ROWS = 4
WEEKLY_LIMIT = 1000  # ~19 years of weekly candles


@dataclass(frozen=True)
class HeatmapRow:
    date: str
    week: int
    price: float
    ma200w: float
    monthly_change: float

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "week": self.week,
            "price": self.price,
            "ma200w": self.ma200w,
            "monthlyChange": self.monthly_change,
        }


def build_heatmap(candles: Sequence[Candle], period: int = MA_PERIOD) -> list[HeatmapRow]:
    """Emit one row per weekly candle that has a full ``period`` window."""
    ma = sma([c.close for c in candles], period)
    rows: list[HeatmapRow] = []

    for candle, value in zip(candles, ma):
        if value is None:
            continue

        # Compare against the (rounded) MA already emitted four rows back
        prev_ma = rows[-MONTH_ROWS].ma200w if len(rows) >= MONTH_ROWS else value
        change = (value - prev_ma) / prev_ma * 100 if prev_ma > 0 else 0.0

        rows.append(
            HeatmapRow(
                date=iso_date(candle.timestamp),
                week=len(rows),
                price=candle.close,
                ma200w=round_half_up(value, 2),
                monthly_change=round_half_up(change, 2),
            )
        )

    return rows


class HeatmapEndpoint(CandleEndpoint):
    """Weekly MA heatmap over the latest 1000 weekly candles."""

    name = "heatmap"

    async def compute(self, fetcher: CandleFetcher, symbol: str) -> list[dict]:
        candles = await fetcher.fetch_latest(symbol, "1w", WEEKLY_LIMIT)
        if not candles:
            raise InsufficientData("No data available")
        if len(candles) < MA_PERIOD:
            raise InsufficientData(
                f"Not enough data: {len(candles)} weekly candles, need {MA_PERIOD}"
            )
        return [row.to_dict() for row in build_heatmap(candles)]
