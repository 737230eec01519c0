"""MVRV proxies from price alone.

On-chain realised value is approximated by moving averages of price:

- STH-MVRV ~ close / SMA(155), the short-term-holder cost basis proxy.
- MVRV Z-score = (close - SMA(365)) / rolling_std(close - SMA(365), 365).

Both series are sampled to the first qualifying day of each UTC calendar
month to keep the payload small.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from marketdash.analytics.base import CandleEndpoint
from marketdash.analytics.shaping import (
    month_index,
    month_label,
    round_half_up,
    round_whole,
    short_month_label,
)
from marketdash.data.fetcher import CandleFetcher
from marketdash.data.models import Candle, datetime_to_ms, ms_to_datetime, years_before
from marketdash.exceptions import InsufficientData
from marketdash.indicators import rolling_std, sma

STH_PERIOD = 155
REALISED_PERIOD = 365
MIN_CANDLES = 200


@dataclass(frozen=True)
class SthMvrvPoint:
    date: str
    value: float
    price: float

    def to_dict(self) -> dict:
        return {"date": self.date, "value": self.value, "price": self.price}


@dataclass(frozen=True)
class MvrvZScorePoint:
    date: str
    market_value: int
    realised_value: int
    z_score: float

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "marketValue": self.market_value,
            "realisedValue": self.realised_value,
            "zScore": self.z_score,
        }


def build_sth_mvrv(candles: Sequence[Candle], period: int = STH_PERIOD) -> list[SthMvrvPoint]:
    closes = [c.close for c in candles]
    basis = sma(closes, period)

    points: list[SthMvrvPoint] = []
    last_month = None
    for candle, avg in zip(candles, basis):
        if avg is None or avg == 0:
            continue
        month = month_index(candle.timestamp)
        if month == last_month:
            continue
        last_month = month

        points.append(
            SthMvrvPoint(
                date=month_label(candle.timestamp),
                value=round_half_up(candle.close / avg, 3),
                price=candle.close,
            )
        )
    return points


def build_mvrv_zscore(
    candles: Sequence[Candle], period: int = REALISED_PERIOD
) -> list[MvrvZScorePoint]:
    closes = [c.close for c in candles]
    realised = sma(closes, period)
    deviations = [
        price - rv if rv is not None else None for price, rv in zip(closes, realised)
    ]
    spread = rolling_std(deviations, period)

    points: list[MvrvZScorePoint] = []
    last_month = None
    for candle, rv, std in zip(candles, realised, spread):
        if rv is None or std is None or std == 0:
            continue
        month = month_index(candle.timestamp)
        if month == last_month:
            continue
        last_month = month

        points.append(
            MvrvZScorePoint(
                date=short_month_label(candle.timestamp),
                market_value=round_whole(candle.close),
                realised_value=round_whole(rv),
                z_score=round_half_up((candle.close - rv) / std, 2),
            )
        )
    return points


class MvrvEndpoint(CandleEndpoint):
    """STH-MVRV and MVRV Z-score over ~5 years of paginated daily candles."""

    name = "mvrv"

    async def compute(self, fetcher: CandleFetcher, symbol: str) -> dict:
        now_ms = self._now_ms()
        start = years_before(ms_to_datetime(now_ms), self._settings.mvrv_lookback_years)
        candles = await fetcher.fetch_since(
            symbol, "1d", datetime_to_ms(start), now_ms=now_ms
        )

        if len(candles) < MIN_CANDLES:
            raise InsufficientData("Not enough data")

        return {
            "sthMvrv": [p.to_dict() for p in build_sth_mvrv(candles)],
            "mvrvZScore": [p.to_dict() for p in build_mvrv_zscore(candles)],
        }
