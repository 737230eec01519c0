"""Bitcoin stock-to-flow model.

Issued supply ("stock") at any instant is reconstructed from the halving
schedule at a nominal 144 blocks/day: every era fully elapsed contributes
``144 * era_days * era_reward``, and the current era contributes the same for
the days elapsed so far. Annual flow is ``144 * 365.25 * current_reward``.

Model price follows the published S2F regression:

    ln(market_cap) = 3.32 * ln(S2F) + 14.6
    model_price    = exp(ln(market_cap)) / stock
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from marketdash.analytics.base import CandleEndpoint
from marketdash.analytics.shaping import round_half_up, round_whole
from marketdash.data.fetcher import CandleFetcher
from marketdash.data.models import Candle, datetime_to_ms, iso_date, ms_to_datetime
from marketdash.exceptions import InsufficientData

BLOCKS_PER_DAY = 144
BLOCKS_PER_YEAR = BLOCKS_PER_DAY * 365.25
REGRESSION_SLOPE = 3.32
REGRESSION_INTERCEPT = 14.6
_SECONDS_PER_DAY = 86_400


@dataclass(frozen=True)
class HalvingEra:
    start_date: datetime
    block_reward: float
    blocks_start_height: int


def _utc(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


HALVINGS: tuple[HalvingEra, ...] = (
    HalvingEra(_utc(2009, 1, 3), 50, 0),
    HalvingEra(_utc(2012, 11, 28), 25, 210_000),
    HalvingEra(_utc(2016, 7, 9), 12.5, 420_000),
    HalvingEra(_utc(2020, 5, 11), 6.25, 630_000),
    HalvingEra(_utc(2024, 4, 20), 3.125, 840_000),
)
OPEN_ERA_END = _utc(2100, 1, 1)


@dataclass(frozen=True)
class SupplySnapshot:
    stock: float
    annual_flow: float
    s2f: float


def supply_and_flow(at: datetime, eras: Sequence[HalvingEra] = HALVINGS) -> SupplySnapshot:
    """Cumulative stock, annual flow and S2F ratio at instant ``at``.

    At the exact start of an era, the new era contributes zero blocks and its
    (halved) reward already sets the flow.
    """
    stock = 0.0
    current_reward = eras[0].block_reward

    for i, era in enumerate(eras):
        if at < era.start_date:
            break
        era_end = eras[i + 1].start_date if i + 1 < len(eras) else OPEN_ERA_END

        end = min(at, era_end)
        days = max(0.0, (end - era.start_date).total_seconds() / _SECONDS_PER_DAY)
        stock += days * BLOCKS_PER_DAY * era.block_reward
        current_reward = era.block_reward

        if at < era_end:
            break

    annual_flow = BLOCKS_PER_YEAR * current_reward
    s2f = stock / annual_flow if annual_flow > 0 else 0.0
    return SupplySnapshot(stock=stock, annual_flow=annual_flow, s2f=s2f)


def model_price(s2f: float, stock: float) -> float:
    """S2F regression price per coin; 0 when the inputs are non-positive."""
    if s2f <= 0 or stock <= 0:
        return 0.0
    ln_market_cap = REGRESSION_SLOPE * math.log(s2f) + REGRESSION_INTERCEPT
    return math.exp(ln_market_cap) / stock


@dataclass(frozen=True)
class S2FPoint:
    date: str
    actual_price: float
    s2f_price: float
    s2f_ratio: float
    stock: int

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "actualPrice": self.actual_price,
            "s2fPrice": self.s2f_price,
            "s2fRatio": self.s2f_ratio,
            "stock": self.stock,
        }


def build_s2f(candles: Sequence[Candle]) -> list[S2FPoint]:
    points = []
    for candle in candles:
        snapshot = supply_and_flow(ms_to_datetime(candle.timestamp))
        points.append(
            S2FPoint(
                date=iso_date(candle.timestamp),
                actual_price=candle.close,
                s2f_price=round_half_up(model_price(snapshot.s2f, snapshot.stock), 2),
                s2f_ratio=round_half_up(snapshot.s2f, 2),
                stock=round_whole(snapshot.stock),
            )
        )
    return points


def halving_markers(start: datetime, now: datetime) -> list[dict]:
    """Reference lines for halvings that fall inside ``[start, now]``."""
    return [
        {
            "date": era.start_date.strftime("%Y-%m-%d"),
            "blockReward": era.block_reward,
            "label": f"Halving {i}",
        }
        for i, era in enumerate(HALVINGS)
        if i > 0 and start <= era.start_date <= now
    ]


def parse_start_date(value: str) -> datetime:
    """Parse a YYYY-MM-DD setting into a UTC midnight datetime."""
    return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)


class StockToFlowEndpoint(CandleEndpoint):
    """S2F model price against actual daily closes since the configured start date."""

    name = "s2f"

    async def compute(self, fetcher: CandleFetcher, symbol: str) -> dict:
        start = parse_start_date(self._settings.s2f_start_date)
        now_ms = self._now_ms()
        candles = await fetcher.fetch_since(
            symbol, "1d", datetime_to_ms(start), now_ms=now_ms
        )
        if not candles:
            raise InsufficientData("No data available")

        return {
            "data": [p.to_dict() for p in build_s2f(candles)],
            "halvingDates": halving_markers(start, ms_to_datetime(now_ms)),
        }
