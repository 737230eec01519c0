"""Pi-Cycle Top indicator: 111-day SMA against twice the 350-day SMA."""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from marketdash.analytics.base import CandleEndpoint
from marketdash.analytics.shaping import round_half_up
from marketdash.data.fetcher import CandleFetcher
from marketdash.data.models import Candle, iso_date
from marketdash.exceptions import InsufficientData
from marketdash.indicators import sma

FAST_PERIOD = 111
SLOW_PERIOD = 350
DAILY_LIMIT = 1000
TOP_RATIO = 1.0
BOTTOM_RATIO = 0.75


class Zone(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    NEUTRAL = "neutral"


def classify_zone(ratio: float | None) -> Zone:
    if ratio is None:
        return Zone.NEUTRAL
    if ratio >= TOP_RATIO:
        return Zone.TOP
    if ratio <= BOTTOM_RATIO:
        return Zone.BOTTOM
    return Zone.NEUTRAL


@dataclass(frozen=True)
class PiCycleRow:
    date: str
    price: float
    ma111: float
    ma350x2: float
    ratio: float | None
    zone: Zone

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "price": self.price,
            "ma111": self.ma111,
            "ma350x2": self.ma350x2,
            "ratio": self.ratio,
            "zone": self.zone.value,
        }


def build_pi_cycle(candles: Sequence[Candle]) -> list[PiCycleRow]:
    """Rows for every day where both moving averages are defined."""
    closes = [c.close for c in candles]
    fast = sma(closes, FAST_PERIOD)
    slow = sma(closes, SLOW_PERIOD)

    rows: list[PiCycleRow] = []
    for candle, m111, m350 in zip(candles, fast, slow):
        if m111 is None or m350 is None:
            continue
        m350x2 = m350 * 2
        ratio = m111 / m350x2 if m350x2 > 0 else None

        rows.append(
            PiCycleRow(
                date=iso_date(candle.timestamp),
                price=candle.close,
                ma111=round_half_up(m111, 2),
                ma350x2=round_half_up(m350x2, 2),
                ratio=round_half_up(ratio, 4) if ratio is not None else None,
                zone=classify_zone(ratio),
            )
        )
    return rows


class PiCycleEndpoint(CandleEndpoint):
    """Pi-Cycle over the latest 1000 daily candles."""

    name = "pi-cycle"

    async def compute(self, fetcher: CandleFetcher, symbol: str) -> list[dict]:
        candles = await fetcher.fetch_latest(symbol, "1d", DAILY_LIMIT)
        if not candles:
            raise InsufficientData("No data available")
        if len(candles) < SLOW_PERIOD:
            raise InsufficientData(
                f"Not enough data: {len(candles)} daily candles, need {SLOW_PERIOD}"
            )
        return [row.to_dict() for row in build_pi_cycle(candles)]
