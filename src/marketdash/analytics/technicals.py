"""Technical chart overlays computed server-side over a chart window.

Supported overlays: ``ma`` (SMA 20), ``ema`` (EMA 20), ``bollinger``
(20, 2 sigma), ``ichimoku``, ``macd`` (12/26/9) and ``rsi`` (14).
"""

from collections.abc import Callable, Sequence
from typing import Any

from marketdash.analytics.base import CandleEndpoint
from marketdash.analytics.ohlcv import resolve_window
from marketdash.data.fetcher import CandleFetcher
from marketdash.data.models import Candle
from marketdash.indicators import bollinger_bands, ema, ichimoku, macd, rsi, sma

OVERLAY_PERIOD = 20
RSI_PERIOD = 14


def _closes(candles: Sequence[Candle]) -> list[float]:
    return [c.close for c in candles]


OVERLAYS: dict[str, Callable[[Sequence[Candle]], Any]] = {
    "ma": lambda candles: sma(_closes(candles), OVERLAY_PERIOD),
    "ema": lambda candles: ema(_closes(candles), OVERLAY_PERIOD),
    "bollinger": lambda candles: bollinger_bands(_closes(candles)).to_dict(),
    "ichimoku": lambda candles: ichimoku(candles).to_dict(),
    "macd": lambda candles: macd(_closes(candles)).to_dict(),
    "rsi": lambda candles: rsi(_closes(candles), RSI_PERIOD),
}


def parse_overlay_names(raw: str | None) -> list[str]:
    """Split a comma list into known overlay names, sorted; empty means all."""
    if not raw:
        return sorted(OVERLAYS)
    names = {name.strip().lower() for name in raw.split(",")}
    return sorted(names & OVERLAYS.keys())


def build_overlays(candles: Sequence[Candle], names: Sequence[str]) -> dict[str, Any]:
    return {name: OVERLAYS[name](candles) for name in names}


class TechnicalsEndpoint(CandleEndpoint):
    """Candles plus the requested overlay series, index-aligned."""

    name = "technicals"

    def normalize_params(self, window: str | None = None, indicators: str | None = None) -> dict:
        return {
            "window": resolve_window(window).code,
            "indicators": ",".join(parse_overlay_names(indicators)),
        }

    async def compute(
        self, fetcher: CandleFetcher, symbol: str, window: str, indicators: str
    ) -> dict:
        chart = resolve_window(window)
        candles = await fetcher.fetch_latest(symbol, chart.timeframe, chart.limit)
        names = [n for n in indicators.split(",") if n]
        return {
            "window": chart.code,
            "candles": [c.to_dict() for c in candles],
            "indicators": build_overlays(candles, names),
        }
