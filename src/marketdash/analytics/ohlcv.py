"""Chart windows: short range codes mapped to a timeframe and candle count."""

from dataclasses import dataclass

from marketdash.analytics.base import CandleEndpoint
from marketdash.data.fetcher import CandleFetcher


@dataclass(frozen=True)
class ChartWindow:
    code: str
    timeframe: str
    limit: int


WINDOWS: dict[str, ChartWindow] = {
    "1d": ChartWindow("1d", "1h", 24),
    "1w": ChartWindow("1w", "4h", 42),
    "1m": ChartWindow("1m", "4h", 180),
    "3m": ChartWindow("3m", "1d", 90),
    "6m": ChartWindow("6m", "1d", 180),
    "1y": ChartWindow("1y", "1d", 365),
}
DEFAULT_WINDOW = "1m"


def resolve_window(code: str | None) -> ChartWindow:
    """Look up a window code; unknown or missing codes fall back to one month."""
    return WINDOWS.get(code or DEFAULT_WINDOW, WINDOWS[DEFAULT_WINDOW])


class OhlcvEndpoint(CandleEndpoint):
    """Raw candles for a chart window."""

    name = "ohlcv"

    def normalize_params(self, window: str | None = None) -> dict:
        return {"window": resolve_window(window).code}

    async def compute(self, fetcher: CandleFetcher, symbol: str, window: str) -> list[dict]:
        chart = resolve_window(window)
        candles = await fetcher.fetch_latest(symbol, chart.timeframe, chart.limit)
        return [c.to_dict() for c in candles]
