"""Per-asset summary statistics for the asset detail page."""

from collections.abc import Mapping, Sequence
from typing import Any

from marketdash.analytics.base import CandleEndpoint
from marketdash.analytics.ohlcv import resolve_window
from marketdash.data.fetcher import CandleFetcher
from marketdash.data.models import Candle
from marketdash.exceptions import MalformedUpstreamPayload
from marketdash.indicators import last_defined, realized_volatility, rsi, sma

STATS_WINDOW = "3m"
MA_PERIOD = 20
RSI_PERIOD = 14
VOLATILITY_PERIOD = 30
OVERBOUGHT = 70
OVERSOLD = 30


def rsi_label(value: float) -> str:
    if value >= OVERBOUGHT:
        return "Overbought"
    if value <= OVERSOLD:
        return "Oversold"
    return "Neutral"


def _ticker_field(ticker: Mapping[str, Any], field: str) -> float:
    value = ticker.get(field)
    return float(value) if value is not None else 0.0


def build_stats(symbol: str, ticker: Any, candles: Sequence[Candle]) -> dict:
    """Combine a ccxt unified ticker with indicators over daily closes.

    Raises:
        MalformedUpstreamPayload: If the ticker is not a mapping.
    """
    if not isinstance(ticker, Mapping):
        raise MalformedUpstreamPayload(f"ticker for {symbol} is {type(ticker).__name__}")

    closes = [c.close for c in candles]
    rsi14 = last_defined(rsi(closes, RSI_PERIOD))

    return {
        "symbol": symbol,
        "price": _ticker_field(ticker, "last"),
        "change24h": _ticker_field(ticker, "change"),
        "changePercent24h": _ticker_field(ticker, "percentage"),
        "volume24h": _ticker_field(ticker, "quoteVolume"),
        "high24h": _ticker_field(ticker, "high"),
        "low24h": _ticker_field(ticker, "low"),
        "ma20": last_defined(sma(closes, MA_PERIOD)),
        "rsi14": rsi14,
        "rsiLabel": rsi_label(rsi14),
        "volatility30d": realized_volatility(closes, VOLATILITY_PERIOD),
    }


class StatsEndpoint(CandleEndpoint):
    """Ticker plus MA20, RSI14 and 30-day realized volatility."""

    name = "stats"

    async def compute(self, fetcher: CandleFetcher, symbol: str) -> dict:
        window = resolve_window(STATS_WINDOW)
        ticker = await fetcher.exchange.fetch_ticker(symbol)
        candles = await fetcher.fetch_latest(symbol, window.timeframe, window.limit)
        return build_stats(symbol, ticker, candles)
