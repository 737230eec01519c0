"""Price envelopes: Bollinger Bands and the Ichimoku cloud."""

import math
from collections.abc import Sequence

from marketdash.data.models import Candle
from marketdash.indicators.averages import sma
from marketdash.indicators.models import BollingerBands, Ichimoku, Series

TENKAN_PERIOD = 9
KIJUN_PERIOD = 26
SENKOU_B_PERIOD = 52
CHIKOU_OFFSET = 26


def bollinger_bands(closes: Sequence[float], period: int = 20, k: float = 2.0) -> BollingerBands:
    """SMA middle band with ``k`` population standard deviations either side."""
    middle = sma(closes, period)
    upper: Series = []
    lower: Series = []

    for i, mean in enumerate(middle):
        if mean is None:
            upper.append(None)
            lower.append(None)
            continue
        window = closes[i - period + 1 : i + 1]
        variance = sum((v - mean) ** 2 for v in window) / period
        width = math.sqrt(variance) * k
        upper.append(mean + width)
        lower.append(mean - width)

    return BollingerBands(upper=upper, middle=middle, lower=lower)


def _midpoint(candles: Sequence[Candle], period: int, index: int) -> float | None:
    """(highest high + lowest low) / 2 over the trailing ``period`` candles."""
    if index < period - 1:
        return None
    window = candles[index - period + 1 : index + 1]
    return (max(c.high for c in window) + min(c.low for c in window)) / 2


def ichimoku(candles: Sequence[Candle]) -> Ichimoku:
    tenkan: Series = []
    kijun: Series = []
    senkou_a: Series = []
    senkou_b: Series = []
    chikou: Series = []

    for i, candle in enumerate(candles):
        t = _midpoint(candles, TENKAN_PERIOD, i)
        k = _midpoint(candles, KIJUN_PERIOD, i)
        tenkan.append(t)
        kijun.append(k)
        senkou_a.append((t + k) / 2 if t is not None and k is not None else None)
        senkou_b.append(_midpoint(candles, SENKOU_B_PERIOD, i))
        chikou.append(candle.close if i >= CHIKOU_OFFSET else None)

    return Ichimoku(
        tenkan=tenkan,
        kijun=kijun,
        senkou_a=senkou_a,
        senkou_b=senkou_b,
        chikou=chikou,
    )
