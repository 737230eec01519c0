"""Result containers for multi-series indicators.

Every series is index-aligned with the input candles; ``None`` marks an index
where the indicator has no value yet. Consumers must not treat ``None`` as 0.
"""

from dataclasses import dataclass

Series = list[float | None]


@dataclass(frozen=True)
class MACDResult:
    macd: Series
    signal: Series
    histogram: Series

    def to_dict(self) -> dict:
        return {"macd": self.macd, "signal": self.signal, "histogram": self.histogram}


@dataclass(frozen=True)
class BollingerBands:
    upper: Series
    middle: Series
    lower: Series

    def to_dict(self) -> dict:
        return {"upper": self.upper, "middle": self.middle, "lower": self.lower}


@dataclass(frozen=True)
class Ichimoku:
    """Ichimoku cloud components.

    ``chikou`` is the close at the same index (from index 26 on), not a
    series shifted 26 periods back. Charts apply the displacement.
    """

    tenkan: Series
    kijun: Series
    senkou_a: Series
    senkou_b: Series
    chikou: Series

    def to_dict(self) -> dict:
        return {
            "tenkan": self.tenkan,
            "kijun": self.kijun,
            "senkouA": self.senkou_a,
            "senkouB": self.senkou_b,
            "chikou": self.chikou,
        }
