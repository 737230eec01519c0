"""Indicator engine: pure sliding-window statistics over numeric series.

Every series-valued function returns a list aligned 1:1 with its input, with
``None`` where the window is not yet filled.
"""

from marketdash.indicators.averages import ema, last_defined, rolling_std, sma
from marketdash.indicators.bands import bollinger_bands, ichimoku
from marketdash.indicators.models import BollingerBands, Ichimoku, MACDResult, Series
from marketdash.indicators.momentum import macd, rsi
from marketdash.indicators.volatility import realized_volatility

__all__ = [
    "BollingerBands",
    "Ichimoku",
    "MACDResult",
    "Series",
    "bollinger_bands",
    "ema",
    "ichimoku",
    "last_defined",
    "macd",
    "realized_volatility",
    "rolling_std",
    "rsi",
    "sma",
]
