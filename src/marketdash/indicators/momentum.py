"""Momentum oscillators: RSI and MACD."""

from collections.abc import Sequence

from marketdash.indicators.averages import ema
from marketdash.indicators.models import MACDResult, Series


def rsi(closes: Sequence[float], period: int = 14) -> Series:
    """Relative Strength Index with Wilder smoothing.

    Index 0 and every ``i < period`` are ``None``. At ``i == period`` the
    average gain/loss are plain means of the first ``period`` close-to-close
    deltas. After that both averages are carried forward:

        avg_t = (avg_{t-1} * (period - 1) + current) / period

    RS is taken as 100 when the average loss is zero.
    """
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")

    result: Series = [None] * min(len(closes), period)
    if len(closes) <= period:
        return result

    gains = [max(closes[i] - closes[i - 1], 0.0) for i in range(1, period + 1)]
    losses = [max(closes[i - 1] - closes[i], 0.0) for i in range(1, period + 1)]
    avg_gain = sum(gains) / period
    avg_loss = sum(losses) / period
    result.append(_rsi_value(avg_gain, avg_loss))

    for i in range(period + 1, len(closes)):
        change = closes[i] - closes[i - 1]
        avg_gain = (avg_gain * (period - 1) + max(change, 0.0)) / period
        avg_loss = (avg_loss * (period - 1) + max(-change, 0.0)) / period
        result.append(_rsi_value(avg_gain, avg_loss))

    return result


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    rs = 100.0 if avg_loss == 0 else avg_gain / avg_loss
    return 100 - 100 / (1 + rs)


def macd(
    closes: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal_period: int = 9,
) -> MACDResult:
    """Moving Average Convergence Divergence.

    macd = EMA(fast) - EMA(slow). The signal line is an EMA over the defined
    MACD values only, mapped back onto the original indices. The histogram
    is macd - signal wherever both exist.
    """
    ema_fast = ema(closes, fast)
    ema_slow = ema(closes, slow)

    macd_line: Series = [
        f - s if f is not None and s is not None else None
        for f, s in zip(ema_fast, ema_slow)
    ]

    defined = [v for v in macd_line if v is not None]
    signal_compact = iter(ema(defined, signal_period))
    signal: Series = [
        next(signal_compact) if v is not None else None for v in macd_line
    ]

    histogram: Series = [
        m - s if m is not None and s is not None else None
        for m, s in zip(macd_line, signal)
    ]
    return MACDResult(macd=macd_line, signal=signal, histogram=histogram)
