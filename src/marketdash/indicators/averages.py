"""Moving averages and rolling dispersion over numeric series.

All functions are pure: they never mutate their input and return a new list
aligned 1:1 with it.
"""

import math
from collections.abc import Sequence

from marketdash.indicators.models import Series


def sma(values: Sequence[float], period: int) -> Series:
    """Simple moving average.

    ``None`` for ``i < period - 1``; otherwise the arithmetic mean of
    ``values[i - period + 1 .. i]``.
    """
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")

    result: Series = []
    for i in range(len(values)):
        if i < period - 1:
            result.append(None)
        else:
            result.append(sum(values[i - period + 1 : i + 1]) / period)
    return result


def ema(values: Sequence[float], period: int) -> Series:
    """Exponential moving average seeded with the SMA of the first ``period`` values.

    alpha = 2 / (period + 1)
    EMA_t = (value_t - EMA_{t-1}) * alpha + EMA_{t-1}

    The recurrence runs left to right over the whole history; an EMA over a
    slice differs from the same indices of an EMA over the full series.
    """
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")

    n = len(values)
    if n < period:
        return [None] * n

    alpha = 2 / (period + 1)
    result: Series = [None] * (period - 1)

    prev = sum(values[0:period]) / period
    result.append(prev)
    for v in values[period:]:
        prev = (v - prev) * alpha + prev
        result.append(prev)
    return result


def rolling_std(values: Sequence[float | None], period: int) -> Series:
    """Population standard deviation over a trailing window that may contain gaps.

    ``None`` when ``i < period - 1``, when ``values[i]`` itself is ``None``,
    or when fewer than ``period / 2`` of the window's values are present.
    The deviation is taken over the values that are present (divide by their
    count).
    """
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")

    result: Series = []
    for i in range(len(values)):
        if i < period - 1 or values[i] is None:
            result.append(None)
            continue

        window = [v for v in values[i - period + 1 : i + 1] if v is not None]
        if len(window) < period * 0.5:
            result.append(None)
            continue

        mean = sum(window) / len(window)
        variance = sum((v - mean) ** 2 for v in window) / len(window)
        result.append(math.sqrt(variance))
    return result


def last_defined(series: Sequence[float | None], default: float = 0.0) -> float:
    """Return the last non-None value of ``series``, or ``default``."""
    for v in reversed(series):
        if v is not None:
            return v
    return default
