"""Realized volatility of a close series."""

import math
from collections.abc import Sequence

DAYS_PER_YEAR = 365


def realized_volatility(closes: Sequence[float], period: int = 30) -> float:
    """Annualized realized volatility in percent over the last ``period`` log returns.

    Uses population variance of ``ln(close_i / close_{i-1})`` scaled by 365
    (crypto trades every day). Returns 0 when there are fewer than
    ``period + 1`` closes. A return touching a non-positive close has no
    logarithm and is left out; 0 when no return remains.
    """
    if len(closes) < period + 1:
        return 0.0

    recent = closes[-period - 1 :]
    returns = [
        math.log(cur / prev)
        for prev, cur in zip(recent, recent[1:])
        if prev > 0 and cur > 0
    ]
    if not returns:
        return 0.0
    mean = sum(returns) / len(returns)
    variance = sum((r - mean) ** 2 for r in returns) / len(returns)
    return math.sqrt(variance * DAYS_PER_YEAR) * 100
