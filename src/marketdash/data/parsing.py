"""Validation of untyped upstream payloads into typed records.

ccxt returns OHLCV as bare ``[timestamp, open, high, low, close, volume]``
lists. Anything that does not fit that shape is rejected here, before it can
leak ``None`` into indicator arithmetic.
"""

import math
from collections.abc import Sequence
from numbers import Real
from typing import Any

from marketdash.data.models import Candle
from marketdash.exceptions import MalformedUpstreamPayload


def _number(value: Any, field: str, row_index: int) -> float:
    # bool is a Real subclass; a True close price is never legitimate
    if isinstance(value, bool) or not isinstance(value, (Real, str)):
        raise MalformedUpstreamPayload(
            f"row {row_index}: {field} is {type(value).__name__}, expected number"
        )
    try:
        result = float(value)
    except (ValueError, OverflowError) as e:
        raise MalformedUpstreamPayload(
            f"row {row_index}: {field}={value!r} is not numeric"
        ) from e
    if not math.isfinite(result):
        raise MalformedUpstreamPayload(f"row {row_index}: {field}={value!r} is not finite")
    return result


def parse_ohlcv(raw: Any) -> list[Candle]:
    """Map a raw ccxt OHLCV payload into an ascending, de-duplicated candle list.

    Some venues return pages newest-first, so rows are sorted by timestamp
    after validation. When a timestamp repeats, the first occurrence wins.

    Raises:
        MalformedUpstreamPayload: If the payload or any row has an unexpected shape.
    """
    if not isinstance(raw, Sequence) or isinstance(raw, (str, bytes)):
        raise MalformedUpstreamPayload(
            f"OHLCV payload is {type(raw).__name__}, expected list"
        )

    candles: dict[int, Candle] = {}
    for i, row in enumerate(raw):
        if not isinstance(row, (list, tuple)) or len(row) < 6:
            raise MalformedUpstreamPayload(f"OHLCV row {i} is not a 6-field list: {row!r}")

        ts = _number(row[0], "timestamp", i)
        candle = Candle(
            timestamp=int(ts),
            open=_number(row[1], "open", i),
            high=_number(row[2], "high", i),
            low=_number(row[3], "low", i),
            close=_number(row[4], "close", i),
            volume=_number(row[5], "volume", i),
        )
        candles.setdefault(candle.timestamp, candle)

    return [candles[ts] for ts in sorted(candles)]


def parse_tx_volume(raw: Any) -> list[tuple[int, float]]:
    """Extract ``(epoch_seconds, usd_volume)`` pairs from a blockchain.com chart payload.

    Raises:
        MalformedUpstreamPayload: If ``values`` is missing or a point lacks x/y.
    """
    if not isinstance(raw, dict) or not isinstance(raw.get("values"), list):
        raise MalformedUpstreamPayload("chart payload has no 'values' list")

    points = []
    for i, point in enumerate(raw["values"]):
        if not isinstance(point, dict) or "x" not in point or "y" not in point:
            raise MalformedUpstreamPayload(f"chart point {i} lacks x/y: {point!r}")
        points.append((int(_number(point["x"], "x", i)), _number(point["y"], "y", i)))
    return points
