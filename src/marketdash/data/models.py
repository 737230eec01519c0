"""Data models for OHLCV candles and timeframe arithmetic.

Candles are immutable once produced by the fetcher. Prices and volume are
floats: every downstream consumer is an indicator that needs ln/exp/sqrt.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

import ccxt.async_support as ccxt_async

MS_PER_DAY = 86_400_000


@dataclass(frozen=True)
class Candle:
    """A single OHLCV candle (one bar for a fixed time bucket)."""

    timestamp: int  # epoch milliseconds, bucket open
    open: float
    high: float
    low: float
    close: float
    volume: float

    def to_dict(self) -> dict:
        """Serialize to a JSON-safe dict."""
        return {
            "timestamp": self.timestamp,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }


@dataclass(frozen=True)
class TxVolumePoint:
    """Daily on-chain transaction volume in USD."""

    date: str  # YYYY-MM-DD (UTC)
    volume_usd: float


def timeframe_to_ms(timeframe: str) -> int:
    """Convert a ccxt timeframe code ("1h", "1d", "1w") to milliseconds."""
    return int(ccxt_async.Exchange.parse_timeframe(timeframe) * 1000)


def ms_to_datetime(timestamp_ms: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)


def datetime_to_ms(dt: datetime) -> int:
    """Convert an aware datetime to epoch milliseconds."""
    return int(dt.timestamp() * 1000)


def iso_date(timestamp_ms: int) -> str:
    """Format epoch milliseconds as YYYY-MM-DD (UTC)."""
    return ms_to_datetime(timestamp_ms).strftime("%Y-%m-%d")


def years_before(dt: datetime, years: int) -> datetime:
    """Same calendar day ``years`` earlier; Feb 29 falls back to Feb 28."""
    try:
        return dt.replace(year=dt.year - years)
    except ValueError:
        return dt.replace(year=dt.year - years, day=28)
