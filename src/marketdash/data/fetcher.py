"""Paginated OHLCV fetch pipeline with watermark advancement and stall guard.

Walks FORWARD from a start timestamp to now, one page per request, strictly
sequentially. Each page is validated into ``Candle`` records before it is
accumulated.

Implementation notes:
- A short page is normal (we've reached the present); the loop still advances.
- Upstream failures abort the whole fetch. No partial series is returned.
- No retries here: each request is one pass through fetch -> compute; the
  dashboard polls and will ask again.
"""

import asyncio
import time

from marketdash.config import FetchSettings
from marketdash.data.models import Candle, timeframe_to_ms
from marketdash.data.parsing import parse_ohlcv
from marketdash.exchange.client import ExchangeClient
from marketdash.logging import get_logger

logger = get_logger(__name__)


class CandleFetcher:
    """Fetches candle series for one exchange.

    Usage:
        fetcher = CandleFetcher(client, settings.fetch)
        weekly = await fetcher.fetch_latest("BTC/USDT", "1w", 1000)
        daily = await fetcher.fetch_since("BTC/USDT", "1d", since_ms)
    """

    def __init__(self, exchange: ExchangeClient, settings: FetchSettings) -> None:
        self._exchange = exchange
        self._settings = settings

    @property
    def exchange(self) -> ExchangeClient:
        """The exchange client this fetcher pages through."""
        return self._exchange

    async def fetch_latest(self, symbol: str, timeframe: str, limit: int) -> list[Candle]:
        """Fetch the most recent ``limit`` candles in a single request."""
        raw = await self._exchange.fetch_ohlcv(symbol, timeframe, None, limit)
        candles = parse_ohlcv(raw)
        logger.debug(
            "ohlcv_latest_fetched",
            exchange=self._exchange.name,
            symbol=symbol,
            timeframe=timeframe,
            count=len(candles),
        )
        return candles

    async def fetch_since(
        self,
        symbol: str,
        timeframe: str,
        since_ms: int,
        page_limit: int | None = None,
        now_ms: int | None = None,
    ) -> list[Candle]:
        """Fetch every candle from ``since_ms`` up to now, page by page.

        The watermark ``since`` starts at ``since_ms`` and moves to one
        timeframe past the last candle of each page. The loop ends when a
        page is empty, when the watermark reaches ``now_ms``, or when a page
        fails to move the watermark forward (upstream anomaly).

        Returns:
            Ascending candle list with no duplicate timestamps.

        Raises:
            UpstreamUnavailable: If any page request fails.
        """
        limit = page_limit or self._settings.page_limit
        now = now_ms if now_ms is not None else int(time.time() * 1000)
        step_ms = timeframe_to_ms(timeframe)

        candles: list[Candle] = []
        since = since_ms
        pages = 0

        while since < now:
            raw = await self._exchange.fetch_ohlcv(symbol, timeframe, since, limit)
            pages += 1
            page = parse_ohlcv(raw)

            if not page:
                break

            # Overlapping pages: keep only candles past what we already hold
            last_held = candles[-1].timestamp if candles else None
            candles.extend(
                c for c in page if last_held is None or c.timestamp > last_held
            )

            last_ts = page[-1].timestamp
            logger.debug(
                "ohlcv_page_fetched",
                symbol=symbol,
                timeframe=timeframe,
                since=since,
                count=len(page),
                last_ts=last_ts,
            )

            if last_ts <= since:
                logger.warning(
                    "ohlcv_watermark_stalled",
                    symbol=symbol,
                    timeframe=timeframe,
                    since=since,
                    last_ts=last_ts,
                )
                break

            since = last_ts + step_ms

            if self._settings.page_delay > 0 and since < now:
                await asyncio.sleep(self._settings.page_delay)

        logger.info(
            "ohlcv_fetch_complete",
            exchange=self._exchange.name,
            symbol=symbol,
            timeframe=timeframe,
            pages=pages,
            candles=len(candles),
        )
        return candles
