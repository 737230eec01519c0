"""ccxt async exchange client implementation.

Wraps any ``ccxt.async_support`` exchange class with rate limiting, market
loading, and translation of ccxt errors into the service's error taxonomy.
"""

import ccxt.async_support as ccxt_async

from marketdash.config import ExchangeSettings
from marketdash.exceptions import UpstreamUnavailable
from marketdash.exchange.client import ExchangeClient
from marketdash.logging import get_logger

logger = get_logger(__name__)


class CcxtExchangeClient(ExchangeClient):
    """Concrete market-data client for a single ccxt exchange."""

    def __init__(self, exchange_id: str, settings: ExchangeSettings) -> None:
        exchange_cls = getattr(ccxt_async, exchange_id, None)
        if exchange_cls is None or exchange_id not in ccxt_async.exchanges:
            raise ValueError(f"Unknown ccxt exchange: {exchange_id}")

        self._name = exchange_id
        self._exchange = exchange_cls(
            {
                "enableRateLimit": settings.enable_rate_limit,
                "timeout": settings.timeout_ms,
            }
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def exchange(self) -> ccxt_async.Exchange:
        """Access the underlying ccxt exchange instance."""
        return self._exchange

    async def connect(self) -> None:
        """Initialize connection by loading markets."""
        logger.info("connecting_to_exchange", exchange=self._name)
        try:
            markets = await self._exchange.load_markets()
        except ccxt_async.BaseError as e:
            raise UpstreamUnavailable(f"{self._name}: {e}") from e
        logger.info("exchange_connected", exchange=self._name, market_count=len(markets))

    async def close(self) -> None:
        """Clean up ccxt async resources. CRITICAL: must be called to avoid resource leaks."""
        logger.info("closing_exchange_connection", exchange=self._name)
        await self._exchange.close()

    async def fetch_ticker(self, symbol: str) -> dict:
        """Fetch current ticker data for a single symbol."""
        try:
            return await self._exchange.fetch_ticker(symbol)
        except ccxt_async.BaseError as e:
            raise UpstreamUnavailable(f"{self._name} ticker {symbol}: {e}") from e

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1d",
        since: int | None = None,
        limit: int = 1000,
    ) -> list[list]:
        """Fetch one page of OHLCV candles via ccxt."""
        try:
            return await self._exchange.fetch_ohlcv(symbol, timeframe, since, limit)
        except ccxt_async.BaseError as e:
            raise UpstreamUnavailable(
                f"{self._name} {symbol} {timeframe} candles: {e}"
            ) from e
