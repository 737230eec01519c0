"""Abstract exchange client interface.

Defines the contract the candle fetcher and analytics endpoints depend on,
keeping ccxt-specific details isolated in the concrete implementation.
"""

from abc import ABC, abstractmethod


class ExchangeClient(ABC):
    """Abstract base class for exchange market-data clients."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Exchange identifier (e.g. "binance")."""
        ...

    @abstractmethod
    async def connect(self) -> None:
        """Initialize connection and load markets."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources (CRITICAL for ccxt async)."""
        ...

    @abstractmethod
    async def fetch_ticker(self, symbol: str) -> dict:
        """Fetch current ticker data for a single symbol."""
        ...

    @abstractmethod
    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1d",
        since: int | None = None,
        limit: int = 1000,
    ) -> list[list]:
        """Fetch OHLCV candle data.

        Returns list of [timestamp_ms, open, high, low, close, volume].

        Pagination is NOT handled here -- callers are responsible for
        iterating with appropriate since parameters.

        Raises:
            UpstreamUnavailable: On any transport or exchange error,
                including an unknown symbol.
        """
        ...
