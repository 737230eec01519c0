"""Base class for cached, candle-backed analytics endpoints.

Each endpoint owns exactly one TTLCache. A request resolves its exchange,
derives a cache key from the resolved parameters, and either serves the
cached payload or runs fetch -> compute -> shape and stores the result.
"""

import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, ClassVar

from marketdash.cache import TTLCache, make_cache_key
from marketdash.config import DEFAULT_SYMBOL, FetchSettings
from marketdash.data.fetcher import CandleFetcher
from marketdash.exchange.registry import ExchangeRegistry


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


class CandleEndpoint(ABC):
    """Fetch candles, compute a metric, cache the JSON-ready payload.

    Subclasses set ``name`` and implement ``compute``. ``normalize_params``
    may canonicalize extra query parameters so equivalent requests share a
    cache key.
    """

    name: ClassVar[str]

    def __init__(
        self,
        registry: ExchangeRegistry,
        cache: TTLCache,
        settings: FetchSettings,
        now_ms: Callable[[], int] = wall_clock_ms,
    ) -> None:
        self._registry = registry
        self._cache = cache
        self._settings = settings
        self._now_ms = now_ms

    @property
    def cache(self) -> TTLCache:
        return self._cache

    def normalize_params(self, **params: Any) -> dict[str, Any]:
        return params

    async def get(
        self, symbol: str = DEFAULT_SYMBOL, exchange: str | None = None, **params: Any
    ) -> Any:
        """Return the payload for ``symbol`` on ``exchange``, from cache when fresh.

        Raises:
            UpstreamUnavailable: If the candle source fails (cache untouched).
            InsufficientData: If the series is too short for this metric.
        """
        exchange_name, client = self._registry.resolve(exchange)
        params = self.normalize_params(**params)
        key = make_cache_key(self.name, exchange=exchange_name, symbol=symbol, **params)
        fetcher = CandleFetcher(client, self._settings)
        return await self._cache.get_or_compute(
            key, lambda: self.compute(fetcher, symbol, **params)
        )

    @abstractmethod
    async def compute(self, fetcher: CandleFetcher, symbol: str, **params: Any) -> Any:
        """Fetch and compute a fresh JSON-ready payload."""
        ...
