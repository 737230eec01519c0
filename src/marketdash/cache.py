"""In-process TTL cache for computed analytics payloads.

One ``TTLCache`` instance per endpoint, constructed once at startup and
injected into the endpoint. Entries are overwritten on recomputation, never
merged and never explicitly deleted. Only successful computations are stored,
so a served payload is always the verbatim output of some earlier
computation.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from marketdash.logging import get_logger

logger = get_logger(__name__)


def make_cache_key(endpoint: str, **params: Any) -> str:
    """Build a deterministic cache key from an endpoint name and its parameters.

    Parameters are sorted by name so call-site ordering does not matter.
    ``None`` values are omitted.

    >>> make_cache_key("heatmap", symbol="BTC/USDT", exchange="binance")
    'heatmap:exchange=binance:symbol=BTC/USDT'
    """
    parts = [endpoint]
    parts.extend(f"{k}={params[k]}" for k in sorted(params) if params[k] is not None)
    return ":".join(parts)


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: Any
    computed_at: float  # clock() reading when stored


class TTLCache:
    """Last-writer-wins keyed store with a freshness window.

    Args:
        ttl_seconds: How long an entry is served before recomputation.
        clock: Monotonic seconds source (injectable for tests).
        name: Label used in log events.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._name = name
        self._entries: dict[str, CacheEntry] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    def get_entry(self, key: str) -> CacheEntry | None:
        """Return the stored entry for ``key`` regardless of freshness."""
        return self._entries.get(key)

    def get(self, key: str) -> Any | None:
        """Return the payload for ``key`` if it is still fresh, else None."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.computed_at < self._ttl:
            return entry.payload
        return None

    def set(self, key: str, payload: Any) -> None:
        """Store ``payload`` under ``key``, replacing any previous entry."""
        self._entries[key] = CacheEntry(key=key, payload=payload, computed_at=self._clock())

    async def get_or_compute(
        self, key: str, compute: Callable[[], Awaitable[Any]]
    ) -> Any:
        """Serve a fresh entry, or run ``compute`` and store its result.

        Concurrent misses on the same key share one computation: the second
        caller waits on the key's lock and then finds the stored payload.
        If ``compute`` raises, nothing is stored and the error propagates.
        """
        payload = self.get(key)
        if payload is not None:
            logger.debug("cache_hit", cache=self._name, key=key)
            return payload

        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                payload = self.get(key)
                if payload is not None:
                    logger.debug("cache_hit_after_wait", cache=self._name, key=key)
                    return payload

                logger.info("cache_miss", cache=self._name, key=key)
                started = time.monotonic()
                payload = await compute()
                self.set(key, payload)
                logger.info(
                    "cache_stored",
                    cache=self._name,
                    key=key,
                    compute_seconds=round(time.monotonic() - started, 3),
                )
                return payload
        finally:
            # Keys are user-supplied; drop the lock once nobody holds or awaits it
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]
