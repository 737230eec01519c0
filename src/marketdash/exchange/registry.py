"""Registry of configured candle sources, selectable by the ``exchange`` query parameter."""

from marketdash.config import ExchangeSettings
from marketdash.exceptions import UpstreamUnavailable
from marketdash.exchange.ccxt_client import CcxtExchangeClient
from marketdash.exchange.client import ExchangeClient
from marketdash.logging import get_logger

logger = get_logger(__name__)


class ExchangeRegistry:
    """Maps exchange names to clients, falling back to the primary exchange.

    Usage:
        registry = ExchangeRegistry.from_settings(settings.exchange)
        name, client = registry.resolve(request_exchange)
    """

    def __init__(self, clients: dict[str, ExchangeClient], primary: str) -> None:
        if primary not in clients:
            raise ValueError(f"Primary exchange {primary!r} is not among {sorted(clients)}")
        self._clients = clients
        self._primary = primary

    @classmethod
    def from_settings(cls, settings: ExchangeSettings) -> "ExchangeRegistry":
        names = list(dict.fromkeys([settings.primary, *settings.enabled]))
        clients: dict[str, ExchangeClient] = {
            name: CcxtExchangeClient(name, settings) for name in names
        }
        return cls(clients, settings.primary)

    @property
    def primary(self) -> str:
        return self._primary

    @property
    def names(self) -> list[str]:
        return list(self._clients)

    def resolve(self, name: str | None) -> tuple[str, ExchangeClient]:
        """Return ``(resolved_name, client)``; unknown names resolve to the primary."""
        key = (name or "").lower()
        if key not in self._clients:
            key = self._primary
        return key, self._clients[key]

    async def connect_all(self) -> None:
        """Load markets on every exchange. Failures are logged, not fatal.

        ccxt loads markets lazily on the first request, so an exchange that
        is unreachable at startup can still serve later.
        """
        for name, client in self._clients.items():
            try:
                await client.connect()
            except UpstreamUnavailable as e:
                logger.warning("exchange_connect_failed", exchange=name, error=str(e))

    async def close_all(self) -> None:
        for client in self._clients.values():
            await client.close()
