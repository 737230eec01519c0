"""Analytics endpoints: candle fetch -> indicators -> response shaping, behind a TTL cache.

``build_endpoints`` constructs one endpoint per metric, each with its own
cache, so nothing is shared across endpoints except the exchange registry.
"""

from marketdash.analytics.base import CandleEndpoint
from marketdash.analytics.heatmap import HeatmapEndpoint
from marketdash.analytics.mvrv import MvrvEndpoint
from marketdash.analytics.nvt import NvtEndpoint
from marketdash.analytics.ohlcv import OhlcvEndpoint
from marketdash.analytics.pi_cycle import PiCycleEndpoint
from marketdash.analytics.stats import StatsEndpoint
from marketdash.analytics.stock_to_flow import StockToFlowEndpoint
from marketdash.analytics.technicals import TechnicalsEndpoint
from marketdash.cache import TTLCache
from marketdash.config import AppSettings
from marketdash.data.onchain import BlockchainInfoClient
from marketdash.exchange.registry import ExchangeRegistry


def build_endpoints(
    settings: AppSettings,
    registry: ExchangeRegistry,
    onchain: BlockchainInfoClient,
) -> dict[str, CandleEndpoint]:
    """Create every analytics endpoint keyed by its route name."""
    ttl = settings.cache
    fetch = settings.fetch

    def cache(name: str, seconds: int) -> TTLCache:
        return TTLCache(seconds, name=name)

    endpoints: list[CandleEndpoint] = [
        HeatmapEndpoint(registry, cache("heatmap", ttl.heatmap), fetch),
        MvrvEndpoint(registry, cache("mvrv", ttl.mvrv), fetch),
        PiCycleEndpoint(registry, cache("pi-cycle", ttl.pi_cycle), fetch),
        StockToFlowEndpoint(registry, cache("s2f", ttl.s2f), fetch),
        NvtEndpoint(registry, cache("nvt", ttl.nvt), fetch, onchain),
        OhlcvEndpoint(registry, cache("ohlcv", ttl.ohlcv), fetch),
        TechnicalsEndpoint(registry, cache("technicals", ttl.technicals), fetch),
        StatsEndpoint(registry, cache("stats", ttl.stats), fetch),
    ]
    return {endpoint.name: endpoint for endpoint in endpoints}


__all__ = [
    "CandleEndpoint",
    "HeatmapEndpoint",
    "MvrvEndpoint",
    "NvtEndpoint",
    "OhlcvEndpoint",
    "PiCycleEndpoint",
    "StatsEndpoint",
    "StockToFlowEndpoint",
    "TechnicalsEndpoint",
    "build_endpoints",
]
