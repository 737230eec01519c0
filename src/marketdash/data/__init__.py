"""Market data layer.

Provides candle models, upstream payload validation, the paginated candle
fetcher, and the on-chain volume client.
"""

from marketdash.data.fetcher import CandleFetcher
from marketdash.data.models import Candle, TxVolumePoint
from marketdash.data.onchain import BlockchainInfoClient
from marketdash.data.parsing import parse_ohlcv

__all__ = [
    "BlockchainInfoClient",
    "Candle",
    "CandleFetcher",
    "TxVolumePoint",
    "parse_ohlcv",
]
