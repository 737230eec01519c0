"""Exchange client layer -- market data via ccxt async."""

from marketdash.exchange.ccxt_client import CcxtExchangeClient
from marketdash.exchange.client import ExchangeClient
from marketdash.exchange.registry import ExchangeRegistry

__all__ = ["CcxtExchangeClient", "ExchangeClient", "ExchangeRegistry"]
