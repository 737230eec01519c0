"""Custom exceptions for the market analytics service.

All data-layer and analytics exceptions live here so the exchange adapters,
fetchers and HTTP routes can share them without circular imports.
"""


class MarketDataError(Exception):
    """Base exception for all market data errors."""


class UpstreamUnavailable(MarketDataError):
    """Raised when a candle or on-chain source cannot be reached or rejects the request."""


class MalformedUpstreamPayload(UpstreamUnavailable):
    """Raised when an upstream response does not have the expected shape."""


class InsufficientData(MarketDataError):
    """Raised when a series is too short for the requested metric."""
