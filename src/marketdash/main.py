"""Entry point for the market analytics API.

Wires the exchange registry, the on-chain client and the cached analytics
endpoints into a FastAPI app, then serves it with uvicorn's programmatic API.

Component wiring order (in build_components):
1. ExchangeRegistry (one ccxt client per enabled exchange)
2. BlockchainInfoClient (on-chain transaction volume for NVT)
3. Analytics endpoints, each with its own TTLCache
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from marketdash.analytics import build_endpoints
from marketdash.api.app import create_app
from marketdash.config import AppSettings
from marketdash.data.onchain import BlockchainInfoClient
from marketdash.exchange.registry import ExchangeRegistry
from marketdash.logging import get_logger, setup_logging


def build_components(settings: AppSettings) -> dict[str, Any]:
    """Build every long-lived component from settings.

    Note: Does NOT connect to exchanges -- that happens in the lifespan.

    Returns:
        Dict with ``registry``, ``onchain`` and ``endpoints``.
    """
    registry = ExchangeRegistry.from_settings(settings.exchange)
    onchain = BlockchainInfoClient(settings.onchain)
    endpoints = build_endpoints(settings, registry, onchain)
    return {"registry": registry, "onchain": onchain, "endpoints": endpoints}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect upstream clients on startup and release them on shutdown."""
    logger = get_logger("marketdash.main")
    components = app.state.components

    app.state.registry = components["registry"]
    app.state.endpoints = components["endpoints"]

    await components["registry"].connect_all()
    logger.info(
        "lifespan_started",
        exchanges=components["registry"].names,
        endpoints=sorted(components["endpoints"]),
    )

    yield

    await components["registry"].close_all()
    await components["onchain"].close()
    logger.info("marketdash_stopped")


async def run() -> None:
    """Load settings, wire components and serve the API until shutdown."""
    settings = AppSettings()
    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("marketdash.main")

    components = build_components(settings)

    app = create_app(lifespan=lifespan)
    app.state.settings = settings
    app.state.components = components

    logger.info(
        "starting_api_server",
        host=settings.server.host,
        port=settings.server.port,
        primary_exchange=settings.exchange.primary,
    )

    config = uvicorn.Config(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level="warning",  # Suppress uvicorn access logs
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
