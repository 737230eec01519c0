"""FastAPI application factory for the analytics API."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from marketdash.api.routes import crypto, health


def create_app(lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to connect and close upstream clients.

    Returns:
        FastAPI application with all routers mounted under /api. Route
        handlers expect ``app.state.endpoints`` and ``app.state.registry``
        to be set by the caller.
    """
    app = FastAPI(
        title="Market Analytics API",
        lifespan=lifespan,
    )

    app.state.endpoints = {}
    app.state.registry = None

    app.include_router(crypto.router, prefix="/api")
    app.include_router(health.router, prefix="/api")

    return app
