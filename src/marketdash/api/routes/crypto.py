"""JSON API endpoints for crypto analytics (heatmap, MVRV, Pi-Cycle, S2F, NVT, charts)."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from marketdash.config import DEFAULT_SYMBOL
from marketdash.exceptions import InsufficientData, MarketDataError, UpstreamUnavailable
from marketdash.logging import request_context

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/crypto")


async def _serve(request: Request, endpoint_name: str, **params: Any) -> JSONResponse:
    """Run an analytics endpoint and map failures to JSON error responses.

    InsufficientData -> 404, UpstreamUnavailable (incl. malformed payloads) -> 502,
    anything else -> 500. No failure path writes to the cache.
    """
    endpoint = request.app.state.endpoints[endpoint_name]
    with request_context(endpoint=endpoint_name, **params):
        try:
            payload = await endpoint.get(**params)
        except InsufficientData as e:
            log.info("insufficient_data", error=str(e))
            return JSONResponse(content={"error": str(e)}, status_code=404)
        except UpstreamUnavailable as e:
            log.error("upstream_unavailable", error=str(e))
            return JSONResponse(content={"error": str(e)}, status_code=502)
        except MarketDataError as e:
            log.error("market_data_error", error=str(e))
            return JSONResponse(content={"error": str(e)}, status_code=500)
        except Exception:
            log.exception("endpoint_failed")
            return JSONResponse(
                content={"error": f"Internal error computing {endpoint_name}"},
                status_code=500,
            )
    return JSONResponse(content=payload)


@router.get("/heatmap")
async def get_heatmap(
    request: Request, symbol: str = DEFAULT_SYMBOL, exchange: str | None = None
) -> JSONResponse:
    """200-week moving average heatmap rows."""
    return await _serve(request, "heatmap", symbol=symbol, exchange=exchange)


@router.get("/mvrv")
async def get_mvrv(
    request: Request, symbol: str = DEFAULT_SYMBOL, exchange: str | None = None
) -> JSONResponse:
    """STH-MVRV and MVRV Z-score, sampled monthly."""
    return await _serve(request, "mvrv", symbol=symbol, exchange=exchange)


@router.get("/pi-cycle")
async def get_pi_cycle(
    request: Request, symbol: str = DEFAULT_SYMBOL, exchange: str | None = None
) -> JSONResponse:
    """Pi-Cycle Top indicator rows with zone classification."""
    return await _serve(request, "pi-cycle", symbol=symbol, exchange=exchange)


@router.get("/s2f")
async def get_stock_to_flow(
    request: Request, symbol: str = DEFAULT_SYMBOL, exchange: str | None = None
) -> JSONResponse:
    """Stock-to-flow model price against actual price, plus halving markers."""
    return await _serve(request, "s2f", symbol=symbol, exchange=exchange)


@router.get("/nvt")
async def get_nvt(
    request: Request, symbol: str = DEFAULT_SYMBOL, exchange: str | None = None
) -> JSONResponse:
    """NVT signal with rolling standard-deviation bands."""
    return await _serve(request, "nvt", symbol=symbol, exchange=exchange)


@router.get("/ohlcv")
async def get_ohlcv(
    request: Request,
    symbol: str = DEFAULT_SYMBOL,
    window: str = "1m",
    exchange: str | None = None,
) -> JSONResponse:
    """Candles for a chart window: 1d, 1w, 1m, 3m, 6m, 1y."""
    return await _serve(request, "ohlcv", symbol=symbol, exchange=exchange, window=window)


@router.get("/technicals")
async def get_technicals(
    request: Request,
    symbol: str = DEFAULT_SYMBOL,
    window: str = "1m",
    indicators: str | None = None,
    exchange: str | None = None,
) -> JSONResponse:
    """Chart window candles plus overlay series (ma, ema, bollinger, ichimoku, macd, rsi)."""
    return await _serve(
        request,
        "technicals",
        symbol=symbol,
        exchange=exchange,
        window=window,
        indicators=indicators,
    )


@router.get("/stats")
async def get_stats(
    request: Request, symbol: str = DEFAULT_SYMBOL, exchange: str | None = None
) -> JSONResponse:
    """Ticker summary with MA20, RSI14 and 30-day realized volatility."""
    return await _serve(request, "stats", symbol=symbol, exchange=exchange)
