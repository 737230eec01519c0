"""Liveness endpoint."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/health")
async def get_health(request: Request) -> JSONResponse:
    registry = request.app.state.registry
    return JSONResponse(
        content={
            "status": "ok",
            "exchanges": registry.names,
            "primaryExchange": registry.primary,
        }
    )
