"""Health check + rendering backend diagnostic."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from logopack.backends.base import RenderBackend
from logopack.backends.loader import check_backend
from logopack.dependencies import get_backend
from logopack.engine.registry import get_registry
from logopack.models.responses import BackendStatusResponse, HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        exporters_registered=get_registry().count,
    )


@router.get("/backend", response_model=BackendStatusResponse)
async def backend_status(backend: RenderBackend = Depends(get_backend)):
    status = check_backend(backend)
    body = BackendStatusResponse(
        backend=status.name,
        available=status.available,
        version=status.version,
        message=status.message,
    )
    if not status.available:
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
