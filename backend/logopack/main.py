"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from logopack.config import settings
from logopack.errors import LogoPackError
from logopack.models.responses import ErrorResponse

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.logopack_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Logo Package",
        description="SVG logo recoloring and multi-format export packages",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    # Import all format modules to trigger registration
    _register_exporters()
    logger.info("Creating app (env=%s, render backend=%s)", settings.logopack_env, settings.render_backend)

    @app.exception_handler(LogoPackError)
    async def _logopack_error(request: Request, exc: LogoPackError) -> JSONResponse:
        logger.warning("%s %s → %d %s: %s", request.method, request.url.path, exc.status_code, exc.code, exc.message)
        body = ErrorResponse(code=exc.code, message=exc.message)
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        body = ErrorResponse(code="PROCESSING_ERROR", message=f"Error processing logo: {exc}")
        return JSONResponse(status_code=500, content=body.model_dump())

    from logopack.api.router import api_router

    app.include_router(api_router)

    return app


def _register_exporters() -> None:
    """Import all format modules so @exporter decorators fire."""
    import importlib
    import pkgutil

    package = importlib.import_module("logopack.engine.formats")
    for _, module_name, _ in pkgutil.iter_modules(package.__path__):
        importlib.import_module(f"logopack.engine.formats.{module_name}")


app = create_app()
