"""processPackage — validate the upload, assemble every cell, zip the result."""

from __future__ import annotations

import logging
import threading
import time

from logopack.backends.base import RenderBackend
from logopack.backends.loader import check_backend
from logopack.config import Settings
from logopack.engine.assembler import PackageAssembler
from logopack.engine.packager import build_zip
from logopack.engine.registry import ExporterRegistry
from logopack.errors import (
    BackendUnavailableError,
    FileTooLargeError,
    InvalidInputError,
    MissingFileError,
    UnsupportedInputError,
)
from logopack.models.artifacts import SourceDocument
from logopack.models.requests import ExportRequest
from logopack.raster.renderer import RasterRenderer
from logopack.raster.surface import BackendSurface

logger = logging.getLogger(__name__)


def load_source(data: bytes | None, filename: str | None, mime_type: str | None,
                max_bytes: int | None = None) -> SourceDocument:
    """Accept only well-formed SVG uploads."""
    if not data:
        raise MissingFileError("No file uploaded")
    if max_bytes is not None and len(data) > max_bytes:
        raise FileTooLargeError(f"File exceeds {max_bytes // (1024 * 1024)} MB")
    source = SourceDocument.load(data, filename, mime_type)
    if not source.declared_svg:
        raise UnsupportedInputError(
            f"Only SVG files are supported (got {source.mime_type or source.extension or 'unknown'})"
        )
    if not source.is_svg:
        raise InvalidInputError("Invalid SVG: the file is not well-formed SVG markup")
    return source


def process_package(
    data: bytes | None,
    filename: str | None,
    mime_type: str | None,
    request: ExportRequest,
    *,
    settings: Settings,
    backend: RenderBackend,
    registry: ExporterRegistry | None = None,
    cancel: threading.Event | None = None,
) -> bytes:
    """Run one upload end to end and return the ZIP archive bytes.

    Setting ``cancel`` stops the job before its next color variant.
    """
    start = time.perf_counter()
    source = load_source(data, filename, mime_type, settings.max_upload_mb * 1024 * 1024)

    status = check_backend(backend)
    if not status.available:
        raise BackendUnavailableError(status.message or f"{status.name} is not available")

    renderer = RasterRenderer(BackendSurface(backend, settings.work_dir), fallback_size=settings.fallback_size)
    assembler = PackageAssembler(renderer, settings, registry=registry)
    report = assembler.run(source, request, cancel=cancel)
    archive = build_zip(report.artifacts)

    logger.info(
        "Package for %r: %d files, %d bytes, %.0fms (backend %s)",
        request.brand_name,
        len(report.artifacts),
        len(archive),
        (time.perf_counter() - start) * 1000,
        status.version or status.name,
    )
    return archive
