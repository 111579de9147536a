"""POST /api/process-logo — upload an SVG, download the logo package ZIP."""

from __future__ import annotations

import asyncio
import json
import logging
import threading

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response
from pydantic import ValidationError

from logopack.backends.base import RenderBackend
from logopack.config import Settings
from logopack.dependencies import get_backend, get_settings
from logopack.engine.assembler import safe_brand
from logopack.engine.packager import package_filename
from logopack.engine.pipeline import process_package
from logopack.errors import InvalidRequestError, JobTimeoutError, MissingFileError
from logopack.models.requests import ExportRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _parse_request(raw: str | None) -> ExportRequest:
    if not raw:
        raise InvalidRequestError("Missing export settings")
    try:
        return ExportRequest.model_validate(json.loads(raw))
    except json.JSONDecodeError as e:
        raise InvalidRequestError(f"Export settings are not valid JSON: {e.msg}") from e
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        raise InvalidRequestError(f"Invalid export settings: {messages}") from e


@router.post("/process-logo")
async def process_logo(
    logo: UploadFile | None = File(None),
    settings_json: str | None = Form(None, alias="settings"),
    app_settings: Settings = Depends(get_settings),
    backend: RenderBackend = Depends(get_backend),
):
    if logo is None:
        raise MissingFileError("No file uploaded")
    request = _parse_request(settings_json)
    data = await logo.read()
    logger.info(
        "Processing %s (%d bytes): formats=%s colors=%s resolutions=%s",
        logo.filename,
        len(data),
        [f.value for f in request.formats],
        request.colors,
        request.resolutions,
    )

    # The worker thread cannot be interrupted; on timeout it stops at the next color
    cancel = threading.Event()
    try:
        archive = await asyncio.wait_for(
            asyncio.to_thread(
                process_package,
                data,
                logo.filename,
                logo.content_type,
                request,
                settings=app_settings,
                backend=backend,
                cancel=cancel,
            ),
            timeout=app_settings.request_timeout_s,
        )
    except asyncio.TimeoutError:
        cancel.set()
        logger.error("Processing %s timed out after %.0fs", logo.filename, app_settings.request_timeout_s)
        raise JobTimeoutError("Processing timed out") from None

    filename = package_filename(safe_brand(request.brand_name))
    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
