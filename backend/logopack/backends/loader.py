"""Backend selection and availability check."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from logopack.backends.base import RenderBackend
from logopack.backends.cairo import CairoSvgBackend
from logopack.backends.inkscape import InkscapeBackend
from logopack.config import Settings
from logopack.errors import BackendUnavailableError, ConversionError

logger = logging.getLogger(__name__)


@dataclass
class BackendStatus:
    name: str
    available: bool
    version: str = ""
    message: str = ""


def load_backend(settings: Settings) -> RenderBackend:
    name = settings.render_backend.strip().lower()
    if name == "inkscape":
        return InkscapeBackend(settings.inkscape_path, timeout_s=settings.backend_timeout_s)
    if name == "cairosvg":
        return CairoSvgBackend()
    raise BackendUnavailableError(f"Unknown render backend {settings.render_backend!r}")


def check_backend(backend: RenderBackend) -> BackendStatus:
    """Probe the backend by asking for its version."""
    try:
        version = backend.version()
    except (BackendUnavailableError, ConversionError) as e:
        logger.warning("Render backend %s unavailable: %s", backend.name, e.message)
        return BackendStatus(name=backend.name, available=False, message=e.message)
    return BackendStatus(name=backend.name, available=True, version=version)
