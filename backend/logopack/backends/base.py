"""Rendering backend contract: ``render(input_path, export_type, output_path, dpi)``."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

EXPORT_TYPES = ("svg", "png", "pdf", "eps")

# Export exactly the drawing's bounding box, or the whole page
AREA_DRAWING = "drawing"
AREA_PAGE = "page"


@runtime_checkable
class RenderBackend(Protocol):
    name: str

    def version(self) -> str:
        """Backend version string. Raises BackendUnavailableError when not installed."""
        ...

    def render(
        self,
        input_path: str,
        export_type: str,
        output_path: str,
        dpi: float | None = None,
        *,
        area: str = AREA_PAGE,
        width: int | None = None,
        height: int | None = None,
    ) -> str:
        """Write ``input_path`` as ``export_type`` to ``output_path`` and return the output path."""
        ...
