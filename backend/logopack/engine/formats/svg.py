"""SVG passthrough: the colored document, or the upload untouched for Original."""

from __future__ import annotations

from logopack.engine.context import ExportContext
from logopack.engine.registry import exporter
from logopack.models.requests import FormatTag


@exporter(format=FormatTag.SVG, extension="svg", vector_only=True, description="Recolored SVG")
def export_svg(ctx: ExportContext, dpi: float | None = None) -> bytes:
    if ctx.spec.is_identity:
        return ctx.source.data
    return ctx.colored_svg.encode("utf-8")
