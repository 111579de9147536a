"""PDF: vector redraw of the rewritten SVG, or an embedded PNG in raster mode."""

from __future__ import annotations

from logopack.engine.context import ExportContext
from logopack.engine.registry import exporter
from logopack.export.pdf import pixels_to_pdf, to_pdf
from logopack.models.requests import FormatTag


@exporter(format=FormatTag.PDF, extension="pdf", description="Single-page PDF")
def export_pdf(ctx: ExportContext, dpi: float | None = None) -> bytes:
    page = ctx.settings.pdf_page_size
    if ctx.settings.pdf_mode == "raster":
        # Natural-size render of the upload, recolored per pixel
        renderer = ctx.renderer
        pixels = renderer.apply_color(renderer.natural(ctx.source_image()), ctx.spec)
        return pixels_to_pdf(pixels, page=page)
    return to_pdf(ctx.rewritten, page=page)
