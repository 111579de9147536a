"""PNG at each requested resolution."""

from __future__ import annotations

from logopack.engine.context import ExportContext
from logopack.engine.registry import exporter
from logopack.models.requests import FormatTag
from logopack.raster.renderer import BASE_DPI, encode_png


@exporter(format=FormatTag.PNG, extension="png", per_resolution=True, description="Transparent PNG")
def export_png(ctx: ExportContext, dpi: float | None) -> bytes:
    pixels = ctx.renderer.rasterize_at(ctx.colored_image(), dpi or BASE_DPI)
    return encode_png(pixels)
