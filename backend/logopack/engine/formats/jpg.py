"""JPG at each requested resolution, flattened onto white."""

from __future__ import annotations

from logopack.engine.context import ExportContext
from logopack.engine.registry import exporter
from logopack.models.requests import FormatTag
from logopack.raster.renderer import BASE_DPI, encode_jpeg


@exporter(format=FormatTag.JPG, extension="jpg", per_resolution=True, description="JPG on white")
def export_jpg(ctx: ExportContext, dpi: float | None) -> bytes:
    pixels = ctx.renderer.rasterize_at(ctx.colored_image(), dpi or BASE_DPI)
    return encode_jpeg(pixels, quality=ctx.settings.jpeg_quality)
