"""Favicon: pixel-level recolor of the uncolored source, one small PNG."""

from __future__ import annotations

from logopack.engine.context import ExportContext
from logopack.engine.registry import exporter
from logopack.models.requests import FormatTag
from logopack.raster.renderer import encode_ico


@exporter(format=FormatTag.ICO, extension="ico", description="32×32 PNG favicon")
def export_ico(ctx: ExportContext, dpi: float | None = None) -> bytes:
    renderer = ctx.renderer
    pixels = renderer.apply_color(renderer.natural(ctx.source_image()), ctx.spec)
    return encode_ico(pixels, size=ctx.settings.ico_size)
