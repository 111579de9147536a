"""EPS, derived from the colored SVG (never from the PDF)."""

from __future__ import annotations

from logopack.engine.context import ExportContext
from logopack.engine.registry import exporter
from logopack.export.eps import to_eps
from logopack.models.requests import FormatTag


@exporter(format=FormatTag.EPS, extension="eps", vector_only=True, description="Encapsulated PostScript")
def export_eps(ctx: ExportContext, dpi: float | None = None) -> bytes:
    return to_eps(ctx.rewritten)
