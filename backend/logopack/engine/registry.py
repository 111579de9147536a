"""Exporter registry — each output format is a standalone function registered via decorator.

Usage:
    @exporter(format=FormatTag.PNG, extension="png", per_resolution=True)
    def export_png(ctx: ExportContext, dpi: float | None) -> bytes:
        return encode_png(ctx.renderer.rasterize_at(ctx.colored_image(), dpi))

Adding a new format = creating one module with the decorator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from logopack.models.requests import FormatTag

if TYPE_CHECKING:
    from logopack.engine.context import ExportContext

logger = logging.getLogger(__name__)

ExportFn = Callable[["ExportContext", "float | None"], bytes]


@dataclass
class ExporterSpec:
    format: FormatTag
    extension: str
    fn: ExportFn
    per_resolution: bool = False
    vector_only: bool = False
    description: str = ""


class ExporterRegistry:
    """Singleton registry of all format exporters."""

    def __init__(self) -> None:
        self._exporters: dict[FormatTag, ExporterSpec] = {}

    def register(self, spec: ExporterSpec) -> None:
        if spec.format in self._exporters:
            raise ValueError(f"Duplicate exporter for format: {spec.format.value}")
        self._exporters[spec.format] = spec
        logger.debug("Registered exporter %s (.%s)", spec.format.value, spec.extension)

    def get(self, fmt: FormatTag) -> ExporterSpec:
        return self._exporters[fmt]

    def has(self, fmt: FormatTag) -> bool:
        return fmt in self._exporters

    @property
    def count(self) -> int:
        return len(self._exporters)


# Module-level singleton
_registry = ExporterRegistry()


def get_registry() -> ExporterRegistry:
    return _registry


def exporter(
    *,
    format: FormatTag,
    extension: str,
    per_resolution: bool = False,
    vector_only: bool = False,
    description: str = "",
):
    """Decorator to register a format exporter."""

    def decorator(fn: ExportFn):
        _registry.register(ExporterSpec(
            format=format,
            extension=extension.lower(),
            fn=fn,
            per_resolution=per_resolution,
            vector_only=vector_only,
            description=description,
        ))
        return fn

    return decorator
