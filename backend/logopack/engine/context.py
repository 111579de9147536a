"""ExportContext — everything the exporters need for one color variant."""

from __future__ import annotations

from dataclasses import dataclass, field

from logopack.color.transform import ColorSpec
from logopack.config import Settings
from logopack.models.artifacts import SourceDocument
from logopack.raster.renderer import RasterRenderer
from logopack.raster.surface import DecodedImage
from logopack.svg.document import SvgElement, serialize_svg
from logopack.svg.recolor import recolor, recolor_with


@dataclass
class ExportContext:
    """Shared state for every (format, resolution) cell of one color.

    ``colored`` follows the configured recolor strategy and feeds the SVG
    passthrough and rasterization; ``rewritten`` is always the attribute
    rewrite and feeds the vector writers.
    """

    source: SourceDocument
    root: SvgElement
    spec: ColorSpec
    renderer: RasterRenderer
    settings: Settings
    colored: SvgElement
    rewritten: SvgElement
    temp_path: str | None = None

    _colored_svg: str | None = field(default=None, repr=False)
    _colored_image: DecodedImage | None = field(default=None, repr=False)
    _source_image: DecodedImage | None = field(default=None, repr=False)

    @classmethod
    def build(
        cls,
        source: SourceDocument,
        root: SvgElement,
        spec: ColorSpec,
        renderer: RasterRenderer,
        settings: Settings,
    ) -> "ExportContext":
        rewritten = recolor(root, spec)
        colored = rewritten if settings.recolor_strategy != "filter" else recolor_with("filter", root, spec)
        return cls(
            source=source,
            root=root,
            spec=spec,
            renderer=renderer,
            settings=settings,
            colored=colored,
            rewritten=rewritten,
        )

    @property
    def colored_svg(self) -> str:
        if self._colored_svg is None:
            self._colored_svg = serialize_svg(self.colored)
        return self._colored_svg

    def colored_image(self) -> DecodedImage:
        """The colored SVG, decoded once per color (rendered from the temp file)."""
        if self._colored_image is None:
            self._colored_image = self.renderer.decode(self.colored_svg.encode("utf-8"), self.temp_path)
        return self._colored_image

    def source_image(self) -> DecodedImage:
        """The uncolored upload, for pixel-level recoloring."""
        if self._source_image is None:
            self._source_image = self.renderer.decode(self.source.data)
        return self._source_image
