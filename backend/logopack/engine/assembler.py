"""PackageAssembler — the colors × formats × resolutions cross-product.

Order is color-major, then format (request order), then resolution. Every
cell is isolated: a failing cell is logged and skipped, the rest still
ship. Only a missing rendering backend aborts the job.
"""

from __future__ import annotations

import logging
import os
import re
import threading
import time
import uuid
from dataclasses import dataclass, field

from logopack.config import Settings
from logopack.engine.context import ExportContext
from logopack.engine.registry import ExporterRegistry, get_registry
from logopack.errors import BackendUnavailableError, JobTimeoutError
from logopack.models.artifacts import OutputArtifact, SourceDocument
from logopack.models.requests import ExportRequest
from logopack.raster.renderer import RasterRenderer
from logopack.svg.document import parse_svg

logger = logging.getLogger(__name__)

_UNSAFE_NAME_RE = re.compile(r"[^A-Za-z0-9 _.-]+")


def safe_brand(name: str) -> str:
    cleaned = _UNSAFE_NAME_RE.sub("_", name).strip(" ._")
    return cleaned or "logo"


def artifact_filename(brand: str, color_label: str, extension: str, resolution: str | None = None) -> str:
    """``{brand}_{color}[_{resolution}].{ext}``"""
    stem = f"{brand}_{color_label}"
    if resolution:
        stem += f"_{resolution}"
    return f"{stem}.{extension.lower()}"


@dataclass
class AssemblyReport:
    artifacts: list[OutputArtifact] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    cells_attempted: int = 0
    elapsed_ms: float = 0.0


class PackageAssembler:
    """Drives every exporter cell for one upload."""

    def __init__(
        self,
        renderer: RasterRenderer,
        settings: Settings,
        registry: ExporterRegistry | None = None,
    ) -> None:
        self.renderer = renderer
        self.settings = settings
        self.registry = registry or get_registry()

    def assemble(self, source: SourceDocument, request: ExportRequest) -> list[OutputArtifact]:
        return self.run(source, request).artifacts

    def run(self, source: SourceDocument, request: ExportRequest,
            cancel: threading.Event | None = None) -> AssemblyReport:
        """Produce every cell; ``cancel`` is checked before each color."""
        start = time.perf_counter()
        report = AssemblyReport()
        root = parse_svg(source.data)
        brand = safe_brand(request.brand_name)
        dpi_cells = request.dpi_cells()

        for spec in request.color_specs():
            if cancel is not None and cancel.is_set():
                logger.warning("Job cancelled after %d artifacts", len(report.artifacts))
                raise JobTimeoutError("Processing timed out")
            ctx = ExportContext.build(source, root, spec, self.renderer, self.settings)
            ctx.temp_path = os.path.join(self.settings.work_dir, f"logo-{uuid.uuid4()}.svg")
            try:
                with open(ctx.temp_path, "w", encoding="utf-8") as fh:
                    fh.write(ctx.colored_svg)
                for fmt in request.formats:
                    if not self.registry.has(fmt):
                        logger.warning("No exporter registered for %s", fmt.value)
                        continue
                    exp = self.registry.get(fmt)
                    if exp.vector_only and not source.is_svg:
                        logger.info("Skipping %s for non-SVG input", fmt.value)
                        continue
                    cells: list[tuple[str | None, float | None]] = list(dpi_cells) if exp.per_resolution else [(None, None)]
                    for resolution, dpi in cells:
                        report.cells_attempted += 1
                        self._run_cell(ctx, exp, brand, resolution, dpi, report)
            finally:
                if ctx.temp_path and os.path.exists(ctx.temp_path):
                    os.remove(ctx.temp_path)

        report.elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Assembled %d/%d artifacts (%d failed) in %.0fms",
            len(report.artifacts),
            report.cells_attempted,
            len(report.errors),
            report.elapsed_ms,
        )
        return report

    def _run_cell(self, ctx, exp, brand: str, resolution: str | None, dpi: float | None,
                  report: AssemblyReport) -> None:
        filename = artifact_filename(brand, ctx.spec.label, exp.extension, resolution)
        cell = f"{exp.format.value}/{filename}"
        t0 = time.perf_counter()
        try:
            data = exp.fn(ctx, dpi)
        except BackendUnavailableError:
            raise
        except Exception as e:
            report.errors[cell] = str(e)
            logger.warning(
                "Cell failed: format=%s color=%s resolution=%s: %s",
                exp.format.value,
                ctx.spec.label,
                resolution or "-",
                e,
            )
            return
        if not data:
            report.errors[cell] = "empty output"
            logger.warning("Cell produced no data: %s", cell)
            return
        report.artifacts.append(OutputArtifact(folder=exp.format.value, filename=filename, data=data))
        logger.debug("  %s: %d bytes in %.1fms", cell, len(data), (time.perf_counter() - t0) * 1000)
