"""In-process CairoSVG backend."""

from __future__ import annotations

import logging

from logopack.backends.base import AREA_PAGE, EXPORT_TYPES
from logopack.errors import BackendUnavailableError, ConversionError

logger = logging.getLogger(__name__)

# CairoSVG's reference resolution: 1 user unit = 1 px at 96 dpi
CAIRO_BASE_DPI = 96.0


def _cairosvg():
    try:
        import cairosvg
    except (ImportError, OSError) as e:
        # OSError: the package is installed but libcairo is not
        raise BackendUnavailableError(f"CairoSVG is not usable: {e}") from e
    return cairosvg


class CairoSvgBackend:
    """Same contract as the CLI backend, rendered with cairosvg in this process.

    Cairo always exports the page area; ``area`` is accepted for
    interface compatibility.
    """

    name = "cairosvg"

    def version(self) -> str:
        module = _cairosvg()
        return f"CairoSVG {getattr(module, '__version__', 'unknown')}"

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
        cairosvg = _cairosvg()
        converters = {
            "png": cairosvg.svg2png,
            "pdf": cairosvg.svg2pdf,
            "eps": cairosvg.svg2eps,
            "svg": cairosvg.svg2svg,
        }
        if export_type not in EXPORT_TYPES:
            raise ConversionError(f"CairoSVG cannot export {export_type!r}")

        kwargs: dict[str, object] = {"url": input_path, "write_to": output_path}
        if export_type == "png":
            if width and height:
                kwargs["output_width"] = width
                kwargs["output_height"] = height
            elif dpi:
                kwargs["scale"] = dpi / CAIRO_BASE_DPI
        try:
            converters[export_type](**kwargs)
        except Exception as e:
            raise ConversionError(
                f"CairoSVG failed to export {export_type}: {e}",
                context={"export_type": export_type},
            ) from e
        logger.debug("CairoSVG wrote %s", output_path)
        return output_path
