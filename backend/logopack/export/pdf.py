"""VectorExporter (PDF) — one fixed-size page drawn with reportlab.

Vector mode redraws the extracted geometry with canvas path primitives;
raster mode embeds a colored PNG. Both scale uniformly to 80% of the page
and center the artwork.
"""

from __future__ import annotations

import io
import logging

import numpy as np
from numpy.typing import NDArray
from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from logopack.color.transform import ColorSpec
from logopack.color.values import parse_rgba, url_reference
from logopack.svg.document import SvgElement, parse_svg
from logopack.svg.geometry import GeometryElement, document_size, extract_geometry
from logopack.svg.recolor import recolor
from logopack.utils.geometry import fit_into, is_identity

logger = logging.getLogger(__name__)

# Cubic Bézier quarter-circle constant: 4/3 * (sqrt(2) - 1)
KAPPA = 0.5522848

DEFAULT_PAGE = 600.0


def _new_canvas(buf: io.BytesIO, page: float) -> canvas.Canvas:
    c = canvas.Canvas(buf, pagesize=(page, page), invariant=1)
    c.setTitle("Vector Logo")
    c.setCreator("Logo Package Generator")
    return c


def _rgba(value: str | None) -> tuple[tuple[float, float, float], float]:
    """Paint value → (0..1 RGB, alpha). Unresolved references draw black."""
    if value is None or url_reference(value) is not None:
        return (0.0, 0.0, 0.0), 1.0
    parsed = parse_rgba(value)
    if parsed is None:
        logger.debug("Unrecognized PDF paint %r, using black", value)
        return (0.0, 0.0, 0.0), 1.0
    rgb, alpha = parsed
    return (rgb[0] / 255.0, rgb[1] / 255.0, rgb[2] / 255.0), alpha


def _ellipse_path(path, cx: float, cy: float, rx: float, ry: float) -> None:
    kx, ky = rx * KAPPA, ry * KAPPA
    path.moveTo(cx + rx, cy)
    path.curveTo(cx + rx, cy + ky, cx + kx, cy + ry, cx, cy + ry)
    path.curveTo(cx - kx, cy + ry, cx - rx, cy + ky, cx - rx, cy)
    path.curveTo(cx - rx, cy - ky, cx - kx, cy - ry, cx, cy - ry)
    path.curveTo(cx + kx, cy - ry, cx + rx, cy - ky, cx + rx, cy)
    path.close()


def _rounded_rect_path(path, x: float, y: float, w: float, h: float, rx: float, ry: float) -> None:
    kx, ky = rx * KAPPA, ry * KAPPA
    path.moveTo(x + rx, y)
    path.lineTo(x + w - rx, y)
    path.curveTo(x + w - rx + kx, y, x + w, y + ry - ky, x + w, y + ry)
    path.lineTo(x + w, y + h - ry)
    path.curveTo(x + w, y + h - ry + ky, x + w - rx + kx, y + h, x + w - rx, y + h)
    path.lineTo(x + rx, y + h)
    path.curveTo(x + rx - kx, y + h, x, y + h - ry + ky, x, y + h - ry)
    path.lineTo(x, y + ry)
    path.curveTo(x, y + ry - ky, x + rx - kx, y, x + rx, y)
    path.close()


def _build_path(c: canvas.Canvas, geom: GeometryElement):
    path = c.beginPath()
    p = geom.params
    if geom.kind == "rect":
        if p["rx"] > 0 and p["ry"] > 0:
            _rounded_rect_path(path, p["x"], p["y"], p["width"], p["height"], p["rx"], p["ry"])
        else:
            path.rect(p["x"], p["y"], p["width"], p["height"])
    elif geom.kind == "circle":
        _ellipse_path(path, p["cx"], p["cy"], p["r"], p["r"])
    elif geom.kind == "ellipse":
        _ellipse_path(path, p["cx"], p["cy"], p["rx"], p["ry"])
    elif geom.kind == "line":
        path.moveTo(p["x1"], p["y1"])
        path.lineTo(p["x2"], p["y2"])
    else:
        for seg in geom.segments:
            if seg.op == "M":
                path.moveTo(*seg.points[0])
            elif seg.op == "L":
                path.lineTo(*seg.points[0])
            elif seg.op == "C":
                (x1, y1), (x2, y2), (x3, y3) = seg.points
                path.curveTo(x1, y1, x2, y2, x3, y3)
            elif seg.op == "Z":
                path.close()
    return path


def _draw_element(c: canvas.Canvas, geom: GeometryElement) -> bool:
    fill = geom.has_fill and geom.kind != "line"
    stroke = geom.has_stroke
    if not fill and not stroke:
        return False
    c.saveState()
    try:
        if not is_identity(geom.transform):
            c.transform(*geom.transform)
        if fill:
            rgb, alpha = _rgba(geom.fill)
            c.setFillColorRGB(*rgb, alpha=alpha * geom.fill_opacity * geom.opacity)
        if stroke:
            rgb, alpha = _rgba(geom.stroke)
            c.setStrokeColorRGB(*rgb, alpha=alpha * geom.stroke_opacity * geom.opacity)
            c.setLineWidth(geom.stroke_width)
        c.drawPath(_build_path(c, geom), stroke=int(stroke), fill=int(fill))
    finally:
        c.restoreState()
    return True


def _draw_fallback_rect(c: canvas.Canvas, page: float) -> None:
    c.saveState()
    c.setFillColorRGB(0.5, 0.5, 0.5, alpha=0.5)
    c.rect(page * 0.25, page * 0.25, page * 0.5, page * 0.5, stroke=0, fill=1)
    c.restoreState()


def text_only_pdf(message: str, page: float = DEFAULT_PAGE) -> bytes:
    """Minimal one-page PDF carrying a note instead of the artwork."""
    buf = io.BytesIO()
    c = _new_canvas(buf, page)
    c.setFont("Helvetica", 12)
    c.drawCentredString(page / 2.0, page / 2.0, message)
    c.showPage()
    c.save()
    return buf.getvalue()


def svg_to_pdf(root: SvgElement, page: float = DEFAULT_PAGE) -> bytes:
    """Redraw an already-colored document's geometry onto one page."""
    size = document_size(root)
    scale, offset_x, offset_y = fit_into(size.width, size.height, page, page)

    buf = io.BytesIO()
    c = _new_canvas(buf, page)
    c.saveState()
    # Page space (y up) → SVG user space (y down)
    c.translate(offset_x, page - offset_y)
    c.scale(scale, -scale)
    c.translate(-size.min_x, -size.min_y)

    drawn = 0
    elements = extract_geometry(root)
    for geom in elements:
        try:
            if _draw_element(c, geom):
                drawn += 1
        except Exception as e:
            logger.warning("PDF: skipped <%s> %s: %s", geom.kind, geom.element_id or "", e)
    c.restoreState()

    if drawn == 0:
        _draw_fallback_rect(c, page)
    c.showPage()
    c.save()
    logger.debug("PDF: %d of %d elements drawn", drawn, len(elements))
    return buf.getvalue()


def to_pdf(svg: str | bytes | SvgElement, spec: ColorSpec | None = None, page: float = DEFAULT_PAGE) -> bytes:
    """Recolor and redraw as PDF. Falls back to a text-only page on failure."""
    try:
        root = svg if isinstance(svg, SvgElement) else parse_svg(svg)
        if spec is not None:
            root = recolor(root, spec)
        return svg_to_pdf(root, page)
    except Exception:
        logger.exception("PDF vector conversion failed, writing text-only PDF")
        return text_only_pdf("Logo could not be converted to PDF. See the SVG and EPS files.", page)


def pixels_to_pdf(pixels: NDArray[np.uint8], page: float = DEFAULT_PAGE) -> bytes:
    """Embed an RGBA pixel buffer as PNG, scaled and centered like the vector path."""
    try:
        height, width = pixels.shape[:2]
        scale, offset_x, offset_y = fit_into(float(width), float(height), page, page)
        png = io.BytesIO()
        Image.fromarray(pixels).save(png, format="PNG")
        png.seek(0)

        buf = io.BytesIO()
        c = _new_canvas(buf, page)
        c.drawImage(
            ImageReader(png), offset_x, offset_y,
            width=width * scale, height=height * scale, mask="auto",
        )
        c.showPage()
        c.save()
        return buf.getvalue()
    except Exception:
        logger.exception("PDF raster embedding failed, writing text-only PDF")
        return text_only_pdf("Logo image could not be embedded.", page)
