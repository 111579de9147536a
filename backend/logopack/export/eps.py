"""VectorExporter (EPS) — SVG geometry re-emitted as PostScript.

Every element is written in page space with the y axis flipped
(PostScript y = height - SVG y). An element's effective transform is
conjugated by the same flip and emitted as a single ``concat``.
"""

from __future__ import annotations

import logging

from logopack.color.transform import ColorSpec
from logopack.export.postscript import (
    eps_footer,
    eps_header,
    fallback_eps,
    num,
    placeholder_shape,
    ps_color,
)
from logopack.svg.document import SvgElement, parse_svg
from logopack.svg.geometry import (
    DocumentSize,
    GeometryElement,
    by_kind_order,
    document_size,
    extract_geometry,
)
from logopack.svg.paths import Segment
from logopack.svg.recolor import recolor
from logopack.utils.geometry import compose, flip_conjugate, is_identity

logger = logging.getLogger(__name__)


class _PageSpace:
    """SVG user space → EPS page space (viewBox origin removed, y flipped)."""

    def __init__(self, size: DocumentSize) -> None:
        self.size = size

    def x(self, x: float) -> float:
        return x - self.size.min_x

    def y(self, y: float) -> float:
        return self.size.height - (y - self.size.min_y)

    def point(self, p: tuple[float, float]) -> str:
        return f"{num(self.x(p[0]))} {num(self.y(p[1]))}"

    def concat(self, geom: GeometryElement) -> str:
        if is_identity(geom.transform):
            return ""
        s = self.size
        # Move the viewBox origin out, apply, move back; then flip-conjugate
        shifted = compose(
            (1.0, 0.0, 0.0, 1.0, -s.min_x, -s.min_y),
            geom.transform,
            (1.0, 0.0, 0.0, 1.0, s.min_x, s.min_y),
        )
        a, b, c, d, e, f = flip_conjugate(shifted, s.height)
        return f"[{num(a)} {num(b)} {num(c)} {num(d)} {num(e)} {num(f)}] concat\n"


def _path_ops(segments: tuple[Segment, ...], page: _PageSpace) -> str:
    lines: list[str] = []
    for seg in segments:
        if seg.op == "M":
            lines.append(f"{page.point(seg.points[0])} m")
        elif seg.op == "L":
            note = " % arc approximated" if seg.source == "A" else ""
            lines.append(f"{page.point(seg.points[0])} l{note}")
        elif seg.op == "C":
            c1, c2, end = seg.points
            lines.append(f"{page.point(c1)} {page.point(c2)} {page.point(end)} c")
        elif seg.op == "Z":
            lines.append("cp")
    return "\n".join(lines) + "\n" if lines else ""


def _shape_ops(geom: GeometryElement, page: _PageSpace) -> str:
    p = geom.params
    if geom.kind == "rect":
        x = page.x(p["x"])
        y = page.y(p["y"]) - p["height"]
        w, h = p["width"], p["height"]
        if p["rx"] > 0 and p["ry"] > 0:
            return f"{num(x)} {num(y)} {num(w)} {num(h)} {num(p['rx'])} {num(p['ry'])} rrect\n"
        return (
            f"{num(x)} {num(y)} m\n"
            f"{num(x + w)} {num(y)} l\n"
            f"{num(x + w)} {num(y + h)} l\n"
            f"{num(x)} {num(y + h)} l\n"
            "cp\n"
        )
    if geom.kind == "circle":
        cx, cy, r = page.x(p["cx"]), page.y(p["cy"]), p["r"]
        return f"{num(cx + r)} {num(cy)} m\n{num(cx)} {num(cy)} {num(r)} 0 360 arc\ncp\n"
    if geom.kind == "ellipse":
        return f"{num(page.x(p['cx']))} {num(page.y(p['cy']))} {num(p['rx'])} {num(p['ry'])} ellipse\n"
    if geom.kind == "line":
        return f"{page.point((p['x1'], p['y1']))} m\n{page.point((p['x2'], p['y2']))} l\n"
    return _path_ops(geom.segments, page)


def element_to_ps(geom: GeometryElement, page: _PageSpace) -> str:
    """gsave / concat / path / fill and stroke / grestore for one element."""
    fill = geom.has_fill and geom.kind != "line"
    stroke = geom.has_stroke
    if not fill and not stroke:
        return ""

    out = [f"% {geom.kind}" + (f" #{geom.element_id}" if geom.element_id else "") + "\n", "gsave\n"]
    out.append(page.concat(geom))
    effective_opacity = geom.opacity * (geom.fill_opacity if fill else geom.stroke_opacity)
    if effective_opacity < 1.0:
        out.append(f"% opacity {effective_opacity:.2f} flattened (EPS has no transparency)\n")
    out.append("n\n")
    out.append(_shape_ops(geom, page))
    if fill:
        out.append(ps_color(geom.fill))
        out.append("gsave f grestore\n" if stroke else "f\n")
    if stroke:
        out.append(ps_color(geom.stroke))
        out.append(f"{num(geom.stroke_width)} w\n")
        out.append("s\n")
    out.append("grestore\n")
    return "".join(out)


def svg_to_eps(root: SvgElement) -> str:
    """Convert an already-colored document. Raises on unexpected input."""
    size = document_size(root)
    page = _PageSpace(size)
    elements = by_kind_order(extract_geometry(root))

    body: list[str] = []
    for geom in elements:
        body.append(element_to_ps(geom, page))
    drawn = sum(1 for chunk in body if chunk)
    if drawn == 0:
        body = [placeholder_shape(size.width, size.height)]

    logger.debug("EPS: %d of %d elements drawn (%gx%g)", drawn, len(elements), size.width, size.height)
    return eps_header(size.width, size.height) + "".join(body) + eps_footer()


def to_eps(svg: str | bytes | SvgElement, spec: ColorSpec | None = None) -> bytes:
    """Recolor and convert to EPS.

    Never raises: any failure yields the fallback EPS so one bad cell does
    not sink the batch.
    """
    try:
        root = svg if isinstance(svg, SvgElement) else parse_svg(svg)
        if spec is not None:
            root = recolor(root, spec)
        return svg_to_eps(root).encode("latin-1", errors="replace")
    except Exception:
        logger.exception("EPS conversion failed, writing fallback EPS")
        return fallback_eps().encode("latin-1")
