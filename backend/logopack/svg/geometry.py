"""GeometryElement extraction — normalized drawables for the vector writers.

Walks the document once, carrying inherited paint state and the composed
ancestor transform, and returns every visible drawable in document order.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from logopack.color.values import parse_rgba, to_hex, url_reference
from logopack.svg.document import SvgElement
from logopack.svg.paths import Segment, parse_path_data
from logopack.svg.styles import (
    DRAWABLES,
    NON_RENDERED,
    Inherited,
    is_hidden,
    parse_unit_float,
    presentation,
)
from logopack.svg.transform_list import parse_transform
from logopack.utils.geometry import IDENTITY_AFFINE, Affine, compose

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 300.0

# Writer order for geometry kinds
KIND_ORDER = ("path", "rect", "circle", "ellipse", "line", "polyline", "polygon")

_NUM_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


@dataclass(frozen=True)
class GeometryElement:
    """One drawable, with paint and transform fully resolved."""

    kind: str
    params: dict[str, float] = field(default_factory=dict)
    segments: tuple[Segment, ...] = ()
    fill: str = "black"
    stroke: str | None = None
    stroke_width: float = 1.0
    opacity: float = 1.0
    fill_opacity: float = 1.0
    stroke_opacity: float = 1.0
    transform: Affine = IDENTITY_AFFINE
    element_id: str | None = None

    @property
    def has_fill(self) -> bool:
        return self.fill.strip().lower() not in ("none", "transparent")

    @property
    def has_stroke(self) -> bool:
        return self.stroke is not None and self.stroke.strip().lower() not in ("none", "transparent")


@dataclass(frozen=True)
class DocumentSize:
    min_x: float
    min_y: float
    width: float
    height: float


def _length(value: str | None) -> float | None:
    if value is None or value.strip().endswith("%"):
        return None
    v = parse_unit_float(value, -1.0)
    return v if v > 0 else None


def document_size(root: SvgElement) -> DocumentSize:
    """viewBox first, then width/height, then 300×300."""
    view_box = root.get("viewBox")
    if view_box:
        nums = [float(n) for n in _NUM_RE.findall(view_box)]
        if len(nums) == 4 and nums[2] > 0 and nums[3] > 0:
            return DocumentSize(nums[0], nums[1], nums[2], nums[3])
    width = _length(root.get("width"))
    height = _length(root.get("height"))
    if width and height:
        return DocumentSize(0.0, 0.0, width, height)
    return DocumentSize(0.0, 0.0, DEFAULT_SIZE, DEFAULT_SIZE)


def intrinsic_size(root: SvgElement) -> tuple[float, float]:
    """Natural raster size: width/height attributes, else viewBox, else 300×300."""
    width = _length(root.get("width"))
    height = _length(root.get("height"))
    if width and height:
        return width, height
    size = document_size(root)
    return size.width, size.height


# ── Gradients ──


def _stop_colors(gradient: SvgElement, ids: dict[str, SvgElement]) -> list[str]:
    seen: set[str] = set()
    node: SvgElement | None = gradient
    while node is not None:
        stops = [c for c in node.children if c.name == "stop"]
        if stops:
            colors = []
            for stop in stops:
                props = presentation(stop)
                colors.append(props.get("stop-color", "black"))
            return colors
        ref = (node.href or "").lstrip("#")
        if not ref or ref in seen:
            break
        seen.add(ref)
        node = ids.get(ref)
    return []


def gradient_color(gradient_id: str, ids: dict[str, SvgElement]) -> str | None:
    """Solid approximation of a gradient.

    Two stops average the first and last; three or more take the middle stop.
    """
    gradient = ids.get(gradient_id)
    if gradient is None or gradient.name not in ("linearGradient", "radialGradient"):
        return None
    parsed = [parse_rgba(c) for c in _stop_colors(gradient, ids)]
    stops = [p[0] for p in parsed if p is not None]
    if not stops:
        return None
    if len(stops) == 1:
        return to_hex(stops[0])
    if len(stops) == 2:
        first, last = stops
        return to_hex(tuple((a + b) / 2.0 for a, b in zip(first, last)))  # type: ignore[arg-type]
    return to_hex(stops[len(stops) // 2])


def resolve_paint(value: str | None, ids: dict[str, SvgElement]) -> str | None:
    """Replace ``url(#gradient)`` paint with its solid approximation.

    Unresolvable references (patterns, missing ids) are returned unchanged.
    """
    ref = url_reference(value)
    if ref is None:
        return value
    return gradient_color(ref, ids) or value


# ── Extraction ──


def _points(value: str | None) -> list[tuple[float, float]]:
    nums = [float(n) for n in _NUM_RE.findall(value or "")]
    return [(nums[i], nums[i + 1]) for i in range(0, len(nums) - 1, 2)]


def _poly_segments(points: list[tuple[float, float]], closed: bool) -> tuple[Segment, ...]:
    if not points:
        return ()
    segs = [Segment("M", (points[0],))]
    segs.extend(Segment("L", (p,)) for p in points[1:])
    if closed:
        segs.append(Segment("Z"))
    return tuple(segs)


def _shape_params(kind: str, props: dict[str, str]) -> dict[str, float] | None:
    def num(name: str, default: float = 0.0) -> float:
        return parse_unit_float(props.get(name), default)

    if kind == "rect":
        w, h = num("width"), num("height")
        if w <= 0 or h <= 0:
            return None
        rx_raw, ry_raw = props.get("rx"), props.get("ry")
        rx = num("rx") if rx_raw is not None else None
        ry = num("ry") if ry_raw is not None else None
        rx = rx if rx is not None else (ry or 0.0)
        ry = ry if ry is not None else rx
        return {
            "x": num("x"), "y": num("y"), "width": w, "height": h,
            "rx": max(0.0, min(rx, w / 2.0)), "ry": max(0.0, min(ry, h / 2.0)),
        }
    if kind == "circle":
        r = num("r")
        return {"cx": num("cx"), "cy": num("cy"), "r": r} if r > 0 else None
    if kind == "ellipse":
        rx, ry = num("rx"), num("ry")
        if rx <= 0 or ry <= 0:
            return None
        return {"cx": num("cx"), "cy": num("cy"), "rx": rx, "ry": ry}
    if kind == "line":
        return {"x1": num("x1"), "y1": num("y1"), "x2": num("x2"), "y2": num("y2")}
    return {}


def _build(kind: str, props: dict[str, str], state: Inherited, transform: Affine,
           ids: dict[str, SvgElement], element_id: str | None) -> GeometryElement | None:
    params = _shape_params(kind, props)
    if params is None:
        return None
    segments: tuple[Segment, ...] = ()
    if kind == "path":
        segments = tuple(parse_path_data(props.get("d")))
        if not segments:
            return None
    elif kind in ("polyline", "polygon"):
        segments = _poly_segments(_points(props.get("points")), closed=kind == "polygon")
        if len(segments) < 2:
            return None

    fill = resolve_paint(state.fill, ids) if state.fill is not None else "black"
    stroke = resolve_paint(state.stroke, ids) if state.stroke is not None else None
    return GeometryElement(
        kind=kind,
        params=params,
        segments=segments,
        fill=fill or "black",
        stroke=stroke,
        stroke_width=parse_unit_float(state.stroke_width, 1.0),
        opacity=state.opacity,
        fill_opacity=parse_unit_float(state.fill_opacity, 1.0),
        stroke_opacity=parse_unit_float(state.stroke_opacity, 1.0),
        transform=transform,
        element_id=element_id,
    )


def extract_geometry(root: SvgElement) -> list[GeometryElement]:
    """Every visible drawable in document order.

    ``display:none`` / ``visibility:hidden`` elements are skipped, as are
    the contents of defs, clip paths, masks, gradients and the like.
    ``<use>`` is expanded in place: the referenced element (or the
    children of a referenced ``<symbol>``) is drawn with the ``x``/``y``
    offset and inherits the ``<use>`` paint.
    """
    ids = root.index_ids()
    found: list[GeometryElement] = []

    def walk(el: SvgElement, state: Inherited, transform: Affine, expanding: frozenset[str]) -> None:
        props = presentation(el)
        if props.get("display", "").strip().lower() == "none":
            return
        own = parse_transform(props.get("transform")) if el is not root else IDENTITY_AFFINE
        current = compose(transform, own)
        child_state = state.child(props)
        if el.name in DRAWABLES:
            if is_hidden({"visibility": child_state.visibility or ""}):
                return
            geom = _build(el.name, props, child_state, current, ids, el.get("id"))
            if geom is not None:
                found.append(geom)
            return
        if el.name == "use":
            expand_use(el, props, child_state, current, expanding)
            return
        for child in el.children:
            if child.name == "defs" or child.name in NON_RENDERED:
                continue
            walk(child, child_state, current, expanding)

    def expand_use(use: SvgElement, props: dict[str, str], state: Inherited, transform: Affine,
                    expanding: frozenset[str]) -> None:
        ref = (use.href or "").strip()
        target = ids.get(ref[1:]) if ref.startswith("#") else None
        if target is None or ref[1:] in expanding:
            logger.debug("Skipping <use> with unresolved or cyclic reference %r", ref)
            return
        dx, dy = parse_unit_float(props.get("x"), 0.0), parse_unit_float(props.get("y"), 0.0)
        placed = compose(transform, (1.0, 0.0, 0.0, 1.0, dx, dy))
        nested = expanding | {ref[1:]}
        if target.name == "symbol":
            symbol_state = state.child(presentation(target))
            for child in target.children:
                if child.name in NON_RENDERED:
                    continue
                walk(child, symbol_state, placed, nested)
        elif target.name not in NON_RENDERED:
            walk(target, state, placed, nested)

    walk(root, Inherited(), IDENTITY_AFFINE, frozenset())
    logger.debug("Extracted %d geometry elements", len(found))
    return found


def by_kind_order(elements: list[GeometryElement]) -> list[GeometryElement]:
    """Stable regrouping: all paths, then rects, circles, ellipses, lines, polylines, polygons."""
    rank = {k: i for i, k in enumerate(KIND_ORDER)}
    return sorted(elements, key=lambda g: rank.get(g.kind, len(rank)))

