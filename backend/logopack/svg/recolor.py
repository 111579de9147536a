"""SvgColorRewriter — recolor an SVG tree by attribute rewrite or filter matrix.

Both strategies return a new tree; the input tree is never modified.
"""

from __future__ import annotations

import logging

from logopack.color.transform import (
    ColorMode,
    ColorSpec,
    ColorTransform,
    build_color_transform,
    build_filter_matrix,
)
from logopack.color.values import is_none, parse_rgba, to_hex, url_reference
from logopack.svg.document import SvgElement
from logopack.svg.geometry import gradient_color
from logopack.svg.styles import DRAWABLES, NON_RENDERED, Inherited, fold_style, presentation

logger = logging.getLogger(__name__)

FILTER_ID = "svg2OneColor"

# Elements that take fill/stroke paint
VISUAL = DRAWABLES | {"g", "a", "switch", "text", "tspan", "textPath", "use"}

# Paint servers, masks and metadata keep their colors
UNTOUCHED = NON_RENDERED - {"symbol", "marker"}

# Content that inherits paint from where it is used, not where it is defined
TEMPLATES = frozenset({"defs", "symbol", "marker"})


def _qualified(like: SvgElement, name: str) -> str:
    """Tag ``name`` in the same namespace as ``like``."""
    if like.tag.startswith("{"):
        return like.tag[: like.tag.index("}") + 1] + name
    return name


def _flat_paint(el: SvgElement, state: Inherited, target: str) -> SvgElement:
    updates: dict[str, str] = {}
    fill = el.get("fill")
    if fill is not None:
        if not is_none(fill):
            updates["fill"] = target
    elif not (state.fill is not None and is_none(state.fill)):
        updates["fill"] = target
    stroke = el.get("stroke")
    if stroke is None:
        # Stroke inherited from an ancestor (root included)
        stroke = state.stroke
    if stroke is not None and not is_none(stroke):
        updates["stroke"] = target
    return el.with_attributes(updates, remove={"fill-opacity", "stroke-opacity"})


def _inverted(value: str, transform: ColorTransform, ids: dict[str, SvgElement]) -> tuple[str, float] | None:
    ref = url_reference(value)
    if ref is not None:
        value = gradient_color(ref, ids) or ""
    parsed = parse_rgba(value)
    if parsed is None:
        return None
    rgb, alpha = parsed
    return to_hex(transform.map_rgb(rgb)), alpha


def _invert_paint(el: SvgElement, state: Inherited, transform: ColorTransform,
                  ids: dict[str, SvgElement], templated: bool) -> SvgElement:
    """Invert own paint, and inherited paint unless the element is a ``<use>`` template."""
    updates: dict[str, str] = {}
    for name in ("fill", "stroke"):
        value = el.get(name)
        if value is None and not templated:
            value = state.fill if name == "fill" else state.stroke
        if value is None or is_none(value):
            continue
        result = _inverted(value, transform, ids)
        if result is None:
            logger.debug("Leaving unparseable %s=%r on <%s>", name, value, el.name)
            continue
        hex_value, alpha = result
        updates[name] = hex_value
        if alpha < 1.0 and not el.has(f"{name}-opacity"):
            updates[f"{name}-opacity"] = f"{alpha:g}"
    # Implicit black fill becomes explicit white
    implicit = el.name in DRAWABLES or el.name in ("text", "use")
    if implicit and not templated and not el.has("fill") and state.fill is None:
        updates["fill"] = to_hex(transform.map_rgb((0, 0, 0)))
    return el.with_attributes(updates)


def recolor(root: SvgElement, spec: ColorSpec) -> SvgElement:
    """Rewrite fill/stroke on every visual element below the root.

    Paint the root sets is written onto its descendants. Drawables inside
    ``<defs>``, ``<symbol>`` and ``<marker>`` are recolored too, since they
    render through ``<use>`` and markers. Original and unrecognized modes
    return ``root`` itself.
    """
    transform = build_color_transform(spec)
    if transform.kind == "identity":
        return root
    ids = root.index_ids()
    flat_target = to_hex(transform.rgb) if transform.kind == "flat" and transform.rgb else None

    def rewrite(el: SvgElement, state: Inherited, is_root: bool, templated: bool) -> SvgElement:
        if el.name == "style":
            return el.with_text(None)
        if el.name in UNTOUCHED:
            return el
        # Inheritance is read from the source attributes, before rewriting
        child_state = state.child(presentation(el))
        if not is_root and el.name in VISUAL:
            el = fold_style(el)
            if flat_target is not None:
                el = _flat_paint(el, state, flat_target)
            else:
                el = _invert_paint(el, state, transform, ids, templated)
        if not el.children:
            return el
        nested = templated or el.name in TEMPLATES
        return el.with_children([rewrite(c, child_state, False, nested) for c in el.children])

    recolored = rewrite(root, Inherited(), True, False)
    logger.debug("Recolored SVG to %s", spec.label)
    return recolored


def apply_filter_matrix(root: SvgElement, spec: ColorSpec) -> SvgElement:
    """Wrap all drawing content in one ``feColorMatrix`` filter group.

    The filter lives in the root's first ``<defs>`` (created if missing);
    everything else moves under ``<g filter="url(#svg2OneColor)">``.
    """
    transform = build_filter_matrix(spec)
    if transform.matrix is None:
        return root

    matrix = SvgElement(
        tag=_qualified(root, "feColorMatrix"),
        attrs=(("type", "matrix"), ("values", transform.matrix_values())),
    )
    color_filter = SvgElement(
        tag=_qualified(root, "filter"),
        attrs=(("id", FILTER_ID), ("color-interpolation-filters", "sRGB")),
        children=(matrix,),
    )

    defs: SvgElement | None = None
    content: list[SvgElement] = []
    for child in root.children:
        if child.name == "defs" and defs is None:
            defs = child
        else:
            content.append(child)
    if defs is None:
        defs = SvgElement(tag=_qualified(root, "defs"))
    defs = defs.with_children([*defs.children, color_filter])

    group = SvgElement(
        tag=_qualified(root, "g"),
        attrs=(("filter", f"url(#{FILTER_ID})"),),
        children=tuple(content),
    )
    logger.debug("Applied %s color matrix filter", spec.label)
    return root.with_children([defs, group])


def recolor_with(strategy: str, root: SvgElement, spec: ColorSpec) -> SvgElement:
    """Dispatch on the configured recolor strategy (``rewrite`` or ``filter``)."""
    if strategy == "filter" and spec.mode is not ColorMode.UNKNOWN:
        return apply_filter_matrix(root, spec)
    return recolor(root, spec)
