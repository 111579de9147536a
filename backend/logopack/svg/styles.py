"""Presentation attributes: inline ``style`` folding and inheritance."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace

from logopack.svg.document import SvgElement

# Properties that flow from ancestors to descendants
INHERITED = ("fill", "stroke", "stroke-width", "fill-opacity", "stroke-opacity", "visibility")

DRAWABLES = frozenset({"path", "rect", "circle", "ellipse", "line", "polyline", "polygon"})

# Subtrees whose paint is not part of the visible artwork
NON_RENDERED = frozenset({
    "clipPath", "mask", "linearGradient", "radialGradient", "pattern",
    "filter", "marker", "symbol", "metadata", "title", "desc", "style", "script",
})


def parse_style(style: str | None) -> dict[str, str]:
    """``"fill:red; stroke : blue"`` → ``{"fill": "red", "stroke": "blue"}``."""
    if not style:
        return {}
    props: dict[str, str] = {}
    for decl in style.split(";"):
        if ":" not in decl:
            continue
        key, value = decl.split(":", 1)
        key, value = key.strip().lower(), value.strip()
        if value.endswith("!important"):
            value = value[: -len("!important")].strip()
        if key and value:
            props[key] = value
    return props


def presentation(el: SvgElement) -> dict[str, str]:
    """Attributes with inline style declarations layered on top."""
    attrs = {k: v for k, v in el.attrs if not k.startswith("{")}
    attrs.update(parse_style(el.get("style")))
    attrs.pop("style", None)
    return attrs


def fold_style(el: SvgElement) -> SvgElement:
    """Move inline style declarations into attributes and drop ``style``."""
    if not el.has("style"):
        return el
    return el.with_attributes(parse_style(el.get("style")), remove={"style"})


def is_hidden(props: Mapping[str, str]) -> bool:
    return (
        props.get("display", "").strip().lower() == "none"
        or props.get("visibility", "").strip().lower() in ("hidden", "collapse")
    )


@dataclass(frozen=True)
class Inherited:
    """Inheritable paint state handed down the tree."""

    fill: str | None = None
    stroke: str | None = None
    stroke_width: str | None = None
    fill_opacity: str | None = None
    stroke_opacity: str | None = None
    visibility: str | None = None
    opacity: float = 1.0

    def child(self, props: Mapping[str, str]) -> "Inherited":
        updates: dict[str, object] = {}
        for name in INHERITED:
            value = props.get(name)
            if value is not None and value.strip().lower() != "inherit":
                updates[name.replace("-", "_")] = value.strip()
        updates["opacity"] = self.opacity * parse_unit_float(props.get("opacity"), 1.0)
        return replace(self, **updates)  # type: ignore[arg-type]


def parse_unit_float(value: str | None, default: float) -> float:
    """Leading number of a length/opacity value; percentages become fractions."""
    if value is None:
        return default
    text = value.strip()
    try:
        if text.endswith("%"):
            return float(text[:-1]) / 100.0
        for unit in ("px", "pt", "mm", "cm", "in", "em"):
            if text.endswith(unit):
                text = text[: -len(unit)]
                break
        return float(text)
    except ValueError:
        return default
