"""Immutable SVG document model — parse once, derive new trees, never mutate.

Every rewrite returns a new SvgElement tree, so the parsed input can be
shared between color variants without aliasing.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace

from logopack.errors import InvalidInputError

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)
ET.register_namespace("inkscape", "http://www.inkscape.org/namespaces/inkscape")
ET.register_namespace("sodipodi", "http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd")

_XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def local_name(qualified: str) -> str:
    """Strip an ElementTree ``{namespace}`` prefix."""
    return qualified.rsplit("}", 1)[-1] if qualified.startswith("{") else qualified


@dataclass(frozen=True)
class SvgElement:
    """One element: tag, ordered attributes, children, text content."""

    tag: str
    attrs: tuple[tuple[str, str], ...] = ()
    children: tuple["SvgElement", ...] = ()
    text: str | None = None
    tail: str | None = None
    _index: dict[str, str] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._index.update(self.attrs)

    @property
    def name(self) -> str:
        return local_name(self.tag)

    @property
    def attributes(self) -> dict[str, str]:
        return dict(self.attrs)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._index.get(key, default)

    def has(self, key: str) -> bool:
        return key in self._index

    @property
    def href(self) -> str | None:
        return self.get("href") or self.get(f"{{{XLINK_NS}}}href")

    def with_attributes(
        self,
        updates: Mapping[str, str] | None = None,
        remove: set[str] | frozenset[str] = frozenset(),
    ) -> "SvgElement":
        """New element with ``updates`` applied and ``remove`` keys dropped.

        Existing keys keep their position; new keys are appended.
        """
        updates = dict(updates or {})
        merged: list[tuple[str, str]] = []
        for key, value in self.attrs:
            if key in remove:
                continue
            merged.append((key, updates.pop(key, value)))
        merged.extend((k, v) for k, v in updates.items() if k not in remove)
        return replace(self, attrs=tuple(merged))

    def with_children(self, children: tuple["SvgElement", ...] | list["SvgElement"]) -> "SvgElement":
        return replace(self, children=tuple(children))

    def with_text(self, text: str | None) -> "SvgElement":
        return replace(self, text=text)

    def iter(self) -> Iterator["SvgElement"]:
        """Depth-first, document order, including self."""
        yield self
        for child in self.children:
            yield from child.iter()

    def find_all(self, name: str) -> list["SvgElement"]:
        return [el for el in self.iter() if el.name == name]

    def index_ids(self) -> dict[str, "SvgElement"]:
        return {el.get("id"): el for el in self.iter() if el.get("id")}  # type: ignore[misc]


def _from_etree(node: ET.Element) -> SvgElement:
    children = tuple(_from_etree(child) for child in node if isinstance(child.tag, str))
    return SvgElement(
        tag=node.tag,
        attrs=tuple(node.attrib.items()),
        children=children,
        text=node.text,
        tail=node.tail,
    )


def _to_etree(element: SvgElement) -> ET.Element:
    node = ET.Element(element.tag, dict(element.attrs))
    node.text = element.text
    node.tail = element.tail
    for child in element.children:
        node.append(_to_etree(child))
    return node


def parse_svg(svg_text: str | bytes) -> SvgElement:
    """Parse SVG markup into an immutable tree.

    Raises InvalidInputError for malformed XML or a non-``<svg>`` root.
    """
    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as e:
        raise InvalidInputError(f"Invalid SVG: malformed XML ({e})") from e
    if local_name(root.tag) != "svg":
        raise InvalidInputError(f"Invalid SVG: root element is <{local_name(root.tag)}>, expected <svg>")
    document = _from_etree(root)
    logger.debug("Parsed SVG document: %d elements", sum(1 for _ in document.iter()))
    return document


def serialize_svg(root: SvgElement, *, xml_declaration: bool = True) -> str:
    """Write the tree back out as SVG markup."""
    body = ET.tostring(_to_etree(root), encoding="unicode")
    return (_XML_DECLARATION + body) if xml_declaration else body


def is_well_formed_svg(svg_text: str | bytes) -> bool:
    try:
        parse_svg(svg_text)
    except InvalidInputError:
        return False
    return True
