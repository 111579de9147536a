"""SVG path data → absolute move/line/cubic/close segments.

svgpathtools does the parsing (relative commands, H/V, S/T reflection);
its segment objects are then normalized to four absolute operations in
SVG user space:

    M (x, y)            moveto
    L (x, y)            lineto
    C (c1, c2, end)     cubic curveto
    Z ()                closepath

Quadratics are promoted to cubics with the 2/3 control-point rule. Arcs
are approximated by a straight line to the arc's endpoint; those segments
keep ``source="A"`` so writers can annotate them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from svgpathtools import Arc, CubicBezier, Line, QuadraticBezier, parse_path

logger = logging.getLogger(__name__)

Point = tuple[float, float]

# Subpath break / closure tolerance in user units
_EPS = 1e-9


@dataclass(frozen=True)
class Segment:
    op: str
    points: tuple[Point, ...] = ()
    source: str = ""

    @property
    def end(self) -> Point | None:
        return self.points[-1] if self.points else None


def _pt(z: complex) -> Point:
    return (float(z.real), float(z.imag))


def _quad_to_cubic(p0: Point, q: Point, p: Point) -> tuple[Point, Point]:
    c1 = (p0[0] + 2.0 / 3.0 * (q[0] - p0[0]), p0[1] + 2.0 / 3.0 * (q[1] - p0[1]))
    c2 = (p[0] + 2.0 / 3.0 * (q[0] - p[0]), p[1] + 2.0 / 3.0 * (q[1] - p[1]))
    return c1, c2


@dataclass
class PathState:
    """Running state while svgpathtools segments are flattened."""

    current: complex | None = None
    start: complex | None = None
    drawn: bool = False
    segments: list[Segment] = field(default_factory=list)

    def emit(self, op: str, points: tuple[Point, ...] = (), source: str = "") -> None:
        self.segments.append(Segment(op=op, points=points, source=source or op))

    def begin(self, at: complex) -> None:
        self.finish()
        self.start = self.current = at
        self.drawn = False
        self.emit("M", (_pt(at),))

    def finish(self) -> None:
        """Close the open subpath when it returns to its start."""
        if self.drawn and self.start is not None and abs(self.current - self.start) < _EPS:
            self.emit("Z")
        self.drawn = False

    def add(self, seg) -> None:
        if self.current is None or abs(seg.start - self.current) > _EPS:
            self.begin(seg.start)
        end = _pt(seg.end)
        if isinstance(seg, CubicBezier):
            self.emit("C", (_pt(seg.control1), _pt(seg.control2), end))
        elif isinstance(seg, QuadraticBezier):
            c1, c2 = _quad_to_cubic(_pt(seg.start), _pt(seg.control), end)
            self.emit("C", (c1, c2, end), source="Q")
        elif isinstance(seg, Arc):
            # Radii, rotation and flags are not honored
            self.emit("L", (end,), source="A")
        elif isinstance(seg, Line):
            self.emit("L", (end,))
        else:
            logger.debug("Unknown path segment %s drawn as a line", type(seg).__name__)
            self.emit("L", (end,))
        self.current = seg.end
        self.drawn = True


def parse_path_data(d: str | None) -> list[Segment]:
    """Parse a ``d`` attribute into absolute segments.

    Unparseable path data yields no segments.
    """
    state = PathState()
    if not d or not d.strip():
        return state.segments
    try:
        path = parse_path(d)
    except Exception as e:
        logger.warning("Failed to parse path: %s", e)
        return []
    for seg in path:
        state.add(seg)
    state.finish()
    return state.segments
