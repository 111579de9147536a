"""PostScript building blocks: EPS header/prolog/footer, colors, fallbacks."""

from __future__ import annotations

import logging
import math

from logopack.color.values import blend_with_white, parse_hex, parse_rgba, url_reference
from logopack.utils.geometry import bbox_padding

logger = logging.getLogger(__name__)

CREATOR = "Logo Package Generator"

PLACEHOLDER_MARKER = "% Placeholder shape due to missing vector elements"
FALLBACK_MARKER = "% Fallback shape - logo conversion error indicator"

# Keywords written as literal PostScript triples
PS_KEYWORDS: dict[str, str] = {
    "black": "0 0 0",
    "white": "1 1 1",
    "red": "1 0 0",
    "green": "0 1 0",
    "blue": "0 0 1",
}

PROLOG = """%%BeginProlog
/m {moveto} bind def
/l {lineto} bind def
/c {curveto} bind def
/cp {closepath} bind def
/n {newpath} bind def
/f {fill} bind def
/s {stroke} bind def
/w {setlinewidth} bind def
/gs {gsave} bind def
/gr {grestore} bind def
/rgb {setrgbcolor} bind def
/tr {translate} bind def
/sc {scale} bind def
% x y w h rx ry rrect -- rounded rectangle with elliptical corners
/rrect {
  6 dict begin
  /ry exch def /rx exch def /h exch def /w exch def /y exch def /x exch def
  matrix currentmatrix
  x y translate 1 ry rx div scale
  /h h rx mul ry div def
  rx 0 m w 0 w h rx arct w h 0 h rx arct 0 h 0 0 rx arct 0 0 w 0 rx arct cp
  setmatrix
  end
} bind def
% cx cy rx ry ellipse -- closed ellipse subpath
/ellipse {
  4 dict begin
  /ry exch def /rx exch def /cy exch def /cx exch def
  matrix currentmatrix
  cx cy translate rx ry scale 0 0 1 0 360 arc cp
  setmatrix
  end
} bind def
%%EndProlog
"""


def num(value: float) -> str:
    """Fixed three-decimal PostScript number; ``-0.000`` is written as ``0.000``."""
    text = f"{value:.3f}"
    return "0.000" if text == "-0.000" else text


def eps_header(width: float, height: float, title: str = "Vector Logo") -> str:
    """DSC header with a padded bounding box, prolog and page setup."""
    pad = bbox_padding(width, height)
    llx, lly = math.floor(-pad), math.floor(-pad)
    urx, ury = math.ceil(width + pad), math.ceil(height + pad)
    return (
        "%!PS-Adobe-3.0 EPSF-3.0\n"
        f"%%BoundingBox: {llx} {lly} {urx} {ury}\n"
        f"%%HiResBoundingBox: {num(-pad)} {num(-pad)} {num(width + pad)} {num(height + pad)}\n"
        f"%%Creator: {CREATOR}\n"
        f"%%Title: {title}\n"
        "%%DocumentData: Clean7Bit\n"
        "%%LanguageLevel: 2\n"
        "%%Pages: 1\n"
        "%%EndComments\n"
        "\n"
        + PROLOG
        + "\n%%BeginSetup\n"
        "1 setlinewidth\n"
        "0 setlinecap\n"
        "0 setlinejoin\n"
        "10 setmiterlimit\n"
        "%%EndSetup\n"
        "\n"
        "%%Page: 1 1\n"
        "gsave\n"
    )


def eps_footer() -> str:
    return "grestore\nshowpage\n%%EOF\n"


def ps_color(value: str | None) -> str:
    """``setrgbcolor`` line (via the ``rgb`` shorthand) for an SVG paint value.

    Transparency is approximated by blending toward white. Unresolved
    ``url(#id)`` paints fall back to black with a note.
    """
    if not value:
        return "0 0 0 rgb\n"
    text = value.strip()
    lowered = text.lower()
    if lowered in PS_KEYWORDS:
        return f"{PS_KEYWORDS[lowered]} rgb\n"
    ref = url_reference(text)
    if ref is not None:
        return f"% paint url(#{ref}) not representable, using black\n0 0 0 rgb\n"
    rgb = parse_hex(text) if text.startswith("#") else None
    if rgb is not None:
        r, g, b = (ch / 255.0 for ch in rgb)
        return f"{num(r)} {num(g)} {num(b)} rgb\n"
    parsed = parse_rgba(text)
    if parsed is not None:
        r, g, b = blend_with_white(*parsed)
        return f"{num(r)} {num(g)} {num(b)} rgb\n"
    logger.warning("Unrecognized color %r, using black", value)
    return "0 0 0 rgb\n"


def placeholder_shape(width: float, height: float) -> str:
    """Centered light-gray square for documents without drawable elements."""
    cx, cy = width / 2.0, height / 2.0
    size = min(width, height) * 0.4
    return (
        f"{PLACEHOLDER_MARKER}\n"
        "gsave\n"
        "n\n"
        f"{num(cx - size)} {num(cy - size)} m\n"
        f"{num(cx + size)} {num(cy - size)} l\n"
        f"{num(cx + size)} {num(cy + size)} l\n"
        f"{num(cx - size)} {num(cy + size)} l\n"
        "cp\n"
        "0.8 0.8 0.8 rgb\n"
        "f\n"
        "grestore\n"
    )


def fallback_eps() -> str:
    """Self-contained EPS with a triangle and circle, used when conversion fails."""
    return (
        eps_header(400, 400, title="Conversion Fallback")
        + f"{FALLBACK_MARKER}\n"
        "gsave\n"
        "n\n"
        "200 150 m\n"
        "300 300 l\n"
        "100 300 l\n"
        "cp\n"
        "0.2 0.2 0.2 rgb\n"
        "f\n"
        "n\n"
        "200 250 50 0 360 arc\n"
        "cp\n"
        "0.8 0.8 0.8 rgb\n"
        "f\n"
        "grestore\n"
        + eps_footer()
    )
