"""Tests for SVG → EPS conversion."""

import re

import pytest

from logopack.color.transform import ColorSpec
from logopack.export.eps import svg_to_eps, to_eps
from logopack.export.postscript import (
    FALLBACK_MARKER,
    PLACEHOLDER_MARKER,
    eps_header,
    ps_color,
)
from logopack.svg.document import parse_svg
from tests.conftest import EMPTY_SVG, LOGO_SVG, RECT_SVG, RED_SQUARE_SVG, SYMBOL_SVG


def eps_text(svg, spec=None) -> str:
    return to_eps(svg, spec).decode("latin-1")


def test_rect_coordinate_flip():
    eps = eps_text(RECT_SVG)
    assert "10.000 40.000 m\n40.000 40.000 l\n40.000 80.000 l\n10.000 80.000 l\ncp\n" in eps


def test_structure():
    eps = eps_text(RED_SQUARE_SVG)
    assert eps.startswith("%!PS-Adobe-3.0 EPSF-3.0\n")
    assert "%%BeginProlog" in eps and "/rrect {" in eps and "/ellipse {" in eps
    assert eps.rstrip().endswith("grestore\nshowpage\n%%EOF")


def test_bounding_box_padding():
    header = eps_header(100, 100)
    assert "%%BoundingBox: -10 -10 110 110" in header
    assert "%%HiResBoundingBox: -10.000 -10.000 110.000 110.000" in header
    assert "%%BoundingBox: -15 -15 515 315" in eps_header(500, 300)


def test_recolored_fill():
    eps = eps_text(RED_SQUARE_SVG, ColorSpec.parse("Black"))
    assert "0.000 0.000 0.000 rgb\nf\n" in eps
    assert "1.000 0.000 0.000 rgb" not in eps


def test_empty_svg_gets_placeholder():
    eps = eps_text(EMPTY_SVG)
    assert PLACEHOLDER_MARKER in eps
    # 40% of the short side around the center of a 50×80 page
    assert "5.000 20.000 m" in eps
    assert "0.8 0.8 0.8 rgb" in eps


def test_malformed_svg_yields_fallback():
    eps = eps_text("<svg><rect></svg>")
    assert FALLBACK_MARKER in eps
    assert "200 250 50 0 360 arc" in eps
    assert eps.rstrip().endswith("%%EOF")


def test_transform_emitted_as_concat():
    eps = eps_text(LOGO_SVG)
    # translate(10 5) in a 100-high page: flip-conjugated translation is (10, -5)
    assert "[1.000 0.000 0.000 1.000 10.000 -5.000] concat" in eps


def test_kind_order_and_skips():
    eps = eps_text(LOGO_SVG)
    kinds = re.findall(r"^% (path|rect|circle|ellipse|line|polyline|polygon)\b", eps, flags=re.M)
    assert kinds == ["path", "rect", "circle", "ellipse", "line", "polygon"]
    # display:none and visibility:hidden contents never reach the output
    assert "0.671 0.804 0.937" not in eps
    assert "0.996 0.863 0.729" not in eps


def test_fill_and_stroke():
    eps = eps_text(LOGO_SVG)
    assert "gsave f grestore\n0.000 0.200 0.400 rgb\n3.000 w\ns\n" in eps


def test_rounded_rect_and_ellipse_helpers():
    eps = eps_text(LOGO_SVG)
    # rect x=130 y=10 w=50 h=30 → PostScript y = 100 - 10 - 30 = 60
    assert "130.000 60.000 50.000 30.000 5.000 5.000 rrect" in eps
    assert "150.000 25.000 20.000 10.000 ellipse" in eps


def test_circle_opacity_noted():
    eps = eps_text(LOGO_SVG)
    assert "% opacity 0.50" in eps


def test_arc_annotated():
    eps = eps_text('<svg viewBox="0 0 10 10"><path d="M0 0 A5 5 0 0 1 10 0"/></svg>')
    assert "10.000 10.000 l % arc approximated" in eps


def test_use_referenced_content_is_drawn():
    eps = eps_text(SYMBOL_SVG)
    assert PLACEHOLDER_MARKER not in eps
    assert "% path\n" in eps and "% circle #dot\n" in eps
    # <use x="10" y="30"> in a 100-high page: flipped translation is (10, -30)
    assert "[1.000 0.000 0.000 1.000 10.000 -30.000] concat" in eps
    assert "1.000 0.000 1.000 rgb" in eps


def test_viewbox_origin_removed():
    eps = svg_to_eps(parse_svg('<svg viewBox="100 200 10 10"><rect x="100" y="200" width="10" height="10"/></svg>'))
    assert "0.000 0.000 m\n10.000 0.000 l\n10.000 10.000 l\n0.000 10.000 l\ncp" in eps


@pytest.mark.parametrize("value,expected", [
    ("#ff8000", "1.000 0.502 0.000 rgb\n"),
    ("green", "0 1 0 rgb\n"),
    ("WHITE", "1 1 1 rgb\n"),
    ("rgba(0, 0, 0, 0.5)", "0.500 0.500 0.500 rgb\n"),
    ("url(#pattern)", "% paint url(#pattern) not representable, using black\n0 0 0 rgb\n"),
    ("chartreuse-ish", "0 0 0 rgb\n"),
])
def test_ps_color(value, expected):
    assert ps_color(value) == expected
