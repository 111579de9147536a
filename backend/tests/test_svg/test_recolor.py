"""Tests for SVG recoloring (attribute rewrite and filter matrix)."""

import pytest

from logopack.color.transform import ColorSpec
from logopack.svg.document import parse_svg, serialize_svg
from logopack.svg.recolor import FILTER_ID, apply_filter_matrix, recolor, recolor_with
from tests.conftest import GROUP_NONE_SVG, LOGO_SVG, RED_SQUARE_SVG, SYMBOL_SVG


def rect_of(svg_text):
    return parse_svg(svg_text).children[0]


class TestFlatRecolor:
    def test_black_square(self):
        out = serialize_svg(recolor(parse_svg(RED_SQUARE_SVG), ColorSpec.parse("Black")))
        assert 'fill="#000000"' in out
        assert "#ff0000" not in out

    def test_original_is_identity(self):
        root = parse_svg(LOGO_SVG)
        assert recolor(root, ColorSpec.parse("Original")) is root

    def test_unknown_mode_is_noop(self):
        root = parse_svg(LOGO_SVG)
        assert recolor(root, ColorSpec.parse("Plaid")) is root

    def test_input_tree_unchanged(self):
        root = parse_svg(RED_SQUARE_SVG)
        before = serialize_svg(root)
        recolor(root, ColorSpec.parse("White"))
        assert serialize_svg(root) == before

    def test_stroke_and_gradient_redirected(self):
        out = serialize_svg(recolor(parse_svg(LOGO_SVG), ColorSpec.parse("Custom", "#112233")))
        assert 'stroke="#003366"' not in out
        assert 'fill="url(#sky)"' not in out
        assert "#ff6600" not in out
        assert "#00aa00" not in out

    def test_style_block_emptied_and_inline_style_folded(self):
        root = recolor(parse_svg(LOGO_SVG), ColorSpec.parse("Black"))
        style = root.find_all("style")[0]
        assert not style.text
        circle = root.find_all("circle")[0]
        assert not circle.has("style")
        assert circle.get("opacity") == "0.5"
        assert circle.get("fill") == "#000000"

    def test_none_fill_preserved(self):
        root = recolor(parse_svg(GROUP_NONE_SVG), ColorSpec.parse("White"))
        assert root.get("fill") == "none"
        circle = root.find_all("circle")[0]
        assert not circle.has("fill")
        assert circle.get("stroke") == "#ffffff"
        assert root.find_all("path")[0].get("stroke") == "#ffffff"

    def test_hidden_state_preserved(self):
        root = recolor(parse_svg(LOGO_SVG), ColorSpec.parse("Grayscale"))
        hidden = [r for r in root.find_all("rect") if r.get("display") == "none"]
        assert len(hidden) == 1
        assert hidden[0].get("fill") == "#808080"

    def test_clip_path_contents_untouched(self):
        root = recolor(parse_svg(LOGO_SVG), ColorSpec.parse("Black"))
        clip_rect = root.index_ids()["clip"].children[0]
        assert clip_rect.get("fill") == "#123456"

    def test_root_stroke_recolored_on_children(self):
        svg = '<svg fill="none" stroke="#ff0000"><circle cx="5" cy="5" r="4"/></svg>'
        root = recolor(parse_svg(svg), ColorSpec.parse("White"))
        circle = root.children[0]
        assert circle.get("stroke") == "#ffffff"
        assert not circle.has("fill")
        # Only the root keeps its own attribute
        assert serialize_svg(root).count("#ff0000") == 1

    def test_symbol_contents_recolored(self):
        root = recolor(parse_svg(SYMBOL_SVG), ColorSpec.parse("Black"))
        out = serialize_svg(root)
        assert root.index_ids()["mark"].children[0].get("fill") == "#000000"
        assert root.index_ids()["dot"].get("fill") == "#000000"
        assert "#ff0000" not in out
        assert root.index_ids()["grad"].children[0].get("stop-color") == "#123456"

    def test_opacity_overrides_stripped(self):
        root = recolor(parse_svg('<svg><rect width="1" height="1" fill="red" fill-opacity="0.3"/></svg>'),
                       ColorSpec.parse("Black"))
        assert not root.children[0].has("fill-opacity")


class TestInvertedRecolor:
    def test_red_becomes_cyan(self):
        rect = recolor(parse_svg(RED_SQUARE_SVG), ColorSpec.parse("Inverted")).children[0]
        assert rect.get("fill") == "#00ffff"

    def test_implicit_black_becomes_white(self):
        root = recolor(parse_svg('<svg><path d="M0 0 L1 1"/></svg>'), ColorSpec.parse("Inverted"))
        assert root.children[0].get("fill") == "#ffffff"

    def test_gradient_inverted_per_consumer(self):
        root = recolor(parse_svg(LOGO_SVG), ColorSpec.parse("Inverted"))
        rect = [r for r in root.find_all("rect") if r.get("rx") == "5"][0]
        assert rect.get("fill") == "#7f7f7f"

    def test_rgba_alpha_kept(self):
        svg = '<svg><rect width="1" height="1" fill="rgba(255,255,255,0.4)"/></svg>'
        rect = recolor(parse_svg(svg), ColorSpec.parse("Inverted")).children[0]
        assert rect.get("fill") == "#000000"
        assert rect.get("fill-opacity") == "0.4"

    def test_group_paint_written_through_to_children(self):
        root = recolor(parse_svg(LOGO_SVG), ColorSpec.parse("Inverted"))
        group = root.find_all("g")[0]
        assert group.get("fill") == "#0099ff"
        path = group.children[0]
        assert path.get("fill") == "#0099ff"
        assert path.get("stroke") == "#ffcc99"

    def test_root_fill_inverted_on_children(self):
        svg = '<svg fill="#ff0000"><path d="M0 0H10V10Z"/></svg>'
        root = recolor(parse_svg(svg), ColorSpec.parse("Inverted"))
        assert root.get("fill") == "#ff0000"
        assert root.children[0].get("fill") == "#00ffff"
        assert "#00ffff" in serialize_svg(root)

    def test_use_template_inherits_inverted_use_paint(self):
        root = recolor(parse_svg(SYMBOL_SVG), ColorSpec.parse("Inverted"))
        symbol_path = root.index_ids()["mark"].children[0]
        plain = root.index_ids()["dot"]
        assert symbol_path.get("fill") == "#00ffff"
        assert not plain.has("fill")
        use = root.find_all("use")[1]
        assert use.get("fill") == "#00ff00"


class TestFilterMatrix:
    def test_wraps_content_in_filter_group(self):
        root = apply_filter_matrix(parse_svg(LOGO_SVG), ColorSpec.parse("Grayscale"))
        assert [c.name for c in root.children] == ["defs", "g"]
        defs, group = root.children
        flt = defs.children[-1]
        assert flt.get("id") == FILTER_ID
        assert flt.get("color-interpolation-filters") == "sRGB"
        assert flt.children[0].get("values").startswith("0.2126 0.7152 0.0722 0 0")
        assert group.get("filter") == f"url(#{FILTER_ID})"

    def test_creates_defs_when_missing(self):
        root = apply_filter_matrix(parse_svg(RED_SQUARE_SVG), ColorSpec.parse("Black"))
        assert [c.name for c in root.children] == ["defs", "g"]
        assert root.children[1].children[0].get("fill") == "#ff0000"

    def test_original_untouched(self):
        root = parse_svg(RED_SQUARE_SVG)
        assert apply_filter_matrix(root, ColorSpec.parse("Original")) is root

    @pytest.mark.parametrize("strategy", ["rewrite", "filter"])
    def test_strategy_dispatch(self, strategy):
        root = recolor_with(strategy, parse_svg(RED_SQUARE_SVG), ColorSpec.parse("Black"))
        has_filter = any(el.name == "filter" for el in root.iter())
        assert has_filter is (strategy == "filter")
