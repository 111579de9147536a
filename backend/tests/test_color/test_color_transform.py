"""Tests for ColorSpec parsing and ColorTransform application."""

import numpy as np
import pytest

from logopack.color.transform import (
    ColorMode,
    ColorSpec,
    ColorTransform,
    FILTER_MATRICES,
    build_color_transform,
    build_filter_matrix,
)
from logopack.color.values import invert_hex


@pytest.fixture
def rgba_pixels() -> np.ndarray:
    rng = np.random.default_rng(7)
    return rng.integers(0, 256, size=(8, 8, 4), dtype=np.uint8)


class TestColorSpec:
    def test_named_modes_case_insensitive(self):
        assert ColorSpec.parse("black").mode is ColorMode.BLACK
        assert ColorSpec.parse("GRAYSCALE").mode is ColorMode.GRAYSCALE
        assert ColorSpec.parse("Original").is_identity

    def test_custom_with_separate_color(self):
        spec = ColorSpec.parse("Custom", "#1A2B3C")
        assert spec.mode is ColorMode.CUSTOM
        assert spec.hex == "#1a2b3c"
        assert spec.label == "Custom-1a2b3c"

    def test_custom_inline_and_bare_hex(self):
        assert ColorSpec.parse("Custom(#abc)").hex == "#aabbcc"
        assert ColorSpec.parse("#00ff00").label == "Custom-00ff00"

    def test_unknown_is_identity_not_error(self):
        spec = ColorSpec.parse("Sepia tone")
        assert spec.mode is ColorMode.UNKNOWN
        assert spec.is_identity
        assert spec.label == "Sepia-tone"

    def test_custom_without_valid_color_is_noop(self):
        assert ColorSpec.parse("Custom", "not-a-color").is_identity


class TestFilterMatrix:
    def test_grayscale_luminance(self):
        t = build_filter_matrix(ColorSpec.parse("Grayscale"))
        assert t.apply_rgba((200, 100, 50, 255)) == (118, 118, 118, 255)

    @pytest.mark.parametrize("mode", ["Black", "White", "Grayscale", "Inverted", "Custom(#336699)"])
    def test_alpha_preserved(self, mode, rgba_pixels):
        t = build_filter_matrix(ColorSpec.parse(mode))
        out = t.apply_pixels(rgba_pixels)
        assert np.array_equal(out[..., 3], rgba_pixels[..., 3])

    def test_inverted_matrix(self):
        t = build_filter_matrix(ColorSpec.parse("Inverted"))
        assert t.apply_rgba((255, 0, 10, 128)) == (0, 255, 245, 128)

    def test_custom_constant_matrix(self):
        t = build_filter_matrix(ColorSpec.parse("#336699"))
        assert t.apply_rgba((1, 2, 3, 40)) == (0x33, 0x66, 0x99, 40)

    def test_matrix_values_string(self):
        t = ColorTransform(kind="matrix", matrix=FILTER_MATRICES[ColorMode.BLACK])
        assert t.matrix_values().split() == ["0"] * 18 + ["1", "0"]

    def test_original_has_no_matrix(self):
        assert build_filter_matrix(ColorSpec.parse("Original")).matrix is None


class TestFlatTransform:
    def test_flat_black(self):
        t = build_color_transform(ColorSpec.parse("Black"))
        assert t.kind == "flat"
        assert t.map_rgb((12, 34, 56)) == (0, 0, 0)

    def test_grayscale_flat_target(self):
        assert build_color_transform(ColorSpec.parse("Grayscale")).rgb == (128, 128, 128)

    def test_invert(self):
        t = build_color_transform(ColorSpec.parse("Inverted"))
        assert t.map_rgb((255, 0, 0)) == (0, 255, 255)

    @pytest.mark.parametrize("color", ["#000000", "#ffffff", "#12ab9f", "#808080"])
    def test_inversion_involution(self, color):
        assert invert_hex(invert_hex(color)) == color

    @pytest.mark.parametrize("mode", ["Black", "White", "Grayscale", "Inverted"])
    def test_flat_alpha_preserved(self, mode, rgba_pixels):
        out = build_color_transform(ColorSpec.parse(mode)).apply_pixels(rgba_pixels)
        assert np.array_equal(out[..., 3], rgba_pixels[..., 3])
