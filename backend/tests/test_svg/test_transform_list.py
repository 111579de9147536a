"""Tests for transform-attribute parsing."""

import pytest

from logopack.svg.transform_list import parse_transform
from logopack.utils.geometry import flip_conjugate


def apply(m, point):
    a, b, c, d, e, f = m
    x, y = point
    return (a * x + c * y + e, b * x + d * y + f)


def test_empty_is_identity():
    assert parse_transform(None) == (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


def test_translate_then_scale_composes_left_to_right():
    m = parse_transform("translate(10, 20) scale(2)")
    assert apply(m, (1.0, 1.0)) == pytest.approx((12.0, 22.0))


def test_rotate_about_center():
    m = parse_transform("rotate(90 10 10)")
    assert apply(m, (20.0, 10.0)) == pytest.approx((10.0, 20.0))


def test_matrix_and_skew():
    assert parse_transform("matrix(1 2 3 4 5 6)") == (1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
    m = parse_transform("skewX(45)")
    assert apply(m, (0.0, 1.0)) == pytest.approx((1.0, 1.0))


def test_malformed_entries_ignored():
    assert parse_transform("translate() scale(3)") == (3.0, 0.0, 0.0, 3.0, 0.0, 0.0)


def test_flip_conjugate_matches_flipped_result():
    m = parse_transform("translate(5 7) rotate(30)")
    h = 100.0
    conj = flip_conjugate(m, h)
    x, y = 12.0, 34.0
    expected = apply(m, (x, y))
    got = apply(conj, (x, h - y))
    assert got == pytest.approx((expected[0], h - expected[1]))
