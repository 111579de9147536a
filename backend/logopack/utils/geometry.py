"""Leaf-node geometry helpers: affine matrices, bounds, page fitting. No engine imports."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

Affine = tuple[float, float, float, float, float, float]

IDENTITY_AFFINE: Affine = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


def to_matrix(m: Affine) -> NDArray[np.float64]:
    """SVG/PostScript (a b c d e f) → 3×3 column-vector matrix."""
    a, b, c, d, e, f = m
    return np.array([[a, c, e], [b, d, f], [0.0, 0.0, 1.0]], dtype=np.float64)


def from_matrix(mat: NDArray[np.float64]) -> Affine:
    return (
        float(mat[0, 0]), float(mat[1, 0]),
        float(mat[0, 1]), float(mat[1, 1]),
        float(mat[0, 2]), float(mat[1, 2]),
    )


def compose(*transforms: Affine) -> Affine:
    """Left-to-right composition, as in an SVG transform list."""
    mat = np.identity(3)
    for t in transforms:
        mat = mat @ to_matrix(t)
    return from_matrix(mat)


def is_identity(m: Affine, eps: float = 1e-12) -> bool:
    return all(abs(v - w) < eps for v, w in zip(m, IDENTITY_AFFINE))


def flip_conjugate(m: Affine, height: float) -> Affine:
    """Re-express an SVG-space transform in y-up page space.

    With F(x, y) = (x, height - y), returns F·M·F so that applying it to
    flipped coordinates equals flipping the SVG-space result.
    """
    a, b, c, d, e, f = m
    return (a, -b, -c, d, c * height + e, height - d * height - f)


def fit_into(
    src_w: float, src_h: float, page_w: float, page_h: float, fill: float = 0.8,
) -> tuple[float, float, float]:
    """Uniform scale filling ``fill`` of the page, plus the centering offset.

    Returns (scale, offset_x, offset_y).
    """
    src_w = src_w if src_w > 0 else page_w
    src_h = src_h if src_h > 0 else page_h
    scale = min(fill * page_w / src_w, fill * page_h / src_h)
    return scale, (page_w - src_w * scale) / 2.0, (page_h - src_h * scale) / 2.0


def bbox_padding(width: float, height: float) -> float:
    """EPS bounding-box margin: 5% of the short side, at least 10 units."""
    return max(10.0, min(width, height) * 0.05)


def deg2rad(deg: float) -> float:
    return deg * math.pi / 180.0
