"""SVG ``transform`` attribute → affine matrix."""

from __future__ import annotations

import logging
import math
import re

from logopack.utils.geometry import IDENTITY_AFFINE, Affine, compose, deg2rad

logger = logging.getLogger(__name__)

_FUNC_RE = re.compile(r"(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)", re.IGNORECASE)
_NUM_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def _function_matrix(name: str, args: list[float]) -> Affine | None:
    name = name.lower()
    if name == "matrix" and len(args) == 6:
        return (args[0], args[1], args[2], args[3], args[4], args[5])
    if name == "translate" and args:
        return (1.0, 0.0, 0.0, 1.0, args[0], args[1] if len(args) > 1 else 0.0)
    if name == "scale" and args:
        sx = args[0]
        sy = args[1] if len(args) > 1 else sx
        return (sx, 0.0, 0.0, sy, 0.0, 0.0)
    if name == "rotate" and args:
        rad = deg2rad(args[0])
        cos, sin = math.cos(rad), math.sin(rad)
        rot = (cos, sin, -sin, cos, 0.0, 0.0)
        if len(args) >= 3:
            cx, cy = args[1], args[2]
            return compose((1.0, 0.0, 0.0, 1.0, cx, cy), rot, (1.0, 0.0, 0.0, 1.0, -cx, -cy))
        return rot
    if name == "skewx" and args:
        return (1.0, 0.0, math.tan(deg2rad(args[0])), 1.0, 0.0, 0.0)
    if name == "skewy" and args:
        return (1.0, math.tan(deg2rad(args[0])), 0.0, 1.0, 0.0, 0.0)
    return None


def parse_transform(value: str | None) -> Affine:
    """Compose every function in a transform list. Malformed entries are ignored."""
    if not value or not value.strip():
        return IDENTITY_AFFINE
    matrices: list[Affine] = []
    for m in _FUNC_RE.finditer(value):
        args = [float(n) for n in _NUM_RE.findall(m.group(2))]
        matrix = _function_matrix(m.group(1), args)
        if matrix is None:
            logger.debug("Ignoring malformed transform %s(%s)", m.group(1), m.group(2))
            continue
        matrices.append(matrix)
    return compose(*matrices) if matrices else IDENTITY_AFFINE
