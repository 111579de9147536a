"""ColorSpec (what the user asked for) and ColorTransform (how to apply it).

A ColorTransform is either a 4×5 color matrix (filter-based recoloring,
R', G', B', A' as linear combinations of normalized RGBA plus a bias column)
or a flat/invert rule for per-element attribute rewriting. Alpha is always
carried through unchanged.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from logopack.color.values import RGB, invert_rgb, normalize_hex, parse_hex

logger = logging.getLogger(__name__)


class ColorMode(str, enum.Enum):
    ORIGINAL = "Original"
    BLACK = "Black"
    WHITE = "White"
    GRAYSCALE = "Grayscale"
    INVERTED = "Inverted"
    CUSTOM = "Custom"
    # Unrecognized request strings: exported untouched under their own label
    UNKNOWN = "Unknown"


# Flat targets for attribute rewriting. Grayscale flattens to mid gray.
FLAT_TARGETS: dict[ColorMode, str] = {
    ColorMode.BLACK: "#000000",
    ColorMode.WHITE: "#ffffff",
    ColorMode.GRAYSCALE: "#808080",
}

# ITU-R BT.709 luminance weights
LUMA_R, LUMA_G, LUMA_B = 0.2126, 0.7152, 0.0722

# Row-major 4×5 matrices: rows R, G, B, A; columns r, g, b, a, bias
FILTER_MATRICES: dict[ColorMode, tuple[float, ...]] = {
    ColorMode.BLACK: (
        0, 0, 0, 0, 0,
        0, 0, 0, 0, 0,
        0, 0, 0, 0, 0,
        0, 0, 0, 1, 0,
    ),
    ColorMode.WHITE: (
        0, 0, 0, 0, 1,
        0, 0, 0, 0, 1,
        0, 0, 0, 0, 1,
        0, 0, 0, 1, 0,
    ),
    ColorMode.GRAYSCALE: (
        LUMA_R, LUMA_G, LUMA_B, 0, 0,
        LUMA_R, LUMA_G, LUMA_B, 0, 0,
        LUMA_R, LUMA_G, LUMA_B, 0, 0,
        0, 0, 0, 1, 0,
    ),
    ColorMode.INVERTED: (
        -1, 0, 0, 0, 1,
        0, -1, 0, 0, 1,
        0, 0, -1, 0, 1,
        0, 0, 0, 1, 0,
    ),
}

_LABEL_UNSAFE_RE = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class ColorSpec:
    """One requested color variant."""

    mode: ColorMode
    label: str
    hex: str | None = None

    @classmethod
    def parse(cls, tag: str, custom_color: str | None = None) -> "ColorSpec":
        """Parse a request color entry.

        Accepts the mode names (case-insensitive), ``Custom`` together with a
        separate custom color, or a bare ``#rrggbb``. Never raises: anything
        unrecognized becomes an UNKNOWN (no-op) variant.
        """
        raw = (tag or "").strip()
        lowered = raw.lower()
        for mode in (ColorMode.ORIGINAL, ColorMode.BLACK, ColorMode.WHITE,
                     ColorMode.GRAYSCALE, ColorMode.INVERTED):
            if lowered == mode.value.lower():
                return cls(mode=mode, label=mode.value, hex=FLAT_TARGETS.get(mode))

        candidate = None
        if lowered == "custom":
            candidate = custom_color
        elif lowered.startswith("custom(") and raw.endswith(")"):
            candidate = raw[len("custom("):-1]
        elif raw.startswith("#"):
            candidate = raw

        if candidate is not None:
            hex_value = normalize_hex(candidate)
            if hex_value is not None:
                return cls(mode=ColorMode.CUSTOM, label=f"Custom-{hex_value[1:]}", hex=hex_value)
            logger.warning("Custom color %r is not a hex color; exporting unchanged", candidate)

        label = _LABEL_UNSAFE_RE.sub("-", raw).strip("-") or "Unknown"
        return cls(mode=ColorMode.UNKNOWN, label=label)

    @property
    def is_identity(self) -> bool:
        return self.mode in (ColorMode.ORIGINAL, ColorMode.UNKNOWN)

    @property
    def target_rgb(self) -> RGB | None:
        return parse_hex(self.hex) if self.hex else None


@dataclass(frozen=True)
class ColorTransform:
    """A color-substitution operation.

    kind:
      - "identity": leave colors alone
      - "flat": replace every visible color with ``rgb``
      - "invert": 255 - channel
      - "matrix": 4×5 color matrix in ``matrix``
    """

    kind: str
    rgb: RGB | None = None
    matrix: tuple[float, ...] | None = None

    def map_rgb(self, rgb: RGB) -> RGB:
        if self.kind == "flat" and self.rgb is not None:
            return self.rgb
        if self.kind == "invert":
            return invert_rgb(rgb)
        if self.kind == "matrix" and self.matrix is not None:
            r, g, b, _ = self.apply_rgba((rgb[0], rgb[1], rgb[2], 255))
            return (r, g, b)
        return rgb

    def apply_rgba(self, rgba: tuple[int, int, int, int]) -> tuple[int, int, int, int]:
        """Apply to one RGBA pixel (0..255 channels). Alpha is never changed."""
        if self.kind != "matrix" or self.matrix is None:
            r, g, b = self.map_rgb((rgba[0], rgba[1], rgba[2]))
            return (r, g, b, rgba[3])
        pixels = np.array([[rgba]], dtype=np.uint8)
        out = self.apply_pixels(pixels)[0, 0]
        return (int(out[0]), int(out[1]), int(out[2]), int(out[3]))

    def apply_pixels(self, pixels: NDArray[np.uint8]) -> NDArray[np.uint8]:
        """Apply to an H×W×4 uint8 RGBA array, returning a new array."""
        out = pixels.copy()
        if self.kind == "identity":
            return out
        if self.kind == "flat" and self.rgb is not None:
            out[..., :3] = np.array(self.rgb, dtype=np.uint8)
            return out
        if self.kind == "invert":
            out[..., :3] = 255 - pixels[..., :3]
            return out
        m = np.array(self.matrix, dtype=np.float64).reshape(4, 5)
        norm = pixels.astype(np.float64) / 255.0
        rgb = norm @ m[:3, :4].T + m[:3, 4]
        out[..., :3] = np.clip(np.rint(rgb * 255.0), 0, 255).astype(np.uint8)
        return out

    def matrix_values(self) -> str:
        """Space-separated values for an ``feColorMatrix``."""
        if self.matrix is None:
            return ""
        return " ".join(_fmt(v) for v in self.matrix)


def _fmt(v: float) -> str:
    return str(int(v)) if float(v).is_integer() else repr(float(v))


IDENTITY = ColorTransform(kind="identity")


def build_color_transform(spec: ColorSpec) -> ColorTransform:
    """Attribute-rewriting transform: flat replace, inversion, or identity."""
    if spec.is_identity:
        return IDENTITY
    if spec.mode is ColorMode.INVERTED:
        return ColorTransform(kind="invert")
    rgb = spec.target_rgb
    if rgb is None:
        return IDENTITY
    return ColorTransform(kind="flat", rgb=rgb)


def build_filter_matrix(spec: ColorSpec) -> ColorTransform:
    """Filter-based transform: one 4×5 matrix per mode.

    Custom colors become a constant-RGB matrix (zero coefficients, bias =
    target / 255); the alpha row is always the identity row.
    """
    if spec.mode in FILTER_MATRICES:
        return ColorTransform(kind="matrix", matrix=FILTER_MATRICES[spec.mode])
    if spec.mode is ColorMode.CUSTOM and spec.target_rgb is not None:
        r, g, b = (c / 255.0 for c in spec.target_rgb)
        matrix = (
            0, 0, 0, 0, round(r, 6),
            0, 0, 0, 0, round(g, 6),
            0, 0, 0, 0, round(b, 6),
            0, 0, 0, 1, 0,
        )
        return ColorTransform(kind="matrix", matrix=matrix)
    return IDENTITY
