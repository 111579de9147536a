"""RasterRenderer — DPI scaling, pixel-level color ops, PNG/JPG/ICO encoding."""

from __future__ import annotations

import io
import logging
import re

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from logopack.color.transform import ColorMode, ColorSpec
from logopack.raster.surface import DecodedImage, RenderingSurface

logger = logging.getLogger(__name__)

BASE_DPI = 72.0

_DPI_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(?:dpi)?\s*$", re.IGNORECASE)


def parse_dpi(label: str) -> float:
    """``"300dpi"`` → 300.0. Raises ValueError for anything else."""
    m = _DPI_RE.match(label or "")
    if not m or float(m.group(1)) <= 0:
        raise ValueError(f"Not a resolution: {label!r}")
    return float(m.group(1))


def scaled_size(base_width: float, base_height: float, dpi: float, fallback: int = 300) -> tuple[int, int]:
    """Output pixel size: ``round(base * dpi / 72)``; base falls back to ``fallback`` square."""
    if base_width <= 0 or base_height <= 0:
        base_width = base_height = float(fallback)
    scale = dpi / BASE_DPI
    return max(1, int(round(base_width * scale))), max(1, int(round(base_height * scale)))


def apply_pixel_op(pixels: NDArray[np.uint8], spec: ColorSpec) -> NDArray[np.uint8]:
    """Per-pixel recolor of an H×W×4 RGBA buffer. Alpha is never touched."""
    out = pixels.copy()
    rgb = out[..., :3]
    if spec.mode is ColorMode.BLACK:
        rgb[...] = 0
    elif spec.mode is ColorMode.WHITE:
        rgb[...] = 255
    elif spec.mode is ColorMode.GRAYSCALE:
        total = pixels[..., :3].astype(np.int32).sum(axis=-1)
        gray = ((total + 1) // 3).astype(np.uint8)
        rgb[...] = gray[..., None]
    elif spec.mode is ColorMode.INVERTED:
        rgb[...] = 255 - pixels[..., :3]
    elif spec.mode is ColorMode.CUSTOM and spec.target_rgb is not None:
        visible = out[..., 3] > 0
        rgb[visible] = np.array(spec.target_rgb, dtype=np.uint8)
    return out


def encode_png(pixels: NDArray[np.uint8]) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(pixels).save(buf, format="PNG", optimize=True)
    return buf.getvalue()


def flatten_on_white(pixels: NDArray[np.uint8]) -> NDArray[np.uint8]:
    """Composite RGBA over opaque white → H×W×3 RGB."""
    alpha = pixels[..., 3:4].astype(np.float64) / 255.0
    rgb = pixels[..., :3].astype(np.float64) * alpha + 255.0 * (1.0 - alpha)
    return np.clip(np.rint(rgb), 0, 255).astype(np.uint8)


def encode_jpeg(pixels: NDArray[np.uint8], quality: int = 90) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(flatten_on_white(pixels)).save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def encode_ico(pixels: NDArray[np.uint8], size: int = 32) -> bytes:
    """Square PNG of ``size`` px. Not a multi-resolution ICO container."""
    img = Image.fromarray(pixels).resize((size, size), Image.Resampling.LANCZOS)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


class RasterRenderer:
    """Rasterize through an injected surface, then recolor pixels when asked."""

    def __init__(self, surface: RenderingSurface, fallback_size: int = 300) -> None:
        self.surface = surface
        self.fallback_size = fallback_size

    def decode(self, data: bytes, path: str | None = None) -> DecodedImage:
        return self.surface.decode(data, path)

    def rasterize(self, image: DecodedImage, width: int, height: int) -> NDArray[np.uint8]:
        return self.surface.draw_scaled(image, width, height)

    def rasterize_at(self, image: DecodedImage, dpi: float) -> NDArray[np.uint8]:
        width, height = scaled_size(image.width, image.height, dpi, self.fallback_size)
        pixels = self.rasterize(image, width, height)
        logger.debug("Rasterized %s at %gdpi → %dx%d", image.kind, dpi, width, height)
        return pixels

    def natural(self, image: DecodedImage) -> NDArray[np.uint8]:
        """Render at intrinsic size (72 dpi)."""
        return self.rasterize_at(image, BASE_DPI)

    def apply_color(self, pixels: NDArray[np.uint8], spec: ColorSpec) -> NDArray[np.uint8]:
        return apply_pixel_op(pixels, spec)
