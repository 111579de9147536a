"""Rendering surface: decode a source image and draw it at a pixel size.

Injected into the raster renderer so the drawing machinery (external CLI,
in-process cairo, Pillow) is never ambient global state.
"""

from __future__ import annotations

import io
import logging
import os
import uuid
from dataclasses import dataclass
from typing import Protocol

import numpy as np
from numpy.typing import NDArray
from PIL import Image, UnidentifiedImageError

from logopack.backends.base import AREA_PAGE, RenderBackend
from logopack.errors import ImageLoadError, InvalidInputError
from logopack.svg.document import parse_svg
from logopack.svg.geometry import intrinsic_size

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodedImage:
    """Intrinsic size plus the means to get at the pixels."""

    kind: str  # "svg" or "bitmap"
    width: float
    height: float
    data: bytes
    path: str | None = None
    pixels: NDArray[np.uint8] | None = None


class RenderingSurface(Protocol):
    def decode(self, data: bytes, path: str | None = None) -> DecodedImage: ...

    def draw_scaled(self, image: DecodedImage, width: int, height: int) -> NDArray[np.uint8]: ...


def _looks_like_svg(data: bytes) -> bool:
    head = data[:512].lstrip().lower()
    return head.startswith(b"<?xml") or head.startswith(b"<svg") or b"<svg" in head


def png_to_rgba(png: bytes) -> NDArray[np.uint8]:
    with Image.open(io.BytesIO(png)) as img:
        return np.asarray(img.convert("RGBA"), dtype=np.uint8).copy()


class BackendSurface:
    """SVG drawn by a rendering backend; bitmaps decoded and scaled by Pillow."""

    def __init__(self, backend: RenderBackend, work_dir: str) -> None:
        self.backend = backend
        self.work_dir = work_dir

    def decode(self, data: bytes, path: str | None = None) -> DecodedImage:
        if _looks_like_svg(data):
            try:
                root = parse_svg(data)
            except InvalidInputError as e:
                raise ImageLoadError(f"SVG could not be decoded: {e.message}") from e
            width, height = intrinsic_size(root)
            return DecodedImage(kind="svg", width=width, height=height, data=data, path=path)
        try:
            pixels = png_to_rgba(data)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise ImageLoadError(f"Image could not be decoded: {e}") from e
        height, width = pixels.shape[:2]
        return DecodedImage(kind="bitmap", width=float(width), height=float(height), data=data, pixels=pixels)

    def draw_scaled(self, image: DecodedImage, width: int, height: int) -> NDArray[np.uint8]:
        if image.kind == "bitmap":
            if image.pixels is None:
                raise ImageLoadError("Bitmap has no decoded pixels")
            resized = Image.fromarray(image.pixels).resize((width, height), Image.Resampling.LANCZOS)
            return np.asarray(resized, dtype=np.uint8).copy()
        return self._render_svg(image, width, height)

    def _render_svg(self, image: DecodedImage, width: int, height: int) -> NDArray[np.uint8]:
        token = uuid.uuid4().hex
        owned_input = image.path is None
        input_path = image.path or os.path.join(self.work_dir, f"logo-{token}.svg")
        output_path = os.path.join(self.work_dir, f"logo-{token}_{width}x{height}.png")
        try:
            if owned_input:
                with open(input_path, "wb") as fh:
                    fh.write(image.data)
            self.backend.render(input_path, "png", output_path, area=AREA_PAGE, width=width, height=height)
            with open(output_path, "rb") as fh:
                pixels = png_to_rgba(fh.read())
        except (UnidentifiedImageError, OSError) as e:
            raise ImageLoadError(f"Rendered PNG could not be read: {e}") from e
        finally:
            for p in ([input_path] if owned_input else []) + [output_path]:
                if os.path.exists(p):
                    os.remove(p)
        if pixels.shape[:2] != (height, width):
            pixels = np.asarray(Image.fromarray(pixels).resize((width, height), Image.Resampling.LANCZOS), dtype=np.uint8).copy()
        return pixels
