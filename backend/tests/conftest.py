"""Shared test fixtures."""

from __future__ import annotations

import pytest
from PIL import Image, ImageDraw

from logopack.config import Settings
from logopack.errors import BackendUnavailableError, ConversionError
from logopack.raster.renderer import RasterRenderer
from logopack.raster.surface import BackendSurface


# The minimal red square, exactly as a client would upload it (no xmlns)
RED_SQUARE_SVG = '<svg viewBox="0 0 100 100"><rect x="0" y="0" width="100" height="100" fill="#ff0000"/></svg>'

RECT_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <rect x="10" y="20" width="30" height="40" fill="#336699"/>
</svg>'''

LOGO_SVG = '''<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" viewBox="0 0 200 100" width="200" height="100">
  <defs>
    <linearGradient id="sky">
      <stop offset="0" stop-color="#000000"/>
      <stop offset="1" stop-color="#ffffff"/>
    </linearGradient>
    <clipPath id="clip"><rect width="10" height="10" fill="#123456"/></clipPath>
  </defs>
  <style>.accent { fill: #ff00ff; }</style>
  <g fill="#ff6600" stroke="#003366" stroke-width="3" transform="translate(10 5)">
    <path d="M10 10 L60 10 Q80 40 60 70 Z"/>
    <circle cx="100" cy="40" r="20" style="fill:#00aa00;opacity:0.5"/>
  </g>
  <rect x="130" y="10" width="50" height="30" rx="5" fill="url(#sky)"/>
  <ellipse cx="150" cy="75" rx="20" ry="10" fill="none" stroke="blue"/>
  <polygon points="5,95 15,80 25,95" fill="rgb(10, 20, 30)"/>
  <line x1="0" y1="0" x2="200" y2="100" stroke="#cccccc"/>
  <rect x="0" y="0" width="5" height="5" fill="#abcdef" display="none"/>
  <g visibility="hidden"><circle cx="5" cy="5" r="2" fill="#fedcba"/></g>
</svg>'''

EMPTY_SVG = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 50 80"><defs/></svg>'

SYMBOL_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" viewBox="0 0 100 100">
  <defs>
    <linearGradient id="grad"><stop offset="0" stop-color="#123456"/></linearGradient>
    <symbol id="mark"><path d="M0 0 L20 0 L20 20 Z" fill="#ff0000"/></symbol>
    <circle id="dot" cx="5" cy="5" r="5"/>
  </defs>
  <use xlink:href="#mark" x="10" y="30"/>
  <use href="#dot" x="50" y="50" fill="#ff00ff"/>
</svg>'''

GROUP_NONE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2">
  <circle cx="12" cy="12" r="10"/>
  <path d="M8 14s1.5 2 4 2 4-2 4-2"/>
</svg>'''


class FakeBackend:
    """Draws a red square PNG at the requested size; no external tools."""

    name = "fake"

    def __init__(self, fail_on_width: int | None = None) -> None:
        self.fail_on_width = fail_on_width
        self.calls: list[dict] = []

    def version(self) -> str:
        return "Fake 1.0"

    def render(self, input_path, export_type, output_path, dpi=None, *, area="page", width=None, height=None):
        self.calls.append({
            "input_path": input_path, "export_type": export_type, "dpi": dpi,
            "width": width, "height": height,
        })
        if width is not None and width == self.fail_on_width:
            raise ConversionError(f"simulated failure at width {width}")
        if export_type != "png":
            with open(output_path, "wb") as fh:
                fh.write(b"%fake " + export_type.encode())
            return output_path
        w, h = width or 100, height or 100
        img = Image.new("RGBA", (w, h), (0, 0, 0, 0))
        ImageDraw.Draw(img).rectangle([w // 4, h // 4, 3 * w // 4, 3 * h // 4], fill=(255, 0, 0, 255))
        img.save(output_path, format="PNG")
        return output_path


class UnavailableBackend(FakeBackend):
    name = "missing"

    def version(self) -> str:
        raise BackendUnavailableError("missing is not installed")


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(temp_dir=str(tmp_path))


@pytest.fixture
def renderer(fake_backend, test_settings) -> RasterRenderer:
    return RasterRenderer(BackendSurface(fake_backend, test_settings.work_dir))


@pytest.fixture
def registry():
    from logopack.engine.registry import get_registry
    from logopack.main import _register_exporters

    _register_exporters()
    return get_registry()
