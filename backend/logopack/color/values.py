"""CSS/SVG color value parsing and formatting."""

from __future__ import annotations

import re

RGB = tuple[int, int, int]

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_RGB_FUNC_RE = re.compile(
    r"^rgba?\(\s*([\d.]+%?)\s*[, ]\s*([\d.]+%?)\s*[, ]\s*([\d.]+%?)\s*(?:[,/]\s*([\d.]+%?)\s*)?\)$",
    re.IGNORECASE,
)
_URL_RE = re.compile(r"^url\(\s*['\"]?#([^'\")\s]+)['\"]?\s*\)", re.IGNORECASE)

# Keywords the exporters map directly; anything else must be hex or rgb().
NAMED_COLORS: dict[str, RGB] = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 128, 0),
    "lime": (0, 255, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "cyan": (0, 255, 255),
    "magenta": (255, 0, 255),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "orange": (255, 165, 0),
    "purple": (128, 0, 128),
}

NONE_VALUES = frozenset({"none", "transparent"})


def is_none(value: str | None) -> bool:
    return value is not None and value.strip().lower() in NONE_VALUES


def parse_hex(value: str | None) -> RGB | None:
    """Parse ``#rgb`` / ``#rrggbb`` (leading ``#`` optional). None if not hex."""
    if not value:
        return None
    m = _HEX_RE.match(value.strip())
    if not m:
        return None
    digits = m.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def to_hex(rgb: RGB) -> str:
    r, g, b = (max(0, min(255, int(round(c)))) for c in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def normalize_hex(value: str) -> str | None:
    rgb = parse_hex(value)
    return to_hex(rgb) if rgb is not None else None


def invert_hex(value: str) -> str:
    """255 - channel on every channel. Raises ValueError for non-hex input."""
    rgb = parse_hex(value)
    if rgb is None:
        raise ValueError(f"Not a hex color: {value!r}")
    return to_hex(invert_rgb(rgb))


def invert_rgb(rgb: RGB) -> RGB:
    return (255 - rgb[0], 255 - rgb[1], 255 - rgb[2])


def _channel(token: str) -> float:
    if token.endswith("%"):
        return float(token[:-1]) * 255.0 / 100.0
    return float(token)


def parse_rgba(value: str | None) -> tuple[RGB, float] | None:
    """Parse hex, named, rgb() or rgba() into ((r, g, b), alpha)."""
    if not value:
        return None
    text = value.strip()
    lowered = text.lower()
    if lowered in NAMED_COLORS:
        return NAMED_COLORS[lowered], 1.0
    rgb = parse_hex(text) if text.startswith("#") else None
    if rgb is not None:
        return rgb, 1.0
    m = _RGB_FUNC_RE.match(text)
    if m:
        r, g, b = (int(round(min(255.0, _channel(t)))) for t in m.groups()[:3])
        alpha = 1.0
        if m.group(4) is not None:
            a = m.group(4)
            alpha = float(a[:-1]) / 100.0 if a.endswith("%") else float(a)
        return (r, g, b), max(0.0, min(1.0, alpha))
    return None


def blend_with_white(rgb: RGB, alpha: float) -> tuple[float, float, float]:
    """Approximate transparency on an opaque medium: channel*alpha + (1 - alpha), in 0..1."""
    return tuple(c / 255.0 * alpha + (1.0 - alpha) for c in rgb)  # type: ignore[return-value]


def url_reference(value: str | None) -> str | None:
    """Return the fragment id of a ``url(#id)`` paint reference."""
    if not value:
        return None
    m = _URL_RE.match(value.strip())
    return m.group(1) if m else None
