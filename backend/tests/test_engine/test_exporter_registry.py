"""Tests for the exporter registry."""

import pytest

from logopack.engine.registry import ExporterRegistry, ExporterSpec
from logopack.models.requests import FormatTag


def _noop(ctx, dpi):
    return b"x"


def test_register_and_get():
    reg = ExporterRegistry()
    reg.register(ExporterSpec(format=FormatTag.PNG, extension="png", fn=_noop, per_resolution=True))
    assert reg.count == 1
    assert reg.get(FormatTag.PNG).per_resolution
    assert not reg.has(FormatTag.SVG)


def test_duplicate_format_rejected():
    reg = ExporterRegistry()
    reg.register(ExporterSpec(format=FormatTag.SVG, extension="svg", fn=_noop))
    with pytest.raises(ValueError, match="Duplicate exporter"):
        reg.register(ExporterSpec(format=FormatTag.SVG, extension="svg", fn=_noop))


def test_all_formats_registered(registry):
    assert registry.count == 6
    specs = {f: registry.get(f) for f in FormatTag}
    assert {f for f, s in specs.items() if s.per_resolution} == {FormatTag.PNG, FormatTag.JPG}
    assert {f for f, s in specs.items() if s.vector_only} == {FormatTag.SVG, FormatTag.EPS}
    assert specs[FormatTag.ICO].extension == "ico"
