"""Tests for the Inkscape and CairoSVG rendering backends."""

import subprocess

import pytest

from logopack.backends import inkscape as inkscape_module
from logopack.backends.cairo import CairoSvgBackend
from logopack.backends.inkscape import InkscapeBackend
from logopack.backends.loader import check_backend, load_backend
from logopack.config import Settings
from logopack.errors import BackendUnavailableError, ConversionError
from tests.conftest import RED_SQUARE_SVG


class FakeRun:
    """Stands in for subprocess.run; records argv and writes the output file."""

    def __init__(self, returncode=0, stdout="", stderr="", raises=None):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.raises = raises
        self.argv = None

    def __call__(self, argv, capture_output, text, timeout, check):
        self.argv = argv
        if self.raises is not None:
            raise self.raises
        for arg in argv:
            if arg.startswith("--export-filename=") and self.returncode == 0:
                with open(arg.split("=", 1)[1], "wb") as fh:
                    fh.write(b"out")
        return subprocess.CompletedProcess(argv, self.returncode, self.stdout, self.stderr)


@pytest.fixture
def inkscape(monkeypatch):
    monkeypatch.setattr(inkscape_module.shutil, "which", lambda name: "/usr/bin/inkscape")
    return InkscapeBackend("inkscape", timeout_s=5)


class TestInkscape:
    def test_png_command(self, inkscape, monkeypatch, tmp_path):
        run = FakeRun()
        monkeypatch.setattr(inkscape_module.subprocess, "run", run)
        out = tmp_path / "out.png"
        inkscape.render("in.svg", "png", str(out), 300)
        assert run.argv[:2] == ["/usr/bin/inkscape", "in.svg"]
        assert "--export-type=png" in run.argv
        assert "--export-dpi=300" in run.argv
        assert "--export-area-drawing" in run.argv
        assert f"--export-filename={out}" in run.argv

    def test_exact_size_overrides_dpi(self, inkscape, monkeypatch, tmp_path):
        run = FakeRun()
        monkeypatch.setattr(inkscape_module.subprocess, "run", run)
        inkscape.render("in.svg", "png", str(tmp_path / "o.png"), 300, area="page", width=64, height=32)
        assert "--export-area-page" in run.argv
        assert "--export-width=64" in run.argv
        assert not any(a.startswith("--export-dpi") for a in run.argv)

    def test_version(self, inkscape, monkeypatch):
        monkeypatch.setattr(inkscape_module.subprocess, "run", FakeRun(stdout="Inkscape 1.2.2 (b0a8486541, 2022-12-01)\n"))
        assert inkscape.version() == "Inkscape 1.2.2 (b0a8486541, 2022-12-01)"

    def test_missing_binary(self, monkeypatch):
        monkeypatch.setattr(inkscape_module.shutil, "which", lambda name: None)
        backend = InkscapeBackend("inkscape")
        with pytest.raises(BackendUnavailableError):
            backend.version()
        assert check_backend(backend).available is False

    def test_nonzero_exit(self, inkscape, monkeypatch, tmp_path):
        monkeypatch.setattr(inkscape_module.subprocess, "run", FakeRun(returncode=1, stderr="boom"))
        with pytest.raises(ConversionError, match="boom"):
            inkscape.render("in.svg", "eps", str(tmp_path / "o.eps"))

    def test_timeout(self, inkscape, monkeypatch, tmp_path):
        run = FakeRun(raises=subprocess.TimeoutExpired(cmd="inkscape", timeout=5))
        monkeypatch.setattr(inkscape_module.subprocess, "run", run)
        with pytest.raises(ConversionError, match="timed out"):
            inkscape.render("in.svg", "pdf", str(tmp_path / "o.pdf"))

    def test_unknown_export_type(self, inkscape):
        with pytest.raises(ConversionError):
            inkscape.render("in.svg", "tiff", "o.tiff")


def test_load_backend_by_name():
    assert load_backend(Settings(render_backend="inkscape")).name == "inkscape"
    assert load_backend(Settings(render_backend="CairoSVG")).name == "cairosvg"
    with pytest.raises(BackendUnavailableError):
        load_backend(Settings(render_backend="ghostscript"))


def test_cairosvg_png(tmp_path):
    backend = CairoSvgBackend()
    if not check_backend(backend).available:
        pytest.skip("CairoSVG / libcairo not installed")
    src = tmp_path / "in.svg"
    src.write_text(RED_SQUARE_SVG.replace("<svg ", '<svg xmlns="http://www.w3.org/2000/svg" '))
    out = tmp_path / "out.png"
    backend.render(str(src), "png", str(out), width=50, height=50)

    from PIL import Image

    with Image.open(out) as img:
        assert img.size == (50, 50)
        assert img.convert("RGBA").getpixel((25, 25)) == (255, 0, 0, 255)
