"""Inkscape command-line backend."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess

from logopack.backends.base import AREA_DRAWING, EXPORT_TYPES
from logopack.errors import BackendUnavailableError, ConversionError

logger = logging.getLogger(__name__)


class InkscapeBackend:
    """Runs ``inkscape`` (1.x CLI) as a subprocess with its own timeout."""

    name = "inkscape"

    def __init__(self, executable: str = "inkscape", timeout_s: float = 30.0) -> None:
        self.executable = executable
        self.timeout_s = timeout_s
        self._binary: str | None = None

    def _resolve(self) -> str:
        if self._binary is None:
            found = shutil.which(self.executable)
            if found is None:
                raise BackendUnavailableError(
                    f"Inkscape not found ({self.executable!r}). Install Inkscape or set INKSCAPE_PATH."
                )
            self._binary = found
        return self._binary

    def _run(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        cmd = [self._resolve(), *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            return subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout_s, check=False)
        except FileNotFoundError as e:
            self._binary = None
            raise BackendUnavailableError(f"Inkscape could not be started: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise ConversionError(f"Inkscape timed out after {self.timeout_s:g}s") from e

    def version(self) -> str:
        result = self._run(["--version"])
        if result.returncode != 0:
            raise BackendUnavailableError(f"Inkscape --version failed: {result.stderr.strip()}")
        return result.stdout.strip().splitlines()[0] if result.stdout.strip() else "unknown"

    def render(
        self,
        input_path: str,
        export_type: str,
        output_path: str,
        dpi: float | None = None,
        *,
        area: str = AREA_DRAWING,
        width: int | None = None,
        height: int | None = None,
    ) -> str:
        if export_type not in EXPORT_TYPES:
            raise ConversionError(f"Inkscape cannot export {export_type!r}")
        args = [
            input_path,
            f"--export-type={export_type}",
            "--export-area-drawing" if area == AREA_DRAWING else "--export-area-page",
            f"--export-filename={output_path}",
        ]
        if export_type == "png":
            args.append("--export-background-opacity=0")
            if width and height:
                args += [f"--export-width={width}", f"--export-height={height}"]
            elif dpi:
                args.append(f"--export-dpi={dpi:g}")
        elif export_type in ("pdf", "eps"):
            args.append("--export-text-to-path")

        result = self._run(args)
        if result.returncode != 0:
            raise ConversionError(
                f"Inkscape exited with {result.returncode}: {result.stderr.strip()[:500]}",
                context={"export_type": export_type},
            )
        if not os.path.exists(output_path):
            raise ConversionError(f"Inkscape produced no output for {export_type}")
        return output_path
