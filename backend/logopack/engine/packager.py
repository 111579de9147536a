"""ZipPackager — one folder per format inside a single archive."""

from __future__ import annotations

import io
import logging
import os
import zipfile

from logopack.models.artifacts import OutputArtifact

logger = logging.getLogger(__name__)


def _dedupe(path: str, taken: set[str]) -> str:
    if path not in taken:
        return path
    stem, ext = os.path.splitext(path)
    n = 2
    while f"{stem}_{n}{ext}" in taken:
        n += 1
    return f"{stem}_{n}{ext}"


def build_zip(artifacts: list[OutputArtifact]) -> bytes:
    """Archive artifacts as ``{folder}/{filename}``; repeated names get ``_2``, ``_3``..."""
    buf = io.BytesIO()
    taken: set[str] = set()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for artifact in artifacts:
            name = _dedupe(artifact.path, taken)
            taken.add(name)
            zf.writestr(name, artifact.data)
    logger.debug("Zipped %d files, %d bytes", len(taken), buf.tell())
    return buf.getvalue()


def package_filename(brand_name: str) -> str:
    return f"{brand_name}_logo_package.zip"
