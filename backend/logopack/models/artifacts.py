"""Pipeline value objects: the uploaded source and the produced files."""

from __future__ import annotations

import os
from dataclasses import dataclass

from logopack.svg.document import is_well_formed_svg

SVG_MIME_TYPES = frozenset({"image/svg+xml", "image/svg"})


@dataclass(frozen=True)
class SourceDocument:
    """Uploaded bytes plus what the client claimed they are."""

    data: bytes
    filename: str = "logo.svg"
    mime_type: str = ""
    is_svg: bool = False

    @classmethod
    def load(cls, data: bytes, filename: str | None = None, mime_type: str | None = None) -> "SourceDocument":
        filename = filename or "logo"
        mime_type = (mime_type or "").split(";")[0].strip().lower()
        declared = mime_type in SVG_MIME_TYPES or filename.lower().endswith(".svg")
        return cls(
            data=data,
            filename=filename,
            mime_type=mime_type,
            is_svg=declared and is_well_formed_svg(data),
        )

    @property
    def declared_svg(self) -> bool:
        return self.mime_type in SVG_MIME_TYPES or self.extension == "svg"

    @property
    def extension(self) -> str:
        return os.path.splitext(self.filename)[1].lstrip(".").lower()


@dataclass(frozen=True)
class OutputArtifact:
    """One named file in the package, filed under its format folder."""

    folder: str
    filename: str
    data: bytes

    @property
    def path(self) -> str:
        return f"{self.folder}/{self.filename}"
