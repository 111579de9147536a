"""API request models."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from logopack.color.transform import ColorSpec
from logopack.raster.renderer import parse_dpi


class FormatTag(str, enum.Enum):
    SVG = "SVG"
    PNG = "PNG"
    JPG = "JPG"
    PDF = "PDF"
    EPS = "EPS"
    ICO = "ICO"


RASTER_FORMATS = frozenset({FormatTag.PNG, FormatTag.JPG})

_FORMAT_ALIASES = {"JPEG": "JPG"}


class ExportRequest(BaseModel):
    """What to put in the package. Accepts the client's camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    formats: list[FormatTag] = Field(..., description="Requested output formats")
    colors: list[str] = Field(..., description="Color variants: Original, Black, White, Grayscale, Inverted, Custom")
    resolutions: list[str] = Field(default_factory=list, description="Raster resolutions, e.g. 72dpi")
    brand_name: str = Field(default="Brand", alias="brandName", description="Filename prefix")
    custom_color: str | None = Field(default=None, alias="customColor", description="Hex color for Custom")

    @field_validator("formats", mode="before")
    @classmethod
    def _normalize_formats(cls, value: object) -> object:
        if not isinstance(value, list):
            return value
        seen: list[str] = []
        for item in value:
            tag = str(item).strip().upper()
            tag = _FORMAT_ALIASES.get(tag, tag)
            if tag not in seen:
                seen.append(tag)
        return seen

    @field_validator("resolutions")
    @classmethod
    def _check_resolutions(cls, value: list[str]) -> list[str]:
        for label in value:
            parse_dpi(label)
        return list(dict.fromkeys(label.strip() for label in value))

    @model_validator(mode="after")
    def _check_selection(self) -> "ExportRequest":
        if not self.formats:
            raise ValueError("Select at least one format")
        if not self.colors:
            raise ValueError("Select at least one color")
        if RASTER_FORMATS & set(self.formats) and not self.resolutions:
            raise ValueError("Select at least one resolution for PNG/JPG output")
        if not self.brand_name.strip():
            raise ValueError("Brand name must not be blank")
        return self

    def color_specs(self) -> list[ColorSpec]:
        return [ColorSpec.parse(tag, self.custom_color) for tag in self.colors]

    def dpi_cells(self) -> list[tuple[str, float]]:
        return [(label, parse_dpi(label)) for label in self.resolutions]
