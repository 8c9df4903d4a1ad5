"""
Pydantic Models and Schemas
===========================

Core data models for render requests, PDF options and embedded fonts.
Options are immutable once built; use PdfOptionsBuilder for chained configuration.
"""

from typing import Optional, Dict, Any, Union
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# Enums
class PageSize(str, Enum):
    """Supported PDF page sizes."""
    A4 = "A4"
    LETTER = "LETTER"
    LEGAL = "LEGAL"
    A3 = "A3"

    @property
    def css_name(self) -> str:
        """Name used by the CSS @page size descriptor."""
        return self.value.lower()


class FontFormat(str, Enum):
    """Embeddable font formats."""
    TRUETYPE = "truetype"
    OPENTYPE = "opentype"


FONT_SUFFIXES: Dict[str, FontFormat] = {
    ".ttf": FontFormat.TRUETYPE,
    ".otf": FontFormat.OPENTYPE,
}


# PDF Models
class PdfOptions(BaseModel):
    """Page geometry, fonts and resource resolution for PDF rendering."""
    model_config = ConfigDict(frozen=True)

    page_size: PageSize = Field(PageSize.A4, description="Page size")
    margin_top: float = Field(36.0, ge=0, description="Top margin in points")
    margin_right: float = Field(36.0, ge=0, description="Right margin in points")
    margin_bottom: float = Field(36.0, ge=0, description="Bottom margin in points")
    margin_left: float = Field(36.0, ge=0, description="Left margin in points")
    font_dir: Optional[Path] = Field(None, description="Directory of .ttf/.otf fonts to embed")
    default_font: Optional[str] = Field(None, description="Font family applied to the body")
    base_uri: Optional[str] = Field(None, description="Base URI for relative resources")

    @field_validator("default_font", "base_uri")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank strings as unset."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def margins(self) -> tuple[float, float, float, float]:
        """Margins in CSS order: top, right, bottom, left."""
        return (self.margin_top, self.margin_right, self.margin_bottom, self.margin_left)

    @classmethod
    def builder(cls) -> "PdfOptionsBuilder":
        """Start a builder seeded with the default options."""
        return PdfOptionsBuilder()


class PdfOptionsBuilder:
    """
    Chained builder for PdfOptions.

    Each ``with_*`` call updates the builder and returns it. ``build()``
    validates the collected values and returns a new, independent PdfOptions;
    later builder calls never affect instances that were already built.
    """

    def __init__(self, base: Optional[PdfOptions] = None) -> None:
        self._values: Dict[str, Any] = (base or PdfOptions()).model_dump()

    def with_base_uri(self, uri: Optional[str]) -> "PdfOptionsBuilder":
        self._values["base_uri"] = uri
        return self

    def with_font_directory(self, directory: Union[str, Path, None]) -> "PdfOptionsBuilder":
        self._values["font_dir"] = directory
        return self

    def with_default_font(self, font_name: Optional[str]) -> "PdfOptionsBuilder":
        self._values["default_font"] = font_name
        return self

    def with_page_size(self, page_size: Union[PageSize, str]) -> "PdfOptionsBuilder":
        if isinstance(page_size, str):
            page_size = PageSize(page_size.upper())
        self._values["page_size"] = page_size
        return self

    def with_margins(
        self, top: float, right: float, bottom: float, left: float
    ) -> "PdfOptionsBuilder":
        self._values.update(
            margin_top=top, margin_right=right, margin_bottom=bottom, margin_left=left
        )
        return self

    def build(self) -> PdfOptions:
        """Validate and return a finished PdfOptions instance."""
        return PdfOptions(**self._values)


class FontFace(BaseModel):
    """A font file registered with a PDF renderer."""
    model_config = ConfigDict(frozen=True)

    family: str = Field(..., min_length=1, description="Font family name")
    path: Path = Field(..., description="Absolute path of the font file")
    format: FontFormat = Field(..., description="Font format")


# Request Models
class RenderRequest(BaseModel):
    """A template reference or inline template content plus its data model."""
    template_name: Optional[str] = Field(None, description="Name resolved via the source chain")
    content: Optional[str] = Field(None, description="Inline template content")
    name: Optional[str] = Field(None, description="Diagnostic name for inline content")
    model: Dict[str, Any] = Field(default_factory=dict, description="Data model")

    @model_validator(mode="after")
    def validate_source(self) -> "RenderRequest":
        """Exactly one of template_name and content must be given."""
        if (self.template_name is None) == (self.content is None):
            raise ValueError("Exactly one of template_name or content must be provided")
        return self

    @property
    def is_inline(self) -> bool:
        return self.content is not None
