"""Configuration settings for Glyphpress."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class SmoothControl(str, Enum):
    """How the first control point of a smooth curve (S/T) is derived."""

    REFLECT = "reflect"
    CURRENT_POINT = "current_point"


class FontFormat(str, Enum):
    """Binary output format."""

    TTF = "ttf"
    OTF = "otf"


class FontConfig(BaseModel):
    """Font-wide constants and metadata defaults."""

    units_per_em: int = Field(
        default=1000,
        ge=16,
        le=16384,
        description="Size of the em square in font units",
    )
    default_author: str = Field(
        default="Glyphpress",
        description="Manufacturer name used when the project has no author",
    )
    default_license: str = Field(
        default="MIT",
        description="License string used when the project has none",
    )
    default_version: str = Field(
        default="1.0",
        description="Version string used when the project has none",
    )


class GlyphConfig(BaseModel):
    """Configuration for per-glyph outline building."""

    right_side_bearing: int = Field(
        default=50,
        ge=0,
        le=1000,
        description="Right margin added to every drawn glyph (at 1000 UPM)",
    )
    notdef_advance_width: int = Field(
        default=600,
        ge=0,
        description="Advance width of the .notdef glyph",
    )
    space_advance_width: int = Field(
        default=500,
        ge=0,
        description="Advance width of the space glyph",
    )
    smooth_control: SmoothControl = Field(
        default=SmoothControl.REFLECT,
        description="First control point rule for smooth curves",
    )
    include_curve_points: bool = Field(
        default=True,
        description="Include curve control and end points in glyph bounds (False: M/L only)",
    )
    transform_tolerance: float = Field(
        default=0.1,
        ge=0.0,
        le=10.0,
        description="Absolute tolerance when validating coordinate transformation",
    )


class MetricsConfig(BaseModel):
    """Configuration for font metrics inference.

    Fallback values are used when no glyph provides usable bounds.
    """

    default_ascender: int = Field(default=800, gt=0, description="Ascender without valid bounds")
    default_descender: int = Field(default=-200, lt=0, description="Descender without valid bounds")
    x_height_ratio: float = Field(
        default=0.5,
        gt=0.0,
        le=1.0,
        description="x-height as a fraction of ascender when no lowercase glyphs exist",
    )
    cap_height_ratio: float = Field(
        default=0.8,
        gt=0.0,
        le=1.0,
        description="Cap height as a fraction of ascender when no uppercase glyphs exist",
    )
    line_gap_ratio: float = Field(default=0.2, ge=0.0, le=1.0)
    underline_position_ratio: float = Field(default=0.1, ge=0.0, le=1.0)
    underline_thickness_ratio: float = Field(default=0.05, ge=0.0, le=1.0)
    x_height_reference: int = Field(default=0x78, description="Code point measured for x-height")
    cap_height_reference: int = Field(default=0x48, description="Code point measured for cap height")


class EncoderConfig(BaseModel):
    """Configuration for the fontTools encoder."""

    format: FontFormat = Field(default=FontFormat.TTF, description="Output font format")
    cu2qu_max_err: float = Field(
        default=1.0,
        ge=0.1,
        le=10.0,
        description="Maximum error converting cubic to quadratic curves (TTF only)",
    )


class ProcessingConfig(BaseModel):
    """Configuration for character conversion."""

    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Worker processes for conversion (None or 1 = in-process)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class GlyphpressSettings(BaseModel):
    """Main application settings."""

    font: FontConfig = Field(default_factory=FontConfig)
    glyph: GlyphConfig = Field(default_factory=GlyphConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    encoder: EncoderConfig = Field(default_factory=EncoderConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> GlyphpressSettings:
    """Get default application settings."""
    return GlyphpressSettings()
