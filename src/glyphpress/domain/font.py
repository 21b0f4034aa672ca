"""Font-level domain models.

This module holds everything above the single glyph: the input project,
the global metrics, the packaged compilation unit handed to an encoder and
the compiled result.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from glyphpress.domain.glyph import GlyphOutline

POSTSCRIPT_NAME_LIMIT = 63
_POSTSCRIPT_FORBIDDEN = frozenset("[](){}<>/%")


def _postscript_part(text: str) -> str:
    """Keep the characters allowed in a PostScript name (ASCII 33-126)."""
    return "".join(
        ch for ch in text if 33 <= ord(ch) <= 126 and ch not in _POSTSCRIPT_FORBIDDEN
    )


@dataclass(frozen=True, slots=True)
class FontMetrics:
    """Global vertical metrics in font units.

    Attributes:
        units_per_em: Size of the em square
        ascender: Highest point above the baseline
        descender: Lowest point, negative below the baseline
        x_height: Height of lowercase letters
        cap_height: Height of capital letters
        baseline: Always 0
        line_gap: Extra space between lines
        underline_position: Underline offset from the baseline
        underline_thickness: Underline stroke thickness
    """

    units_per_em: int
    ascender: int
    descender: int
    x_height: int
    cap_height: int
    baseline: int = 0
    line_gap: int = 0
    underline_position: int = 0
    underline_thickness: int = 0

    @property
    def total_height(self) -> int:
        """Distance from descender to ascender."""
        return self.ascender - self.descender

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "units_per_em": self.units_per_em,
            "ascender": self.ascender,
            "descender": self.descender,
            "x_height": self.x_height,
            "cap_height": self.cap_height,
            "baseline": self.baseline,
            "line_gap": self.line_gap,
            "underline_position": self.underline_position,
            "underline_thickness": self.underline_thickness,
        }


@dataclass
class FontSettings:
    """User-facing font metadata.

    Attributes:
        family_name: Font family name (required for compilation)
        style_name: Subfamily name
        author: Manufacturer/designer name
        description: Free-form description
        license: License string
        version: Version string
    """

    family_name: str = ""
    style_name: str = "Regular"
    author: str | None = None
    description: str | None = None
    license: str | None = None
    version: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.family_name} {self.style_name}"

    @property
    def postscript_name(self) -> str:
        """PostScript name: printable ASCII without spaces or delimiters.

        Falls back to "Glyphpress" for the family and "Regular" for the style
        when nothing usable is left, and is capped at 63 characters.
        """
        family = _postscript_part(self.family_name) or "Glyphpress"
        style = _postscript_part(self.style_name) or "Regular"
        return f"{family}-{style}"[:POSTSCRIPT_NAME_LIMIT]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FontSettings":
        """Build settings from a project file mapping."""
        return cls(
            family_name=data.get("family_name") or "",
            style_name=data.get("style_name") or "Regular",
            author=data.get("author"),
            description=data.get("description"),
            license=data.get("license"),
            version=data.get("version"),
        )


@dataclass
class CharacterData:
    """Hand-authored data for one character.

    Attributes:
        vector_data: Path string in drawing space; None or empty means skip
    """

    vector_data: str | None = None

    def has_path(self) -> bool:
        return bool(self.vector_data and self.vector_data.strip())


@dataclass
class FontProject:
    """Input to font generation.

    Attributes:
        characters: Mapping of "U+XXXX" keys to character data
        settings: Font metadata
    """

    characters: dict[str, CharacterData] = field(default_factory=dict)
    settings: FontSettings = field(default_factory=FontSettings)


@dataclass(frozen=True)
class CompilationUnit:
    """Everything an encoder needs to produce a binary font.

    Built once per successful run and never mutated afterwards.

    Attributes:
        glyphs: Required glyphs first, then converted glyphs in input order
        metrics: Normalized font metrics
        settings: Font metadata
    """

    glyphs: tuple[GlyphOutline, ...]
    metrics: FontMetrics
    settings: FontSettings

    @property
    def glyph_order(self) -> list[str]:
        return [glyph.name for glyph in self.glyphs]

    @property
    def character_map(self) -> dict[int, str]:
        """Code point to glyph name mapping (first glyph wins)."""
        cmap: dict[int, str] = {}
        for glyph in self.glyphs:
            cmap.setdefault(glyph.code_point, glyph.name)
        return cmap


@dataclass(frozen=True)
class CompiledFont:
    """Binary output of a compilation run.

    Attributes:
        font_data: Encoded font bytes
        format: Output format ("ttf" or "otf")
        size: Size of font_data in bytes
        checksum: SHA-256 hex digest of font_data
        glyph_count: Number of glyphs in the font
        generated_at: Time the font was compiled
    """

    font_data: bytes
    format: str
    size: int
    checksum: str
    glyph_count: int
    generated_at: datetime
