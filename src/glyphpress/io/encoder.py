"""Binary font encoding.

The pipeline only depends on the narrow FontEncoder protocol. The
production implementation drives fontTools' FontBuilder; tests can pass any
object with an ``encode`` method.
"""

import io
from collections.abc import Sequence
from typing import Any, Protocol

from fontTools.fontBuilder import FontBuilder
from fontTools.misc.roundTools import otRound
from fontTools.pens.cu2quPen import Cu2QuPen
from fontTools.pens.t2CharStringPen import T2CharStringPen
from fontTools.pens.ttGlyphPen import TTGlyphPen

from glyphpress.config import EncoderConfig, FontConfig, FontFormat
from glyphpress.domain.command import CommandType, DrawCommand
from glyphpress.domain.font import CompilationUnit
from glyphpress.domain.glyph import GlyphOutline
from glyphpress.exceptions import EncoderError


class FontEncoder(Protocol):
    """Turns a CompilationUnit into font bytes.

    Implementations raise EncoderError on failure.
    """

    format: str

    def encode(self, unit: CompilationUnit) -> bytes: ...


def draw_outline(commands: Sequence[DrawCommand], pen: Any) -> None:
    """Replay absolute outline commands into a fontTools pen.

    Arcs are drawn as straight segments to their end point.

    Args:
        commands: Absolute outline from GlyphBuilder
        pen: Any fontTools segment pen
    """
    for cmd in commands:
        c = cmd.coordinates
        ctype = cmd.type

        if ctype is CommandType.MOVE_TO:
            pen.moveTo((c[0], c[1]))
        elif ctype is CommandType.LINE_TO:
            pen.lineTo((c[0], c[1]))
        elif ctype is CommandType.CUBIC_TO:
            pen.curveTo((c[0], c[1]), (c[2], c[3]), (c[4], c[5]))
        elif ctype is CommandType.QUAD_TO:
            pen.qCurveTo((c[0], c[1]), (c[2], c[3]))
        elif ctype is CommandType.ARC_TO:
            pen.lineTo((c[5], c[6]))
        elif ctype is CommandType.CLOSE_PATH:
            pen.closePath()
        else:
            raise EncoderError(f"Outline contains unresolved command {ctype.value}")


class FontToolsEncoder:
    """Encodes a CompilationUnit as TrueType (glyf) or OpenType (CFF).

    Example:
        encoder = FontToolsEncoder(EncoderConfig(format=FontFormat.OTF))
        data = encoder.encode(unit)
    """

    def __init__(
        self,
        config: EncoderConfig | None = None,
        font_config: FontConfig | None = None,
    ) -> None:
        """Initialize the encoder.

        Args:
            config: Output format and curve conversion settings
            font_config: Metadata defaults for missing project fields
        """
        self.config = config or EncoderConfig()
        self.font_config = font_config or FontConfig()

    @property
    def format(self) -> str:
        return self.config.format.value

    @property
    def is_ttf(self) -> bool:
        return self.config.format is FontFormat.TTF

    def encode(self, unit: CompilationUnit) -> bytes:
        """Build the binary font.

        Args:
            unit: Glyphs, metrics and metadata to encode

        Returns:
            Font file contents

        Raises:
            EncoderError: If fontTools rejects the data
        """
        try:
            builder = self._build(unit)
            buffer = io.BytesIO()
            builder.save(buffer)
            return buffer.getvalue()
        except EncoderError:
            raise
        except Exception as e:
            raise EncoderError(str(e)) from e

    def _build(self, unit: CompilationUnit) -> FontBuilder:
        """Populate a FontBuilder with every table the font needs."""
        metrics = unit.metrics
        settings = unit.settings

        fb = FontBuilder(metrics.units_per_em, isTTF=self.is_ttf)
        fb.setupGlyphOrder(unit.glyph_order)
        fb.setupCharacterMap(unit.character_map)

        if self.is_ttf:
            fb.setupGlyf({glyph.name: self._tt_glyph(glyph) for glyph in unit.glyphs})
        else:
            fb.setupCFF(
                psName=settings.postscript_name,
                fontInfo={
                    "FamilyName": _cff_string(settings.family_name, settings.postscript_name),
                    "FullName": _cff_string(settings.full_name, settings.postscript_name),
                },
                charStringsDict={glyph.name: self._charstring(glyph) for glyph in unit.glyphs},
                privateDict={},
            )

        fb.setupHorizontalMetrics(
            {glyph.name: (glyph.advance_width, _x_min(glyph)) for glyph in unit.glyphs}
        )
        fb.setupHorizontalHeader(
            ascent=metrics.ascender,
            descent=metrics.descender,
            lineGap=metrics.line_gap,
        )
        fb.setupNameTable(self._name_strings(unit))
        fb.setupOS2(
            sTypoAscender=metrics.ascender,
            sTypoDescender=metrics.descender,
            sTypoLineGap=metrics.line_gap,
            usWinAscent=max(0, metrics.ascender),
            usWinDescent=abs(metrics.descender),
            sxHeight=metrics.x_height,
            sCapHeight=metrics.cap_height,
            fsType=0,
        )
        fb.setupPost(
            underlinePosition=metrics.underline_position,
            underlineThickness=metrics.underline_thickness,
        )
        fb.setupMaxp()
        return fb

    def _tt_glyph(self, glyph: GlyphOutline) -> Any:
        tt_pen = TTGlyphPen(None)
        if not glyph.is_empty():
            pen = Cu2QuPen(tt_pen, max_err=self.config.cu2qu_max_err, reverse_direction=False)
            draw_outline(glyph.commands, pen)
        return tt_pen.glyph()

    def _charstring(self, glyph: GlyphOutline) -> Any:
        pen = T2CharStringPen(width=glyph.advance_width, glyphSet=None)
        draw_outline(glyph.commands, pen)
        return pen.getCharString()

    def _name_strings(self, unit: CompilationUnit) -> dict[str, str]:
        """Name table entries, with configured defaults for missing metadata."""
        settings = unit.settings
        defaults = self.font_config
        version = settings.version or defaults.default_version

        names = {
            "familyName": settings.family_name,
            "styleName": settings.style_name,
            "uniqueFontIdentifier": f"Glyphpress:{settings.postscript_name}",
            "fullName": settings.full_name,
            "psName": settings.postscript_name,
            "version": f"Version {version}",
            "manufacturer": settings.author or defaults.default_author,
            "licenseDescription": settings.license or defaults.default_license,
        }
        if settings.description:
            names["description"] = settings.description
        return names


def _cff_string(text: str, fallback: str) -> str:
    """CFF strings are latin-1; other characters are dropped.

    The full Unicode names live in the name table.
    """
    cleaned = " ".join(text.encode("latin-1", "ignore").decode("latin-1").split())
    return cleaned or fallback


def _x_min(glyph: GlyphOutline) -> int:
    """hmtx left side bearing: the outline's x_min, 0 for empty glyphs."""
    if glyph.bounds is None:
        return 0
    return otRound(glyph.bounds.x_min)
