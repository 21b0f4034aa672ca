"""Domain models for glyphpress.

This module contains the core domain models representing path commands,
glyph outlines, metrics and the packaged font. All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Serializable for inter-process communication (parallel conversion)
- Independent of fonttools implementation details

Key classes:
- CommandType / DrawCommand: Typed path commands
- Diagnostic: A non-fatal finding returned by a pipeline stage
- BoundingBox / GlyphMetrics / GlyphOutline: A single glyph
- FontMetrics / FontSettings / FontProject: Font-wide data
- CompilationUnit / CompiledFont: Encoder input and output
"""

from glyphpress.domain.command import CommandType, DrawCommand
from glyphpress.domain.diagnostic import Diagnostic, Severity
from glyphpress.domain.font import (
    CharacterData,
    CompilationUnit,
    CompiledFont,
    FontMetrics,
    FontProject,
    FontSettings,
)
from glyphpress.domain.glyph import BoundingBox, GlyphMetrics, GlyphOutline

__all__: list[str] = [
    # Enums
    "CommandType",
    "Severity",
    # Commands
    "Diagnostic",
    "DrawCommand",
    # Glyphs
    "BoundingBox",
    "GlyphMetrics",
    "GlyphOutline",
    # Font
    "CharacterData",
    "CompilationUnit",
    "CompiledFont",
    "FontMetrics",
    "FontProject",
    "FontSettings",
]
