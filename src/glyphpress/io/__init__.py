"""Font I/O layer for glyphpress.

This module handles everything that touches bytes or files: loading
projects, encoding compiled glyphs with fonttools, and writing fonts. It
provides a clean abstraction layer between fonttools and the domain models.

Key classes:
- ProjectReader: Load JSON font projects
- FontEncoder: Protocol for binary encoders
- FontToolsEncoder: TTF/OTF encoder built on fontTools' FontBuilder
- FontWriter: Save compiled fonts
"""

from glyphpress.io.encoder import FontEncoder, FontToolsEncoder, draw_outline
from glyphpress.io.reader import ProjectReader, project_from_dict
from glyphpress.io.writer import FontWriter, font_filename

__all__ = [
    "FontEncoder",
    "FontToolsEncoder",
    "FontWriter",
    "ProjectReader",
    "draw_outline",
    "font_filename",
    "project_from_dict",
]
