"""Glyphpress - Compile hand-drawn glyph outlines into fonts.

Glyphpress takes a project of characters drawn as SVG-style path strings
in a top-down drawing canvas, converts them into font-space glyph
outlines, infers font-wide vertical metrics, and compiles a TrueType or
OpenType font.

Example:
    $ glyphpress build sketch.json

This will create sketch-hand.ttf (named after the project's family name)
next to the project file.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
