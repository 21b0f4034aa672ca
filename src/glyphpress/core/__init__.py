"""Core pipeline stages for glyphpress.

This module contains the algorithms that turn drawn paths into a font:

- Path parsing (lenient, diagnostics instead of exceptions)
- Coordinate transformation (drawing space to font space and back)
- Glyph construction (absolute closed outlines, bounds, advance widths)
- Metrics inference (ascender, descender, x-height, cap height)
- Generation orchestration (staged pipeline with progress reporting)

Parsing, transformation and glyph construction are pure and safe for use
in worker processes.

Key classes:
- PathParser: Parses path strings into DrawCommands
- CoordinateTransformer: Flips the Y axis and applies the baseline offset
- GlyphBuilder: Builds glyph outlines and per-glyph metrics
- FontMetricsAggregator: Infers, validates and normalizes font metrics
- FontGenerator: Runs the whole pipeline for a FontProject
"""

from glyphpress.core.builder import GlyphBuilder, glyph_name_for
from glyphpress.core.generator import (
    FontGenerator,
    GenerationProgress,
    GenerationResult,
    GenerationStage,
    convert_character,
    parse_code_point,
)
from glyphpress.core.geometry import reflect_point, round_half_up
from glyphpress.core.metrics import FontMetricsAggregator
from glyphpress.core.parser import (
    ParseResult,
    PathParser,
    commands_to_path_string,
    parse_path,
    validate_path,
)
from glyphpress.core.transform import (
    CoordinateTransformer,
    TransformResult,
    TransformValidation,
)

__all__ = [
    "CoordinateTransformer",
    # Generator
    "FontGenerator",
    # Metrics
    "FontMetricsAggregator",
    "GenerationProgress",
    "GenerationResult",
    "GenerationStage",
    # Builder
    "GlyphBuilder",
    # Parser
    "ParseResult",
    "PathParser",
    "TransformResult",
    "TransformValidation",
    "commands_to_path_string",
    "convert_character",
    "glyph_name_for",
    "parse_code_point",
    "parse_path",
    # Geometry
    "reflect_point",
    "round_half_up",
    "validate_path",
]
