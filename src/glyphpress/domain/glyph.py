"""Glyph outline and per-glyph metrics.

This module defines the glyph domain model: a single character's outline in
font space together with the metrics measured from it.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from glyphpress.domain.command import CommandType, DrawCommand


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounds in font units.

    Attributes:
        x_min: Left edge
        y_min: Bottom edge
        x_max: Right edge
        y_max: Top edge
    """

    x_min: float
    y_min: float
    x_max: float
    y_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    def is_point(self) -> bool:
        """Check if the box has collapsed to a single point."""
        return self.width == 0 and self.height == 0

    def to_tuple(self) -> tuple[float, float, float, float]:
        """Convert to (x_min, y_min, x_max, y_max)."""
        return (self.x_min, self.y_min, self.x_max, self.y_max)

    @classmethod
    def from_points(cls, points: Iterable[tuple[float, float]]) -> "BoundingBox | None":
        """Compute the bounds of a point set.

        Args:
            points: (x, y) pairs

        Returns:
            BoundingBox, or None if there are no points
        """
        pts = list(points)
        if not pts:
            return None
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        return cls(min(xs), min(ys), max(xs), max(ys))


@dataclass(frozen=True, slots=True)
class GlyphMetrics:
    """Horizontal metrics measured from an outline.

    Attributes:
        left_side_bearing: max(0, -bounds.x_min)
        right_side_bearing: Margin right of the ink
        advance_width: Horizontal advance, never negative
        bounds: Ink bounds, None for glyphs without coordinates
    """

    left_side_bearing: int
    right_side_bearing: int
    advance_width: int
    bounds: BoundingBox | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "lsb": self.left_side_bearing,
            "rsb": self.right_side_bearing,
            "advance_width": self.advance_width,
            "bounds": list(self.bounds.to_tuple()) if self.bounds else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GlyphMetrics":
        """Deserialize from dictionary."""
        bounds = BoundingBox(*data["bounds"]) if data.get("bounds") is not None else None
        return cls(
            left_side_bearing=data["lsb"],
            right_side_bearing=data["rsb"],
            advance_width=data["advance_width"],
            bounds=bounds,
        )


@dataclass(frozen=True)
class GlyphOutline:
    """A glyph ready for encoding.

    Commands are absolute font-space commands and every contour is closed.

    Attributes:
        name: Glyph name (e.g. "uni0041", ".notdef")
        code_point: Unicode code point
        commands: Outline drawing commands
        metrics: Metrics measured from the outline
    """

    name: str
    code_point: int
    commands: tuple[DrawCommand, ...] = field(default_factory=tuple)
    metrics: GlyphMetrics = field(default_factory=lambda: GlyphMetrics(0, 0, 0))

    @property
    def advance_width(self) -> int:
        return self.metrics.advance_width

    @property
    def bounds(self) -> BoundingBox | None:
        return self.metrics.bounds

    @property
    def character(self) -> str:
        """The character this glyph encodes."""
        return chr(self.code_point)

    def is_empty(self) -> bool:
        """Check if glyph has no outline.

        Returns:
            True for non-drawing glyphs such as space
        """
        return len(self.commands) == 0

    def contour_count(self) -> int:
        """Number of contours (one per MoveTo)."""
        return sum(1 for cmd in self.commands if cmd.type is CommandType.MOVE_TO)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary representation of the glyph
        """
        return {
            "name": self.name,
            "code_point": self.code_point,
            "commands": [cmd.to_dict() for cmd in self.commands],
            "metrics": self.metrics.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GlyphOutline":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a glyph

        Returns:
            GlyphOutline instance
        """
        return cls(
            name=data["name"],
            code_point=data["code_point"],
            commands=tuple(DrawCommand.from_dict(c) for c in data["commands"]),
            metrics=GlyphMetrics.from_dict(data["metrics"]),
        )
