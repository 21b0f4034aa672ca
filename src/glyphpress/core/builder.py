"""Glyph outline construction and per-glyph metrics.

The builder walks font-space commands with a pen, resolving relative
operands and shorthand commands into an absolute outline made of MoveTo,
LineTo, CubicCurveTo, QuadraticCurveTo, ArcTo and ClosePath only. Every
contour in the result is closed.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from glyphpress.config import GlyphConfig, SmoothControl
from glyphpress.core.geometry import Point, reflect_point, round_half_up
from glyphpress.domain.command import CommandType, DrawCommand
from glyphpress.domain.glyph import BoundingBox, GlyphMetrics, GlyphOutline

NOTDEF_NAME = ".notdef"
SPACE_NAME = "space"

_LINE_TYPES = frozenset({
    CommandType.MOVE_TO,
    CommandType.LINE_TO,
    CommandType.HLINE_TO,
    CommandType.VLINE_TO,
})


def glyph_name_for(code_point: int) -> str:
    """Production glyph name for a code point.

    Returns:
        "uniXXXX" inside the BMP, "uXXXXX" above it
    """
    if code_point <= 0xFFFF:
        return f"uni{code_point:04X}"
    return f"u{code_point:05X}"


@dataclass
class _Walk:
    """Accumulated state of one pass over a command list."""

    outline: list[DrawCommand] = field(default_factory=list)
    points: list[Point] = field(default_factory=list)
    line_points: list[Point] = field(default_factory=list)


class GlyphBuilder:
    """Builds closed outlines and measures them.

    Example:
        builder = GlyphBuilder(GlyphConfig())
        glyph = builder.build(font_space_commands, code_point=0x41)
        print(glyph.name, glyph.advance_width)
    """

    def __init__(self, config: GlyphConfig | None = None) -> None:
        """Initialize the builder.

        Args:
            config: Glyph settings (side bearing, smooth curve rule, bounds mode)
        """
        self.config = config or GlyphConfig()

    def build(self, commands: Sequence[DrawCommand], code_point: int) -> GlyphOutline:
        """Build a glyph from font-space commands.

        Args:
            commands: Commands in font space, relative or absolute
            code_point: Unicode code point of the glyph

        Returns:
            GlyphOutline with absolute closed contours and its metrics
        """
        walk = self._walk(commands)
        return GlyphOutline(
            name=glyph_name_for(code_point),
            code_point=code_point,
            commands=tuple(walk.outline),
            metrics=self._metrics(walk),
        )

    def measure(self, commands: Sequence[DrawCommand]) -> GlyphMetrics:
        """Measure a command list without keeping the outline.

        Args:
            commands: Commands in font space

        Returns:
            GlyphMetrics with bounds, side bearings and advance width
        """
        return self._metrics(self._walk(commands))

    def outline(self, commands: Sequence[DrawCommand]) -> list[DrawCommand]:
        """Resolve commands into an absolute, closed outline."""
        return self._walk(commands).outline

    def required_glyphs(self) -> list[GlyphOutline]:
        """Glyphs every font carries regardless of input.

        Returns:
            [.notdef, space], both without outlines
        """
        return [
            GlyphOutline(
                name=NOTDEF_NAME,
                code_point=0x0000,
                metrics=GlyphMetrics(0, 0, self.config.notdef_advance_width),
            ),
            GlyphOutline(
                name=SPACE_NAME,
                code_point=0x0020,
                metrics=GlyphMetrics(0, 0, self.config.space_advance_width),
            ),
        ]

    def _metrics(self, walk: _Walk) -> GlyphMetrics:
        """Derive metrics from the points visited by a walk."""
        points = walk.points if self.config.include_curve_points else walk.line_points
        bounds = BoundingBox.from_points(points)
        rsb = self.config.right_side_bearing

        if bounds is None:
            return GlyphMetrics(0, rsb, rsb, None)

        lsb = max(0.0, -bounds.x_min)
        advance_width = round_half_up(bounds.width + lsb + rsb)

        return GlyphMetrics(
            left_side_bearing=round_half_up(lsb),
            right_side_bearing=rsb,
            advance_width=max(0, advance_width),
            bounds=bounds,
        )

    def _walk(self, commands: Sequence[DrawCommand]) -> _Walk:
        """Resolve commands against a pen and collect visited points."""
        walk = _Walk()
        reflect = self.config.smooth_control is SmoothControl.REFLECT

        pen: Point = (0.0, 0.0)
        start: Point = (0.0, 0.0)
        contour_open = False
        last_cubic_ctrl: Point | None = None
        last_quad_ctrl: Point | None = None

        def resolve(x: float, y: float, relative: bool) -> Point:
            return (pen[0] + x, pen[1] + y) if relative else (x, y)

        def close() -> None:
            nonlocal contour_open, pen
            walk.outline.append(DrawCommand(CommandType.CLOSE_PATH))
            contour_open = False
            pen = start

        def open_at(point: Point) -> None:
            nonlocal contour_open, start
            walk.outline.append(DrawCommand(CommandType.MOVE_TO, point))
            walk.points.append(point)
            walk.line_points.append(point)
            start = point
            contour_open = True

        for cmd in commands:
            ctype = cmd.type
            c = cmd.coordinates
            rel = cmd.relative
            cubic_ctrl: Point | None = None
            quad_ctrl: Point | None = None

            if ctype is CommandType.CLOSE_PATH:
                if contour_open:
                    close()
                last_cubic_ctrl = last_quad_ctrl = None
                continue

            if ctype is CommandType.MOVE_TO:
                if contour_open:
                    close()
                pen = resolve(c[0], c[1], rel)
                open_at(pen)
                last_cubic_ctrl = last_quad_ctrl = None
                continue

            if not contour_open:
                open_at(pen)

            if ctype in _LINE_TYPES:
                if ctype is CommandType.HLINE_TO:
                    end = (pen[0] + c[0] if rel else c[0], pen[1])
                elif ctype is CommandType.VLINE_TO:
                    end = (pen[0], pen[1] + c[0] if rel else c[0])
                else:
                    end = resolve(c[0], c[1], rel)
                walk.outline.append(DrawCommand(CommandType.LINE_TO, end))
                walk.line_points.append(end)
                walk.points.append(end)

            elif ctype in (CommandType.CUBIC_TO, CommandType.SMOOTH_CUBIC_TO):
                if ctype is CommandType.CUBIC_TO:
                    c1 = resolve(c[0], c[1], rel)
                    c2 = resolve(c[2], c[3], rel)
                    end = resolve(c[4], c[5], rel)
                else:
                    if reflect and last_cubic_ctrl is not None:
                        c1 = reflect_point(last_cubic_ctrl, pen)
                    else:
                        c1 = pen
                    c2 = resolve(c[0], c[1], rel)
                    end = resolve(c[2], c[3], rel)
                walk.outline.append(DrawCommand(CommandType.CUBIC_TO, (*c1, *c2, *end)))
                walk.points.extend((c1, c2, end))
                cubic_ctrl = c2

            elif ctype in (CommandType.QUAD_TO, CommandType.SMOOTH_QUAD_TO):
                if ctype is CommandType.QUAD_TO:
                    q1 = resolve(c[0], c[1], rel)
                    end = resolve(c[2], c[3], rel)
                else:
                    if reflect and last_quad_ctrl is not None:
                        q1 = reflect_point(last_quad_ctrl, pen)
                    else:
                        q1 = pen
                    end = resolve(c[0], c[1], rel)
                walk.outline.append(DrawCommand(CommandType.QUAD_TO, (*q1, *end)))
                walk.points.extend((q1, end))
                quad_ctrl = q1

            else:
                end = resolve(c[5], c[6], rel)
                walk.outline.append(DrawCommand(CommandType.ARC_TO, (*c[:5], *end)))
                walk.points.append(end)

            pen = end
            last_cubic_ctrl = cubic_ctrl
            last_quad_ctrl = quad_ctrl

        if contour_open:
            close()

        return walk
