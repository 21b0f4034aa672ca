"""Coordinate conversion between drawing space and font space.

Drawing space has its origin at the top left with Y growing downwards.
Font space has its origin on the baseline with Y growing upwards. The
conversion flips the Y axis and shifts each glyph by a baseline offset
computed from its own vertical extent:

    y_font = baseline_offset + units_per_em - y_draw

X coordinates, arc radii, rotation and flags pass through unchanged.
Relative Y deltas are negated rather than shifted.
"""

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from glyphpress.domain.command import CommandType, DrawCommand


@dataclass
class TransformResult:
    """Commands converted to another space and the offset that was used."""

    commands: list[DrawCommand]
    baseline_offset: float = 0.0


@dataclass
class TransformValidation:
    """Outcome of comparing an original and a transformed command list."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class TransformationStats:
    """Counts describing a transformation, for debugging."""

    command_count: int
    transformed_command_count: int
    coordinate_count: int
    y_transformations: int


def iter_absolute_y(commands: Sequence[DrawCommand]) -> Iterator[float]:
    """Yield every Y value of a command list as an absolute position.

    Relative operands are resolved against the pen so that deltas are not
    mistaken for positions. For absolute paths this is exactly the Y
    operands in order.

    Args:
        commands: Commands in any space

    Yields:
        Absolute Y values
    """
    x = y = 0.0
    start_x = start_y = 0.0

    for cmd in commands:
        ctype = cmd.type
        coords = cmd.coordinates

        if ctype is CommandType.CLOSE_PATH:
            x, y = start_x, start_y
            continue

        base_x, base_y = (x, y) if cmd.relative else (0.0, 0.0)

        for index in ctype.y_indices:
            yield base_y + coords[index]

        if ctype is CommandType.HLINE_TO:
            x = base_x + coords[0]
        elif ctype is CommandType.VLINE_TO:
            y = base_y + coords[0]
        else:
            x, y = base_x + coords[-2], base_y + coords[-1]

        if ctype is CommandType.MOVE_TO:
            start_x, start_y = x, y


class CoordinateTransformer:
    """Maps glyph commands between drawing space and font space.

    Example:
        transformer = CoordinateTransformer(units_per_em=1000)
        result = transformer.to_font_space(commands)
        print(result.baseline_offset)
    """

    def __init__(self, units_per_em: int = 1000, tolerance: float = 0.1) -> None:
        """Initialize the transformer.

        Args:
            units_per_em: Em square size in font units
            tolerance: Absolute tolerance used by validate()
        """
        self.units_per_em = units_per_em
        self.tolerance = tolerance

    def y_extent(self, commands: Sequence[DrawCommand]) -> tuple[float, float] | None:
        """Vertical extent of a command list.

        Returns:
            (min_y, max_y), or None if no command carries a Y value
        """
        ys = list(iter_absolute_y(commands))
        if not ys:
            return None
        return min(ys), max(ys)

    def baseline_offset(self, commands: Sequence[DrawCommand]) -> float:
        """Vertical shift applied when moving a glyph into font space.

        The offset is max(0, upm - height - min_y), capped at upm - height so
        the glyph cannot be pushed above the em box ceiling.

        Args:
            commands: Commands in drawing space

        Returns:
            Baseline offset in font units (0 when there are no Y values)
        """
        extent = self.y_extent(commands)
        if extent is None:
            return 0.0

        min_y, max_y = extent
        glyph_height = max_y - min_y
        offset = max(0.0, self.units_per_em - glyph_height - min_y)
        return min(offset, self.units_per_em - glyph_height)

    def to_font_space(
        self,
        commands: Sequence[DrawCommand],
        baseline_offset: float | None = None,
    ) -> TransformResult:
        """Convert drawing-space commands to font space.

        Args:
            commands: Commands in drawing space
            baseline_offset: Fixed offset to use instead of the one computed
                from the glyph's vertical extent

        Returns:
            TransformResult with one transformed command per input command
        """
        if baseline_offset is None:
            offset = self.baseline_offset(commands)
        else:
            offset = baseline_offset
        transformed = [
            self._flip(cmd, offset, inverse=False) for cmd in _anchor_leading(commands)
        ]
        return TransformResult(commands=transformed, baseline_offset=offset)

    def to_draw_space(
        self,
        commands: Sequence[DrawCommand],
        baseline_offset: float = 0.0,
    ) -> TransformResult:
        """Convert font-space commands back to drawing space.

        Applies y = upm - (y' - baseline_offset). Used for round-trip checks
        and debugging, not for production output.

        Args:
            commands: Commands in font space
            baseline_offset: Offset the commands were produced with

        Returns:
            TransformResult with commands in drawing space
        """
        transformed = [
            self._flip(cmd, baseline_offset, inverse=True) for cmd in _anchor_leading(commands)
        ]
        return TransformResult(commands=transformed, baseline_offset=baseline_offset)

    def validate(
        self,
        original: Sequence[DrawCommand],
        transformed: Sequence[DrawCommand],
        baseline_offset: float = 0.0,
    ) -> TransformValidation:
        """Check a transformation against its expected result.

        Mismatches are reported, never raised.

        Args:
            original: Commands in drawing space
            transformed: Commands claimed to be their font-space version
            baseline_offset: Offset the transformation used

        Returns:
            TransformValidation listing errors and warnings
        """
        report = TransformValidation()

        if len(original) != len(transformed):
            report.errors.append(
                f"Command count mismatch: {len(original)} vs {len(transformed)}"
            )

        anchored = _anchor_leading(original)
        for index, (orig, trans) in enumerate(zip(anchored, transformed)):
            if orig.type is not trans.type:
                report.errors.append(
                    f"Command type mismatch at index {index}: "
                    f"{orig.type.value} vs {trans.type.value}"
                )
                continue

            for y_index in orig.y_indices:
                original_y = orig.coordinates[y_index]
                transformed_y = trans.coordinates[y_index]
                if orig.relative and trans.relative:
                    expected_y = -original_y
                else:
                    expected_y = baseline_offset + self.units_per_em - original_y

                if not math.isfinite(transformed_y):
                    report.errors.append(f"Non-finite coordinate at command {index}")
                elif abs(transformed_y - expected_y) > self.tolerance:
                    report.errors.append(
                        f"Y-coordinate transformation error at command {index}: "
                        f"expected {expected_y}, got {transformed_y}"
                    )

            if orig.relative != trans.relative:
                report.warnings.append(f"Relative flag changed at command {index}")

        return report

    def stats(
        self,
        original: Sequence[DrawCommand],
        transformed: Sequence[DrawCommand],
    ) -> TransformationStats:
        """Summarize a transformation."""
        return TransformationStats(
            command_count=len(original),
            transformed_command_count=len(transformed),
            coordinate_count=sum(len(cmd.coordinates) for cmd in original),
            y_transformations=sum(len(cmd.y_indices) for cmd in original),
        )

    def _flip(self, cmd: DrawCommand, offset: float, inverse: bool) -> DrawCommand:
        """Apply the Y mapping to one command."""
        if not cmd.y_indices:
            return cmd

        upm = self.units_per_em
        coords = list(cmd.coordinates)
        for index in cmd.y_indices:
            if cmd.relative:
                coords[index] = -coords[index]
            elif inverse:
                coords[index] = upm - (coords[index] - offset)
            else:
                coords[index] = offset + upm - coords[index]
        return cmd.with_coordinates(coords)


def _anchor_leading(commands: Sequence[DrawCommand]) -> list[DrawCommand]:
    """Make relative commands absolute until the pen has a Y position.

    Deltas taken from the untouched origin do not survive the flip, since
    the origin itself maps elsewhere. Such commands are resolved against the
    pen; a close path before any move returns the pen to the origin.
    """
    result = []
    x = y = 0.0
    start_x = start_y = 0.0
    moved = placed = False

    for cmd in commands:
        ctype = cmd.type

        if ctype is CommandType.CLOSE_PATH:
            x, y = start_x, start_y
            placed = moved
            result.append(cmd)
            continue

        if cmd.relative and not placed:
            cmd = _resolve(cmd, x, y)

        base_x, base_y = (x, y) if cmd.relative else (0.0, 0.0)
        coords = cmd.coordinates
        if ctype is CommandType.HLINE_TO:
            x = base_x + coords[0]
        elif ctype is CommandType.VLINE_TO:
            y = base_y + coords[0]
        else:
            x, y = base_x + coords[-2], base_y + coords[-1]

        if ctype is CommandType.MOVE_TO:
            start_x, start_y = x, y
            moved = True
        if ctype.y_indices:
            placed = True
        result.append(cmd)

    return result


def _resolve(cmd: DrawCommand, x: float, y: float) -> DrawCommand:
    """Absolute form of a relative command issued from pen position (x, y)."""
    coords = list(cmd.coordinates)
    if cmd.type is CommandType.HLINE_TO:
        coords[0] += x
    elif cmd.type is CommandType.VLINE_TO:
        coords[0] += y
    elif cmd.type is CommandType.ARC_TO:
        coords[5] += x
        coords[6] += y
    else:
        for index in range(0, len(coords), 2):
            coords[index] += x
            coords[index + 1] += y
    return DrawCommand(cmd.type, tuple(coords), relative=False)
