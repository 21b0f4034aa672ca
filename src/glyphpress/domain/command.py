"""Path drawing commands.

This module defines the command vocabulary shared by the parser, the
coordinate transformer and the glyph builder:
- CommandType: Enum of path commands with their fixed operand arity
- DrawCommand: A single command with its coordinates
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class CommandType(str, Enum):
    """Path command letters (absolute form).

    The lowercase letter of a command marks the relative variant; the
    distinction is carried by ``DrawCommand.relative``.
    """

    MOVE_TO = "M"
    LINE_TO = "L"
    HLINE_TO = "H"
    VLINE_TO = "V"
    CUBIC_TO = "C"
    SMOOTH_CUBIC_TO = "S"
    QUAD_TO = "Q"
    SMOOTH_QUAD_TO = "T"
    ARC_TO = "A"
    CLOSE_PATH = "Z"

    @property
    def arity(self) -> int:
        """Number of operands the command takes."""
        return _ARITY[self]

    @property
    def y_indices(self) -> tuple[int, ...]:
        """Operand indices that hold Y values."""
        return _Y_INDICES[self]

    @classmethod
    def from_letter(cls, letter: str) -> "CommandType | None":
        """Look up a command by letter, ignoring case.

        Args:
            letter: Single command letter

        Returns:
            Matching CommandType, or None for unknown letters
        """
        return _BY_LETTER.get(letter.upper())


_ARITY: dict[CommandType, int] = {
    CommandType.MOVE_TO: 2,
    CommandType.LINE_TO: 2,
    CommandType.HLINE_TO: 1,
    CommandType.VLINE_TO: 1,
    CommandType.CUBIC_TO: 6,
    CommandType.SMOOTH_CUBIC_TO: 4,
    CommandType.QUAD_TO: 4,
    CommandType.SMOOTH_QUAD_TO: 2,
    CommandType.ARC_TO: 7,
    CommandType.CLOSE_PATH: 0,
}

_Y_INDICES: dict[CommandType, tuple[int, ...]] = {
    CommandType.MOVE_TO: (1,),
    CommandType.LINE_TO: (1,),
    CommandType.HLINE_TO: (),
    CommandType.VLINE_TO: (0,),
    CommandType.CUBIC_TO: (1, 3, 5),
    CommandType.SMOOTH_CUBIC_TO: (1, 3),
    CommandType.QUAD_TO: (1, 3),
    CommandType.SMOOTH_QUAD_TO: (1,),
    CommandType.ARC_TO: (6,),
    CommandType.CLOSE_PATH: (),
}

_BY_LETTER: dict[str, CommandType] = {member.value: member for member in CommandType}


def format_number(value: float) -> str:
    """Format a coordinate for a path string.

    Integral values are written without a decimal point; other values use
    the shortest representation that parses back to the same float.
    """
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass(frozen=True, slots=True)
class DrawCommand:
    """A single drawing command.

    Attributes:
        type: Command type
        coordinates: Operands, exactly ``type.arity`` of them
        relative: True if operands are relative to the current pen position
    """

    type: CommandType
    coordinates: tuple[float, ...] = ()
    relative: bool = False

    def __post_init__(self) -> None:
        if len(self.coordinates) != self.type.arity:
            raise ValueError(
                f"Command {self.type.value} takes {self.type.arity} coordinates, "
                f"got {len(self.coordinates)}"
            )
        if self.type is CommandType.CLOSE_PATH and self.relative:
            object.__setattr__(self, "relative", False)

    @property
    def letter(self) -> str:
        """Command letter, lowercase for relative commands."""
        return self.type.value.lower() if self.relative else self.type.value

    @property
    def y_indices(self) -> tuple[int, ...]:
        """Operand indices that hold Y values."""
        return self.type.y_indices

    def with_coordinates(self, coordinates: tuple[float, ...] | list[float]) -> "DrawCommand":
        """Return a copy of this command with new operands."""
        return replace(self, coordinates=tuple(coordinates))

    def to_path_fragment(self) -> str:
        """Serialize to path syntax, e.g. ``"L 10 20"`` or ``"Z"``."""
        if self.type is CommandType.CLOSE_PATH:
            return "Z"
        coords = " ".join(format_number(c) for c in self.coordinates)
        return f"{self.letter} {coords}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with type, coordinates, and relative fields
        """
        return {
            "type": self.type.value,
            "coordinates": list(self.coordinates),
            "relative": self.relative,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DrawCommand":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with type, coordinates, and relative fields

        Returns:
            DrawCommand instance
        """
        return cls(
            type=CommandType(data["type"]),
            coordinates=tuple(data["coordinates"]),
            relative=data.get("relative", False),
        )
