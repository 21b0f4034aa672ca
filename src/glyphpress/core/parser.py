"""Path string parsing.

Turns an SVG-style path description into a list of DrawCommands. Parsing is
lenient: malformed input degrades to a partial command list plus
diagnostics and never raises.
"""

import math
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from glyphpress.domain.command import CommandType, DrawCommand
from glyphpress.domain.diagnostic import Diagnostic, warning

STAGE = "parse"

_TOKEN_RE = re.compile(
    r"""
    (?P<number>[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)
    | (?P<separator>[\s,]+)
    | (?P<command>[A-Za-z])
    | (?P<invalid>.)
    """,
    re.VERBOSE | re.DOTALL,
)


@dataclass(frozen=True, slots=True)
class RawCommand:
    """A command letter and the operands that followed it, before arity checks.

    Attributes:
        letter: Command letter as written, or None for operands before any command
        operands: Numbers following the letter
        position: Character offset of the letter in the source string
    """

    letter: str | None
    operands: tuple[float, ...]
    position: int


@dataclass
class ParseResult:
    """Commands parsed from a path plus everything that was skipped."""

    commands: list[DrawCommand] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.diagnostics


class PathParser:
    """Parses path strings into DrawCommands.

    The parser holds no state between calls and is safe to share.

    Example:
        result = PathParser().parse("M 10 10 L 90 10 Z")
        for command in result.commands:
            print(command.letter, command.coordinates)
    """

    def tokenize(self, path: str | None) -> Iterator[RawCommand]:
        """Group a path string into command letters and their operands.

        Stray characters are reported as a RawCommand with an empty letter.

        Args:
            path: Path description string

        Yields:
            RawCommand groups in source order
        """
        letter: str | None = None
        operands: list[float] = []
        position = 0

        for match in _TOKEN_RE.finditer(path or ""):
            kind = match.lastgroup
            text = match.group()

            if kind == "separator":
                continue
            if kind == "number":
                operands.append(float(text))
            elif kind == "command":
                if letter is not None or operands:
                    yield RawCommand(letter, tuple(operands), position)
                letter = text
                operands = []
                position = match.start()
            else:
                yield RawCommand("", (), match.start())

        if letter is not None or operands:
            yield RawCommand(letter, tuple(operands), position)

    def parse(self, path: str | None) -> ParseResult:
        """Parse a path string.

        Args:
            path: Path description string

        Returns:
            ParseResult with the commands that parsed cleanly and a
            diagnostic for everything that was skipped
        """
        result = ParseResult()
        for raw in self.tokenize(path):
            self._append(raw, result)
        return result

    def validate(self, path: str | None) -> list[str]:
        """Check that a path is structurally usable.

        A usable path is non-empty, yields at least one command, contains a
        MoveTo, and has coordinates on every command except ClosePath.

        Args:
            path: Path description string

        Returns:
            List of error messages (empty when valid)
        """
        errors: list[str] = []

        if not path or not path.strip():
            errors.append("SVG path is empty")
            return errors

        raws = [raw for raw in self.tokenize(path) if raw.letter]
        commands = self.parse(path).commands

        if not commands:
            errors.append("No valid SVG commands found")

        if not any(cmd.type is CommandType.MOVE_TO for cmd in commands):
            errors.append("SVG path must start with a move command (M)")

        for index, raw in enumerate(raws, start=1):
            command_type = CommandType.from_letter(raw.letter or "")
            if command_type is None or command_type is CommandType.CLOSE_PATH:
                continue
            if not raw.operands:
                errors.append(f"Command {index} ({raw.letter}) has no coordinates")

        return errors

    def _append(self, raw: RawCommand, result: ParseResult) -> None:
        """Convert one raw group into commands, or record why it was skipped."""
        subject = f"offset {raw.position}"

        if raw.letter is None:
            result.diagnostics.append(
                warning(STAGE, f"Discarded {len(raw.operands)} operands before the first command", subject)
            )
            return

        if raw.letter == "":
            result.diagnostics.append(warning(STAGE, "Unexpected character skipped", subject))
            return

        command_type = CommandType.from_letter(raw.letter)
        if command_type is None:
            result.diagnostics.append(
                warning(STAGE, f"Unknown command '{raw.letter}' skipped", subject)
            )
            return

        relative = raw.letter.islower()

        if command_type is CommandType.CLOSE_PATH:
            if raw.operands:
                result.diagnostics.append(
                    warning(STAGE, f"Close path takes no coordinates; {len(raw.operands)} ignored", subject)
                )
            result.commands.append(DrawCommand(CommandType.CLOSE_PATH))
            return

        if not raw.operands:
            result.diagnostics.append(
                warning(STAGE, f"No coordinates found for command {raw.letter}", subject)
            )
            return

        if not all(math.isfinite(value) for value in raw.operands):
            result.diagnostics.append(
                warning(STAGE, f"Command {raw.letter} has non-finite coordinates", subject)
            )
            return

        arity = command_type.arity
        if len(raw.operands) % arity:
            result.diagnostics.append(
                warning(
                    STAGE,
                    f"Command {raw.letter} expects {arity} coordinates, got {len(raw.operands)}",
                    subject,
                )
            )
            return

        # Repeated operand groups repeat the command; extra MoveTo pairs are LineTo.
        for start in range(0, len(raw.operands), arity):
            repeated_type = command_type
            if command_type is CommandType.MOVE_TO and start > 0:
                repeated_type = CommandType.LINE_TO
            result.commands.append(
                DrawCommand(repeated_type, raw.operands[start:start + arity], relative)
            )


_default_parser = PathParser()


def parse_path(path: str | None) -> ParseResult:
    """Parse a path string with the shared default parser."""
    return _default_parser.parse(path)


def validate_path(path: str | None) -> list[str]:
    """Validate a path string with the shared default parser."""
    return _default_parser.validate(path)


def commands_to_path_string(commands: Sequence[DrawCommand]) -> str:
    """Serialize commands back into a path string.

    Args:
        commands: Commands to serialize

    Returns:
        Space-separated path string, e.g. "M 10 10 L 90 10 Z"
    """
    return " ".join(cmd.to_path_fragment() for cmd in commands)
