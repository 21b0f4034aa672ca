"""Structured diagnostics returned alongside pipeline results."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Diagnostic severity."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A non-fatal finding from one pipeline stage.

    Attributes:
        severity: How serious the finding is
        stage: Pipeline stage that produced it (e.g. "parse", "converting")
        message: Human-readable description
        subject: What the finding is about (character key, command index, ...)
    """

    severity: Severity
    stage: str
    message: str
    subject: str | None = None

    def __str__(self) -> str:
        prefix = f"{self.subject}: " if self.subject else ""
        return f"[{self.stage}] {prefix}{self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "severity": self.severity.value,
            "stage": self.stage,
            "message": self.message,
            "subject": self.subject,
        }


def warning(stage: str, message: str, subject: str | None = None) -> Diagnostic:
    """Shorthand for a warning diagnostic."""
    return Diagnostic(Severity.WARNING, stage, message, subject)


def error(stage: str, message: str, subject: str | None = None) -> Diagnostic:
    """Shorthand for an error diagnostic."""
    return Diagnostic(Severity.ERROR, stage, message, subject)
