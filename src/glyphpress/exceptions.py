"""Exception hierarchy for Glyphpress."""


class GlyphpressError(Exception):
    """Base exception for all Glyphpress errors."""

    pass


class ProjectError(GlyphpressError):
    """Errors related to loading or validating a font project."""

    pass


class ProjectLoadError(ProjectError):
    """Error loading a project file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load project '{path}': {reason}")


class ValidationError(ProjectError):
    """Pre-flight validation failed.

    Carries every violation found, not just the first one.
    """

    def __init__(self, violations: list[str]) -> None:
        self.violations = list(violations)
        super().__init__(f"Project validation failed: {', '.join(self.violations)}")


class ConversionError(GlyphpressError):
    """Error converting a single character into a glyph."""

    def __init__(self, character: str, reason: str) -> None:
        self.character = character
        self.reason = reason
        super().__init__(f"Failed to convert character {character}: {reason}")


class EmptyResultError(GlyphpressError):
    """No usable glyphs remain to build a font from."""

    def __init__(self, message: str = "No valid glyphs could be created from the character data") -> None:
        super().__init__(message)


class MetricsError(GlyphpressError):
    """Errors in font metrics calculation."""

    pass


class EmptyInputError(MetricsError):
    """Metrics were requested for an empty glyph collection."""

    def __init__(self) -> None:
        super().__init__("Cannot calculate metrics for empty glyph collection")


class EncoderError(GlyphpressError):
    """The binary font encoder failed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Font encoding failed: {reason}")


class FontSaveError(GlyphpressError):
    """Error saving a compiled font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save font '{path}': {reason}")
