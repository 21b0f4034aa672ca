"""Font generation orchestration.

This module drives the whole pipeline for a FontProject:

    preparing -> converting -> calculating -> building -> compiling -> complete

Key components:
- convert_character: Top-level picklable function converting one character
- FontGenerator: Stage machine reporting progress and returning a result
"""

import hashlib
import time
import traceback
from collections.abc import Callable, Iterator
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

import structlog

from glyphpress.config import GlyphpressSettings
from glyphpress.core.builder import GlyphBuilder
from glyphpress.core.metrics import FontMetricsAggregator
from glyphpress.core.parser import PathParser
from glyphpress.core.transform import CoordinateTransformer
from glyphpress.domain.diagnostic import Diagnostic, Severity, error, warning
from glyphpress.domain.font import (
    CharacterData,
    CompilationUnit,
    CompiledFont,
    FontMetrics,
    FontProject,
)
from glyphpress.domain.glyph import GlyphOutline
from glyphpress.exceptions import (
    ConversionError,
    EmptyResultError,
    EncoderError,
    GlyphpressError,
    ValidationError,
)
from glyphpress.io.encoder import FontEncoder, FontToolsEncoder
from glyphpress.utils import GenerationLogger, GenerationStats


class GenerationStage(str, Enum):
    """Pipeline stage."""

    PREPARING = "preparing"
    CONVERTING = "converting"
    CALCULATING = "calculating"
    BUILDING = "building"
    COMPILING = "compiling"
    COMPLETE = "complete"


@dataclass(frozen=True)
class GenerationProgress:
    """A progress report sent to the progress sink.

    Attributes:
        stage: Current stage
        progress: Overall progress, 0-100
        message: Human-readable status
        current_glyph: Character key being converted, if any
        total_glyphs: Number of characters in the project, if known
    """

    stage: GenerationStage
    progress: int
    message: str
    current_glyph: str | None = None
    total_glyphs: int | None = None


ProgressSink = Callable[[GenerationProgress], None]


@dataclass
class GenerationResult:
    """Outcome of FontGenerator.generate().

    Attributes:
        success: True if a font was compiled
        font: Compiled font bytes and digest
        unit: Compilation unit handed to the encoder
        metrics: Normalized font metrics
        warnings: Metrics validation warnings
        diagnostics: Everything skipped or repaired along the way
        error: Description of the fatal error, if any
        error_type: Class name of the fatal error, if any
        stats: Conversion statistics
    """

    success: bool
    font: CompiledFont | None = None
    unit: CompilationUnit | None = None
    metrics: FontMetrics | None = None
    warnings: list[str] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error: str | None = None
    error_type: str | None = None
    stats: GenerationStats | None = None


def parse_code_point(key: str) -> int:
    """Parse a "U+XXXX" character key.

    Args:
        key: Character key, e.g. "U+0041" (the "U+" prefix is optional)

    Returns:
        Code point

    Raises:
        ValueError: If the key is not a valid Unicode scalar value
    """
    text = key.strip()
    if text[:2].upper() == "U+":
        text = text[2:]
    code_point = int(text, 16)
    if not 0 <= code_point <= 0x10FFFF:
        raise ValueError(f"Code point out of range: {key}")
    return code_point


def convert_character(
    key: str,
    path: str,
    settings_dict: dict[str, Any],
) -> dict[str, Any]:
    """Convert one character's path into a glyph.

    Top-level function designed to be picklable for use with
    ProcessPoolExecutor. Parses, transforms to font space and builds.

    Args:
        key: Character key ("U+0041")
        path: Path string in drawing space
        settings_dict: Serialized GlyphpressSettings

    Returns:
        Dictionary containing either:
        - Success: {"glyph": glyph_dict, "diagnostics": [...], "baseline_offset": float,
          "command_count": int, "duration_ms": float}
        - Error: {"error": str, "character": str, "traceback": str, "diagnostics": [...],
          "duration_ms": float}
    """
    start_time = time.time()
    diagnostics: list[dict[str, Any]] = []

    try:
        settings = GlyphpressSettings.model_validate(settings_dict)
        upm = settings.font.units_per_em
        code_point = parse_code_point(key)

        parsed = PathParser().parse(path)
        diagnostics.extend(
            Diagnostic(
                d.severity, d.stage, d.message, f"{key} {d.subject}" if d.subject else key
            ).to_dict()
            for d in parsed.diagnostics
        )
        if not parsed.commands:
            raise ConversionError(key, "path has no drawable commands")

        transformer = CoordinateTransformer(upm, settings.glyph.transform_tolerance)
        transformed = transformer.to_font_space(parsed.commands)

        validation = transformer.validate(
            parsed.commands, transformed.commands, transformed.baseline_offset
        )
        for message in validation.errors + validation.warnings:
            diagnostics.append(warning("transform", message, key).to_dict())

        glyph = GlyphBuilder(settings.glyph).build(transformed.commands, code_point)

        return {
            "glyph": glyph.to_dict(),
            "diagnostics": diagnostics,
            "baseline_offset": transformed.baseline_offset,
            "command_count": len(transformed.commands),
            "duration_ms": (time.time() - start_time) * 1000,
        }

    except Exception as e:
        return {
            "error": e.reason if isinstance(e, ConversionError) else str(e),
            "character": key,
            "traceback": traceback.format_exc(),
            "diagnostics": diagnostics,
            "duration_ms": (time.time() - start_time) * 1000,
        }


class FontGenerator:
    """Orchestrates font generation from a FontProject.

    Manages the complete workflow:
    1. Validate the project
    2. Convert every character with path data (failures are skipped)
    3. Infer font metrics
    4. Assemble the compilation unit
    5. Encode it and record size and checksum

    Fatal errors are returned in the GenerationResult, never raised.

    Example:
        generator = FontGenerator(GlyphpressSettings())
        generator.set_progress_callback(print)
        result = generator.generate(project)
        if result.success:
            Path("font.ttf").write_bytes(result.font.font_data)
    """

    def __init__(
        self,
        settings: GlyphpressSettings | None = None,
        encoder: FontEncoder | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
        progress_callback: ProgressSink | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            settings: Pipeline settings (defaults when None)
            encoder: Binary encoder (FontToolsEncoder when None)
            logger: Structured logger (module logger when None)
            progress_callback: Optional progress sink
        """
        self.settings = settings or GlyphpressSettings()
        self.encoder = encoder or FontToolsEncoder(self.settings.encoder, self.settings.font)
        self.logger = logger or structlog.get_logger("glyphpress")
        self.parser = PathParser()
        self.builder = GlyphBuilder(self.settings.glyph)
        self.aggregator = FontMetricsAggregator(
            self.settings.metrics, self.settings.font.units_per_em
        )
        self._progress_callback = progress_callback

    def set_progress_callback(self, callback: ProgressSink | None) -> None:
        """Set the progress sink; it is called synchronously and must not block."""
        self._progress_callback = callback

    def generate(self, project: FontProject) -> GenerationResult:
        """Generate a font from a project.

        Args:
            project: Characters and font settings

        Returns:
            GenerationResult; success is False with an error message when
            the project cannot produce a usable font
        """
        diagnostics: list[Diagnostic] = []
        glyph_logger = GenerationLogger(self.logger)
        stats = glyph_logger.stats
        stats.start_time = time.time()

        try:
            self._update_progress(GenerationStage.PREPARING, 0, "Preparing font generation...")
            self.validate_project(project)

            self._update_progress(
                GenerationStage.CONVERTING, 20, "Converting SVG paths to glyphs..."
            )
            glyphs = self._convert_characters(project.characters, diagnostics, glyph_logger)
            if not glyphs:
                raise EmptyResultError()

            self._update_progress(GenerationStage.CALCULATING, 40, "Calculating font metrics...")
            raw_metrics = self.aggregator.aggregate(glyphs)
            metric_warnings = self.aggregator.validate(raw_metrics)
            metrics = self.aggregator.normalize(raw_metrics)
            if metric_warnings:
                self.logger.warning("Font metrics validation warnings", warnings=metric_warnings)
            self.logger.info("Font metrics calculated", **metrics.to_dict())

            self._update_progress(GenerationStage.BUILDING, 60, "Building font...")
            unit = CompilationUnit(
                glyphs=tuple(self.builder.required_glyphs()) + tuple(glyphs),
                metrics=metrics,
                settings=project.settings,
            )

            self._update_progress(GenerationStage.COMPILING, 80, "Compiling font formats...")
            font = self.compile(unit)

            stats.end_time = time.time()
            self._update_progress(GenerationStage.COMPLETE, 100, "Font generation complete!")
            self.logger.info(
                "Font generation complete",
                glyphs=font.glyph_count,
                size=font.size,
                converted=stats.converted_count,
                skipped=stats.skipped_count,
                errors=stats.error_count,
                duration_seconds=round(stats.duration_seconds, 2),
            )

            return GenerationResult(
                success=True,
                font=font,
                unit=unit,
                metrics=metrics,
                warnings=metric_warnings,
                diagnostics=diagnostics,
                stats=stats,
            )

        except GlyphpressError as e:
            self.logger.error("Font generation failed", error=str(e), error_type=type(e).__name__)
            return self._failure(e, diagnostics, stats)
        except Exception as e:
            self.logger.error(
                "Font generation failed unexpectedly",
                error=str(e),
                traceback=traceback.format_exc(),
            )
            return self._failure(e, diagnostics, stats, prefix="Font generation failed: ")

    def validate_project(self, project: FontProject) -> None:
        """Pre-flight checks.

        Characters without path data are not violations; they are skipped
        during conversion.

        Args:
            project: Project to check

        Raises:
            ValidationError: Listing every violation found
        """
        errors: list[str] = []

        if len(project.characters) < 1:
            errors.append("At least one character is required")

        if not project.settings.family_name or not project.settings.family_name.strip():
            errors.append("Font family name is required")

        for key, char_data in project.characters.items():
            try:
                parse_code_point(key)
            except ValueError:
                errors.append(f"Character {key} is not a valid code point")
                continue

            if not char_data.has_path():
                continue

            path_errors = self.parser.validate(char_data.vector_data)
            if path_errors:
                errors.append(f"Character {key} has invalid SVG path: {', '.join(path_errors)}")

        if errors:
            raise ValidationError(errors)

    def can_generate(self, characters: dict[str, CharacterData]) -> tuple[bool, list[str]]:
        """Quick check whether any character can become a glyph.

        Args:
            characters: Character map

        Returns:
            (can_generate, issues)
        """
        issues: list[str] = []

        if not characters:
            return False, ["No characters provided"]

        valid_count = 0
        for key, char_data in characters.items():
            if not char_data.has_path():
                issues.append(f"Character {key}: No vector data")
                continue
            path_errors = self.parser.validate(char_data.vector_data)
            if path_errors:
                issues.append(f"Character {key}: {', '.join(path_errors)}")
            else:
                valid_count += 1

        if valid_count == 0:
            issues.append("No valid characters found")

        return valid_count > 0, issues

    @staticmethod
    def estimate_generation_time(character_count: int) -> int:
        """Rough wall-clock estimate in milliseconds."""
        return max(1000, character_count * 100 + 500)

    def compile(self, unit: CompilationUnit) -> CompiledFont:
        """Encode a compilation unit and fingerprint the output.

        Args:
            unit: Unit to encode

        Returns:
            CompiledFont with size and SHA-256 checksum

        Raises:
            EncoderError: If the encoder fails
        """
        try:
            font_data = bytes(self.encoder.encode(unit))
        except EncoderError:
            raise
        except Exception as e:
            raise EncoderError(str(e)) from e
        return CompiledFont(
            font_data=font_data,
            format=getattr(self.encoder, "format", self.settings.encoder.format.value),
            size=len(font_data),
            checksum=hashlib.sha256(font_data).hexdigest(),
            glyph_count=len(unit.glyphs),
            generated_at=datetime.now(),
        )

    def _convert_characters(
        self,
        characters: dict[str, CharacterData],
        diagnostics: list[Diagnostic],
        glyph_logger: GenerationLogger,
    ) -> list[GlyphOutline]:
        """Convert every character with path data, skipping failures.

        Results are consumed in input order whether or not a process pool
        is used, so glyph order and diagnostics are deterministic.
        """
        glyphs: list[GlyphOutline] = []
        seen_names: set[str] = set()
        total = len(characters)

        tasks: list[tuple[str, str]] = []
        for key, char_data in characters.items():
            if not char_data.has_path():
                diagnostics.append(warning("converting", "Skipped: no vector data", key))
                glyph_logger.log_glyph_skipped(key, "no vector data")
                continue
            tasks.append((key, char_data.vector_data or ""))

        for index, (key, result) in enumerate(self._run_conversions(tasks), start=1):
            diagnostics.extend(_diagnostics_from_dicts(result.get("diagnostics", [])))

            if "error" in result:
                failure = ConversionError(key, result["error"])
                diagnostics.append(error("converting", str(failure), key))
                glyph_logger.log_glyph_error(key, failure, result.get("traceback"))
            else:
                glyph = GlyphOutline.from_dict(result["glyph"])
                if glyph.name in seen_names:
                    diagnostics.append(
                        warning("converting", f"Duplicate glyph {glyph.name} skipped", key)
                    )
                    glyph_logger.log_glyph_skipped(key, "duplicate code point")
                else:
                    seen_names.add(glyph.name)
                    glyphs.append(glyph)
                    glyph_logger.log_transform(
                        key, result["baseline_offset"], result["command_count"]
                    )
                    glyph_logger.log_glyph_complete(
                        key, glyph.name, glyph.advance_width, result["duration_ms"]
                    )

            progress = 20 + (index / total) * 20 if total else 40
            self._update_progress(
                GenerationStage.CONVERTING,
                progress,
                f"Converting character {key}...",
                current_glyph=key,
                total_glyphs=total,
            )

        return glyphs

    def _run_conversions(
        self, tasks: list[tuple[str, str]]
    ) -> Iterator[tuple[str, dict[str, Any]]]:
        """Run convert_character over tasks, in-process or in a worker pool."""
        settings_dict = self.settings.model_dump(mode="json")
        max_workers = self.settings.processing.max_workers

        if not max_workers or max_workers <= 1 or len(tasks) <= 1:
            for key, path in tasks:
                yield key, convert_character(key, path, settings_dict)
            return

        self.logger.info("Starting parallel conversion", tasks=len(tasks), max_workers=max_workers)
        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                (key, executor.submit(convert_character, key, path, settings_dict))
                for key, path in tasks
            ]
            for key, future in futures:
                try:
                    yield key, future.result()
                except Exception as e:
                    yield key, {
                        "error": str(e),
                        "character": key,
                        "traceback": traceback.format_exc(),
                    }

    def _failure(
        self,
        exc: Exception,
        diagnostics: list[Diagnostic],
        stats: GenerationStats,
        prefix: str = "",
    ) -> GenerationResult:
        stats.end_time = time.time()
        return GenerationResult(
            success=False,
            diagnostics=diagnostics,
            error=f"{prefix}{exc}",
            error_type=type(exc).__name__,
            stats=stats,
        )

    def _update_progress(
        self,
        stage: GenerationStage,
        progress: float,
        message: str,
        current_glyph: str | None = None,
        total_glyphs: int | None = None,
    ) -> None:
        """Report progress to the sink, if one is set."""
        if self._progress_callback is None:
            return
        self._progress_callback(
            GenerationProgress(
                stage=stage,
                progress=round(progress),
                message=message,
                current_glyph=current_glyph,
                total_glyphs=total_glyphs,
            )
        )


def _diagnostics_from_dicts(items: list[dict[str, Any]]) -> Iterator[Diagnostic]:
    for item in items:
        yield Diagnostic(
            severity=Severity(item["severity"]),
            stage=item["stage"],
            message=item["message"],
            subject=item.get("subject"),
        )
