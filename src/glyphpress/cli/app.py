"""CLI application entry point for glyphpress.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer

from glyphpress import __version__
from glyphpress.cli.output import (
    console,
    create_progress,
    format_file_size,
    print_check_result,
    print_diagnostics,
    print_error,
    print_header,
    print_metrics,
    print_project_info,
    print_step,
    print_success,
    print_warnings,
)
from glyphpress.config import (
    EncoderConfig,
    FontFormat,
    GlyphpressSettings,
    LoggingConfig,
    ProcessingConfig,
)
from glyphpress.core import FontGenerator, GenerationProgress
from glyphpress.domain import FontProject
from glyphpress.exceptions import FontSaveError, GlyphpressError, ProjectLoadError
from glyphpress.io import FontWriter, ProjectReader
from glyphpress.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="glyphpress",
    help="Compile hand-drawn glyph outlines into TrueType/OpenType fonts.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Glyphpress[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Compile hand-drawn glyph outlines into fonts."""


@app.command()
def build(
    project_file: Annotated[
        Path,
        typer.Argument(
            help="Path to a JSON font project",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {family-name}.{ext} next to the project)",
        ),
    ] = None,
    font_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format (ttf|otf)",
        ),
    ] = "ttf",
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of worker processes for conversion (default: in-process)",
            min=1,
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file (default: glyphpress_{timestamp}.log)",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
) -> None:
    """Build a font from a project file.

    Characters without path data are skipped, characters that fail to
    convert are reported and left out; the font is written as long as at
    least one glyph was produced.

    Example:
        glyphpress build sketch.json --format otf
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    try:
        output_format = FontFormat(font_format.lower())
    except ValueError:
        print_error(f"Invalid format: {font_format}", details="Valid values: ttf, otf")
        raise typer.Exit(code=1)

    settings = GlyphpressSettings(
        encoder=EncoderConfig(format=output_format),
        processing=ProcessingConfig(max_workers=workers),
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "ERROR",
        ),
    )

    if not quiet:
        print_header(__version__)

    try:
        project = _load_project(project_file, quiet)

        logger = configure_logging(
            log_file=settings.logging.log_file,
            console_level=settings.logging.log_level,
            file_level=settings.logging.file_log_level,
            quiet=quiet,
        )
        generator = FontGenerator(settings, logger=logger)

        if not quiet:
            print_step("Generating")
            with create_progress() as progress:
                task_id = progress.add_task("preparing", total=100)

                def update_progress(update: GenerationProgress) -> None:
                    progress.update(
                        task_id, completed=update.progress, description=update.stage.value
                    )

                generator.set_progress_callback(update_progress)
                result = generator.generate(project)
        else:
            result = generator.generate(project)

        if not quiet and result.diagnostics:
            print_step("Diagnostics")
            print_diagnostics(result.diagnostics, verbose=verbose)

        if not result.success or result.font is None:
            print_error(result.error or "Font generation failed")
            raise typer.Exit(code=1)

        if not quiet and result.metrics is not None:
            print_step("Metrics")
            print_metrics(result.metrics)
            print_warnings(result.warnings)

        output_path = output or FontWriter.get_output_path(
            project_file, project.settings.family_name, result.font.format
        )
        FontWriter(output_path).save(result.font)

        if not quiet and result.stats is not None:
            print_success(
                output_path=str(output_path),
                file_size=format_file_size(result.font.size),
                total_time_s=result.stats.duration_seconds,
                glyphs=result.font.glyph_count,
                skipped=result.stats.skipped_count,
                errors=result.stats.error_count,
                checksum=result.font.checksum,
                avg_time_ms=result.stats.avg_glyph_time_ms,
            )

    except ProjectLoadError as e:
        print_error(f"Could not load project: {e.reason}")
        raise typer.Exit(code=1)
    except FontSaveError as e:
        print_error(f"Could not save font: {e.reason}")
        raise typer.Exit(code=1)
    except GlyphpressError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


@app.command()
def check(
    project_file: Annotated[
        Path,
        typer.Argument(
            help="Path to a JSON font project",
            show_default=False,
        ),
    ],
) -> None:
    """Check whether a project can be generated without writing a font.

    Exits with status 1 if no character can become a glyph or the project
    fails validation.
    """
    try:
        project = _load_project(project_file, quiet=False)
    except ProjectLoadError as e:
        print_error(f"Could not load project: {e.reason}")
        raise typer.Exit(code=1)

    generator = FontGenerator()
    ok, issues = generator.can_generate(project.characters)

    try:
        generator.validate_project(project)
    except GlyphpressError as e:
        ok = False
        issues.extend(getattr(e, "violations", [str(e)]))

    print_step("Checking")
    print_check_result(ok, issues)
    estimate_ms = FontGenerator.estimate_generation_time(len(project.characters))
    console.print(f"  Estimated generation time {estimate_ms / 1000:.1f}s", style="dim")

    if not ok:
        raise typer.Exit(code=1)


def _load_project(project_file: Path, quiet: bool) -> FontProject:
    """Load a project file, printing its summary.

    Raises:
        ProjectLoadError: If the file is missing or not a valid project
    """
    if not quiet:
        print_step("Loading project")

    try:
        project = ProjectReader(project_file).load()
    except FileNotFoundError as e:
        raise ProjectLoadError(str(project_file), "file not found") from e

    if not quiet:
        print_project_info(
            project_path=str(project_file),
            family_name=project.settings.family_name,
            character_count=len(project.characters),
        )
    return project


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
