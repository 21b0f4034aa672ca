"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from glyphpress.domain import Diagnostic, FontMetrics, Severity

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_WARN = "!"  # Warning
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for font generation.

    Returns:
        Configured Progress instance with stage text, bar and time elapsed.
    """
    return Progress(
        TextColumn("  {task.description:<12}"),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Glyphpress[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_project_info(project_path: str, family_name: str, character_count: int) -> None:
    """Print project information.

    Args:
        project_path: Path to the project file
        family_name: Font family name
        character_count: Number of characters in the project
    """
    # Use Text to safely handle paths with special characters
    line1 = Text("  ")
    line1.append(project_path)
    console.print(line1)
    line2 = Text("  ")
    line2.append(family_name or "(unnamed)", style="bold")
    line2.append(f" {SYM_DOT} {character_count:,} characters")
    console.print(line2)


def print_metrics(metrics: FontMetrics) -> None:
    """Print the inferred font metrics as a table."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column(justify="right")
    for label, value in (
        ("Units per em", metrics.units_per_em),
        ("Ascender", metrics.ascender),
        ("Descender", metrics.descender),
        ("Cap height", metrics.cap_height),
        ("x-height", metrics.x_height),
        ("Line gap", metrics.line_gap),
    ):
        table.add_row(label, str(value))
    console.print(table)


def print_diagnostics(diagnostics: list[Diagnostic], verbose: bool, limit: int = 20) -> None:
    """Print skipped characters and repaired input.

    Args:
        diagnostics: Diagnostics collected during generation
        verbose: Show every diagnostic instead of a summary count
        limit: Maximum number of diagnostics listed in verbose mode
    """
    if not diagnostics:
        return

    errors = sum(1 for d in diagnostics if d.severity is Severity.ERROR)
    warnings = len(diagnostics) - errors
    console.print(
        f"  [yellow]{warnings} warnings[/yellow] {SYM_DOT} [red]{errors} errors[/red]"
    )

    if verbose:
        for diagnostic in diagnostics[:limit]:
            style = "red" if diagnostic.severity is Severity.ERROR else "yellow"
            line = Text(f"  {SYM_WARN} ", style=style)
            line.append(str(diagnostic), style="default")
            console.print(line)
        if len(diagnostics) > limit:
            console.print(f"  {SYM_DOT}{SYM_DOT}{SYM_DOT} (+{len(diagnostics) - limit} more)")


def print_warnings(warnings: list[str]) -> None:
    """Print metrics validation warnings."""
    for message in warnings:
        console.print(f"  [yellow]{SYM_WARN}[/yellow] {message}")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def format_file_size(size_bytes: int) -> str:
    """Format a byte count in human-readable form (e.g. "12 KB")."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def print_success(
    output_path: str,
    file_size: str,
    total_time_s: float,
    glyphs: int,
    skipped: int,
    errors: int,
    checksum: str,
    avg_time_ms: float | None = None,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        total_time_s: Total generation time in seconds
        glyphs: Number of glyphs in the font
        skipped: Number of characters skipped
        errors: Number of characters that failed to convert
        checksum: SHA-256 digest of the font file
        avg_time_ms: Average conversion time per glyph in milliseconds
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    error_style = "red" if errors > 0 else "green"
    console.print(
        f"  {glyphs} glyphs {SYM_DOT} {skipped} skipped {SYM_DOT} "
        f"[{error_style}]{errors} errors[/{error_style}]"
    )
    console.print(f"  sha256 {checksum[:16]}{SYM_DOT}{SYM_DOT}{SYM_DOT}", style="dim")

    if avg_time_ms is not None:
        console.print(f"  {avg_time_ms:.1f}ms avg per glyph")


def print_check_result(ok: bool, issues: list[str]) -> None:
    """Print the outcome of a pre-flight check.

    Args:
        ok: Whether the project can be generated
        issues: Problems found, if any
    """
    for issue in issues:
        console.print(f"  [yellow]{SYM_WARN}[/yellow] {issue}")
    if ok:
        console.print(f"\n[bold green]{SYM_OK} Ready[/bold green] {SYM_DOT} project can be generated")
    else:
        console.print(f"\n[bold red]{SYM_ERR} Not ready[/bold red] {SYM_DOT} fix the issues above")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
