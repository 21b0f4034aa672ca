"""Command-line interface for glyphpress.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- build: compile a JSON project into a TTF or OTF font
- check: pre-flight validation without writing output
- Stage progress bar and diagnostics summary
- Verbose/quiet output modes
"""

from glyphpress.cli.app import cli, main

__all__ = ["cli", "main"]
