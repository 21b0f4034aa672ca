"""Utility functions for glyphpress.

This module provides utility functions including:

- Logging setup and configuration
- Generation statistics tracking
"""

from glyphpress.utils.logging import (
    GenerationLogger,
    GenerationStats,
    configure_logging,
)

__all__ = [
    "GenerationLogger",
    "GenerationStats",
    "configure_logging",
]
