"""Configuration management for glyphpress.

This module provides configuration management using Pydantic models.
Every heuristic default of the pipeline (em size, side bearings, fallback
metrics) lives here so callers and tests can override it.

Key classes:
- FontConfig: Em size and metadata defaults
- GlyphConfig: Outline building settings
- MetricsConfig: Metrics inference defaults and ratios
- EncoderConfig: Binary output settings
- ProcessingConfig: Conversion settings
- LoggingConfig: Logging settings
- GlyphpressSettings: Main application settings
"""

from glyphpress.config.settings import (
    EncoderConfig,
    FontConfig,
    FontFormat,
    GlyphConfig,
    GlyphpressSettings,
    LoggingConfig,
    MetricsConfig,
    ProcessingConfig,
    SmoothControl,
    get_default_settings,
)

__all__ = [
    "EncoderConfig",
    "FontConfig",
    "FontFormat",
    "GlyphConfig",
    "GlyphpressSettings",
    "LoggingConfig",
    "MetricsConfig",
    "ProcessingConfig",
    "SmoothControl",
    "get_default_settings",
]
