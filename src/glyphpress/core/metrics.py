"""Font-wide metrics inference.

Global metrics are derived from the bounds of the converted glyphs.
Reference glyphs ("x" for x-height, "H" for cap height) are preferred when
present; otherwise the aggregator falls back to averages over lowercase or
uppercase letters, and finally to fixed ratios of the ascender.
"""

from collections.abc import Callable, Sequence

from glyphpress.config import FontConfig, MetricsConfig
from glyphpress.core.geometry import mean, round_half_up
from glyphpress.domain.font import FontMetrics
from glyphpress.domain.glyph import GlyphOutline
from glyphpress.exceptions import EmptyInputError


def _is_lowercase(glyph: GlyphOutline) -> bool:
    return glyph.code_point > 0 and glyph.character.islower()


def _is_uppercase(glyph: GlyphOutline) -> bool:
    return glyph.code_point > 0 and glyph.character.isupper()


class FontMetricsAggregator:
    """Derives FontMetrics from a glyph collection.

    Example:
        aggregator = FontMetricsAggregator()
        metrics = aggregator.aggregate(glyphs)
        for message in aggregator.validate(metrics):
            print(message)
    """

    def __init__(
        self,
        config: MetricsConfig | None = None,
        units_per_em: int | None = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            config: Metrics defaults and ratios
            units_per_em: Em size recorded in the metrics (default from FontConfig)
        """
        self.config = config or MetricsConfig()
        self.units_per_em = units_per_em or FontConfig().units_per_em

    def aggregate(self, glyphs: Sequence[GlyphOutline]) -> FontMetrics:
        """Calculate font metrics from glyph bounds.

        Args:
            glyphs: Converted glyphs

        Returns:
            FontMetrics rounded to integer font units

        Raises:
            EmptyInputError: If glyphs is empty
        """
        if not glyphs:
            raise EmptyInputError()

        cfg = self.config
        ascender = self.ascender(glyphs)
        descender = self.descender(glyphs)
        x_height = self._reference_height(
            glyphs, cfg.x_height_reference, _is_lowercase, ascender * cfg.x_height_ratio
        )
        cap_height = self._reference_height(
            glyphs, cfg.cap_height_reference, _is_uppercase, ascender * cfg.cap_height_ratio
        )
        total = ascender - descender

        return FontMetrics(
            units_per_em=self.units_per_em,
            ascender=round_half_up(ascender),
            descender=round_half_up(descender),
            x_height=round_half_up(x_height),
            cap_height=round_half_up(cap_height),
            baseline=0,
            line_gap=round_half_up(total * cfg.line_gap_ratio),
            underline_position=round_half_up(descender * cfg.underline_position_ratio),
            underline_thickness=round_half_up(total * cfg.underline_thickness_ratio),
        )

    def ascender(self, glyphs: Sequence[GlyphOutline]) -> float:
        """Highest bounds top over all glyphs, or the default."""
        tops = [g.bounds.y_max for g in glyphs if g.bounds is not None]
        return max(tops) if tops else float(self.config.default_ascender)

    def descender(self, glyphs: Sequence[GlyphOutline]) -> float:
        """Lowest bounds bottom over all glyphs, or the default."""
        bottoms = [g.bounds.y_min for g in glyphs if g.bounds is not None]
        return min(bottoms) if bottoms else float(self.config.default_descender)

    def _reference_height(
        self,
        glyphs: Sequence[GlyphOutline],
        reference: int,
        in_class: Callable[[GlyphOutline], bool],
        fallback: float,
    ) -> float:
        """Top of the reference glyph, else mean top of its letter class."""
        for glyph in glyphs:
            if glyph.code_point == reference and glyph.bounds is not None:
                return glyph.bounds.y_max

        average = mean(
            g.bounds.y_max for g in glyphs if g.bounds is not None and in_class(g)
        )
        if average is not None:
            return float(round_half_up(average))

        return float(round_half_up(fallback))

    def validate(self, metrics: FontMetrics) -> list[str]:
        """Check metrics for consistency.

        Every problem is a warning; none of them blocks compilation.

        Args:
            metrics: Metrics to check

        Returns:
            List of warning messages (empty when consistent)
        """
        warnings: list[str] = []

        if metrics.ascender <= 0:
            warnings.append("Ascender must be positive")

        if metrics.descender >= 0:
            warnings.append("Descender should be negative")

        if metrics.x_height <= 0 or metrics.x_height > metrics.ascender:
            warnings.append("X-height must be positive and not exceed ascender")

        if metrics.cap_height <= 0 or metrics.cap_height > metrics.ascender:
            warnings.append("Cap height must be positive and not exceed ascender")

        if metrics.x_height > metrics.cap_height:
            warnings.append("X-height should not exceed cap height")

        if metrics.line_gap < 0:
            warnings.append("Line gap should be non-negative")

        if metrics.total_height > metrics.units_per_em:
            warnings.append("Total height exceeds units per em")

        return warnings

    def normalize(self, metrics: FontMetrics) -> FontMetrics:
        """Coerce metrics into a shape encoders accept.

        The descender is made non-positive by flipping its sign (zero becomes
        the default descender), a non-positive ascender becomes the default,
        cap height and x-height are capped so that
        x_height <= cap_height <= ascender, and the underline sits at or
        below the baseline.

        Args:
            metrics: Metrics as aggregated

        Returns:
            New FontMetrics with baseline 0
        """
        cfg = self.config

        ascender = metrics.ascender if metrics.ascender > 0 else cfg.default_ascender
        descender = -abs(metrics.descender) if metrics.descender != 0 else cfg.default_descender

        cap_height = metrics.cap_height
        if cap_height <= 0:
            cap_height = round_half_up(ascender * cfg.cap_height_ratio)
        cap_height = min(cap_height, ascender)

        x_height = metrics.x_height
        if x_height <= 0:
            x_height = round_half_up(ascender * cfg.x_height_ratio)
        x_height = min(x_height, cap_height)

        return FontMetrics(
            units_per_em=metrics.units_per_em,
            ascender=round_half_up(ascender),
            descender=round_half_up(descender),
            x_height=round_half_up(x_height),
            cap_height=round_half_up(cap_height),
            baseline=0,
            line_gap=max(0, round_half_up(metrics.line_gap)),
            underline_position=-abs(round_half_up(metrics.underline_position)),
            underline_thickness=max(0, round_half_up(metrics.underline_thickness)),
        )

    def optimal_advance_widths(
        self,
        glyphs: Sequence[GlyphOutline],
        right_side_bearing: int = 50,
        default_width: int = 600,
    ) -> dict[str, int]:
        """Advance width each glyph would get from its bounds alone.

        Args:
            glyphs: Glyphs to measure
            right_side_bearing: Right margin in font units
            default_width: Width for glyphs without bounds

        Returns:
            Mapping of glyph name to advance width
        """
        widths: dict[str, int] = {}
        for glyph in glyphs:
            bounds = glyph.bounds
            if bounds is None:
                widths[glyph.name] = default_width
                continue
            lsb = max(0.0, -bounds.x_min)
            widths[glyph.name] = round_half_up(bounds.width + lsb + right_side_bearing)
        return widths
