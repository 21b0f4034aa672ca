"""Unit tests for the font generation pipeline.

The encoder is replaced by a stub that records the compilation unit it
receives, so these tests exercise the orchestration without fontTools.
"""

import hashlib
from unittest.mock import MagicMock

import pytest

from glyphpress.config import GlyphpressSettings, ProcessingConfig
from glyphpress.core.generator import (
    FontGenerator,
    GenerationProgress,
    GenerationStage,
    convert_character,
    parse_code_point,
)
from glyphpress.domain import (
    CharacterData,
    CompilationUnit,
    FontProject,
    FontSettings,
    Severity,
)
from glyphpress.exceptions import EncoderError, ValidationError

SQUARE = "M 10 10 L 90 10 L 90 90 L 10 90 Z"


class StubEncoder:
    """Encoder that records its input and returns fixed bytes."""

    format = "ttf"

    def __init__(self, data: bytes = b"\x00\x01\x00\x00stub") -> None:
        self.data = data
        self.units: list[CompilationUnit] = []

    def encode(self, unit: CompilationUnit) -> bytes:
        self.units.append(unit)
        return self.data


class FailingEncoder:
    """Encoder that always fails."""

    format = "ttf"

    def encode(self, unit: CompilationUnit) -> bytes:
        raise RuntimeError("disk on fire")


def project(characters: dict[str, str | None], family_name: str = "Test") -> FontProject:
    return FontProject(
        characters={key: CharacterData(path) for key, path in characters.items()},
        settings=FontSettings(family_name=family_name),
    )


@pytest.fixture
def encoder() -> StubEncoder:
    return StubEncoder()


@pytest.fixture
def generator(encoder: StubEncoder) -> FontGenerator:
    return FontGenerator(encoder=encoder, logger=MagicMock())


class TestParseCodePoint:
    """Tests for character key parsing."""

    @pytest.mark.parametrize(
        ("key", "code_point"),
        [("U+0041", 0x41), ("u+20ac", 0x20AC), ("0042", 0x42), ("U+1F600", 0x1F600)],
    )
    def test_valid_keys(self, key: str, code_point: int) -> None:
        """Test accepted key forms."""
        assert parse_code_point(key) == code_point

    @pytest.mark.parametrize("key", ["ZZ", "U+", "U+110000", "U+-1"])
    def test_invalid_keys(self, key: str) -> None:
        """Test rejected keys."""
        with pytest.raises(ValueError):
            parse_code_point(key)


class TestConvertCharacter:
    """Tests for the picklable per-character conversion."""

    def test_success(self) -> None:
        """Test a square converts into a glyph dictionary."""
        settings_dict = GlyphpressSettings().model_dump(mode="json")
        result = convert_character("U+0041", SQUARE, settings_dict)

        assert "error" not in result
        assert result["glyph"]["name"] == "uni0041"
        assert result["glyph"]["code_point"] == 0x41
        assert result["baseline_offset"] == 910.0
        assert result["duration_ms"] >= 0

    def test_failure_returned(self) -> None:
        """Test errors are returned, not raised."""
        settings_dict = GlyphpressSettings().model_dump(mode="json")
        result = convert_character("U+0041", "Q 1", settings_dict)

        assert result["character"] == "U+0041"
        assert "no drawable commands" in result["error"]
        assert "Traceback" in result["traceback"]
        assert result["diagnostics"][0]["subject"].startswith("U+0041")


class TestGenerate:
    """Tests for FontGenerator.generate."""

    def test_single_character(self, generator: FontGenerator, encoder: StubEncoder) -> None:
        """Test a one-letter project compiles with the required glyphs."""
        result = generator.generate(project({"U+0041": SQUARE}))

        assert result.success, result.error
        assert result.error is None
        assert result.font is not None
        assert result.font.glyph_count >= 3

        unit = encoder.units[0]
        assert unit.glyph_order == [".notdef", "space", "uni0041"]
        assert unit.character_map[0x41] == "uni0041"
        assert unit.metrics.ascender > 0 > unit.metrics.descender
        assert unit.settings.family_name == "Test"
        assert result.unit is unit

    def test_checksum_and_size(self, generator: FontGenerator, encoder: StubEncoder) -> None:
        """Test the digest is computed over the encoder output."""
        result = generator.generate(project({"U+0041": SQUARE}))

        assert result.font.font_data == encoder.data
        assert result.font.size == len(encoder.data)
        assert result.font.checksum == hashlib.sha256(encoder.data).hexdigest()
        assert result.font.format == "ttf"

    def test_empty_path_only(self, generator: FontGenerator, encoder: StubEncoder) -> None:
        """Test a single empty path is skipped and nothing is compiled."""
        result = generator.generate(project({"U+0041": ""}))

        assert not result.success
        assert result.error_type == "EmptyResultError"
        assert result.font is None
        assert encoder.units == []
        assert [d.subject for d in result.diagnostics] == ["U+0041"]
        assert result.diagnostics[0].message == "Skipped: no vector data"

    def test_partial_failure(self, generator: FontGenerator) -> None:
        """Test bad characters are skipped and good ones still compile."""
        result = generator.generate(
            project({"U+0041": SQUARE, "U+0042": None, "U+0043": "M 0 0 L 50 50 Z"})
        )

        assert result.success
        assert result.unit.glyph_order == [".notdef", "space", "uni0041", "uni0043"]
        assert result.stats.converted_count == 2
        assert result.stats.skipped_count == 1

    def test_conversion_error_is_diagnostic(
        self, generator: FontGenerator, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test a failing character becomes an error diagnostic."""
        import glyphpress.core.generator as generator_module

        original = generator_module.convert_character

        def flaky(key, path, settings_dict):
            if key == "U+0042":
                return {"error": "boom", "character": key, "traceback": "", "diagnostics": []}
            return original(key, path, settings_dict)

        monkeypatch.setattr(generator_module, "convert_character", flaky)
        result = generator.generate(project({"U+0041": SQUARE, "U+0042": SQUARE}))

        assert result.success
        errors = [d for d in result.diagnostics if d.severity is Severity.ERROR]
        assert len(errors) == 1
        assert errors[0].subject == "U+0042"
        assert "boom" in errors[0].message
        assert result.stats.error_count == 1

    def test_duplicate_code_points(self, generator: FontGenerator) -> None:
        """Test keys naming the same code point keep only the first glyph."""
        result = generator.generate(project({"U+0041": SQUARE, "U+41": SQUARE}))

        assert result.success
        assert result.unit.glyph_order.count("uni0041") == 1
        assert any("Duplicate glyph" in d.message for d in result.diagnostics)

    def test_parse_diagnostics_collected(self, generator: FontGenerator) -> None:
        """Test repaired input is reported with the character key."""
        result = generator.generate(project({"U+0041": SQUARE + " L 5"}))

        assert result.success
        parse_diags = [d for d in result.diagnostics if d.stage == "parse"]
        assert len(parse_diags) == 1
        assert parse_diags[0].subject.startswith("U+0041")

    def test_metrics_normalized(self, generator: FontGenerator) -> None:
        """Test the returned metrics satisfy the ordering invariants."""
        result = generator.generate(
            project({"U+0041": SQUARE, "U+0078": "M 0 500 L 100 500 L 100 700 Z"})
        )

        metrics = result.metrics
        assert metrics.x_height <= metrics.cap_height <= metrics.ascender
        assert metrics.descender < 0 < metrics.ascender

    def test_validation_failure(self, generator: FontGenerator, encoder: StubEncoder) -> None:
        """Test every violation is listed in the error."""
        result = generator.generate(
            project({"U+0041": "L 10 10", "bogus": SQUARE}, family_name="")
        )

        assert not result.success
        assert result.error_type == "ValidationError"
        assert "Font family name is required" in result.error
        assert "Character U+0041 has invalid SVG path" in result.error
        assert "Character bogus is not a valid code point" in result.error
        assert encoder.units == []

    def test_no_characters(self, generator: FontGenerator) -> None:
        """Test an empty project fails validation."""
        result = generator.generate(project({}))
        assert not result.success
        assert "At least one character is required" in result.error

    def test_encoder_failure(self) -> None:
        """Test encoder exceptions become EncoderError results."""
        generator = FontGenerator(encoder=FailingEncoder(), logger=MagicMock())
        result = generator.generate(project({"U+0041": SQUARE}))

        assert not result.success
        assert result.error_type == EncoderError.__name__
        assert "disk on fire" in result.error

    def test_progress_stages(self, encoder: StubEncoder) -> None:
        """Test every stage is reported in order with its progress value."""
        updates: list[GenerationProgress] = []
        generator = FontGenerator(
            encoder=encoder, logger=MagicMock(), progress_callback=updates.append
        )

        generator.generate(project({"U+0041": SQUARE, "U+0042": SQUARE}))

        stages = [u.stage for u in updates]
        assert stages[0] is GenerationStage.PREPARING
        assert stages[-1] is GenerationStage.COMPLETE
        assert [s for i, s in enumerate(stages) if i == 0 or stages[i - 1] is not s] == [
            GenerationStage.PREPARING,
            GenerationStage.CONVERTING,
            GenerationStage.CALCULATING,
            GenerationStage.BUILDING,
            GenerationStage.COMPILING,
            GenerationStage.COMPLETE,
        ]
        assert [u.progress for u in updates] == sorted(u.progress for u in updates)
        assert updates[-1].progress == 100

        converting = [u for u in updates if u.current_glyph is not None]
        assert [u.current_glyph for u in converting] == ["U+0041", "U+0042"]
        assert all(u.total_glyphs == 2 for u in converting)
        assert converting[-1].progress == 40

    def test_set_progress_callback(self, generator: FontGenerator) -> None:
        """Test the sink can be replaced after construction."""
        sink = MagicMock()
        generator.set_progress_callback(sink)
        generator.generate(project({"U+0041": SQUARE}))
        assert sink.call_count >= 6

    def test_parallel_matches_sequential(self, encoder: StubEncoder) -> None:
        """Test the process pool preserves input order."""
        characters = {f"U+{0x41 + i:04X}": SQUARE for i in range(4)}
        settings = GlyphpressSettings(processing=ProcessingConfig(max_workers=2))
        parallel = FontGenerator(settings, encoder=encoder, logger=MagicMock())
        sequential = FontGenerator(encoder=StubEncoder(), logger=MagicMock())

        first = parallel.generate(project(characters))
        second = sequential.generate(project(characters))

        assert first.success
        assert first.unit.glyph_order == second.unit.glyph_order
        assert first.unit.glyphs == second.unit.glyphs


class TestValidateProject:
    """Tests for pre-flight validation."""

    def test_raises_with_violations(self, generator: FontGenerator) -> None:
        """Test ValidationError carries every violation."""
        with pytest.raises(ValidationError) as exc_info:
            generator.validate_project(project({"U+0041": "M 0 0 L Z"}, family_name=" "))

        violations = exc_info.value.violations
        assert len(violations) == 2
        assert "Font family name is required" in violations

    def test_empty_paths_allowed(self, generator: FontGenerator) -> None:
        """Test absent paths are not violations."""
        generator.validate_project(project({"U+0041": None, "U+0042": ""}))


class TestCanGenerate:
    """Tests for the quick generation check."""

    def test_no_characters(self, generator: FontGenerator) -> None:
        """Test empty input."""
        assert generator.can_generate({}) == (False, ["No characters provided"])

    def test_some_valid(self, generator: FontGenerator) -> None:
        """Test issues are listed while valid characters exist."""
        ok, issues = generator.can_generate(
            {"U+0041": CharacterData(SQUARE), "U+0042": CharacterData(None)}
        )
        assert ok
        assert issues == ["Character U+0042: No vector data"]

    def test_none_valid(self, generator: FontGenerator) -> None:
        """Test all characters invalid."""
        ok, issues = generator.can_generate({"U+0041": CharacterData("L 1 1")})
        assert not ok
        assert issues[-1] == "No valid characters found"


class TestEstimateGenerationTime:
    """Tests for the generation time estimate."""

    @pytest.mark.parametrize(("count", "expected"), [(0, 1000), (5, 1000), (26, 3100)])
    def test_estimate(self, count: int, expected: int) -> None:
        """Test the estimate has a one second floor."""
        assert FontGenerator.estimate_generation_time(count) == expected
