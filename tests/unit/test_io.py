"""Unit tests for the Font I/O layer.

Tests for ProjectReader, FontWriter, and the fontTools encoder.
"""

import io
import json
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from fontTools.ttLib import TTFont

from glyphpress.config import EncoderConfig, FontFormat
from glyphpress.core.builder import GlyphBuilder
from glyphpress.domain import (
    BoundingBox,
    CommandType,
    CompilationUnit,
    CompiledFont,
    DrawCommand,
    FontMetrics,
    FontSettings,
    GlyphMetrics,
    GlyphOutline,
)
from glyphpress.exceptions import EncoderError, FontSaveError, ProjectLoadError
from glyphpress.io.encoder import FontToolsEncoder, draw_outline
from glyphpress.io.reader import ProjectReader, project_from_dict
from glyphpress.io.writer import FontWriter, font_filename


def square_glyph() -> GlyphOutline:
    commands = (
        DrawCommand(CommandType.MOVE_TO, (10.0, 0.0)),
        DrawCommand(CommandType.LINE_TO, (110.0, 0.0)),
        DrawCommand(CommandType.LINE_TO, (110.0, 700.0)),
        DrawCommand(CommandType.LINE_TO, (10.0, 700.0)),
        DrawCommand(CommandType.CLOSE_PATH),
    )
    return GlyphOutline(
        name="uni0041",
        code_point=0x41,
        commands=commands,
        metrics=GlyphMetrics(0, 50, 150, BoundingBox(10, 0, 110, 700)),
    )


def curve_glyph() -> GlyphOutline:
    commands = (
        DrawCommand(CommandType.MOVE_TO, (0.0, 0.0)),
        DrawCommand(CommandType.CUBIC_TO, (0.0, 300.0, 300.0, 300.0, 300.0, 0.0)),
        DrawCommand(CommandType.QUAD_TO, (150.0, -100.0, 0.0, 0.0)),
        DrawCommand(CommandType.CLOSE_PATH),
    )
    return GlyphOutline(
        name="uni006F",
        code_point=0x6F,
        commands=commands,
        metrics=GlyphMetrics(0, 50, 350, BoundingBox(0, -100, 300, 300)),
    )


def make_unit(family: str = "Test Sketch", **settings: str) -> CompilationUnit:
    return CompilationUnit(
        glyphs=tuple(GlyphBuilder().required_glyphs()) + (square_glyph(), curve_glyph()),
        metrics=FontMetrics(
            units_per_em=1000,
            ascender=800,
            descender=-200,
            x_height=500,
            cap_height=700,
            line_gap=200,
            underline_position=-20,
            underline_thickness=50,
        ),
        settings=FontSettings(family_name=family, **settings),
    )


class TestProjectFromDict:
    """Tests for decoding project data."""

    def test_character_forms(self) -> None:
        """Test string, object and null character entries."""
        project = project_from_dict(
            {
                "font": {"family_name": "Test"},
                "characters": {
                    "U+0041": {"path": "M 0 0 L 1 1"},
                    "U+0042": "M 0 0 L 2 2",
                    "U+0043": {"vector_data": "M 0 0 L 3 3"},
                    "U+0044": None,
                },
            }
        )
        assert project.settings.family_name == "Test"
        assert project.characters["U+0041"].vector_data == "M 0 0 L 1 1"
        assert project.characters["U+0042"].vector_data == "M 0 0 L 2 2"
        assert project.characters["U+0043"].vector_data == "M 0 0 L 3 3"
        assert not project.characters["U+0044"].has_path()

    def test_insertion_order_kept(self) -> None:
        """Test characters keep file order."""
        project = project_from_dict({"characters": {"U+0042": "", "U+0041": ""}})
        assert list(project.characters) == ["U+0042", "U+0041"]

    @pytest.mark.parametrize(
        "data",
        [[], {"font": "x"}, {"characters": ["M 0 0"]}, {"characters": {"U+0041": 5}}],
    )
    def test_invalid_structure(self, data) -> None:
        """Test malformed projects raise ValueError."""
        with pytest.raises(ValueError):
            project_from_dict(data)


class TestProjectReader:
    """Tests for ProjectReader class."""

    def test_load_nonexistent_file(self) -> None:
        """Test loading a nonexistent file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ProjectReader(Path("nonexistent.json")).load()

    def test_load(self, tmp_path: Path) -> None:
        """Test loading a project file."""
        path = tmp_path / "sketch.json"
        path.write_text(
            json.dumps({"font": {"family_name": "Sketch"}, "characters": {"U+0041": "M 0 0 Z"}}),
            encoding="utf-8",
        )

        project = ProjectReader(path).load()
        assert project.settings.family_name == "Sketch"
        assert "U+0041" in project.characters

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test broken JSON raises ProjectLoadError."""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ProjectLoadError) as exc_info:
            ProjectReader(path).load()
        assert exc_info.value.path == str(path)


class TestFontWriter:
    """Tests for FontWriter class."""

    @pytest.mark.parametrize(
        ("base", "expected"),
        [("My Font!", "my-font.ttf"), ("  Sketch   Hand ", "sketch-hand.ttf"), ("!!!", "custom-font.ttf")],
    )
    def test_font_filename(self, base: str, expected: str) -> None:
        """Test kebab-case filenames."""
        assert font_filename(base, "ttf") == expected

    def test_get_output_path(self) -> None:
        """Test default path next to the project."""
        path = FontWriter.get_output_path(Path("fonts/sketch.json"), "Sketch Hand", "otf")
        assert path == Path("fonts/sketch-hand.otf")

    def test_get_output_path_without_family(self) -> None:
        """Test the project stem is used when the family name is empty."""
        path = FontWriter.get_output_path(Path("fonts/sketch.json"), "", "ttf")
        assert path == Path("fonts/sketch.ttf")

    def test_save(self, tmp_path: Path) -> None:
        """Test bytes are written, creating parent directories."""
        font = CompiledFont(b"data", "ttf", 4, "0" * 64, 3, datetime.now())
        output = tmp_path / "out" / "font.ttf"

        assert FontWriter(output).save(font) == output
        assert output.read_bytes() == b"data"

    def test_save_failure(self, tmp_path: Path) -> None:
        """Test OS errors become FontSaveError."""
        font = CompiledFont(b"data", "ttf", 4, "0" * 64, 3, datetime.now())
        writer = FontWriter(tmp_path / "font.ttf")

        with patch.object(Path, "write_bytes", side_effect=PermissionError("denied")):
            with pytest.raises(FontSaveError, match="denied"):
                writer.save(font)


class TestDrawOutline:
    """Tests for replaying outlines into pens."""

    def test_pen_calls(self) -> None:
        """Test each command maps to the matching pen call."""
        pen = MagicMock()
        draw_outline(curve_glyph().commands, pen)

        pen.moveTo.assert_called_once_with((0.0, 0.0))
        pen.curveTo.assert_called_once_with((0.0, 300.0), (300.0, 300.0), (300.0, 0.0))
        pen.qCurveTo.assert_called_once_with((150.0, -100.0), (0.0, 0.0))
        pen.closePath.assert_called_once()

    def test_arc_as_line(self) -> None:
        """Test arcs are drawn as straight segments to their end point."""
        pen = MagicMock()
        draw_outline([DrawCommand(CommandType.ARC_TO, (5, 5, 0, 0, 1, 20, 30))], pen)
        pen.lineTo.assert_called_once_with((20, 30))

    def test_unresolved_command(self) -> None:
        """Test shorthand commands are rejected."""
        with pytest.raises(EncoderError):
            draw_outline([DrawCommand(CommandType.HLINE_TO, (5.0,))], MagicMock())


class TestFontToolsEncoder:
    """Tests for the fontTools encoder."""

    def test_encode_ttf(self) -> None:
        """Test a TrueType font with the expected tables and glyphs."""
        data = FontToolsEncoder().encode(make_unit())
        font = TTFont(io.BytesIO(data))

        assert "glyf" in font
        assert font.getGlyphOrder() == [".notdef", "space", "uni0041", "uni006F"]
        cmap = font.getBestCmap()
        assert cmap[0x41] == "uni0041"
        assert cmap[0x20] == "space"
        assert font["head"].unitsPerEm == 1000
        assert font["hhea"].ascent == 800
        assert font["hhea"].descent == -200
        assert font["OS/2"].sCapHeight == 700
        assert font["OS/2"].sxHeight == 500
        assert font["post"].underlinePosition == -20
        assert font["hmtx"]["uni0041"] == (150, 10)
        assert font["hmtx"]["space"] == (500, 0)
        assert font["glyf"]["uni0041"].numberOfContours == 1

    def test_encode_otf(self) -> None:
        """Test a CFF-flavoured OpenType font."""
        encoder = FontToolsEncoder(EncoderConfig(format=FontFormat.OTF))
        data = encoder.encode(make_unit())
        font = TTFont(io.BytesIO(data))

        assert encoder.format == "otf"
        assert "CFF " in font
        assert "glyf" not in font
        assert font["hmtx"]["uni006F"][0] == 350

    def test_name_table(self) -> None:
        """Test metadata and defaults in the name table."""
        data = FontToolsEncoder().encode(make_unit(author="Ada", version="2.1"))
        names = TTFont(io.BytesIO(data))["name"]

        assert names.getDebugName(1) == "Test Sketch"
        assert names.getDebugName(2) == "Regular"
        assert names.getDebugName(4) == "Test Sketch Regular"
        assert names.getDebugName(5) == "Version 2.1"
        assert names.getDebugName(6) == "TestSketch-Regular"
        assert names.getDebugName(8) == "Ada"
        assert names.getDebugName(13) == "MIT"

    @pytest.mark.parametrize("font_format", [FontFormat.TTF, FontFormat.OTF])
    @pytest.mark.parametrize(
        ("family", "ps_name"),
        [("手書き", "Glyphpress-Regular"), ("My (Font)/1", "MyFont1-Regular")],
    )
    def test_non_ascii_and_punctuated_family(
        self, font_format: FontFormat, family: str, ps_name: str
    ) -> None:
        """Test any family name encodes, keeping Unicode in the name table."""
        encoder = FontToolsEncoder(EncoderConfig(format=font_format))
        font = TTFont(io.BytesIO(encoder.encode(make_unit(family))))

        assert font["name"].getDebugName(1) == family
        assert font["name"].getDebugName(6) == ps_name
        if font_format is FontFormat.OTF:
            assert font["CFF "].cff.fontNames == [ps_name]

    def test_encoder_failure_wrapped(self) -> None:
        """Test fontTools errors surface as EncoderError."""
        encoder = FontToolsEncoder()
        with patch.object(encoder, "_build", side_effect=KeyError("glyf")):
            with pytest.raises(EncoderError, match="glyf"):
                encoder.encode(make_unit())
