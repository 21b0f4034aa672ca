"""Font writer for saving compiled fonts."""

import re
from pathlib import Path

from glyphpress.domain.font import CompiledFont
from glyphpress.exceptions import FontSaveError


def font_filename(base_name: str, font_format: str) -> str:
    """Generate a kebab-case filename for a font.

    Converts: "My Font!" + "ttf" -> "my-font.ttf"

    Args:
        base_name: Usually the family name
        font_format: Extension without dot

    Returns:
        Filename with extension
    """
    clean = re.sub(r"[^a-zA-Z0-9\s-]", "", base_name).strip()
    kebab = re.sub(r"\s+", "-", clean).lower() or "custom-font"
    return f"{kebab}.{font_format}"


class FontWriter:
    """Writes compiled fonts to disk.

    Example:
        writer = FontWriter(Path("out/sketch.ttf"))
        writer.save(compiled)
    """

    def __init__(self, output_path: Path) -> None:
        """Initialize the font writer.

        Args:
            output_path: Path where the font will be saved
        """
        self._output_path = output_path

    @property
    def output_path(self) -> Path:
        return self._output_path

    def save(self, font: CompiledFont) -> Path:
        """Write the font bytes.

        Args:
            font: Compiled font to write

        Returns:
            The path written

        Raises:
            FontSaveError: If the file cannot be written
        """
        try:
            self._output_path.parent.mkdir(parents=True, exist_ok=True)
            self._output_path.write_bytes(font.font_data)
        except OSError as e:
            raise FontSaveError(str(self._output_path), str(e)) from e
        return self._output_path

    @staticmethod
    def get_output_path(project_path: Path, family_name: str, font_format: str) -> Path:
        """Default output path next to the project file.

        Converts: fonts/sketch.json + "Sketch Hand" -> fonts/sketch-hand.ttf

        Args:
            project_path: Project file the font was built from
            family_name: Font family name
            font_format: Extension without dot

        Returns:
            Output path in the project's directory
        """
        base = family_name or project_path.stem
        return project_path.parent / font_filename(base, font_format)
