"""Project reader for loading font projects from JSON.

A project file looks like:

    {
        "font": {"family_name": "Sketch", "author": "Ada"},
        "characters": {
            "U+0041": {"path": "M 10 10 L 90 10 L 90 90 Z"},
            "U+0042": "M 0 0 L 50 50 Z"
        }
    }

Character entries may be a path string or an object with a "path" (or
"vector_data") field; null or empty paths are kept and skipped later.
"""

import json
from pathlib import Path
from typing import Any

from glyphpress.domain.font import CharacterData, FontProject, FontSettings
from glyphpress.exceptions import ProjectLoadError


def project_from_dict(data: dict[str, Any]) -> FontProject:
    """Build a FontProject from decoded project data.

    Args:
        data: Decoded JSON object

    Returns:
        FontProject

    Raises:
        ValueError: If the structure is not a project
    """
    if not isinstance(data, dict):
        raise ValueError("Project must be a JSON object")

    font_data = data.get("font") or {}
    if not isinstance(font_data, dict):
        raise ValueError("'font' must be an object")

    raw_characters = data.get("characters") or {}
    if not isinstance(raw_characters, dict):
        raise ValueError("'characters' must be an object")

    characters: dict[str, CharacterData] = {}
    for key, entry in raw_characters.items():
        if entry is None or isinstance(entry, str):
            characters[key] = CharacterData(vector_data=entry)
        elif isinstance(entry, dict):
            characters[key] = CharacterData(
                vector_data=entry.get("path", entry.get("vector_data"))
            )
        else:
            raise ValueError(f"Character {key} must be a path string or an object")

    return FontProject(characters=characters, settings=FontSettings.from_dict(font_data))


class ProjectReader:
    """Loads font projects from JSON files.

    Example:
        project = ProjectReader(Path("sketch.json")).load()
        print(len(project.characters))
    """

    def __init__(self, project_path: Path) -> None:
        """Initialize the project reader.

        Args:
            project_path: Path to the JSON project file
        """
        self._project_path = project_path

    def load(self) -> FontProject:
        """Read and decode the project file.

        Returns:
            FontProject

        Raises:
            FileNotFoundError: If the project file does not exist
            ProjectLoadError: If the file is not a valid project
        """
        if not self._project_path.exists():
            raise FileNotFoundError(f"Project file not found: {self._project_path}")

        try:
            with self._project_path.open(encoding="utf-8") as f:
                data = json.load(f)
            return project_from_dict(data)
        except (json.JSONDecodeError, ValueError) as e:
            raise ProjectLoadError(str(self._project_path), str(e)) from e
