"""Reads the parts of elm.json that test discovery needs."""

import json
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import ConfigurationError, MissingElmJson
from .source_roots import SourceRootSet

ELM_JSON = "elm.json"
TESTS_DIR = "tests"
PACKAGE_SOURCE_DIR = "src"

VALID_PROJECT_TYPES = {"application", "package"}


@dataclass
class ProjectConfig:
    """Project settings read from elm.json."""
    root: Path
    project_type: str
    source_directories: list[str] = field(default_factory=list)

    @property
    def is_package(self) -> bool:
        return self.project_type == "package"

    def source_roots(self) -> SourceRootSet:
        """Source directories plus tests/, which is always compiled with them."""
        return SourceRootSet(
            [*self.source_directories, TESTS_DIR],
            project_root=self.root,
        )


def read_project_config(project_root: Path) -> ProjectConfig:
    """Read elm.json from the project root.

    Args:
        project_root: Directory that holds elm.json.

    Returns:
        Parsed ProjectConfig.

    Raises:
        MissingElmJson: If elm.json does not exist.
        ConfigurationError: If elm.json is unreadable or malformed.
    """
    project_root = Path(project_root)
    elm_json_path = project_root / ELM_JSON

    if not elm_json_path.is_file():
        raise MissingElmJson(project_root)

    try:
        with open(elm_json_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read {elm_json_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{elm_json_path} must contain a JSON object")

    project_type = data.get("type")
    if project_type not in VALID_PROJECT_TYPES:
        raise ConfigurationError(
            f'"type" in {elm_json_path} must be one of: '
            f"{', '.join(sorted(VALID_PROJECT_TYPES))}, got {project_type!r}"
        )

    if project_type == "package":
        return ProjectConfig(
            root=project_root,
            project_type=project_type,
            source_directories=[PACKAGE_SOURCE_DIR],
        )

    source_dirs = data.get("source-directories")
    if not isinstance(source_dirs, list) or not all(isinstance(d, str) for d in source_dirs):
        raise ConfigurationError(
            f'"source-directories" in {elm_json_path} must be a list of strings'
        )

    return ProjectConfig(
        root=project_root,
        project_type=project_type,
        source_directories=source_dirs,
    )
