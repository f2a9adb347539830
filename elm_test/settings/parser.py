"""YAML parser for the elm-test settings file."""

import logging
from pathlib import Path
from typing import Optional, Union

import yaml

from ..errors import SettingsError
from .schema import RunnerSettings
from .validator import validate_settings

logger = logging.getLogger(__name__)

SETTINGS_FILENAMES = ("elm-test.yaml", "elm-test.yml")


def find_settings_file(project_root: Union[str, Path]) -> Optional[Path]:
    """Return the settings file in the project root, if there is one."""
    for name in SETTINGS_FILENAMES:
        candidate = Path(project_root) / name
        if candidate.is_file():
            return candidate
    return None


def load_settings(project_root: Union[str, Path]) -> RunnerSettings:
    """Load and validate settings for a project.

    A project without a settings file gets the defaults.

    Raises:
        SettingsError: If the file is malformed or fails validation.
    """
    settings_file = find_settings_file(project_root)
    if settings_file is None:
        return RunnerSettings()

    settings = parse_settings(settings_file)
    validation = validate_settings(settings)

    if not validation.valid:
        errors_str = "; ".join(f"{e.path}: {e.message}" for e in validation.errors)
        raise SettingsError(f"Invalid settings in {settings_file}: {errors_str}")

    for warning in validation.warnings:
        logger.warning("%s: %s: %s", settings_file, warning.path, warning.message)

    return settings


def parse_settings(file_path: Union[str, Path]) -> RunnerSettings:
    """Parse a YAML settings file into RunnerSettings.

    Args:
        file_path: Path to the YAML file.

    Returns:
        Parsed (not yet validated) RunnerSettings.

    Raises:
        SettingsError: If the YAML is malformed or has unknown keys.
    """
    file_path = Path(file_path)

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise SettingsError(f"Could not read {file_path}: {e}") from e

    if data is None:
        return RunnerSettings()

    return parse_settings_data(data, source=str(file_path))


def parse_settings_data(data: dict, source: str = "<inline>") -> RunnerSettings:
    """Parse settings from an already loaded mapping.

    Raises:
        SettingsError: If data is not a mapping or has unknown keys.
    """
    if not isinstance(data, dict):
        raise SettingsError(f"Settings must be a YAML mapping, got {type(data).__name__} in {source}")

    # YAML keys use dashes, dataclass fields use underscores
    normalized = {str(k).replace("-", "_"): v for k, v in data.items()}

    unknown = sorted(set(normalized) - set(RunnerSettings.__dataclass_fields__))
    if unknown:
        raise SettingsError(f"Unknown settings {', '.join(unknown)} in {source}")

    try:
        return RunnerSettings(**normalized)
    except TypeError as e:
        raise SettingsError(f"Invalid settings in {source}: {e}") from e
