"""Settings module - optional elm-test.yaml runner settings."""

from .schema import (
    ReportFormat,
    RunnerSettings,
    ValidationError,
    ValidationResult,
)
from .parser import find_settings_file, load_settings, parse_settings, parse_settings_data
from .validator import validate_settings

__all__ = [
    "ReportFormat",
    "RunnerSettings",
    "ValidationError",
    "ValidationResult",
    "find_settings_file",
    "load_settings",
    "parse_settings",
    "parse_settings_data",
    "validate_settings",
]
