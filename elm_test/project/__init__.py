"""Project module - elm.json, source directories and module names."""

from .elm_json import ProjectConfig, read_project_config
from .files import ELM_EXTENSION, find_project_root, gather_test_files
from .modules import resolve_module_name, resolve_module_names
from .source_roots import SourceRootMatch, SourceRootSet

__all__ = [
    "ProjectConfig",
    "read_project_config",
    "ELM_EXTENSION",
    "find_project_root",
    "gather_test_files",
    "resolve_module_name",
    "resolve_module_names",
    "SourceRootMatch",
    "SourceRootSet",
]
