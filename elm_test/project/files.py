"""Locates the project root and gathers test files."""

import glob
import os
from pathlib import Path
from typing import Iterable, Optional

from ..errors import MissingElmJson, NoTestsFound
from .elm_json import ELM_JSON, TESTS_DIR

ELM_EXTENSION = ".elm"


def find_project_root(start: Optional[Path] = None) -> Path:
    """Find the nearest directory at or above ``start`` that holds elm.json.

    Raises:
        MissingElmJson: If no ancestor has an elm.json.
    """
    start = Path(start or Path.cwd()).resolve()

    for directory in (start, *start.parents):
        if (directory / ELM_JSON).is_file():
            return directory

    raise MissingElmJson(start)


def gather_test_files(project_root: Path, paths: Iterable[str] = ()) -> list[Path]:
    """Expand path arguments into the test files to compile.

    Directories are searched recursively for ``.elm`` files. Files named
    explicitly are kept whatever their extension. Arguments that do not
    exist are treated as glob patterns. With no arguments, ``tests/`` is
    searched.

    Args:
        project_root: Anchor for relative paths.
        paths: User-supplied paths. Empty = default tests directory.

    Returns:
        Sorted, deduplicated absolute file paths.

    Raises:
        NoTestsFound: If nothing was found.
    """
    paths = list(paths)
    arguments = paths or [TESTS_DIR]
    results: set[Path] = set()

    for argument in arguments:
        for target in _expand(project_root, argument):
            if target.is_dir():
                results.update(
                    _normalize(found)
                    for found in target.rglob(f"*{ELM_EXTENSION}")
                    if found.is_file()
                )
            elif target.is_file():
                results.add(_normalize(target))

    if not results:
        raise NoTestsFound(paths)

    return sorted(results)


def _expand(project_root: Path, argument: str) -> list[Path]:
    """Turn one argument into existing paths (itself, or its glob matches)."""
    path = Path(project_root) / argument
    if path.exists():
        return [path]
    return [Path(match) for match in sorted(glob.glob(str(path), recursive=True))]


def _normalize(path: Path) -> Path:
    return Path(os.path.abspath(path))
