"""Maps test file paths to Elm module names."""

import logging
import re
from pathlib import Path, PurePath
from typing import Iterable

from ..errors import AmbiguousModule, InvalidModuleName, UnresolvableModule
from .source_roots import SourceRootSet

logger = logging.getLogger(__name__)

MODULE_SEPARATOR = "."
UPPER_NAME = re.compile(r"^[A-Z][A-Za-z0-9_]*$")


def module_name_from_remainder(remainder: PurePath) -> str:
    """Turn ``Foo/BarTest.elm`` into ``Foo.BarTest``."""
    return MODULE_SEPARATOR.join(remainder.with_suffix("").parts)


def is_valid_module_name(name: str) -> bool:
    return all(UPPER_NAME.match(part) for part in name.split(MODULE_SEPARATOR))


def resolve_module_name(
    path: Path,
    roots: SourceRootSet,
    is_package: bool = False,
) -> str:
    """Resolve a test file to exactly one module name.

    Args:
        path: Absolute path of the test file.
        roots: Source directories of the project.
        is_package: Whether the project is an Elm package (changes the hint).

    Returns:
        The module name.

    Raises:
        UnresolvableModule: If no source directory contains the file.
        AmbiguousModule: If source directories disagree on the module name.
        InvalidModuleName: If the derived name is not a legal module name.
    """
    matches = roots.matches(path)

    if not matches:
        raise UnresolvableModule(path, is_package=is_package)

    candidates = [
        (match.directory, module_name_from_remainder(match.remainder))
        for match in matches
    ]
    names = {name for _, name in candidates}

    if len(names) > 1:
        raise AmbiguousModule(path, candidates)

    source_dir, module_name = candidates[0]
    if not is_valid_module_name(module_name):
        raise InvalidModuleName(path, source_dir, module_name)

    logger.debug("Resolved %s to %s", path, module_name)
    return module_name


def resolve_module_names(
    paths: Iterable[Path],
    roots: SourceRootSet,
    is_package: bool = False,
) -> list[str]:
    """Resolve many test files. Returns sorted, deduplicated module names."""
    return sorted({
        resolve_module_name(path, roots, is_package=is_package)
        for path in paths
    })
