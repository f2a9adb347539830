"""Ordered set of source directories declared by the project."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional


@dataclass(frozen=True)
class SourceRootMatch:
    """A source directory that contains a file, plus the file's path inside it."""
    directory: Path
    remainder: Path


class SourceRootSet:
    """Ordered, deduplicated list of source directories.

    Directories are stored absolute with symlinks resolved, so a file that is
    reachable through a symlinked directory matches every directory that
    really contains it.
    """

    def __init__(self, directories: Iterable[Path], project_root: Optional[Path] = None):
        """Initialize the set.

        Args:
            directories: Source directories, absolute or relative to project_root.
            project_root: Anchor for relative directories. Default: current directory.
        """
        base = Path(project_root) if project_root else Path.cwd()
        self._directories: list[Path] = []

        for directory in directories:
            resolved = (base / directory).resolve()
            if resolved not in self._directories:
                self._directories.append(resolved)

    @property
    def directories(self) -> list[Path]:
        return list(self._directories)

    def matches(self, path: Path) -> list[SourceRootMatch]:
        """Return every directory that is a path prefix of ``path``.

        The file is checked both where it sits (directories resolved, the
        file name kept) and where it points to, so a symlinked test file
        inside a source directory still matches it.

        Args:
            path: Absolute file path.

        Returns:
            Matches in declaration order, each with the path remainder.
        """
        absolute = Path(os.path.abspath(path))
        candidates = [absolute.parent.resolve() / absolute.name, absolute.resolve()]
        found = []

        for directory in self._directories:
            for candidate in candidates:
                if candidate == directory or not candidate.is_relative_to(directory):
                    continue
                match = SourceRootMatch(
                    directory=directory,
                    remainder=candidate.relative_to(directory),
                )
                if match not in found:
                    found.append(match)

        return found

    def __len__(self) -> int:
        return len(self._directories)

    def __iter__(self):
        return iter(self._directories)
