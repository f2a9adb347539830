"""Runs the Elm compiler over the test files.

The compiled program itself is thrown away. The run only needs the
interface files (.elmi) the compiler writes for every module it builds.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Iterable, Optional

from ..errors import CompilationFailed, InvalidCompilerFlag, SpawnFailed
from ..settings.schema import DEFAULT_COMPILER

logger = logging.getLogger(__name__)


def resolve_compiler(flag: Optional[str]) -> str:
    """Validate the --compiler flag.

    Args:
        flag: Value of the flag, or None to use ``elm`` from PATH.

    Returns:
        Absolute path of the compiler, or the default command name.

    Raises:
        InvalidCompilerFlag: If the path does not exist or is a directory.
    """
    if flag is None:
        return DEFAULT_COMPILER

    try:
        path = Path(flag).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise InvalidCompilerFlag(flag) from e

    if path.is_dir():
        raise InvalidCompilerFlag(flag)

    return str(path)


class CompilationCoordinator:
    """Invokes ``elm make`` once per run and waits for it."""

    def __init__(self, compiler: str, project_root: Path, quiet: bool = False):
        """Initialize the coordinator.

        Args:
            compiler: Compiler executable.
            project_root: Directory the compiler runs in.
            quiet: Discard the compiler's stdout (errors still go to stderr).
        """
        self.compiler = compiler
        self.project_root = Path(project_root)
        self.quiet = quiet

    def build_command(self, files: Iterable[Path]) -> list[str]:
        return [
            self.compiler,
            "make",
            f"--output={os.devnull}",
            *(str(f) for f in files),
        ]

    def compile(self, files: Iterable[Path]) -> None:
        """Compile the files and block until the compiler exits.

        Raises:
            SpawnFailed: If the compiler could not be started.
            CompilationFailed: If the compiler exited with a non-zero status.
        """
        command = self.build_command(files)
        logger.debug("Compiling: %s", " ".join(command))

        try:
            result = subprocess.run(
                command,
                cwd=self.project_root,
                stdout=subprocess.DEVNULL if self.quiet else None,
            )
        except OSError as e:
            raise SpawnFailed(self.compiler, str(e)) from e

        if result.returncode != 0:
            raise CompilationFailed(result.returncode)

        logger.debug("Compilation succeeded")
