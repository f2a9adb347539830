"""Error types for elm-test.

Every error is fatal to the run. The CLI prints ``str(error)`` and exits 1.
"""

from pathlib import Path
from typing import Iterable, Optional


class ElmTestError(Exception):
    """Base class for all errors reported to the user."""


class ConfigurationError(ElmTestError):
    """Project configuration is missing, unreadable or malformed."""


class MissingElmJson(ConfigurationError):
    def __init__(self, start_dir: Path):
        self.start_dir = start_dir
        super().__init__(
            f"Could not find elm.json in {start_dir} or any of its parent directories.\n"
            "Run elm-test from inside an Elm project."
        )


class InvalidCompilerFlag(ConfigurationError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(
            f"The --compiler flag must point to an elm executable, got: {value}"
        )


class SettingsError(ConfigurationError):
    """The optional elm-test.yaml settings file failed validation."""


class MissingWorker(ConfigurationError):
    def __init__(self, script: Path):
        self.script = script
        super().__init__(
            f"Could not find the test worker at {script}\n"
            'Set "worker-command" in elm-test.yaml to the command that starts a '
            "worker, for example:\n\n"
            "    worker-command: [node, path/to/worker.js]"
        )


class NoTestsFound(ElmTestError):
    def __init__(self, paths: Iterable[str] = ()):
        self.paths = list(paths)
        if self.paths:
            where = "\n".join(f"    {p}" for p in self.paths)
            message = f"No tests found for the given paths:\n\n{where}"
        else:
            message = "No tests found in the tests/ directory."
        super().__init__(message)


class UnresolvableModule(ElmTestError):
    def __init__(self, path: Path, is_package: bool = False):
        self.path = path
        self.is_package = is_package
        if is_package:
            hint = "Move it to tests/ or src/ in your project root."
        else:
            hint = (
                "Move it to tests/ in your project root, or make sure it is "
                'covered by "source-directories" in your elm.json.'
            )
        super().__init__(
            f"This file:\n\n    {path}\n\n"
            f"...is not inside any source directory, so its imports cannot work.\n\n{hint}"
        )


class AmbiguousModule(ElmTestError):
    def __init__(self, path: Path, candidates: list[tuple[Path, str]]):
        self.path = path
        self.candidates = candidates
        listing = "\n".join(f"    {name}  (from {directory})" for directory, name in candidates)
        super().__init__(
            f"This file:\n\n    {path}\n\n"
            f"...can be named as more than one module:\n\n{listing}\n\n"
            'Edit "source-directories" in your elm.json so that no source '
            "directory contains another one."
        )

    @property
    def module_names(self) -> list[str]:
        return [name for _, name in self.candidates]


class InvalidModuleName(ElmTestError):
    def __init__(self, path: Path, source_dir: Path, module_name: str):
        self.path = path
        self.source_dir = source_dir
        self.module_name = module_name
        super().__init__(
            f"This file:\n\n    {path}\n\n"
            f"...inside the source directory {source_dir} gives the module name "
            f"{module_name!r}, which is not valid.\n\n"
            "Every part of a module name must start with an uppercase letter and "
            "contain only letters, digits and underscores, for example:\n\n"
            "    Main\n    Http.Helpers"
        )


class CompilationFailed(ElmTestError):
    def __init__(self, returncode: Optional[int]):
        self.returncode = returncode
        super().__init__(
            f"Compilation failed (exit code {returncode}). "
            "Fix the compiler errors above and run elm-test again."
        )


class SpawnFailed(ElmTestError):
    def __init__(self, command: str, reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"Could not start {command!r}: {reason}")


class MissingInterface(ElmTestError):
    def __init__(self, module_name: str, path: Path):
        self.module_name = module_name
        self.path = path
        super().__init__(
            f"Compilation succeeded but the interface file for {module_name} "
            f"was not found at {path}"
        )


class MalformedInterface(ElmTestError):
    def __init__(self, reason: str, path: Optional[Path] = None):
        self.reason = reason
        self.path = path
        location = f" {path}" if path else ""
        super().__init__(f"Could not read interface file{location}: {reason}")


class WorkerFailure(ElmTestError):
    def __init__(self, slot: int, returncode: Optional[int], reason: str = ""):
        self.slot = slot
        self.returncode = returncode
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Worker {slot} exited with code {returncode}{detail}")
