"""Test run pipeline - wires discovery, compilation and execution.

Stages run strictly in order and each must succeed before the next starts:
1. Read elm.json
2. Gather test files
3. Resolve module names
4. Compile
5. Read interface files to find tests
6. Run tests in the worker pool
"""

import logging
import os
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from ..compiler import CompilationCoordinator, resolve_compiler
from ..errors import MissingWorker, NoTestsFound
from ..interface import TestIdentity, discover_tests
from ..project import gather_test_files, read_project_config, resolve_module_names
from ..settings.schema import DEFAULT_WORKER_COMMAND, ReportFormat, RunnerSettings
from .results import ExecutionReport
from .worker_pool import WorkerPoolOrchestrator, WorkerSlot

logger = logging.getLogger(__name__)

MAX_SEED = 2**32 - 1


@dataclass
class RunOptions:
    """Inputs of a test run."""
    project_root: Path
    paths: list[str] = field(default_factory=list)
    settings: RunnerSettings = field(default_factory=RunnerSettings)
    compiler: Optional[str] = None  # --compiler flag, overrides settings


@dataclass
class Discovery:
    """What the discovery stages found."""
    files: list[Path]
    modules: list[str]
    tests: tuple[TestIdentity, ...] = ()


class RunPipeline:
    """Runs the full discover-compile-execute sequence for one project."""

    def __init__(
        self,
        options: RunOptions,
        on_slot_done: Optional[Callable[[WorkerSlot, int], None]] = None,
    ):
        """Initialize the pipeline.

        Args:
            options: Run inputs.
            on_slot_done: Optional progress callback, see WorkerPoolOrchestrator.
        """
        self.options = options
        self.settings = options.settings
        self.project_root = Path(options.project_root)
        self.on_slot_done = on_slot_done
        self.seed = self.settings.seed if self.settings.seed is not None else random.randint(0, MAX_SEED)

    def discover(self) -> Discovery:
        """Run every stage up to and including interface reading.

        Raises:
            ElmTestError: From whichever stage failed first.
        """
        config = read_project_config(self.project_root)
        roots = config.source_roots()

        files = gather_test_files(self.project_root, self.options.paths)
        logger.info("Found %d test files", len(files))

        modules = resolve_module_names(files, roots, is_package=config.is_package)

        compiler = self._compiler()
        coordinator = CompilationCoordinator(
            compiler,
            self.project_root,
            quiet=self.settings.report == ReportFormat.JSON.value,
        )
        coordinator.compile(files)

        tests = discover_tests(self.project_root, modules, self.settings.interfaces_dir)
        logger.info("Found %d tests in %d modules", len(tests), len(modules))

        return Discovery(files=files, modules=modules, tests=tests)

    def run(self) -> ExecutionReport:
        """Discover and run the tests.

        Raises:
            NoTestsFound: If no module exposes a test.
            MissingWorker: If the default worker script was never generated.
            ElmTestError: From any failed stage.
        """
        discovery = self.discover()
        if not discovery.tests:
            raise NoTestsFound(self.options.paths)
        self._check_worker_command()

        orchestrator = WorkerPoolOrchestrator(
            worker_command=self.settings.worker_command,
            project_root=self.project_root,
            workers=self.settings.workers,
            seed=self.seed,
            fuzz=self.settings.fuzz,
            on_slot_done=self.on_slot_done,
        )
        return orchestrator.run(discovery.tests)

    def _compiler(self) -> str:
        if self.options.compiler is not None:
            return resolve_compiler(self.options.compiler)
        compiler = self.settings.compiler
        # A bare command name is looked up on PATH, a path is taken relative to the project
        if os.sep in compiler or (os.altsep and os.altsep in compiler):
            return resolve_compiler(str(self.project_root / compiler))
        return compiler

    def _check_worker_command(self) -> None:
        command = self.settings.worker_command
        if command != DEFAULT_WORKER_COMMAND:
            return
        script = self.project_root / command[-1]
        if not script.is_file():
            raise MissingWorker(script)


def run_tests(options: RunOptions) -> ExecutionReport:
    """Convenience wrapper around RunPipeline."""
    return RunPipeline(options).run()
