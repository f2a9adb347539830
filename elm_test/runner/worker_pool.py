"""Runs discovered tests across a pool of worker processes.

Each worker gets a JSON manifest with its share of the tests and is spawned
as ``<worker_command> --manifest <file>``. Results are read from its stdout
(see results.py) after it exits.
"""

import json
import logging
import os
import signal
import subprocess
import tempfile
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Callable, Iterator, Optional, Sequence

from ..errors import SpawnFailed, WorkerFailure
from ..interface.reader import TestIdentity
from ..settings.schema import DEFAULT_FUZZ
from .partition import partition
from .results import ExecutionReport, ResultCollector

logger = logging.getLogger(__name__)


def pool_size(requested: Optional[int] = None) -> int:
    """Number of worker slots: the requested count, else the logical CPU count."""
    if requested is not None:
        return max(1, requested)
    return max(1, os.cpu_count() or 1)


def _raise_interrupt(signum, frame):
    raise KeyboardInterrupt(f"received signal {signum}")


@contextmanager
def interrupt_on_sigterm() -> Iterator[None]:
    """Turn SIGTERM into KeyboardInterrupt while the block runs.

    Cleanup that already handles Ctrl-C then also runs for ``kill <pid>``.
    Signal handlers can only be set from the main thread; elsewhere this
    does nothing. The previous handler is restored on exit.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous = signal.signal(signal.SIGTERM, _raise_interrupt)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)


@dataclass
class WorkerSlot:
    """One worker process and the files it reads and writes."""
    index: int
    tests: tuple[TestIdentity, ...]
    manifest_path: Path
    output_path: Path
    process: Optional[subprocess.Popen] = None
    _output: Optional[IO[bytes]] = field(default=None, repr=False)

    def write_manifest(self, seed: Optional[int], fuzz: int) -> None:
        manifest = {
            "seed": seed,
            "fuzz": fuzz,
            "tests": [{"module": t.module, "name": t.name} for t in self.tests],
        }
        with open(self.manifest_path, "w", encoding="utf-8") as f:
            json.dump(manifest, f)

    def spawn(self, command: Sequence[str], cwd: Path) -> None:
        """Start the worker.

        Raises:
            OSError: If the process could not be started.
        """
        self._output = open(self.output_path, "wb")
        try:
            self.process = subprocess.Popen(
                [*command, "--manifest", str(self.manifest_path)],
                cwd=cwd,
                stdout=self._output,
            )
        except OSError:
            self._close_output()
            raise

    def wait(self) -> int:
        """Block until the worker exits. Returns its exit code."""
        returncode = self.process.wait()
        self._close_output()
        return returncode

    def kill(self) -> None:
        """Kill and reap the worker if it is still running."""
        if self.process is not None and self.process.poll() is None:
            self.process.kill()
            self.process.wait()
        self._close_output()

    def read_output(self) -> str:
        return self.output_path.read_text(encoding="utf-8", errors="replace")

    def _close_output(self) -> None:
        if self._output is not None:
            self._output.close()
            self._output = None


class WorkerPoolOrchestrator:
    """Spawns the worker pool, waits for every worker and builds the report."""

    def __init__(
        self,
        worker_command: Sequence[str],
        project_root: Path,
        workers: Optional[int] = None,
        seed: Optional[int] = None,
        fuzz: int = DEFAULT_FUZZ,
        on_slot_done: Optional[Callable[[WorkerSlot, int], None]] = None,
    ):
        """Initialize the orchestrator.

        Args:
            worker_command: Command that starts one worker.
            project_root: Working directory of the workers.
            workers: Pool size. Default: logical CPU count.
            seed: Seed passed to every worker.
            fuzz: Fuzz runs per fuzz test, passed to every worker.
            on_slot_done: Optional callback(slot, returncode) after each worker exits.
        """
        self.worker_command = list(worker_command)
        self.project_root = Path(project_root)
        self.size = pool_size(workers)
        self.seed = seed
        self.fuzz = fuzz
        self.on_slot_done = on_slot_done

    def run(self, tests: Sequence[TestIdentity]) -> ExecutionReport:
        """Run the tests and return the finished report.

        Every worker is waited for, whatever the others do. If anything goes
        wrong while they run (including Ctrl-C or SIGTERM), every worker
        still running is killed and reaped before the error propagates.

        Raises:
            SpawnFailed: If a worker could not be started.
            KeyboardInterrupt: On Ctrl-C or SIGTERM, after all workers are reaped.
        """
        start_time = time.time()
        report = ExecutionReport(seed=self.seed)
        partitions = partition(tests, self.size)
        logger.info("Running %d tests in %d workers", len(tests), len(partitions))

        with tempfile.TemporaryDirectory(prefix="elm-test-") as tmp:
            slots = [
                WorkerSlot(
                    index=index,
                    tests=share,
                    manifest_path=Path(tmp) / f"manifest-{index}.json",
                    output_path=Path(tmp) / f"output-{index}.log",
                )
                for index, share in enumerate(partitions)
            ]

            with interrupt_on_sigterm():
                try:
                    for slot in slots:
                        self._spawn(slot)

                    for slot in slots:
                        returncode = slot.wait()
                        self._collect(slot, returncode, report)
                        if self.on_slot_done:
                            self.on_slot_done(slot, returncode)
                finally:
                    for slot in slots:
                        slot.kill()

        report.duration_ms = int((time.time() - start_time) * 1000)
        return report

    def _spawn(self, slot: WorkerSlot) -> None:
        try:
            slot.write_manifest(self.seed, self.fuzz)
            slot.spawn(self.worker_command, self.project_root)
        except OSError as e:
            raise SpawnFailed(" ".join(self.worker_command), str(e)) from e
        logger.debug("Worker %d started with %d tests", slot.index, len(slot.tests))

    def _collect(self, slot: WorkerSlot, returncode: int, report: ExecutionReport) -> None:
        collector = ResultCollector(slot.tests)
        collector.collect_output(slot.read_output())

        if returncode != 0:
            missing = len(collector.expected) - len(collector.outcomes)
            if missing:
                reason = f"exited before reporting {missing} of {len(slot.tests)} tests"
            else:
                reason = "reported failing tests"
            failure = WorkerFailure(slot.index, returncode, reason)
            report.record_worker_failure(failure)
            logger.debug(str(failure))
            outcomes = collector.finalize(f"Worker {slot.index} exited with code {returncode}")
        else:
            outcomes = collector.finalize()

        for outcome in outcomes:
            report.record(outcome)
