"""Runner module - test orchestration."""

from .partition import partition
from .pipeline import Discovery, RunOptions, RunPipeline, run_tests
from .results import ExecutionReport, ResultCollector, TestOutcome, TestStatus
from .worker_pool import WorkerPoolOrchestrator, WorkerSlot, interrupt_on_sigterm, pool_size

__all__ = [
    "partition",
    "Discovery",
    "RunOptions",
    "RunPipeline",
    "run_tests",
    "ExecutionReport",
    "ResultCollector",
    "TestOutcome",
    "TestStatus",
    "WorkerPoolOrchestrator",
    "WorkerSlot",
    "interrupt_on_sigterm",
    "pool_size",
]
