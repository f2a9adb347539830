"""Collects per-test outcomes reported by worker processes.

Workers print one JSON object per line:

    {"module": "Foo.BarTest", "name": "suite", "status": "pass"}

``status`` is one of pass, fail or todo; ``message`` is optional. Lines
that are not JSON objects are ignored, so workers may print other output.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from ..errors import WorkerFailure
from ..interface.reader import TestIdentity

logger = logging.getLogger(__name__)


class TestStatus(str, Enum):
    """Outcome of a single test suite."""
    __test__ = False

    PASS = "pass"
    FAIL = "fail"
    TODO = "todo"
    ERROR = "error"


REPORTABLE_STATUSES = {TestStatus.PASS.value, TestStatus.FAIL.value, TestStatus.TODO.value}


@dataclass
class TestOutcome:
    """Outcome of one test suite."""
    __test__ = False

    identity: TestIdentity
    status: str
    message: str = ""

    @property
    def passed(self) -> bool:
        return self.status == TestStatus.PASS.value


@dataclass
class ExecutionReport:
    """Aggregated outcomes of a run."""
    seed: Optional[int] = None
    outcomes: dict[TestIdentity, TestOutcome] = field(default_factory=dict)
    worker_failures: list[WorkerFailure] = field(default_factory=list)
    duration_ms: int = 0

    def record(self, outcome: TestOutcome) -> None:
        self.outcomes[outcome.identity] = outcome

    def record_worker_failure(self, failure: WorkerFailure) -> None:
        self.worker_failures.append(failure)

    @property
    def results(self) -> list[TestOutcome]:
        """Outcomes in test order."""
        return [self.outcomes[identity] for identity in sorted(self.outcomes)]

    def _count(self, status: TestStatus) -> int:
        return sum(1 for o in self.outcomes.values() if o.status == status.value)

    @property
    def passed_count(self) -> int:
        return self._count(TestStatus.PASS)

    @property
    def failed_count(self) -> int:
        return self._count(TestStatus.FAIL)

    @property
    def todo_count(self) -> int:
        return self._count(TestStatus.TODO)

    @property
    def errored_count(self) -> int:
        return self._count(TestStatus.ERROR)

    @property
    def total_count(self) -> int:
        return len(self.outcomes)

    @property
    def success(self) -> bool:
        return not self.worker_failures and all(o.passed for o in self.outcomes.values())


class ResultCollector:
    """Turns one worker's output into outcomes for its partition."""

    def __init__(self, tests: Iterable[TestIdentity]):
        """Initialize result collector.

        Args:
            tests: The partition handed to the worker.
        """
        self.expected = set(tests)
        self.outcomes: dict[TestIdentity, TestOutcome] = {}

    def collect_output(self, output: str) -> None:
        """Collect every result line from a worker's stdout."""
        for line in output.splitlines():
            self.collect_line(line)

    def collect_line(self, line: str) -> Optional[TestOutcome]:
        """Collect one line. Returns the outcome it described, if any."""
        line = line.strip()
        if not line.startswith("{"):
            return None

        try:
            message = json.loads(line)
        except json.JSONDecodeError:
            logger.debug("Ignoring worker line: %s", line)
            return None

        if not isinstance(message, dict):
            return None

        module = message.get("module")
        name = message.get("name")
        status = message.get("status")

        if not isinstance(module, str) or not isinstance(name, str):
            logger.debug("Ignoring worker line without module/name: %s", line)
            return None

        identity = TestIdentity(module=module, name=name)
        if identity not in self.expected:
            logger.warning("Worker reported %s, which it was not given", identity)
            return None

        if status in REPORTABLE_STATUSES:
            outcome = TestOutcome(identity, status, str(message.get("message") or ""))
        else:
            outcome = TestOutcome(
                identity,
                TestStatus.ERROR.value,
                f"Worker reported unknown status {status!r}",
            )

        self.outcomes[identity] = outcome
        return outcome

    def finalize(self, reason: str = "No result reported by worker") -> list[TestOutcome]:
        """Return outcomes for the whole partition.

        Tests the worker never reported on are recorded as errors.
        """
        for identity in self.expected - set(self.outcomes):
            self.outcomes[identity] = TestOutcome(identity, TestStatus.ERROR.value, reason)
        return [self.outcomes[identity] for identity in sorted(self.outcomes)]
