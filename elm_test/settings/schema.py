"""Runner settings data models.

Settings come from the optional ``elm-test.yaml`` file in the project root.
Command-line flags override them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ReportFormat(str, Enum):
    """Supported report formats."""
    CONSOLE = "console"
    JSON = "json"


VALID_REPORT_FORMATS = {e.value for e in ReportFormat}

DEFAULT_COMPILER = "elm"
DEFAULT_INTERFACES_DIR = "elm-stuff/0.19.1"
# Not generated by the run. Projects without this script must set worker_command.
DEFAULT_WORKER_COMMAND = ["node", "elm-stuff/generated-code/elm-test/worker.js"]
DEFAULT_FUZZ = 100


@dataclass
class RunnerSettings:
    """Settings for a test run."""
    compiler: str = DEFAULT_COMPILER
    worker_command: list[str] = field(default_factory=lambda: list(DEFAULT_WORKER_COMMAND))
    workers: Optional[int] = None
    interfaces_dir: str = DEFAULT_INTERFACES_DIR
    report: str = ReportFormat.CONSOLE.value
    seed: Optional[int] = None
    fuzz: int = DEFAULT_FUZZ

    def __post_init__(self):
        if isinstance(self.report, str):
            self.report = self.report.lower()

    def merged(self, **overrides: Any) -> "RunnerSettings":
        """Return a copy with every non-None override applied."""
        values = dict(self.__dict__)
        values["worker_command"] = list(self.worker_command)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return RunnerSettings(**values)


@dataclass
class ValidationError:
    """A single validation error."""
    path: str
    message: str
    severity: str = "error"  # "error" or "warning"


@dataclass
class ValidationResult:
    """Result of settings validation."""
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)
