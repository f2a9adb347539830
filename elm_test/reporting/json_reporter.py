"""JSON report generator for test runs."""

import json
from datetime import datetime, timezone
from typing import Any

from ..runner.results import ExecutionReport


class JsonReporter:
    """Generates JSON reports from an ExecutionReport."""

    def generate(self, report: ExecutionReport) -> dict[str, Any]:
        """Generate a JSON-serializable report.

        Args:
            report: Finished execution report.

        Returns:
            Report dictionary ready for JSON serialization.
        """
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "status": "passed" if report.success else "failed",
            "seed": report.seed,
            "summary": {
                "total": report.total_count,
                "passed": report.passed_count,
                "failed": report.failed_count,
                "todo": report.todo_count,
                "errored": report.errored_count,
                "duration_ms": report.duration_ms,
            },
            "tests": [
                {
                    "module": o.identity.module,
                    "name": o.identity.name,
                    "status": o.status,
                    "message": o.message or None,
                }
                for o in report.results
            ],
            "worker_failures": [
                {
                    "worker": f.slot,
                    "exit_code": f.returncode,
                    "reason": f.reason,
                }
                for f in report.worker_failures
            ],
        }

    def to_json_string(self, report: dict[str, Any], pretty: bool = True) -> str:
        """Convert report to JSON string.

        Args:
            report: Report dictionary.
            pretty: If True, format with indentation.

        Returns:
            JSON string.
        """
        if pretty:
            return json.dumps(report, indent=2, ensure_ascii=False)
        return json.dumps(report, ensure_ascii=False)
