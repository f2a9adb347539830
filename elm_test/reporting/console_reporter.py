"""Human-readable summary of a test run."""

from ..runner.results import ExecutionReport, TestStatus

STATUS_LABELS = {
    TestStatus.FAIL.value: "FAIL",
    TestStatus.TODO.value: "TODO",
    TestStatus.ERROR.value: "ERROR",
}


class ConsoleReporter:
    """Formats an ExecutionReport for the terminal."""

    def format(self, report: ExecutionReport) -> str:
        lines = []

        for outcome in report.results:
            if outcome.passed:
                continue
            label = STATUS_LABELS.get(outcome.status, outcome.status.upper())
            lines.append(f"  [{label}] {outcome.identity}")
            for message_line in outcome.message.splitlines():
                lines.append(f"      {message_line}")

        if report.worker_failures:
            lines.append("")
            for failure in report.worker_failures:
                lines.append(f"  {failure}")

        if lines:
            lines.append("")

        lines.append(f"TEST RUN {'PASSED' if report.success else 'FAILED'}")
        lines.append("")
        lines.append(f"Duration: {report.duration_ms} ms")
        lines.append(f"Passed:   {report.passed_count}")
        lines.append(f"Failed:   {report.failed_count + report.errored_count}")
        if report.todo_count:
            lines.append(f"Todo:     {report.todo_count}")
        lines.append(f"Seed:     {report.seed}")

        return "\n".join(lines)

    def print(self, report: ExecutionReport) -> None:
        print(self.format(report))
