import json

from elm_test.errors import WorkerFailure
from elm_test.interface import TestIdentity
from elm_test.runner import ExecutionReport, ResultCollector, TestOutcome

A = TestIdentity("ATest", "suite")
B = TestIdentity("BTest", "suite")


def _line(identity, status, message=""):
    return json.dumps({"module": identity.module, "name": identity.name, "status": status, "message": message})


def test_collector_reads_result_lines_and_ignores_noise():
    collector = ResultCollector([A, B])

    collector.collect_output("\n".join([
        "Compiling...",
        _line(A, "pass"),
        "{ not json",
        "[1, 2]",
        _line(B, "fail", "Expected 1, got 2"),
    ]))

    outcomes = collector.finalize()
    assert [(o.identity, o.status) for o in outcomes] == [(A, "pass"), (B, "fail")]
    assert outcomes[1].message == "Expected 1, got 2"


def test_unreported_tests_become_errors():
    collector = ResultCollector([A, B])
    collector.collect_line(_line(A, "pass"))

    outcomes = collector.finalize("worker died")

    assert outcomes[1].identity == B
    assert outcomes[1].status == "error"
    assert outcomes[1].message == "worker died"


def test_tests_outside_the_partition_are_ignored():
    collector = ResultCollector([A])

    assert collector.collect_line(_line(B, "pass")) is None
    assert collector.finalize()[0].status == "error"


def test_unknown_status_is_an_error():
    collector = ResultCollector([A])

    outcome = collector.collect_line(_line(A, "skipped"))

    assert outcome.status == "error"
    assert "skipped" in outcome.message


def test_report_counts_and_success():
    report = ExecutionReport(seed=1)
    report.record(TestOutcome(A, "pass"))
    assert report.success

    report.record(TestOutcome(B, "todo"))
    assert not report.success
    assert (report.total_count, report.passed_count, report.todo_count) == (2, 1, 1)


def test_worker_failure_fails_the_run():
    report = ExecutionReport()
    report.record(TestOutcome(A, "pass"))
    report.record_worker_failure(WorkerFailure(0, 1, "reported failing tests"))

    assert not report.success


def test_results_are_in_test_order():
    report = ExecutionReport()
    report.record(TestOutcome(B, "pass"))
    report.record(TestOutcome(A, "fail"))

    assert [o.identity for o in report.results] == [A, B]
