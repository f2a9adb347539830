import json
import os

import pytest

from elm_test.errors import (
    AmbiguousModule,
    CompilationFailed,
    InvalidCompilerFlag,
    MissingInterface,
    MissingWorker,
    NoTestsFound,
)
from elm_test.interface import TestIdentity, interface_path
from elm_test.runner import RunOptions, RunPipeline, run_tests
from elm_test.settings import RunnerSettings

from conftest import (
    PLAIN_FUNCTION,
    TEST_RUNNER,
    TEST_VALUE,
    posix_only,
    read_worker_manifests,
    write_compiler,
    write_elm_file,
    write_elm_json,
    write_worker,
)


def _options(project, compiler, paths=(), **settings):
    settings.setdefault("worker_command", write_worker(project))
    settings.setdefault("report", "json")
    return RunOptions(
        project_root=project,
        paths=list(paths),
        settings=RunnerSettings(**settings),
        compiler=str(compiler),
    )


def _compiler_calls(log):
    if not log.exists():
        return []
    return [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]


@posix_only
def test_full_run(project):
    compiler, log = write_compiler(project, interfaces={
        "Foo.BarTest": {"suite": TEST_VALUE, "helper": PLAIN_FUNCTION},
        "BazTest": {"runners": TEST_RUNNER, "failingSuite": TEST_VALUE},
    })
    write_elm_file(project, "tests/Foo/BarTest.elm")
    write_elm_file(project, "tests/BazTest.elm")

    report = run_tests(_options(project, compiler, workers=2, seed=99))

    assert len(_compiler_calls(log)) == 1
    assert [str(o.identity) for o in report.results] == [
        "BazTest.failingSuite",
        "BazTest.runners",
        "Foo.BarTest.suite",
    ]
    assert not report.success
    assert report.seed == 99
    assert len(read_worker_manifests(project)) == 2


@posix_only
def test_interfaces_are_read_only_after_compilation(project):
    compiler, log = write_compiler(project, interfaces={"ATest": {"suite": TEST_VALUE}})
    write_elm_file(project, "tests/ATest.elm")
    artifact = interface_path(project, "ATest")
    assert not artifact.exists()

    discovery = RunPipeline(_options(project, compiler)).discover()

    assert artifact.exists()
    assert len(_compiler_calls(log)) == 1
    assert discovery.tests == (TestIdentity("ATest", "suite"),)


@posix_only
def test_discover_returns_files_modules_and_tests(project):
    compiler, _ = write_compiler(project, interfaces={"ATest": {"suite": TEST_VALUE}})
    write_elm_file(project, "tests/ATest.elm")

    discovery = RunPipeline(_options(project, compiler)).discover()

    assert discovery.files == [project / "tests" / "ATest.elm"]
    assert discovery.modules == ["ATest"]
    assert discovery.tests == (TestIdentity("ATest", "suite"),)
    assert read_worker_manifests(project) == []


@posix_only
def test_no_test_files_means_no_compilation(project):
    compiler, log = write_compiler(project)

    with pytest.raises(NoTestsFound):
        run_tests(_options(project, compiler))

    assert _compiler_calls(log) == []


@posix_only
def test_failed_compilation_stops_the_run(project):
    compiler, log = write_compiler(project, exit_code=1, interfaces={"ATest": {"suite": TEST_VALUE}})
    write_elm_file(project, "tests/ATest.elm")

    with pytest.raises(CompilationFailed):
        run_tests(_options(project, compiler))

    assert len(_compiler_calls(log)) == 1
    assert not interface_path(project, "ATest").exists()
    assert read_worker_manifests(project) == []


@posix_only
def test_ambiguous_module_stops_before_compilation(tmp_path):
    write_elm_json(tmp_path, source_dirs=("src", "src/tests"))
    compiler, log = write_compiler(tmp_path)
    path = write_elm_file(tmp_path, "src/tests/ATest.elm")

    with pytest.raises(AmbiguousModule):
        run_tests(_options(tmp_path, compiler, paths=[str(path)]))

    assert _compiler_calls(log) == []


@posix_only
def test_compiler_that_writes_no_interfaces_fails_discovery(project):
    compiler, log = write_compiler(project)
    write_elm_file(project, "tests/ATest.elm")

    with pytest.raises(MissingInterface) as excinfo:
        RunPipeline(_options(project, compiler)).discover()

    assert excinfo.value.module_name == "ATest"
    assert len(_compiler_calls(log)) == 1
    assert read_worker_manifests(project) == []


@posix_only
def test_modules_without_tests_raise_no_tests_found(project):
    compiler, _ = write_compiler(project, interfaces={"Helpers": {"helper": PLAIN_FUNCTION}})
    write_elm_file(project, "tests/Helpers.elm")

    with pytest.raises(NoTestsFound):
        run_tests(_options(project, compiler))

    assert read_worker_manifests(project) == []


@posix_only
def test_compiler_path_from_settings_is_relative_to_project(project):
    write_compiler(project, interfaces={"ATest": {"suite": TEST_VALUE}})
    write_elm_file(project, "tests/ATest.elm")
    options = _options(project, "unused")
    options.settings.compiler = "./fake-elm"
    options.compiler = None

    report = run_tests(options)

    assert report.success


@posix_only
def test_bare_compiler_name_from_settings_is_found_on_path(project, monkeypatch):
    write_compiler(project, interfaces={"ATest": {"suite": TEST_VALUE}})
    write_elm_file(project, "tests/ATest.elm")
    monkeypatch.setenv("PATH", f"{project}{os.pathsep}{os.environ.get('PATH', '')}")
    options = _options(project, "unused")
    options.settings.compiler = "fake-elm"
    options.compiler = None

    report = run_tests(options)

    assert report.success


def test_missing_compiler_path_from_settings_is_rejected(project):
    write_elm_file(project, "tests/ATest.elm")
    options = _options(project, "unused")
    options.settings.compiler = "bin/elm"
    options.compiler = None

    with pytest.raises(InvalidCompilerFlag):
        RunPipeline(options).discover()


@posix_only
def test_default_worker_must_exist(project):
    compiler, _ = write_compiler(project, interfaces={"ATest": {"suite": TEST_VALUE}})
    write_elm_file(project, "tests/ATest.elm")
    options = _options(project, compiler)
    options.settings = RunnerSettings(report="json")

    with pytest.raises(MissingWorker) as excinfo:
        run_tests(options)

    assert "worker-command" in str(excinfo.value)
    assert excinfo.value.script == project / "elm-stuff/generated-code/elm-test/worker.js"


def test_random_seed_when_none_configured(project):
    pipeline = RunPipeline(RunOptions(project_root=project))

    assert 0 <= pipeline.seed <= 2**32 - 1
