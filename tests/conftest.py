"""Shared fixtures for elm-test tests.

The Elm toolchain is never needed: the compiler and the workers are replaced
by small Python scripts written into the temporary project.
"""

import json
import os
import stat
import sys
import textwrap
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from elm_test.interface import ExportedSymbol, TypeSignature, encode_interface, interface_path

posix_only = pytest.mark.skipif(os.name == "nt", reason="uses executable scripts")

TEST_VALUE = TypeSignature((), "Test.Test")
TEST_RUNNER = TypeSignature(("Int", "Random.Seed"), "Test.Runner.SeededRunners")
PLAIN_FUNCTION = TypeSignature(("Int",), "Int")


# Logs its arguments, then writes the interface files it was given, the way
# a successful build leaves them behind. A failing build writes nothing.
FAKE_COMPILER = """\
#!{python}
import json
import os
import sys

ARTIFACTS = {artifacts!r}

with open({log!r}, "a", encoding="utf-8") as f:
    f.write(json.dumps(sys.argv[1:]) + "\\n")

if {exit_code} == 0:
    for path, data in ARTIFACTS.items():
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)

sys.exit({exit_code})
"""

# Reads its manifest and reports on each test. Suites named "failing..."
# fail, "todo..." are todo; modules with "Crash" in the name make the worker
# exit 3 without reporting anything.
FAKE_WORKER = """\
import json
import os
import sys

manifest_path = sys.argv[sys.argv.index("--manifest") + 1]
with open(manifest_path, encoding="utf-8") as f:
    manifest = json.load(f)

os.makedirs("worker-logs", exist_ok=True)
with open(os.path.join("worker-logs", f"{os.getpid()}.json"), "w", encoding="utf-8") as f:
    json.dump(manifest, f)

print("worker starting")
if any("Crash" in t["module"] for t in manifest["tests"]):
    sys.exit(3)

exit_code = 0
for test in manifest["tests"]:
    if test["name"].startswith("failing"):
        status, exit_code = "fail", 1
    elif test["name"].startswith("todo"):
        status = "todo"
    else:
        status = "pass"
    print(json.dumps({"module": test["module"], "name": test["name"],
                      "status": status, "message": "expected 1, got 2" if status == "fail" else ""}))
sys.exit(exit_code)
"""


def write_elm_json(root: Path, source_dirs=("src",), project_type="application") -> Path:
    data = {"type": project_type}
    if project_type == "application":
        data["source-directories"] = list(source_dirs)
    path = root / "elm.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def write_elm_file(root: Path, relative: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    module = relative.split("/", 1)[1].removesuffix(".elm").replace("/", ".")
    path.write_text(f"module {module} exposing (..)\n", encoding="utf-8")
    return path


def _encode(module_name: str, symbols: dict) -> bytes:
    return encode_interface(
        module_name,
        [ExportedSymbol(name, signature) for name, signature in symbols.items()],
    )


def write_interface(root: Path, module_name: str, symbols: dict, interfaces_dir=None) -> Path:
    """Write an .elmi for module_name. symbols maps name -> TypeSignature."""
    kwargs = {"interfaces_dir": interfaces_dir} if interfaces_dir else {}
    path = interface_path(root, module_name, **kwargs)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(_encode(module_name, symbols))
    return path


def write_compiler(root: Path, exit_code: int = 0, interfaces=None) -> tuple[Path, Path]:
    """Write an executable fake compiler. Returns (script, call log).

    interfaces maps module name -> symbols (see write_interface). The
    compiler writes them under root only when it runs and succeeds.
    """
    artifacts = {
        str(interface_path(root, module_name)): _encode(module_name, symbols)
        for module_name, symbols in (interfaces or {}).items()
    }
    log = root / "compiler-calls.log"
    script = root / "fake-elm"
    script.write_text(
        FAKE_COMPILER.format(
            python=sys.executable,
            log=str(log),
            exit_code=exit_code,
            artifacts=artifacts,
        ),
        encoding="utf-8",
    )
    script.chmod(script.stat().st_mode | stat.S_IEXEC)
    return script, log


def write_worker(root: Path) -> list[str]:
    """Write the fake worker. Returns the command that starts it."""
    script = root / "fake_worker.py"
    script.write_text(textwrap.dedent(FAKE_WORKER), encoding="utf-8")
    return [sys.executable, str(script)]


def read_worker_manifests(root: Path) -> list[dict]:
    logs = root / "worker-logs"
    if not logs.exists():
        return []
    return [json.loads(p.read_text(encoding="utf-8")) for p in sorted(logs.iterdir())]


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An application project with src/ and tests/ source directories."""
    root = tmp_path / "project"
    root.mkdir()
    write_elm_json(root, source_dirs=("src",))
    (root / "src").mkdir()
    (root / "tests").mkdir()
    return root
