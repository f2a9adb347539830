"""Finds the test suites a compiled module exposes."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from ..errors import MalformedInterface, MissingInterface
from ..settings.schema import DEFAULT_INTERFACES_DIR
from .elmi import TypeSignature, decode_interface

logger = logging.getLogger(__name__)

INTERFACE_EXTENSION = ".elmi"

# A top-level `Test` value, or a runner function built from a seed.
TEST_VALUE_SIGNATURE = TypeSignature((), "Test.Test")
TEST_RUN_SIGNATURE = TypeSignature(("Int", "Random.Seed"), "Test.Runner.SeededRunners")
TEST_SIGNATURES = frozenset({TEST_VALUE_SIGNATURE, TEST_RUN_SIGNATURE})


@dataclass(frozen=True, order=True)
class TestIdentity:
    """A test suite exposed by a module."""
    __test__ = False  # not a pytest class

    module: str
    name: str

    def __str__(self) -> str:
        return f"{self.module}.{self.name}"


def is_test_suite(signature: TypeSignature) -> bool:
    return signature in TEST_SIGNATURES


def interface_path(
    project_root: Path,
    module_name: str,
    interfaces_dir: str = DEFAULT_INTERFACES_DIR,
) -> Path:
    """Where the compiler writes the interface file for a module.

    ``Foo.BarTest`` lives at ``<interfaces_dir>/Foo-BarTest.elmi``.
    """
    filename = module_name.replace(".", "-") + INTERFACE_EXTENSION
    return Path(project_root) / interfaces_dir / filename


def read_test_identities(
    project_root: Path,
    module_name: str,
    interfaces_dir: str = DEFAULT_INTERFACES_DIR,
) -> list[TestIdentity]:
    """Read one module's interface and return its test suites.

    Args:
        project_root: Project root directory.
        module_name: Module whose interface to read.
        interfaces_dir: Interface directory relative to the project root.

    Returns:
        Test suites in declaration order. Empty if the module has none.

    Raises:
        MissingInterface: If the interface file does not exist.
        MalformedInterface: If it cannot be decoded or describes another module.
    """
    path = interface_path(project_root, module_name, interfaces_dir)

    try:
        data = path.read_bytes()
    except FileNotFoundError as e:
        raise MissingInterface(module_name, path) from e
    except OSError as e:
        raise MalformedInterface(str(e), path) from e

    try:
        interface = decode_interface(data)
    except MalformedInterface as e:
        raise MalformedInterface(e.reason, path) from e

    if interface.module_name != module_name:
        raise MalformedInterface(
            f"describes module {interface.module_name}, expected {module_name}",
            path,
        )

    identities = [
        TestIdentity(module=module_name, name=symbol.name)
        for symbol in interface.symbols
        if is_test_suite(symbol.signature)
    ]
    logger.debug(
        "%s exposes %d symbols, %d tests",
        module_name, len(interface.symbols), len(identities),
    )
    return identities


def discover_tests(
    project_root: Path,
    module_names: Iterable[str],
    interfaces_dir: str = DEFAULT_INTERFACES_DIR,
) -> tuple[TestIdentity, ...]:
    """Collect the test suites of every module.

    Returns:
        Sorted, deduplicated identities. Independent of module order.
    """
    identities: set[TestIdentity] = set()
    for module_name in module_names:
        identities.update(read_test_identities(project_root, module_name, interfaces_dir))
    return tuple(sorted(identities))
