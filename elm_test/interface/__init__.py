"""Interface module - reads compiled interface files to find tests."""

from .elmi import (
    ExportedSymbol,
    ModuleInterface,
    TypeSignature,
    decode_interface,
    encode_interface,
)
from .reader import (
    TestIdentity,
    discover_tests,
    interface_path,
    is_test_suite,
    read_test_identities,
)

__all__ = [
    "ExportedSymbol",
    "ModuleInterface",
    "TypeSignature",
    "decode_interface",
    "encode_interface",
    "TestIdentity",
    "discover_tests",
    "interface_path",
    "is_test_suite",
    "read_test_identities",
]
