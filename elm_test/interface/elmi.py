"""Binary codec for compiled interface (.elmi) files.

Layout (all integers big-endian):

    magic        4 bytes  b"ELMI"
    version      u16
    module name  str
    count        u32
    symbol*      name str, kind u8, argc u8, argc x argument type str,
                 result type str
    checksum     u32      CRC-32 of every preceding byte

A ``str`` is a u16 byte length followed by UTF-8 text. ``kind`` is 0 for a
plain value (argc must be 0) and 1 for a function (argc must be > 0).
"""

import struct
import zlib
from dataclasses import dataclass
from typing import Iterable

from ..errors import MalformedInterface

MAGIC = b"ELMI"
FORMAT_VERSION = 1

KIND_VALUE = 0
KIND_FUNCTION = 1

HEADER_SIZE = len(MAGIC) + 2
CHECKSUM_SIZE = 4
# name length + kind + argc + result length
MIN_SYMBOL_SIZE = 2 + 1 + 1 + 2
MAX_STRING_SIZE = 0xFFFF
MAX_ARGUMENTS = 0xFF


@dataclass(frozen=True)
class TypeSignature:
    """Type of an exported symbol: argument types and result type."""
    arguments: tuple[str, ...]
    result: str

    @property
    def is_function(self) -> bool:
        return len(self.arguments) > 0

    def __str__(self) -> str:
        return " -> ".join([*self.arguments, self.result])


@dataclass(frozen=True)
class ExportedSymbol:
    name: str
    signature: TypeSignature


@dataclass(frozen=True)
class ModuleInterface:
    """Decoded contents of one interface file."""
    module_name: str
    symbols: tuple[ExportedSymbol, ...] = ()


class _Cursor:
    """Reads primitives from a byte buffer, failing on short reads."""

    def __init__(self, data: bytes, offset: int = 0):
        self.data = data
        self.offset = offset

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def take(self, size: int) -> bytes:
        if size > self.remaining:
            raise MalformedInterface(
                f"truncated: needed {size} bytes at offset {self.offset}, "
                f"only {self.remaining} left"
            )
        chunk = self.data[self.offset:self.offset + size]
        self.offset += size
        return chunk

    def u8(self) -> int:
        return self.take(1)[0]

    def u16(self) -> int:
        return struct.unpack(">H", self.take(2))[0]

    def u32(self) -> int:
        return struct.unpack(">I", self.take(4))[0]

    def string(self) -> str:
        raw = self.take(self.u16())
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedInterface(f"invalid UTF-8 at offset {self.offset - len(raw)}") from e


def decode_interface(data: bytes) -> ModuleInterface:
    """Decode an interface file.

    Args:
        data: Full file contents.

    Returns:
        The module name and its exported symbols, in file order.

    Raises:
        MalformedInterface: On any structural problem.
    """
    header = _Cursor(data)
    if header.take(len(MAGIC)) != MAGIC:
        raise MalformedInterface("not an interface file (bad magic bytes)")

    version = header.u16()
    if version != FORMAT_VERSION:
        raise MalformedInterface(
            f"unsupported format version {version}, expected {FORMAT_VERSION}"
        )

    if header.remaining < CHECKSUM_SIZE:
        raise MalformedInterface("truncated: missing checksum")

    body, trailer = data[:-CHECKSUM_SIZE], data[-CHECKSUM_SIZE:]
    expected = struct.unpack(">I", trailer)[0]
    actual = zlib.crc32(body)
    if actual != expected:
        raise MalformedInterface(
            f"checksum mismatch (stored {expected:#010x}, computed {actual:#010x})"
        )

    cursor = _Cursor(body, offset=HEADER_SIZE)
    module_name = cursor.string()
    count = cursor.u32()

    if count * MIN_SYMBOL_SIZE > cursor.remaining:
        raise MalformedInterface(
            f"invalid symbol count {count} for {cursor.remaining} remaining bytes"
        )

    symbols = tuple(_decode_symbol(cursor) for _ in range(count))

    if cursor.remaining:
        raise MalformedInterface(f"{cursor.remaining} unexpected trailing bytes")

    return ModuleInterface(module_name=module_name, symbols=symbols)


def _decode_symbol(cursor: _Cursor) -> ExportedSymbol:
    name = cursor.string()
    kind = cursor.u8()
    argc = cursor.u8()

    if kind not in (KIND_VALUE, KIND_FUNCTION):
        raise MalformedInterface(f"unknown symbol kind {kind} for {name!r}")
    if kind == KIND_VALUE and argc != 0:
        raise MalformedInterface(f"value {name!r} declares {argc} arguments")
    if kind == KIND_FUNCTION and argc == 0:
        raise MalformedInterface(f"function {name!r} declares no arguments")

    arguments = tuple(cursor.string() for _ in range(argc))
    result = cursor.string()
    return ExportedSymbol(name=name, signature=TypeSignature(arguments, result))


def encode_interface(module_name: str, symbols: Iterable[ExportedSymbol]) -> bytes:
    """Encode an interface file. Inverse of decode_interface.

    Raises:
        ValueError: If a name or type is longer than MAX_STRING_SIZE bytes,
            or a function takes more than MAX_ARGUMENTS arguments.
    """
    symbols = list(symbols)
    parts = [MAGIC, struct.pack(">H", FORMAT_VERSION), _encode_string(module_name)]
    parts.append(struct.pack(">I", len(symbols)))

    for symbol in symbols:
        arguments = symbol.signature.arguments
        kind = KIND_FUNCTION if arguments else KIND_VALUE
        if len(arguments) > MAX_ARGUMENTS:
            raise ValueError(
                f"{symbol.name!r} takes {len(arguments)} arguments, at most {MAX_ARGUMENTS} fit"
            )
        parts.append(_encode_string(symbol.name))
        parts.append(struct.pack(">BB", kind, len(arguments)))
        parts.extend(_encode_string(a) for a in arguments)
        parts.append(_encode_string(symbol.signature.result))

    body = b"".join(parts)
    return body + struct.pack(">I", zlib.crc32(body))


def _encode_string(value: str) -> bytes:
    raw = value.encode("utf-8")
    if len(raw) > MAX_STRING_SIZE:
        raise ValueError(
            f"string of {len(raw)} bytes does not fit in an interface file "
            f"(limit {MAX_STRING_SIZE}): {value[:40]!r}..."
        )
    return struct.pack(">H", len(raw)) + raw
