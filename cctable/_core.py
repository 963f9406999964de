"""Fixed-width little-endian primitives and header validation.

Every reader takes the buffer and the current offset and returns
``(value, new_offset)``.  The offset is the only cursor; nothing is kept
between calls, so error offsets are always "bytes consumed so far".
"""

from __future__ import annotations

import struct
from typing import Tuple

from ._constants import (
    INT64_MAX,
    INT64_MIN,
    MAGIC,
    MAGIC_SIZE,
    SCALAR_SIZE,
    UINT32_MAX,
)
from ._errors import (
    ERR_INVALID_HEADER,
    ERR_NUMERIC_OVERFLOW,
    ERR_UNEXPECTED_EOF,
    TableError,
)

_U32 = struct.Struct("<I")
_I64 = struct.Struct("<q")
_F64 = struct.Struct("<d")


# ── Readers ──────────────────────────────────────────────────

def _need(buf: bytes, off: int, size: int, what: str) -> None:
    if off + size > len(buf):
        raise TableError(
            ERR_UNEXPECTED_EOF,
            "truncated {}: need {} bytes, {} left".format(what, size, len(buf) - off),
            off,
        )


def read_u32(buf: bytes, off: int, what: str = "u32") -> Tuple[int, int]:
    _need(buf, off, 4, what)
    return _U32.unpack_from(buf, off)[0], off + 4


def read_i64(buf: bytes, off: int) -> Tuple[int, int]:
    _need(buf, off, SCALAR_SIZE, "i64 payload")
    return _I64.unpack_from(buf, off)[0], off + SCALAR_SIZE


def read_f64(buf: bytes, off: int) -> Tuple[float, int]:
    _need(buf, off, SCALAR_SIZE, "f64 payload")
    return _F64.unpack_from(buf, off)[0], off + SCALAR_SIZE


def read_header(buf: bytes, off: int = 0) -> Tuple[int, int]:
    """Check the magic and return ``(declared_count, offset_after_header)``."""
    if buf[off:off + MAGIC_SIZE] != MAGIC:
        raise TableError(ERR_INVALID_HEADER, offset=off)
    off += MAGIC_SIZE
    return read_u32(buf, off, "entry count")


# ── Writers ──────────────────────────────────────────────────

def pack_u32(n: int) -> bytes:
    if n < 0 or n > UINT32_MAX:
        raise TableError(ERR_NUMERIC_OVERFLOW, "{} does not fit in u32".format(n))
    return _U32.pack(n)


def pack_i64(n: int) -> bytes:
    # Python ints are unbounded; the format stores signed 64-bit only.
    if n < INT64_MIN or n > INT64_MAX:
        raise TableError(ERR_NUMERIC_OVERFLOW, "integer {} outside int64 range".format(n))
    return _I64.pack(n)


def pack_f64(x: float) -> bytes:
    return _F64.pack(x)


def pack_header(count: int) -> bytes:
    return MAGIC + pack_u32(count)
