"""Construct Classic hash table constants: header magic, type tags, ranges.

The layout is flat: magic, entry count, then key/value pairs until the end
of the buffer.  All integers on the wire are little-endian.
"""

from __future__ import annotations

from enum import IntEnum

# 6-byte file magic, ASCII "MAP1.0".  There is no other version field.
MAGIC = b"MAP1.0"
MAGIC_SIZE: int = len(MAGIC)

# Entry count follows the magic as a u32le.
COUNT_SIZE: int = 4
HEADER_SIZE: int = MAGIC_SIZE + COUNT_SIZE

# ── Value type tags (u32le each) ─────────────────────────────
# Numbering follows the engine's expression types:
#   integer = 1, float = 2, string = 3
TYPE_I64: int = 1
TYPE_F64: int = 2
TYPE_STRING: int = 3

SCALAR_SIZE: int = 8  # both I64 and F64 payloads


class ValueKind(IntEnum):
    """The three scalar kinds a value can have.  Values are the wire tags."""

    I64 = TYPE_I64
    F64 = TYPE_F64
    STRING = TYPE_STRING


# ── Integer ranges ───────────────────────────────────────────
INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1
UINT32_MAX: int = 2**32 - 1

# Narrowing targets accepted by typed decoding: name -> (min, max).
INTEGER_RANGES = {
    "i8": (-(2**7), 2**7 - 1),
    "i16": (-(2**15), 2**15 - 1),
    "i32": (-(2**31), 2**31 - 1),
    "i64": (INT64_MIN, INT64_MAX),
    "u8": (0, 2**8 - 1),
    "u16": (0, 2**16 - 1),
    "u32": (0, UINT32_MAX),
    "u64": (0, 2**64 - 1),
}

# ── Text ─────────────────────────────────────────────────────
# Python's cp1252 leaves five bytes undefined; the engine (and WHATWG)
# map them straight to the C1 controls with the same value.
TEXT_ENCODING = "cp1252"
CP1252_UNDEFINED = frozenset((0x81, 0x8D, 0x8F, 0x90, 0x9D))
