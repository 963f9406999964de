"""Hash table decoder: bytes -> ordered dict of scalars.

Layout walked here:

    "MAP1.0"  u32le count  { key  tag  payload }*

Keys are untagged strings; values carry a u32le type tag.  The declared
count is read and ignored: entries are consumed until the buffer is empty,
which is what the engine itself does when loading.
"""

from __future__ import annotations

import logging
import struct
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from ._constants import (
    HEADER_SIZE,
    INTEGER_RANGES,
    TYPE_F64,
    TYPE_I64,
    TYPE_STRING,
    ValueKind,
)
from ._core import read_f64, read_header, read_i64, read_u32
from ._errors import (
    ERR_MESSAGE,
    ERR_MISSING_STRING_TERMINATOR,
    ERR_NUMERIC_OVERFLOW,
    ERR_TRAILING_CHARACTERS,
    ERR_TYPE_MISMATCH,
    TableError,
    string_length_error,
    unknown_type_id,
)
from ._text import decode_text

logger = logging.getLogger(__name__)

_F32 = struct.Struct("<f")

# Type names accepted by the ``types`` argument of from_bytes().
TYPE_NAMES = frozenset(INTEGER_RANGES) | {"bool", "f32", "f64", "str"}


# ── Strings ──────────────────────────────────────────────────

def _read_tag(buf: bytes, off: int, expected: int) -> int:
    """Consume a type tag that must equal `expected`; return the new offset."""
    tag, off = read_u32(buf, off, "type tag")
    if tag != expected:
        raise TableError(
            ERR_TYPE_MISMATCH,
            "expected {} value, found type id {}".format(ValueKind(expected).name, tag),
            off,
        )
    return off


def read_string(buf: bytes, off: int, tagged: bool) -> Tuple[str, int]:
    """Read a length-prefixed, NUL-terminated Windows-1252 string.

    Keys are read with ``tagged=False``; string values with ``tagged=True``
    first consume and check the STRING tag.
    """
    if tagged:
        off = _read_tag(buf, off, TYPE_STRING)

    length_off = off
    n, off = read_u32(buf, off, "string length")
    remaining = len(buf) - off
    if n > remaining:
        # Reported at the length field, not the payload.
        raise string_length_error(n, remaining, length_off)
    if n == 0:
        raise TableError(ERR_MISSING_STRING_TERMINATOR, offset=off)

    end = off + n
    if buf[end - 1] != 0:
        raise TableError(ERR_MISSING_STRING_TERMINATOR, offset=end - 1)
    return decode_text(buf[off:end - 1]), end


# ── Values ───────────────────────────────────────────────────

def read_value(buf: bytes, off: int) -> Tuple[Any, int]:
    """Read one tagged value, dispatching on whatever tag is on the wire."""
    tag, payload_off = read_u32(buf, off, "type tag")

    if tag == TYPE_I64:
        return read_i64(buf, payload_off)
    if tag == TYPE_F64:
        return read_f64(buf, payload_off)
    if tag == TYPE_STRING:
        return read_string(buf, off, tagged=True)

    # Reported at the tag itself.
    raise unknown_type_id(tag, off)


def _narrow_f32(x: float) -> float:
    try:
        return _F32.unpack(_F32.pack(x))[0]
    except OverflowError:
        # Saturate like a native double -> float cast.
        return float("inf") if x > 0 else float("-inf")


def read_typed_value(buf: bytes, off: int, type_name: str) -> Tuple[Any, int]:
    """Read a value the caller expects to be of kind `type_name`.

    Integer kinds, including ``bool``, go through the I64 path and are
    narrowed afterwards.
    """
    if type_name in INTEGER_RANGES or type_name == "bool":
        off = _read_tag(buf, off, TYPE_I64)
        val, off = read_i64(buf, off)
        if type_name == "bool":
            return val != 0, off
        lo, hi = INTEGER_RANGES[type_name]
        if val < lo or val > hi:
            raise TableError(
                ERR_NUMERIC_OVERFLOW,
                "{} does not fit in {}".format(val, type_name),
                off,
            )
        return val, off

    if type_name in ("f32", "f64"):
        off = _read_tag(buf, off, TYPE_F64)
        val, off = read_f64(buf, off)
        if type_name == "f32":
            val = _narrow_f32(val)
        return val, off

    if type_name == "str":
        return read_string(buf, off, tagged=True)

    raise TableError(ERR_MESSAGE, "unknown value type {!r}".format(type_name))


# ── Entries ──────────────────────────────────────────────────

def _check_types(types: Mapping[str, str]) -> None:
    for key, type_name in types.items():
        if type_name not in TYPE_NAMES:
            raise TableError(
                ERR_MESSAGE,
                "unknown value type {!r} for key {!r}".format(type_name, key),
            )


def _walk(buf: bytes, types: Optional[Mapping[str, str]]) -> Iterator[Tuple[str, Any, int]]:
    """Yield ``(key, value, offset_after_entry)`` for every entry in buf."""
    declared, off = read_header(buf)
    logger.debug("header ok, %d entries declared, %d bytes", declared, len(buf))

    while off < len(buf):
        key_off = off
        key, off = read_string(buf, off, tagged=False)
        if types is not None and key in types:
            val, off = read_typed_value(buf, off, types[key])
        else:
            val, off = read_value(buf, off)
        logger.debug("entry %r at offset %d", key, key_off)
        yield key, val, off


def iter_entries(buf: bytes) -> Iterator[Tuple[str, Any]]:
    """Lazily yield ``(key, value)`` pairs in file order."""
    for key, val, _ in _walk(buf, None):
        yield key, val


def from_bytes(buf: bytes, types: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Decode a whole hash table into an ordered dict.

    `types` optionally maps keys to the kind the caller expects ("i32",
    "bool", "f32", "str", ...).  Listed keys are read strictly and narrowed;
    every other key is decoded as whatever its tag says.
    """
    if types is not None:
        _check_types(types)

    doc: Dict[str, Any] = {}
    end = HEADER_SIZE
    for key, val, end in _walk(buf, types):
        if key in doc:
            logger.warning("duplicate key %r, keeping the last value", key)
        doc[key] = val

    if end != len(buf):
        raise TableError(ERR_TRAILING_CHARACTERS, offset=end)
    return doc
