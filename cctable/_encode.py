"""Hash table encoder: mapping of scalars -> bytes.

Each scalar kind has exactly one wire form:

    int / bool  -> I64     (tag 1, i64le)
    float       -> F64     (tag 2, f64le)
    str         -> STRING  (tag 3, u32le length incl. NUL, cp1252 bytes, NUL)

Anything else is rejected.  The format is flat: a mapping is only valid as
the root, never as a value.
"""

from __future__ import annotations

import logging
from collections import abc
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from ._constants import TYPE_F64, TYPE_I64, TYPE_STRING, ValueKind
from ._core import pack_f64, pack_header, pack_i64, pack_u32
from ._errors import (
    ERR_INVALID_KEY_TYPE,
    ERR_LENGTH_NOT_GIVEN,
    ERR_MESSAGE,
    ERR_UNSUPPORTED_VALUE,
    TableError,
)
from ._text import encode_text

logger = logging.getLogger(__name__)

Pairs = Iterable[Tuple[str, Any]]


def value_kind(val: Any) -> ValueKind:
    """Classify a Python value as one of the three wire kinds.

    bool is an int subclass, so True/False land on I64 as 1/0.
    """
    if isinstance(val, int):
        return ValueKind.I64
    if isinstance(val, float):
        return ValueKind.F64
    if isinstance(val, str):
        return ValueKind.STRING
    raise TableError(
        ERR_UNSUPPORTED_VALUE,
        "Unsupported value in input: {}".format(type(val).__name__),
    )


def encode_string(s: str, tagged: bool) -> bytes:
    """Encode a key (``tagged=False``) or a string value (``tagged=True``)."""
    raw = encode_text(s)
    parts = [pack_u32(len(raw) + 1), raw, b"\x00"]
    if tagged:
        parts.insert(0, pack_u32(TYPE_STRING))
    return b"".join(parts)


def encode_key(key: Any) -> bytes:
    if not isinstance(key, str):
        raise TableError(
            ERR_INVALID_KEY_TYPE,
            "Keys must be strings, got {}".format(type(key).__name__),
        )
    return encode_string(key, tagged=False)


def encode_value(val: Any) -> bytes:
    kind = value_kind(val)
    if kind is ValueKind.I64:
        return pack_u32(TYPE_I64) + pack_i64(int(val))
    if kind is ValueKind.F64:
        return pack_u32(TYPE_F64) + pack_f64(val)
    return encode_string(val, tagged=True)


def _entries(document: Any) -> Tuple[Pairs, Optional[int]]:
    """Split the root into an iterable of pairs and its length, if known."""
    if isinstance(document, abc.Mapping):
        return document.items(), len(document)
    if isinstance(document, (str, bytes, bytearray)) or not isinstance(document, abc.Iterable):
        raise TableError(
            ERR_UNSUPPORTED_VALUE,
            "root must be a mapping, got {}".format(type(document).__name__),
        )
    try:
        return document, len(document)
    except TypeError:
        return document, None


def to_bytes(document: Union[Mapping[str, Any], Pairs], count: Optional[int] = None) -> bytes:
    """Encode a document into hash table bytes.

    `document` is a mapping, or an iterable of ``(key, value)`` pairs.  The
    entry count goes in the header before any entry, so a pair iterable
    with no ``len()`` needs an explicit `count`.
    """
    pairs, known = _entries(document)
    if count is None:
        count = known
    if count is None:
        raise TableError(ERR_LENGTH_NOT_GIVEN)

    parts: List[bytes] = [pack_header(count)]
    written = 0
    for item in pairs:
        # A 2-character string would otherwise unpack as a pair.
        if isinstance(item, (str, bytes, bytearray)):
            raise TableError(
                ERR_UNSUPPORTED_VALUE,
                "expected a (key, value) pair, got {}".format(type(item).__name__),
            )
        try:
            key, val = item
        except (TypeError, ValueError):
            raise TableError(
                ERR_UNSUPPORTED_VALUE,
                "expected a (key, value) pair, got {}".format(type(item).__name__),
            ) from None
        parts.append(encode_key(key))
        parts.append(encode_value(val))
        written += 1

    if written != count:
        raise TableError(
            ERR_MESSAGE,
            "declared {} entries, wrote {}".format(count, written),
        )
    logger.debug("encoded %d entries", written)
    return b"".join(parts)
