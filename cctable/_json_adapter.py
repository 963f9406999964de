"""JSON text <-> document adapter.

Type mapping:
    JSON object (root only) -> document
    JSON integer            -> I64    (range-checked at parse time)
    JSON float              -> F64    ("1.0" stays a float)
    JSON string             -> STRING
    JSON boolean            -> I64 0 / 1 when encoded
    {"$f64": "<16 hex>"}    -> F64 with exactly those bits (NaNs other
                               than the canonical one)
    JSON null, array,
    other nested object     -> left in place, rejected by the encoder

Python's json keeps "1.0" and "1" apart (float vs int), which is exactly
the F64 / I64 split, so re-serializing a decoded table is lossless.
"""

from __future__ import annotations

import json
import math
import re
import struct
from typing import Any, Dict, Mapping, Union

from ._constants import INT64_MAX, INT64_MIN
from ._decode import from_bytes
from ._encode import to_bytes
from ._errors import (
    ERR_MESSAGE,
    ERR_NUMERIC_OVERFLOW,
    ERR_UNSUPPORTED_VALUE,
    TableError,
)

# json writes every NaN as the bare NaN token, which reads back as this one.
CANONICAL_NAN_BITS = 0x7FF8000000000000
F64_BITS_KEY = "$f64"
_HEX64 = re.compile(r"[0-9a-fA-F]{16}")
_F64 = struct.Struct("<d")
_U64 = struct.Struct("<Q")


def _intercept_int(s: str) -> int:
    """Called by json.loads for integer-shaped number tokens.

    Overflow is caught here, with the raw token in the message, rather
    than later in the encoder where the source text is gone.
    """
    val = int(s)
    if val < INT64_MIN or val > INT64_MAX:
        raise TableError(ERR_NUMERIC_OVERFLOW, "integer overflow: {}".format(s))
    return val


def _float_bits(x: float) -> int:
    return _U64.unpack(_F64.pack(x))[0]


def _dump_value(val: Any) -> Any:
    """Wrap NaNs the NaN token would not reproduce bit for bit."""
    if isinstance(val, float) and math.isnan(val):
        bits = _float_bits(val)
        if bits != CANONICAL_NAN_BITS:
            return {F64_BITS_KEY: "{:016x}".format(bits)}
    return val


def _load_value(val: Any) -> Any:
    if (
        isinstance(val, dict)
        and len(val) == 1
        and isinstance(val.get(F64_BITS_KEY), str)
        and _HEX64.fullmatch(val[F64_BITS_KEY])
    ):
        return _F64.unpack(_U64.pack(int(val[F64_BITS_KEY], 16)))[0]
    return val


def json_to_document(raw: Union[str, bytes]) -> Dict[str, Any]:
    """Parse JSON text into a document.  Duplicate keys: the last one wins."""
    try:
        obj = json.loads(raw, parse_int=_intercept_int)
    except TableError:
        raise
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise TableError(ERR_MESSAGE, "JSON parse error: {}".format(e)) from None

    if not isinstance(obj, dict):
        raise TableError(
            ERR_UNSUPPORTED_VALUE,
            "JSON root must be an object, got {}".format(type(obj).__name__),
        )
    return {key: _load_value(val) for key, val in obj.items()}


def document_to_json(doc: Mapping[str, Any]) -> str:
    """Pretty-print a document.

    Infinities and the canonical NaN use json's own tokens.  Any other NaN
    is written as ``{"$f64": "<bits in hex>"}`` so its sign and payload
    survive the trip back.
    """
    out = {key: _dump_value(val) for key, val in doc.items()}
    return json.dumps(out, indent=2, ensure_ascii=False)


# ── One-shot conversions ──────────────────────────────────────

def table_to_json(buf: bytes) -> str:
    return document_to_json(from_bytes(buf))


def json_to_table(raw: Union[str, bytes]) -> bytes:
    return to_bytes(json_to_document(raw))
