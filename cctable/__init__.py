"""cctable: Construct Classic hash table codec.

Converts between the engine's flat binary hash table files (magic
"MAP1.0") and plain Python dicts / JSON text, byte-for-byte.

Quick start:
    >>> from cctable import to_bytes, from_bytes
    >>> raw = to_bytes({"hp": 100, "name": "Orc"})
    >>> raw[:10]
    b'MAP1.0\\x02\\x00\\x00\\x00'
    >>> from_bytes(raw)
    {'hp': 100, 'name': 'Orc'}

Values are int (I64), float (F64) or str (STRING, Windows-1252).  bool is
written as the integer 0 or 1.  Nested containers and None are rejected.
"""

from __future__ import annotations

from ._constants import (
    INT64_MAX,
    INT64_MIN,
    MAGIC,
    TYPE_F64,
    TYPE_I64,
    TYPE_STRING,
    ValueKind,
)
from ._decode import from_bytes, iter_entries
from ._encode import to_bytes, value_kind
from ._errors import (
    ERR_INVALID_HEADER,
    ERR_INVALID_KEY_TYPE,
    ERR_LENGTH_NOT_GIVEN,
    ERR_MESSAGE,
    ERR_MISSING_STRING_TERMINATOR,
    ERR_NUMERIC_OVERFLOW,
    ERR_STRING_LENGTH,
    ERR_TEXT_ENCODING,
    ERR_TRAILING_CHARACTERS,
    ERR_TYPE_MISMATCH,
    ERR_UNEXPECTED_EOF,
    ERR_UNKNOWN_TYPE_ID,
    ERR_UNSUPPORTED_VALUE,
    TableError,
)
from ._json_adapter import (
    document_to_json,
    json_to_document,
    json_to_table,
    table_to_json,
)

__version__ = "0.2.0"

__all__ = [
    # Codec
    "from_bytes",
    "iter_entries",
    "to_bytes",
    "value_kind",
    "ValueKind",
    # JSON
    "json_to_document",
    "document_to_json",
    "table_to_json",
    "json_to_table",
    # Format constants
    "MAGIC",
    "TYPE_I64",
    "TYPE_F64",
    "TYPE_STRING",
    "INT64_MIN",
    "INT64_MAX",
    # Exception
    "TableError",
    # Error codes
    "ERR_MESSAGE",
    "ERR_MISSING_STRING_TERMINATOR",
    "ERR_STRING_LENGTH",
    "ERR_UNKNOWN_TYPE_ID",
    "ERR_NUMERIC_OVERFLOW",
    "ERR_TYPE_MISMATCH",
    "ERR_TRAILING_CHARACTERS",
    "ERR_LENGTH_NOT_GIVEN",
    "ERR_INVALID_KEY_TYPE",
    "ERR_TEXT_ENCODING",
    "ERR_INVALID_HEADER",
    "ERR_UNSUPPORTED_VALUE",
    "ERR_UNEXPECTED_EOF",
]
