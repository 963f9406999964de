"""Error codes and the exception class shared by the decoder and encoder.

Decode errors carry the byte offset where the fault was found.  Encode
errors carry no offset: there is no input buffer to point into.
"""

from __future__ import annotations

from typing import Optional

# ── Error codes ──────────────────────────────────────────────

ERR_MESSAGE: str = "ERR_MESSAGE"                          # free text, adapter layer
ERR_MISSING_STRING_TERMINATOR: str = "ERR_MISSING_STRING_TERMINATOR"
ERR_STRING_LENGTH: str = "ERR_STRING_LENGTH"              # length runs past the end
ERR_UNKNOWN_TYPE_ID: str = "ERR_UNKNOWN_TYPE_ID"
ERR_NUMERIC_OVERFLOW: str = "ERR_NUMERIC_OVERFLOW"
ERR_TYPE_MISMATCH: str = "ERR_TYPE_MISMATCH"              # tag != expected kind
ERR_TRAILING_CHARACTERS: str = "ERR_TRAILING_CHARACTERS"
ERR_LENGTH_NOT_GIVEN: str = "ERR_LENGTH_NOT_GIVEN"        # entry count unknown
ERR_INVALID_KEY_TYPE: str = "ERR_INVALID_KEY_TYPE"
ERR_TEXT_ENCODING: str = "ERR_TEXT_ENCODING"              # not representable in cp1252
ERR_INVALID_HEADER: str = "ERR_INVALID_HEADER"
ERR_UNSUPPORTED_VALUE: str = "ERR_UNSUPPORTED_VALUE"
ERR_UNEXPECTED_EOF: str = "ERR_UNEXPECTED_EOF"            # fixed-width field truncated

_DESCRIPTIONS = {
    ERR_MESSAGE: "Unknown error",
    ERR_MISSING_STRING_TERMINATOR: "String is missing its NUL terminator",
    ERR_STRING_LENGTH: "String length too long",
    ERR_UNKNOWN_TYPE_ID: "Unknown type id",
    ERR_NUMERIC_OVERFLOW: "Numeric value out of range",
    ERR_TYPE_MISMATCH: "Value type does not match the expected type",
    ERR_TRAILING_CHARACTERS: "Trailing bytes after the last entry",
    ERR_LENGTH_NOT_GIVEN: "Entry count must be known before writing",
    ERR_INVALID_KEY_TYPE: "Keys must be strings",
    ERR_TEXT_ENCODING: "Text cannot be encoded as Windows-1252",
    ERR_INVALID_HEADER: "The file header is invalid",
    ERR_UNSUPPORTED_VALUE: "Unsupported value in input",
    ERR_UNEXPECTED_EOF: "Unexpected end of input",
}


class TableError(Exception):
    """Exception for hash table encode/decode errors.

    `.code` is one of the ERR_* strings above, `.offset` the byte position
    in the decoded buffer (None on the encode path).
    """

    def __init__(self, code: str, msg: str = "", offset: Optional[int] = None) -> None:
        self.code = code
        self.offset = offset
        self.description = msg or _DESCRIPTIONS.get(code, code)
        super().__init__(self.description)

    def __str__(self) -> str:
        if self.offset is not None:
            return "At offset {}: {}".format(self.offset, self.description)
        return self.description


# ── Constructors for errors with extra payload ────────────────

def string_length_error(declared: int, remaining: int, offset: int) -> TableError:
    err = TableError(
        ERR_STRING_LENGTH,
        "String length {} too long, only {} bytes left in document".format(declared, remaining),
        offset,
    )
    err.declared = declared
    err.remaining = remaining
    return err


def unknown_type_id(tag: int, offset: int) -> TableError:
    err = TableError(ERR_UNKNOWN_TYPE_ID, "Unknown type id {}".format(tag), offset)
    err.tag = tag
    return err
