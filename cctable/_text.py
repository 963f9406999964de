"""Windows-1252 text codec for keys and string values.

Encoding is strict: a character with no Windows-1252 byte is an error.
Decoding never fails: undecodable bytes become U+FFFD.

Python's cp1252 table leaves 0x81, 0x8D, 0x8F, 0x90 and 0x9D undefined.
Files written by the engine can still contain them, so both directions map
those bytes to the C1 control with the same value.  That keeps every byte
sequence stable across a decode/encode round trip.
"""

from __future__ import annotations

import codecs
from typing import Tuple, Union

from ._constants import CP1252_UNDEFINED, TEXT_ENCODING
from ._errors import ERR_TEXT_ENCODING, TableError

_ERRORS = "cctable-c1"


def _c1_passthrough(exc: UnicodeError) -> Tuple[Union[str, bytes], int]:
    if isinstance(exc, UnicodeDecodeError):
        byte = exc.object[exc.start]
        if byte in CP1252_UNDEFINED:
            return chr(byte), exc.start + 1
        return "\ufffd", exc.start + 1

    if isinstance(exc, UnicodeEncodeError):
        chunk = exc.object[exc.start:exc.end]
        if all(ord(ch) in CP1252_UNDEFINED for ch in chunk):
            return bytes(ord(ch) for ch in chunk), exc.end
    raise exc


codecs.register_error(_ERRORS, _c1_passthrough)


def encode_text(s: str) -> bytes:
    """Encode to Windows-1252, raising ERR_TEXT_ENCODING on the first bad char."""
    try:
        return s.encode(TEXT_ENCODING, errors=_ERRORS)
    except UnicodeEncodeError as e:
        raise TableError(
            ERR_TEXT_ENCODING,
            "cannot encode {!r} as Windows-1252".format(e.object[e.start:e.end]),
        ) from None


def decode_text(raw: bytes) -> str:
    return raw.decode(TEXT_ENCODING, errors=_ERRORS)
