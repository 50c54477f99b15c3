"""Just enough canonical CBOR (RFC 8949 §4.2.1) to serialize native scripts.

Only unsigned integers, byte strings and definite-length arrays are
supported, which is everything a native script is made of.
"""
import io
import struct
from typing import Any

MAJOR_UINT = 0
MAJOR_BYTES = 2
MAJOR_ARRAY = 4


def header_encode(major: int, i: int, w) -> None:
    """Write the shortest initial byte(s) for `major` with argument `i`."""
    if i < 0:
        raise ValueError("CBOR argument must be non-negative, got {}".format(i))
    mt = major << 5
    if i < 24:
        w.write(struct.pack("!B", mt | i))
    elif i <= 0xFF:
        w.write(struct.pack("!BB", mt | 24, i))
    elif i <= 0xFFFF:
        w.write(struct.pack("!BH", mt | 25, i))
    elif i <= 0xFFFFFFFF:
        w.write(struct.pack("!BL", mt | 26, i))
    elif i <= 0xFFFFFFFFFFFFFFFF:
        w.write(struct.pack("!BQ", mt | 27, i))
    else:
        raise ValueError("CBOR argument {} does not fit in 64 bits".format(i))


def value_encode(v: Any, w) -> None:
    if isinstance(v, bool):
        # bool is an int subclass, and would silently encode as 0/1
        raise TypeError("Cannot encode bool as a native script item")
    if isinstance(v, int):
        header_encode(MAJOR_UINT, v, w)
    elif isinstance(v, (bytes, bytearray)):
        header_encode(MAJOR_BYTES, len(v), w)
        w.write(bytes(v))
    elif isinstance(v, (list, tuple)):
        header_encode(MAJOR_ARRAY, len(v), w)
        for item in v:
            value_encode(item, w)
    else:
        raise TypeError("Cannot CBOR-encode {}".format(type(v).__name__))


def dumps(v: Any) -> bytes:
    w = io.BytesIO()
    value_encode(v, w)
    return w.getvalue()
