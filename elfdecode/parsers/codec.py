"""
Integer Codec
==============

The two byte-order conventions the ELF32 little-endian layout uses:

* :func:`decode_magic` reads the four identification bytes big-endian, so
  ``7F 45 4C 46`` compares equal to the canonical ``0x7F454C46``.
* :func:`decode_le` reads every other multi-byte field little-endian.

The magic field is the only one whose first byte is most significant.
"""

from __future__ import annotations

import struct

_LE_FORMATS: dict[int, str] = {
    2: "<H",
    4: "<I",
}


def decode_magic(data: bytes) -> int:
    """Interpret four bytes as a big-endian ``u32``."""
    if len(data) != 4:
        raise ValueError(f"magic is 4 bytes, got {len(data)}")
    return struct.unpack(">I", data)[0]


def decode_le(data: bytes, width: int) -> int:
    """Interpret *data* as a little-endian unsigned integer of *width* bytes.

    Args:
        data: Exactly *width* raw bytes.
        width: 2 (``u16``) or 4 (``u32``).
    """
    try:
        fmt = _LE_FORMATS[width]
    except KeyError:
        raise ValueError(f"unsupported integer width {width}") from None
    if len(data) != width:
        raise ValueError(f"expected {width} bytes, got {len(data)}")
    return struct.unpack(fmt, data)[0]


def encode_le(value: int, width: int) -> bytes:
    """Inverse of :func:`decode_le`."""
    try:
        fmt = _LE_FORMATS[width]
    except KeyError:
        raise ValueError(f"unsupported integer width {width}") from None
    try:
        return struct.pack(fmt, value)
    except struct.error as exc:
        raise ValueError(f"{value} does not fit in {width} bytes") from exc
