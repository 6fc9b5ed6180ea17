"""
UTF-8 Codec

Pure functions over code points and UTF-8 byte buffers:
- rune_byte_width(): sequence width announced by a lead byte
- decode_at(): decode the rune starting at a byte offset
- encode(): encode a code point into 1-4 bytes
- iter_runes() / count_runes() / rune_start(): hardened buffer walkers
- is_letter() / is_digit() / is_space(): General Category membership
- to_upper() / to_lower(): simple case mapping

Lead byte patterns:
- 0xxxxxxx: 1 byte (ASCII)
- 110xxxxx: 2 bytes
- 1110xxxx: 3 bytes
- 11110xxx: 4 bytes
- anything else (10xxxxxx continuation, 11111xxx): width 0

The walkers never advance by a zero width: an unrecognized lead byte or a
sequence running past the end of the buffer raises MalformedUtf8Error.
Well-formedness of continuation bytes is not validated.
"""
from __future__ import annotations

from typing import Iterator, Optional, Union

from runestr.constants import MAX_CODE_POINT
from runestr.internals.errors import MalformedUtf8Error, OutOfRangeError
from runestr.unicode.tables import get_tables

Buffer = Union[bytes, bytearray, memoryview]


def rune_byte_width(lead: int) -> int:
    """Return the byte width announced by a UTF-8 lead byte, 0 if invalid."""
    if lead < 0x80:
        return 1  # 0xxxxxxx
    if (lead & 0xE0) == 0xC0:
        return 2  # 110xxxxx
    if (lead & 0xF0) == 0xE0:
        return 3  # 1110xxxx
    if (lead & 0xF8) == 0xF0:
        return 4  # 11110xxx
    return 0


def is_continuation(byte: int) -> bool:
    return (byte & 0xC0) == 0x80


def _decode(data: Buffer, offset: int, width: int) -> int:
    b0 = data[offset]
    if width == 1:
        return b0
    if width == 2:
        return ((b0 & 0x1F) << 6) | (data[offset + 1] & 0x3F)
    if width == 3:
        return (((b0 & 0x0F) << 12)
                | ((data[offset + 1] & 0x3F) << 6)
                | (data[offset + 2] & 0x3F))
    return (((b0 & 0x07) << 18)
            | ((data[offset + 1] & 0x3F) << 12)
            | ((data[offset + 2] & 0x3F) << 6)
            | (data[offset + 3] & 0x3F))


def decode_at(data: Buffer, offset: int) -> int:
    """Decode the rune whose lead byte sits at `offset`.

    Args:
        data: UTF-8 bytes.
        offset: Byte offset of a lead byte.

    Returns:
        The decoded code point, or 0 when the byte at `offset` is not a
        valid lead byte.

    Raises:
        MalformedUtf8Error: TE3002 if the sequence runs past the buffer.
    """
    width = rune_byte_width(data[offset])
    if width == 0:
        return 0
    if offset + width > len(data):
        raise MalformedUtf8Error("TE3002", offset=offset, width=width,
                                 available=len(data) - offset)
    return _decode(data, offset, width)


def encode(code_point: int) -> bytes:
    """Encode a code point as UTF-8.

    Raises:
        OutOfRangeError: TE2004 if the code point is negative or above U+10FFFF.
    """
    if code_point < 0 or code_point > MAX_CODE_POINT:
        raise OutOfRangeError("TE2004", code_point=code_point)
    if code_point < 0x80:
        return bytes((code_point,))
    if code_point < 0x800:
        return bytes((0xC0 | (code_point >> 6),
                      0x80 | (code_point & 0x3F)))
    if code_point < 0x10000:
        return bytes((0xE0 | (code_point >> 12),
                      0x80 | ((code_point >> 6) & 0x3F),
                      0x80 | (code_point & 0x3F)))
    return bytes((0xF0 | (code_point >> 18),
                  0x80 | ((code_point >> 12) & 0x3F),
                  0x80 | ((code_point >> 6) & 0x3F),
                  0x80 | (code_point & 0x3F)))


def encoded_width(code_point: int) -> int:
    """Number of bytes encode() produces for a code point."""
    if code_point < 0 or code_point > MAX_CODE_POINT:
        raise OutOfRangeError("TE2004", code_point=code_point)
    if code_point < 0x80:
        return 1
    if code_point < 0x800:
        return 2
    if code_point < 0x10000:
        return 3
    return 4


def iter_runes(data: Buffer, start: int = 0, end: Optional[int] = None) -> Iterator[tuple[int, int]]:
    """Yield (byte offset, rune) for every rune in data[start:end].

    Raises:
        MalformedUtf8Error: TE3001 on an invalid lead byte, TE3002 when the
            last sequence is cut off by `end`.
    """
    if end is None:
        end = len(data)
    offset = start
    while offset < end:
        lead = data[offset]
        width = rune_byte_width(lead)
        if width == 0:
            raise MalformedUtf8Error("TE3001", byte=lead, offset=offset)
        if offset + width > end:
            raise MalformedUtf8Error("TE3002", offset=offset, width=width,
                                     available=end - offset)
        yield offset, _decode(data, offset, width)
        offset += width


def count_runes(data: Buffer, end: Optional[int] = None) -> int:
    """Count the runes in data[:end] using the hardened walk."""
    if end is None:
        end = len(data)
    count = 0
    offset = 0
    while offset < end:
        lead = data[offset]
        width = rune_byte_width(lead)
        if width == 0:
            raise MalformedUtf8Error("TE3001", byte=lead, offset=offset)
        if offset + width > end:
            raise MalformedUtf8Error("TE3002", offset=offset, width=width,
                                     available=end - offset)
        offset += width
        count += 1
    return count


def rune_start(data: Buffer, offset: int) -> int:
    """Return the lead byte offset of the rune that ends right before `offset`."""
    start = offset - 1
    while start > 0 and is_continuation(data[start]):
        start -= 1
    return start


# ==============================================================================
# Classification
# ==============================================================================

def is_letter(code_point: int) -> bool:
    """Lu, Ll, Lt, Lm or Lo."""
    if code_point < 0x80:
        return 0x41 <= code_point <= 0x5A or 0x61 <= code_point <= 0x7A
    return get_tables().in_categories(code_point, "Lu", "Ll", "Lt", "Lm", "Lo")


def is_digit(code_point: int) -> bool:
    """Nd (decimal digit) only; letter-like numbers such as U+2160 are not digits."""
    if code_point < 0x80:
        return 0x30 <= code_point <= 0x39
    return get_tables().in_categories(code_point, "Nd")


def is_space(code_point: int) -> bool:
    """Zs, Zl, Zp or Cc. Every control character counts as space."""
    if code_point < 0x80:
        return code_point <= 0x20 or code_point == 0x7F
    return get_tables().in_categories(code_point, "Zs", "Zl", "Zp", "Cc")


def to_upper(code_point: int) -> int:
    if 0x61 <= code_point <= 0x7A:
        return code_point - 32
    if code_point < 0x80:
        return code_point
    return get_tables().to_upper.get(code_point, code_point)


def to_lower(code_point: int) -> int:
    if 0x41 <= code_point <= 0x5A:
        return code_point + 32
    if code_point < 0x80:
        return code_point
    return get_tables().to_lower.get(code_point, code_point)
