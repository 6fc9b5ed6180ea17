"""
String Value

Immutable, rune-indexed UTF-8 string. A String owns one NUL-terminated byte
buffer (the terminator is never counted in the byte length) together with
its precomputed rune count. Every transform returns a new String.

Indexing is by rune, not byte. at() resolves negative indexes Python-style;
find() with a negative start searches backward from the resolved index.

Lifecycle: transfer() hands the buffer to a new String and leaves the source
moved-from. Every public operation on a moved-from value, and every moved-from
String passed as an operand, raises InvalidStateError. raw_pointer() is the
exception and returns None.
"""
from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from runestr.constants import NPOS
from runestr.internals.errors import InvalidStateError, OutOfRangeError
from runestr.search import find_all_runes, find_bytes, find_runes
from runestr.unicode import codec

BytesLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class _Buffer:
    data: bytes  # size + 1 bytes, NUL-terminated
    size: int
    runes: int

    @property
    def payload(self) -> bytes:
        return self.data[:self.size]

    @classmethod
    def from_payload(cls, payload: bytes, runes: Optional[int] = None) -> _Buffer:
        if not payload:
            return _EMPTY
        if runes is None:
            runes = codec.count_runes(payload)
        return cls(payload + b"\0", len(payload), runes)


_EMPTY = _Buffer(b"\0", 0, 0)


def _clone(buf: _Buffer) -> _Buffer:
    # Fresh bytes object: no two Strings share a buffer
    if buf.size == 0:
        return _EMPTY
    return _Buffer(bytes(bytearray(buf.data)), buf.size, buf.runes)


def _guarded(method):
    """Raise InvalidStateError when the receiver has been moved from."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        if self._buffer is None:
            raise InvalidStateError("TE1001", operation=method.__name__)
        return method(self, *args, **kwargs)
    return wrapper


def _operand(value: Union[String, str], operation: str) -> _Buffer:
    """Buffer of a String or str argument."""
    if isinstance(value, String):
        if value._buffer is None:
            raise InvalidStateError("TE1001", operation=operation)
        return value._buffer
    if isinstance(value, str):
        return _Buffer.from_payload(value.encode("utf-8", "surrogatepass"), len(value))
    raise TypeError(f"expected String or str, got {type(value).__name__}")


def _runes_of(buf: _Buffer) -> List[int]:
    return [rune for _, rune in codec.iter_runes(buf.data, 0, buf.size)]


def _runes_with_offsets(buf: _Buffer) -> Tuple[List[int], List[int]]:
    """Runes plus the byte offset of each one; offsets has a trailing `size` sentinel."""
    runes: List[int] = []
    offsets: List[int] = []
    for offset, rune in codec.iter_runes(buf.data, 0, buf.size):
        offsets.append(offset)
        runes.append(rune)
    offsets.append(buf.size)
    return runes, offsets


def _rune_boundaries(buf: _Buffer) -> Dict[int, int]:
    """Byte offset -> rune index for every rune start, plus `size` -> rune count."""
    bounds = {offset: index for index, (offset, _) in enumerate(codec.iter_runes(buf.data, 0, buf.size))}
    bounds[buf.size] = buf.runes
    return bounds


def _find_aligned(buf: _Buffer, bounds: Dict[int, int], pattern: bytes, start: int) -> int:
    """Byte offset of the first `pattern` at or after `start` that begins and
    ends on rune boundaries, or NPOS."""
    found = find_bytes(buf.data, pattern, start, buf.size)
    while found != NPOS:
        if found in bounds and found + len(pattern) in bounds:
            return found
        found = find_bytes(buf.data, pattern, found + 1, buf.size)
    return NPOS


class String:
    """Immutable UTF-8 string indexed by rune.

    String()                    empty
    String("text")              UTF-8 encoding of a Python str
    String(b"bytes", length)    first `length` bytes (all when omitted)
    String(other)               copy of another String
    """

    __slots__ = ("_buffer",)

    def __init__(self, value: Union[String, str, BytesLike, None] = None,
                 length: Optional[int] = None) -> None:
        self._buffer: Optional[_Buffer]
        if length is not None and not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError("length is only accepted with a bytes-like value")

        if value is None:
            self._buffer = _EMPTY
        elif isinstance(value, String):
            self._buffer = _clone(_operand(value, "copy"))
        elif isinstance(value, str):
            self._buffer = _operand(value, "__init__")
        elif isinstance(value, (bytes, bytearray, memoryview)):
            data = bytes(value)
            if length is not None:
                if length < 0 or length > len(data):
                    raise OutOfRangeError("TE2005", length=length, available=len(data))
                data = data[:length]
            self._buffer = _Buffer.from_payload(data)
        else:
            raise TypeError(f"cannot build a String from {type(value).__name__}")

    @classmethod
    def _wrap(cls, buf: _Buffer) -> String:
        obj = cls.__new__(cls)
        obj._buffer = buf
        return obj

    # ==========================================================================
    # Construction
    # ==========================================================================

    @classmethod
    def from_bytes(cls, data: BytesLike, length: Optional[int] = None) -> String:
        """Build from raw UTF-8 bytes.

        Raises:
            OutOfRangeError: TE2005 if `length` exceeds the data.
            MalformedUtf8Error: if the bytes cannot be walked rune by rune.
        """
        return cls(data, length)

    @classmethod
    def from_c_string(cls, data: BytesLike) -> String:
        """Build from a NUL-terminated byte sequence; bytes after the first NUL are ignored."""
        data = bytes(data)
        end = data.find(b"\0")
        return cls(data if end == -1 else data[:end])

    @classmethod
    def from_rune(cls, code_point: int) -> String:
        return cls._wrap(_Buffer.from_payload(codec.encode(code_point), 1))

    @classmethod
    def from_runes(cls, runes: Iterable[int]) -> String:
        parts = [codec.encode(r) for r in runes]
        return cls._wrap(_Buffer.from_payload(b"".join(parts), len(parts)))

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    @property
    def is_moved(self) -> bool:
        return self._buffer is None

    @_guarded
    def copy(self) -> String:
        return String._wrap(_clone(self._buffer))

    def __copy__(self) -> String:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> String:
        return self.copy()

    @_guarded
    def transfer(self) -> String:
        """Move the buffer into a new String; this value becomes moved-from."""
        buf = self._buffer
        self._buffer = None
        return String._wrap(buf)

    def assign(self, other: Union[String, str]) -> String:
        """Replace this value's content with a copy of `other`.

        Also valid on a moved-from value, which becomes usable again.
        """
        self._buffer = _clone(_operand(other, "assign"))
        return self

    # ==========================================================================
    # Queries
    # ==========================================================================

    @_guarded
    def length(self) -> int:
        """Number of runes (not bytes)."""
        return self._buffer.runes

    __len__ = length

    @_guarded
    def __bool__(self) -> bool:
        return self._buffer.size > 0

    def _offset_of(self, index: int) -> int:
        """Byte offset of rune `index` (0 <= index <= rune count)."""
        buf = self._buffer
        if index == buf.runes:
            return buf.size
        offset = 0
        for _ in range(index):
            offset += codec.rune_byte_width(buf.data[offset])
        return offset

    @_guarded
    def at(self, index: int) -> int:
        """Rune at `index`; negative indexes count from the end.

        Raises:
            OutOfRangeError: TE2001 if the resolved index is outside [0, length()).
        """
        runes = self._buffer.runes
        resolved = index + runes if index < 0 else index
        if resolved < 0 or resolved >= runes:
            raise OutOfRangeError("TE2001", index=index, length=runes)
        return codec.decode_at(self._buffer.data, self._offset_of(resolved))

    def __getitem__(self, index: int) -> int:
        if not isinstance(index, int):
            raise TypeError(f"String indices must be integers, not {type(index).__name__}")
        return self.at(index)

    @_guarded
    def __iter__(self) -> Iterator[int]:
        buf = self._buffer
        return (rune for _, rune in codec.iter_runes(buf.data, 0, buf.size))

    @_guarded
    def runes(self) -> List[int]:
        return _runes_of(self._buffer)

    @_guarded
    def find(self, substring: Union[String, str], start: int = 0) -> int:
        """Rune index of `substring`, or NPOS.

        A non-negative `start` returns the first match at or after it. A
        negative `start` is resolved as length() + start and returns the last
        match starting at or before that index.
        """
        needle = _operand(substring, "find")
        return find_runes(_runes_of(self._buffer), _runes_of(needle), start)

    @_guarded
    def find_all(self, substring: Union[String, str]) -> List[int]:
        """Rune indexes of every match, overlapping matches included."""
        needle = _operand(substring, "find_all")
        return find_all_runes(_runes_of(self._buffer), _runes_of(needle))

    @_guarded
    def contains(self, substring: Union[String, str]) -> bool:
        """True if `substring` occurs byte-exact, starting and ending on rune boundaries."""
        buf = self._buffer
        needle = _operand(substring, "contains")
        return _find_aligned(buf, _rune_boundaries(buf), needle.payload, 0) != NPOS

    __contains__ = contains

    def _prefix_runes(self, prefix: _Buffer) -> Optional[int]:
        """Runes covered by `prefix` if the value starts with it and the match
        ends on a rune boundary, else None."""
        buf = self._buffer
        if not buf.data.startswith(prefix.payload, 0, buf.size):
            return None
        if buf.runes == buf.size:
            return prefix.size
        return _rune_boundaries(buf).get(prefix.size)

    def _suffix_runes(self, suffix: _Buffer) -> Optional[int]:
        """Runes left in front of `suffix` if the value ends with it and the
        match starts on a rune boundary, else None."""
        buf = self._buffer
        if not buf.data.endswith(suffix.payload, 0, buf.size):
            return None
        cut = buf.size - suffix.size
        if buf.runes == buf.size:
            return cut
        return _rune_boundaries(buf).get(cut)

    @_guarded
    def starts_with(self, prefix: Union[String, str]) -> bool:
        return self._prefix_runes(_operand(prefix, "starts_with")) is not None

    @_guarded
    def ends_with(self, suffix: Union[String, str]) -> bool:
        return self._suffix_runes(_operand(suffix, "ends_with")) is not None

    # ==========================================================================
    # Transforms
    # ==========================================================================

    def _leading_space(self) -> Tuple[int, int]:
        """(byte offset, rune count) of the leading whitespace run."""
        buf = self._buffer
        offset = 0
        skipped = 0
        while offset < buf.size:
            if not codec.is_space(codec.decode_at(buf.data, offset)):
                break
            offset += codec.rune_byte_width(buf.data[offset])
            skipped += 1
        return offset, skipped

    def _trailing_space(self, floor: int = 0) -> Tuple[int, int]:
        """(byte offset, rune count) where the trailing whitespace run begins."""
        buf = self._buffer
        end = buf.size
        skipped = 0
        while end > floor:
            start = codec.rune_start(buf.data, end)
            if not codec.is_space(codec.decode_at(buf.data, start)):
                break
            end = start
            skipped += 1
        return end, skipped

    def _slice(self, start: int, end: int, runes: int) -> String:
        return String._wrap(_Buffer.from_payload(self._buffer.data[start:end], runes))

    @_guarded
    def trim(self) -> String:
        start, leading = self._leading_space()
        end, trailing = self._trailing_space(start)
        return self._slice(start, end, self._buffer.runes - leading - trailing)

    @_guarded
    def trim_start(self) -> String:
        start, leading = self._leading_space()
        return self._slice(start, self._buffer.size, self._buffer.runes - leading)

    @_guarded
    def trim_end(self) -> String:
        end, trailing = self._trailing_space()
        return self._slice(0, end, self._buffer.runes - trailing)

    @_guarded
    def strip_prefix(self, prefix: Union[String, str]) -> String:
        """Drop `prefix` if the value starts with it (byte-exact, ending on a rune
        boundary), else return a copy."""
        buf = self._buffer
        p = _operand(prefix, "strip_prefix")
        skipped = self._prefix_runes(p)
        if skipped is None:
            return self.copy()
        return self._slice(p.size, buf.size, buf.runes - skipped)

    @_guarded
    def strip_suffix(self, suffix: Union[String, str]) -> String:
        """Drop `suffix` if the value ends with it (byte-exact, starting on a rune
        boundary), else return a copy."""
        buf = self._buffer
        s = _operand(suffix, "strip_suffix")
        kept = self._suffix_runes(s)
        if kept is None:
            return self.copy()
        return self._slice(0, buf.size - s.size, kept)

    @_guarded
    def substring(self, start: int, length: int = NPOS) -> String:
        """Up to `length` runes starting at rune `start` (NPOS: to the end).

        Raises:
            OutOfRangeError: TE2002 if `start` is negative or past length(),
                TE2003 if `length` is negative but not NPOS.
        """
        buf = self._buffer
        if start < 0 or start > buf.runes:
            raise OutOfRangeError("TE2002", start=start, length=buf.runes)
        if length == NPOS:
            count = buf.runes - start
        elif length < 0:
            raise OutOfRangeError("TE2003", count=length)
        else:
            count = min(length, buf.runes - start)

        first = self._offset_of(start)
        end = first
        for _ in range(count):
            end += codec.rune_byte_width(buf.data[end])

        runes = [rune for _, rune in codec.iter_runes(buf.data, first, end)]
        out = bytearray(sum(codec.encoded_width(r) for r in runes))
        pos = 0
        for rune in runes:
            encoded = codec.encode(rune)
            out[pos:pos + len(encoded)] = encoded
            pos += len(encoded)
        return String._wrap(_Buffer.from_payload(bytes(out), count))

    @_guarded
    def replace(self, old: Union[String, str], new: Union[String, str]) -> String:
        """Replace every non-overlapping `old`, left to right.

        An empty `old` returns an unchanged copy.
        """
        buf = self._buffer
        o = _operand(old, "replace")
        n = _operand(new, "replace")
        if o.size == 0:
            return self.copy()

        runes, offsets = _runes_with_offsets(buf)
        needle = _runes_of(o)
        replacement = n.payload

        out = bytearray()
        matches = 0
        resume = 0
        found = find_runes(runes, needle, 0)
        while found != NPOS:
            out += buf.data[offsets[resume]:offsets[found]]
            out += replacement
            matches += 1
            resume = found + o.runes
            found = find_runes(runes, needle, resume)
        out += buf.data[offsets[resume]:buf.size]

        total = buf.runes + matches * (n.runes - o.runes)
        return String._wrap(_Buffer.from_payload(bytes(out), total))

    @_guarded
    def split(self, delimiter: Union[String, str]) -> List[String]:
        """Split on a byte-exact delimiter. A match only counts when it starts
        and ends on rune boundaries.

        Adjacent, leading and trailing delimiters produce empty segments, so
        joining the result with the delimiter gives back the original value.
        An empty delimiter returns a single copy.
        """
        buf = self._buffer
        d = _operand(delimiter, "split")
        if d.size == 0:
            return [self.copy()]

        bounds = _rune_boundaries(buf)
        parts: List[String] = []
        current = 0
        while True:
            found = _find_aligned(buf, bounds, d.payload, current)
            end = buf.size if found == NPOS else found
            parts.append(self._slice(current, end, bounds[end] - bounds[current]))
            if found == NPOS:
                return parts
            current = found + d.size

    @_guarded
    def lines(self) -> List[String]:
        """Split on '\\n', dropping a '\\r' before each break and the empty
        segment after a final newline."""
        if self._buffer.size == 0:
            return []
        parts = self.split("\n")
        if parts[-1]._buffer.size == 0:
            parts.pop()
        return [p.strip_suffix("\r") for p in parts]

    @_guarded
    def upper(self) -> String:
        return String.from_runes(codec.to_upper(r) for r in _runes_of(self._buffer))

    @_guarded
    def lower(self) -> String:
        return String.from_runes(codec.to_lower(r) for r in _runes_of(self._buffer))

    # ==========================================================================
    # Operators
    # ==========================================================================

    @_guarded
    def __add__(self, other: Union[String, str]) -> String:
        if not isinstance(other, (String, str)):
            return NotImplemented
        a = self._buffer
        b = _operand(other, "__add__")
        if a.size + b.size == 0:
            return String()
        return String._wrap(_Buffer(a.payload + b.data, a.size + b.size, a.runes + b.runes))

    @_guarded
    def __radd__(self, other: str) -> String:
        if not isinstance(other, str):
            return NotImplemented
        return String(other) + self

    @_guarded
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, String):
            return NotImplemented
        b = _operand(other, "__eq__")
        return self._buffer.size == b.size and self._buffer.data == b.data

    @_guarded
    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    @_guarded
    def __hash__(self) -> int:
        return hash(self._buffer.data)

    # ==========================================================================
    # Byte access and conversion
    # ==========================================================================

    def raw_pointer(self) -> Optional[memoryview]:
        """Read-only view of the NUL-terminated buffer, None if empty or moved-from."""
        if self._buffer is None or self._buffer.size == 0:
            return None
        return memoryview(self._buffer.data)

    @_guarded
    def raw_byte_length(self) -> int:
        return self._buffer.size

    @_guarded
    def to_bytes(self) -> bytes:
        return self._buffer.payload

    @_guarded
    def __str__(self) -> str:
        return "".join(map(chr, _runes_of(self._buffer)))

    def __repr__(self) -> str:
        if self._buffer is None:
            return "String(<moved>)"
        return f"String({str(self)!r})"
