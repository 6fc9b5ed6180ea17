"""
Substring Search

Search over rune sequences (lists of code points):
- find_runes(): first match at or after a start index, or, for a negative
  start, last match at or before the resolved index
- find_all_runes(): every (possibly overlapping) match, KMP scan
- prefix_table(): KMP longest proper prefix/suffix table
- find_bytes(): byte-level scan used by String.split() and String.contains()

find_runes() filters candidate windows with a Rabin-Karp rolling hash and
confirms every hash hit rune by rune, so results are identical to a plain
linear scan in the same direction.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from runestr.constants import NPOS

# Hash base above the largest code point; Mersenne prime modulus
_BASE = 0x110003
_MOD = (1 << 61) - 1


def _hash(runes: Sequence[int]) -> int:
    h = 0
    for r in runes:
        h = (h * _BASE + r) % _MOD
    return h


def _scan_forward(haystack: List[int], needle: List[int], first: int) -> int:
    m = len(needle)
    last = len(haystack) - m
    target = _hash(needle)
    high = pow(_BASE, m - 1, _MOD)
    window = _hash(haystack[first:first + m])

    i = first
    while True:
        if window == target and haystack[i:i + m] == needle:
            return i
        if i == last:
            return NPOS
        # Drop haystack[i] (highest order), shift in haystack[i + m]
        window = ((window - haystack[i] * high) * _BASE + haystack[i + m]) % _MOD
        i += 1


def _scan_backward(haystack: List[int], needle: List[int], first: int) -> int:
    # Reversed weighting: the leftmost rune is the lowest order term, so the
    # window can roll one position to the left without a modular inverse.
    m = len(needle)
    target = _hash(reversed(needle))
    high = pow(_BASE, m - 1, _MOD)
    window = _hash(reversed(haystack[first:first + m]))

    i = first
    while True:
        if window == target and haystack[i:i + m] == needle:
            return i
        if i == 0:
            return NPOS
        # Drop haystack[i + m - 1] (highest order), shift in haystack[i - 1]
        window = ((window - haystack[i + m - 1] * high) * _BASE + haystack[i - 1]) % _MOD
        i -= 1


def find_runes(haystack: Sequence[int], needle: Sequence[int], start: int = 0) -> int:
    """Find `needle` in `haystack`.

    Args:
        haystack: Runes to search.
        needle: Runes to look for.
        start: Non-negative: scan forward from this index and return the
            first match. Negative: resolve as len(haystack) + start and scan
            backward, returning the last match starting at or before it.

    Returns:
        Rune index of the match, or NPOS. An empty needle matches at the
        (resolved) start when it lies within 0..len(haystack).
    """
    if not isinstance(haystack, list):
        haystack = list(haystack)
    if not isinstance(needle, list):
        needle = list(needle)
    n = len(haystack)
    m = len(needle)

    if start < 0:
        resolved = n + start
        if resolved < 0:
            return NPOS
        if m == 0:
            return resolved
        first = min(resolved, n - m)
        if first < 0:
            return NPOS
        return _scan_backward(haystack, needle, first)

    if start > n:
        return NPOS
    if m == 0:
        return start
    if start > n - m:
        return NPOS
    return _scan_forward(haystack, needle, start)


def prefix_table(needle: Sequence[int]) -> List[int]:
    """KMP table: table[i] is the length of the longest proper prefix of
    needle[:i + 1] that is also its suffix."""
    table = [0] * len(needle)
    k = 0
    for i in range(1, len(needle)):
        while k > 0 and needle[i] != needle[k]:
            k = table[k - 1]
        if needle[i] == needle[k]:
            k += 1
        table[i] = k
    return table


def find_all_runes(haystack: Sequence[int], needle: Sequence[int]) -> List[int]:
    """Start indexes of every match of `needle`, overlapping ones included.

    An empty needle matches at every boundary 0..len(haystack).
    """
    m = len(needle)
    if m == 0:
        return list(range(len(haystack) + 1))

    table = prefix_table(needle)
    matches: List[int] = []
    k = 0
    for i, rune in enumerate(haystack):
        while k > 0 and rune != needle[k]:
            k = table[k - 1]
        if rune == needle[k]:
            k += 1
        if k == m:
            matches.append(i - m + 1)
            k = table[k - 1]
    return matches


def find_bytes(data: bytes, pattern: bytes, start: int = 0, end: Optional[int] = None) -> int:
    """Byte offset of the first `pattern` in data[start:end], or NPOS."""
    if end is None:
        end = len(data)
    return data.find(pattern, start, end)
