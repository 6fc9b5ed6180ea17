"""
Unicode Range and Case Tables

Sorted inclusive (start, end) interval tables per General Category plus the
simple upper/lower case maps. Tables are derived from the interpreter's
unicodedata database. The .rtab cache (see table_format.py) is opt-in:
load_tables() reads or writes it and install_tables() hands the result to
the codec. Without that, get_tables() builds in memory and does no I/O.

Tables are read-only once loaded.
"""
from __future__ import annotations

import logging
import time
import unicodedata
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional

from runestr.config import TextConfig
from runestr.constants import MAX_CODE_POINT
from runestr.internals.errors import TableFormatError

logger = logging.getLogger(__name__)

PLANE_SIZE = 0x10000
PLANE_COUNT = 17

# Categories that can carry a simple case mapping
_CASED_CATEGORIES = frozenset({"Lu", "Ll", "Lt", "Lm", "Lo", "Mn", "Nl", "So"})


class UnicodeRange(NamedTuple):
    start: int
    end: int


class RangeTable:
    """Sorted, non-overlapping inclusive code point intervals."""

    __slots__ = ("ranges", "_starts")

    def __init__(self, ranges: Iterable[Iterable[int]] = ()) -> None:
        self.ranges = tuple(sorted(UnicodeRange(*r) for r in ranges))
        self._starts = [r.start for r in self.ranges]

    def contains(self, code_point: int) -> bool:
        i = bisect_right(self._starts, code_point) - 1
        return i >= 0 and code_point <= self.ranges[i].end

    __contains__ = contains

    def __len__(self) -> int:
        return len(self.ranges)

    def __iter__(self):
        return iter(self.ranges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RangeTable):
            return NotImplemented
        return self.ranges == other.ranges

    def __repr__(self) -> str:
        return f"RangeTable({len(self.ranges)} ranges)"


@dataclass
class UnicodeTables:
    unicode_version: str
    categories: Dict[str, RangeTable] = field(default_factory=dict)
    to_upper: Dict[int, int] = field(default_factory=dict)
    to_lower: Dict[int, int] = field(default_factory=dict)

    def in_categories(self, code_point: int, *names: str) -> bool:
        for name in names:
            table = self.categories.get(name)
            if table is not None and table.contains(code_point):
                return True
        return False

    def to_payload(self) -> dict:
        """Plain-data form used by the on-disk format."""
        return {
            "unicode_version": self.unicode_version,
            "categories": {
                name: [list(r) for r in table.ranges]
                for name, table in sorted(self.categories.items())
            },
            "to_upper": sorted([k, v] for k, v in self.to_upper.items()),
            "to_lower": sorted([k, v] for k, v in self.to_lower.items()),
        }

    @classmethod
    def from_payload(cls, payload: dict) -> UnicodeTables:
        return cls(
            unicode_version=payload["unicode_version"],
            categories={name: RangeTable(ranges)
                        for name, ranges in payload["categories"].items()},
            to_upper={k: v for k, v in payload["to_upper"]},
            to_lower={k: v for k, v in payload["to_lower"]},
        )


def build_tables(progress: Optional[Callable[[int], None]] = None) -> UnicodeTables:
    """Sweep U+0000..U+10FFFF through unicodedata and build every table.

    Args:
        progress: Called with the number of code points processed after each
            plane (17 calls in total).

    Returns:
        Fresh tables for unicodedata.unidata_version.
    """
    started = time.perf_counter()
    ranges: Dict[str, List[UnicodeRange]] = {}
    to_upper: Dict[int, int] = {}
    to_lower: Dict[int, int] = {}

    current: Optional[str] = None
    run_start = 0
    for plane in range(PLANE_COUNT):
        base = plane * PLANE_SIZE
        for cp in range(base, base + PLANE_SIZE):
            ch = chr(cp)
            category = unicodedata.category(ch)
            if category != current:
                if current is not None:
                    ranges.setdefault(current, []).append(UnicodeRange(run_start, cp - 1))
                current = category
                run_start = cp

            if category in _CASED_CATEGORIES:
                upper = ch.upper()
                if len(upper) == 1 and upper != ch:
                    to_upper[cp] = ord(upper)
                lower = ch.lower()
                if len(lower) == 1 and lower != ch:
                    to_lower[cp] = ord(lower)
        if progress is not None:
            progress(PLANE_SIZE)

    ranges.setdefault(current, []).append(UnicodeRange(run_start, MAX_CODE_POINT))

    tables = UnicodeTables(
        unicode_version=unicodedata.unidata_version,
        categories={name: RangeTable(rs) for name, rs in ranges.items()},
        to_upper=to_upper,
        to_lower=to_lower,
    )
    logger.debug(
        "Built Unicode %s tables: %d categories, %d ranges, %d/%d case pairs in %.2fs",
        tables.unicode_version,
        len(tables.categories),
        sum(len(t) for t in tables.categories.values()),
        len(to_upper),
        len(to_lower),
        time.perf_counter() - started,
    )
    return tables


def load_tables(config: TextConfig) -> UnicodeTables:
    """Load tables from the configured cache, building (and caching) on a miss."""
    from runestr.unicode.table_format import TableFormat

    version = unicodedata.unidata_version
    if not config.table_cache:
        return build_tables()

    path = config.table_cache_path(version)
    if path.is_file():
        try:
            tables = TableFormat.read(path)
        except (TableFormatError, OSError) as e:
            logger.warning("Ignoring unreadable table cache %s: %s", path, e)
        else:
            if tables.unicode_version == version:
                logger.debug("Loaded Unicode %s tables from %s", version, path)
                return tables
            logger.warning("Table cache %s holds Unicode %s, expected %s; rebuilding",
                           path, tables.unicode_version, version)

    tables = build_tables()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        TableFormat.write(path, tables)
    except OSError as e:
        logger.warning("Could not write table cache %s: %s", path, e)
    else:
        logger.debug("Wrote table cache %s", path)
    return tables


_active: Optional[UnicodeTables] = None


def get_tables() -> UnicodeTables:
    """Process-wide tables used by the codec.

    Built in memory from unicodedata on first use. Never reads configuration
    or touches the disk; a cached copy is only used once install_tables()
    has been handed one.
    """
    global _active
    if _active is None:
        _active = build_tables()
    return _active


def install_tables(tables: UnicodeTables) -> None:
    """Replace the process-wide tables, e.g. with load_tables(load_config())."""
    global _active
    _active = tables
