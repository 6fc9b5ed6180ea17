"""Shared test fixtures for runestr."""
import unicodedata
from pathlib import Path

import pytest

from runestr.config import TextConfig
from runestr.unicode.tables import RangeTable, UnicodeTables


@pytest.fixture
def tmp_config(tmp_path: Path) -> TextConfig:
    """Config with the table cache enabled under a temporary home."""
    return TextConfig(home=tmp_path, cache_dir=tmp_path / "cache", table_cache=True)


@pytest.fixture
def small_tables() -> UnicodeTables:
    """Hand-written tables for the current Unicode version."""
    return UnicodeTables(
        unicode_version=unicodedata.unidata_version,
        categories={
            "Lu": RangeTable([(0x41, 0x5A), (0xC0, 0xD6)]),
            "Ll": RangeTable([(0x61, 0x7A)]),
            "Nd": RangeTable([(0x30, 0x39)]),
        },
        to_upper={0xE9: 0xC9},
        to_lower={0xC9: 0xE9},
    )
