"""runestr constants."""
from pathlib import Path

# Rune index sentinel: "no match" for searches, "to the end" for substring()
NPOS = -1

MAX_CODE_POINT = 0x10FFFF

RUNESTR_HOME = Path.home() / ".runestr"
CACHE_DIR_NAME = "cache"
CONFIG_NAME = "config.toml"
TABLE_EXT = ".rtab"

ENV_HOME = "RUNESTR_HOME"
ENV_NO_CACHE = "RUNESTR_NO_CACHE"
