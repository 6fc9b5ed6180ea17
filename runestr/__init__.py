"""runestr - immutable rune-indexed UTF-8 strings."""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("runestr")
    __dev__ = False
except PackageNotFoundError:
    # Development mode - read from pyproject.toml
    import tomllib
    from pathlib import Path
    try:
        pyproject = Path(__file__).parent.parent / "pyproject.toml"
        with open(pyproject, "rb") as f:
            __version__ = tomllib.load(f).get("project", {}).get("version", "unknown")
    except (OSError, tomllib.TOMLDecodeError):
        __version__ = "unknown"
    __dev__ = True

from runestr.constants import NPOS
from runestr.internals.errors import (
    ConfigError,
    InvalidStateError,
    MalformedUtf8Error,
    OutOfRangeError,
    TableFormatError,
    TextError,
)
from runestr.string import String

__all__ = [
    "NPOS",
    "ConfigError",
    "InvalidStateError",
    "MalformedUtf8Error",
    "OutOfRangeError",
    "String",
    "TableFormatError",
    "TextError",
]
