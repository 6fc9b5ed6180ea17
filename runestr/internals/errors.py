# internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict


class Category(str, Enum):
    GENERAL   = "general"
    LIFECYCLE = "lifecycle"
    RANGE     = "range"
    DECODE    = "decode"
    TABLES    = "tables"
    CONFIG    = "config"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    text: str
    category: Category = Category.GENERAL
    doc: str = ""


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)


#
# --- Exceptions
#

class TextError(Exception):
    """Base exception for every error raised by runestr.

    Carries the catalog code and the format arguments so callers can branch
    on `code` instead of parsing the message.
    """

    def __init__(self, code: str, **kwargs):
        self.code = code
        self.kwargs = kwargs
        self.message = _fmt(code, **kwargs)
        super().__init__(f"{code}: {self.message}")


class InvalidStateError(TextError, RuntimeError):
    """Operation on a String whose buffer was transferred away."""


class OutOfRangeError(TextError, IndexError):
    """Rune index, substring bounds or code point outside the valid range."""


class MalformedUtf8Error(TextError, ValueError):
    """Byte sequence that cannot be walked rune by rune."""


class TableFormatError(TextError):
    """Unreadable Unicode table cache file."""


class ConfigError(TextError):
    """Invalid runestr configuration."""


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

def _fmt(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Registry population
#

# Lifecycle (TE1xxx)
_add(ErrorMessage("TE1001",
    "cannot call '{operation}' on a moved-from String",
    Category.LIFECYCLE, "The value's buffer was handed to another String by transfer()."))

# Range (TE2xxx)
_add(ErrorMessage("TE2001",
    "rune index {index} out of range for length {length}",
    Category.RANGE, "Index is outside [-length, length) before negative resolution."))

_add(ErrorMessage("TE2002",
    "substring start {start} out of range for length {length}",
    Category.RANGE, "Start must be between 0 and the rune count (inclusive)."))

_add(ErrorMessage("TE2003",
    "substring length {count} is negative",
    Category.RANGE, "Only NPOS (-1) may be used to mean 'to the end'."))

_add(ErrorMessage("TE2004",
    "code point {code_point:#x} is outside the Unicode range",
    Category.RANGE, "Code points must lie in U+0000..U+10FFFF."))

_add(ErrorMessage("TE2005",
    "byte length {length} out of range for a {available}-byte buffer",
    Category.RANGE, "An explicit length must not exceed the bytes supplied."))

# Decoding (TE3xxx)
_add(ErrorMessage("TE3001",
    "invalid UTF-8 lead byte {byte:#04x} at offset {offset}",
    Category.DECODE, "A continuation byte or an impossible bit pattern where a rune should start."))

_add(ErrorMessage("TE3002",
    "truncated UTF-8 sequence at offset {offset}: need {width} bytes, {available} available",
    Category.DECODE, "The lead byte announces more bytes than the buffer holds."))

# Table cache (TE4xxx)
_add(ErrorMessage("TE4001",
    "'{path}' is not a Unicode table file (bad magic)",
    Category.TABLES))

_add(ErrorMessage("TE4002",
    "'{path}' uses table format version {version}, supported is {supported}",
    Category.TABLES))

_add(ErrorMessage("TE4003",
    "'{path}' is truncated: expected {expected} bytes, got {actual}",
    Category.TABLES))

_add(ErrorMessage("TE4004",
    "'{path}' has an undecodable payload: {reason}",
    Category.TABLES))

# Configuration (TE5xxx)
_add(ErrorMessage("TE5001",
    "cannot parse '{path}': {reason}",
    Category.CONFIG))

_add(ErrorMessage("TE5002",
    "'{key}' in '{path}' must be {expected}, got {actual}",
    Category.CONFIG))
