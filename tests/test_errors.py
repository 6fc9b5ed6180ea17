"""Tests for the error catalog."""

import pytest

from runestr.internals.errors import (
    ERR,
    REGISTRY,
    Category,
    ConfigError,
    InvalidStateError,
    MalformedUtf8Error,
    OutOfRangeError,
    TableFormatError,
    TextError,
)


class TestCatalog:
    def test_codes_are_grouped_by_category(self):
        prefixes = {
            "TE1": Category.LIFECYCLE,
            "TE2": Category.RANGE,
            "TE3": Category.DECODE,
            "TE4": Category.TABLES,
            "TE5": Category.CONFIG,
        }
        for code, msg in REGISTRY.items():
            assert msg.code == code
            assert msg.category == prefixes[code[:3]]

    def test_attribute_and_item_lookup(self):
        assert ERR.TE1001 is REGISTRY["TE1001"]
        assert ERR["TE2001"].category == Category.RANGE
        with pytest.raises(AttributeError):
            ERR.TE9999


class TestTextError:
    def test_message_is_formatted(self):
        err = OutOfRangeError("TE2001", index=9, length=3)
        assert err.code == "TE2001"
        assert err.kwargs == {"index": 9, "length": 3}
        assert str(err) == "TE2001: rune index 9 out of range for length 3"

    def test_hex_formatting(self):
        assert "0x110000" in str(OutOfRangeError("TE2004", code_point=0x110000))
        assert "0x80" in str(MalformedUtf8Error("TE3001", byte=0x80, offset=2))

    def test_missing_argument(self):
        with pytest.raises(KeyError, match="missing text key 'length'"):
            OutOfRangeError("TE2001", index=1)

    def test_unknown_code(self):
        with pytest.raises(KeyError):
            TextError("TE0000")

    @pytest.mark.parametrize("cls, builtin", [
        (InvalidStateError, RuntimeError),
        (OutOfRangeError, IndexError),
        (MalformedUtf8Error, ValueError),
        (TableFormatError, TextError),
        (ConfigError, TextError),
    ])
    def test_hierarchy(self, cls, builtin):
        assert issubclass(cls, TextError)
        assert issubclass(cls, builtin)
