"""Unicode codec and category/case tables."""
from runestr.unicode.codec import (
    decode_at,
    encode,
    is_digit,
    is_letter,
    is_space,
    rune_byte_width,
    to_lower,
    to_upper,
)

__all__ = [
    "decode_at",
    "encode",
    "is_digit",
    "is_letter",
    "is_space",
    "rune_byte_width",
    "to_lower",
    "to_upper",
]
