"""Tests for rune and byte substring search."""

import random

import pytest

from runestr.constants import NPOS
from runestr.search import find_all_runes, find_bytes, find_runes, prefix_table


def runes(text: str) -> list[int]:
    return [ord(c) for c in text]


def naive_forward(haystack, needle, start):
    for i in range(start, len(haystack) - len(needle) + 1):
        if haystack[i:i + len(needle)] == needle:
            return i
    return NPOS


def naive_backward(haystack, needle, resolved):
    for i in range(min(resolved, len(haystack) - len(needle)), -1, -1):
        if haystack[i:i + len(needle)] == needle:
            return i
    return NPOS


class TestFindForward:
    def test_first_match(self):
        assert find_runes(runes("Hello, World!"), runes("World")) == 7

    def test_case_sensitive(self):
        assert find_runes(runes("Hello, World!"), runes("world")) == NPOS

    def test_start_index(self):
        h = runes("/usr/bin/bash")
        assert find_runes(h, runes("/"), 0) == 0
        assert find_runes(h, runes("/"), 1) == 4
        assert find_runes(h, runes("/"), 8) == 8
        assert find_runes(h, runes("/"), 9) == NPOS

    def test_multibyte_runes(self):
        assert find_runes(runes("Hello, 世界🌏!"), runes("界🌏")) == 8

    def test_needle_longer_than_haystack(self):
        assert find_runes(runes("ab"), runes("abc")) == NPOS

    def test_match_at_end(self):
        assert find_runes(runes("abcabc"), runes("abc"), 1) == 3


class TestFindBackward:
    def test_last_position(self):
        assert find_runes(runes("/usr/bin/bash"), runes("/"), -1) == 8

    def test_match_at_or_before_resolved_index(self):
        h = runes("/usr/bin/bash")
        assert find_runes(h, runes("/"), -5) == 8   # resolved 8
        assert find_runes(h, runes("/"), -6) == 4   # resolved 7
        assert find_runes(h, runes("/"), -13) == 0  # resolved 0

    def test_resolved_before_start(self):
        assert find_runes(runes("/usr"), runes("/"), -5) == NPOS

    def test_window_clamped_to_fit_needle(self):
        assert find_runes(runes("abcabc"), runes("abc"), -1) == 3

    def test_no_match(self):
        assert find_runes(runes("abcabc"), runes("x"), -1) == NPOS

    def test_needle_longer_than_haystack(self):
        assert find_runes(runes("ab"), runes("abc"), -1) == NPOS


class TestEmptyNeedle:
    def test_forward(self):
        h = runes("abc")
        assert find_runes(h, [], 0) == 0
        assert find_runes(h, [], 2) == 2
        assert find_runes(h, [], 3) == 3
        assert find_runes(h, [], 4) == NPOS

    def test_backward(self):
        h = runes("abc")
        assert find_runes(h, [], -1) == 2
        assert find_runes(h, [], -3) == 0
        assert find_runes(h, [], -4) == NPOS


class TestRollingHashAgreesWithLinearScan:
    @pytest.mark.parametrize("seed", range(5))
    def test_random_small_alphabet(self, seed):
        rng = random.Random(seed)
        alphabet = [0x61, 0x62, 0x4E16, 0x1F30F]
        haystack = [rng.choice(alphabet) for _ in range(200)]
        for _ in range(50):
            needle = [rng.choice(alphabet) for _ in range(rng.randint(1, 4))]
            start = rng.randint(0, 200)
            assert find_runes(haystack, needle, start) == naive_forward(haystack, needle, start)
            back = -rng.randint(1, 200)
            assert find_runes(haystack, needle, back) == naive_backward(haystack, needle, 200 + back)


class TestKmp:
    def test_prefix_table(self):
        assert prefix_table(runes("ABABCABAB")) == [0, 0, 1, 2, 0, 1, 2, 3, 4]
        assert prefix_table(runes("AAAA")) == [0, 1, 2, 3]
        assert prefix_table([]) == []

    def test_all_overlapping_matches(self):
        assert find_all_runes(runes("aaaa"), runes("aa")) == [0, 1, 2]
        assert find_all_runes(runes("abababa"), runes("aba")) == [0, 2, 4]

    def test_all_matches(self):
        assert find_all_runes(runes("你好你好"), runes("你好")) == [0, 2]
        assert find_all_runes(runes("abc"), runes("x")) == []

    def test_empty_needle_matches_every_boundary(self):
        assert find_all_runes(runes("ab"), []) == [0, 1, 2]

    def test_agrees_with_first_match(self):
        rng = random.Random(7)
        haystack = [rng.choice((1, 2)) for _ in range(100)]
        needle = [1, 2, 1]
        matches = find_all_runes(haystack, needle)
        assert matches[0] == find_runes(haystack, needle)
        assert matches[-1] == find_runes(haystack, needle, -1)


class TestFindBytes:
    def test_found(self):
        assert find_bytes(b"a,b", b",") == 1

    def test_missing(self):
        assert find_bytes(b"abc", b",") == NPOS

    def test_bounds(self):
        assert find_bytes(b"a,b,c\0", b",", 2) == 3
        assert find_bytes(b"a,b\0,", b",", 2, 3) == NPOS
