"""
Tests for TextSpan

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

import copy

import pytest

from mdtranslation.spans import TextSpan


class TestTextSpan:
    """Borrowed views and owned buffers."""

    def test_borrowed_view(self):
        source = "Hello world"
        span = TextSpan.borrowed(source, 6, 11)
        assert span.is_borrowed
        assert span.text == "world"
        assert len(span) == 5

    def test_full_borrow_returns_source(self):
        source = "abc"
        assert TextSpan.borrowed(source).text is source

    def test_owned(self):
        span = TextSpan.owned("abc")
        assert span.is_owned
        assert str(span) == "abc"

    def test_substr_is_owned(self):
        span = TextSpan.borrowed("Hello world", 0, 11)
        part = span.substr(6)
        assert part.is_owned
        assert part == "world"
        assert span.substr(0, 5) == "Hello"

    def test_substr_out_of_range(self):
        with pytest.raises(ValueError):
            TextSpan.owned("abc").substr(2, 5)

    def test_invalid_range(self):
        with pytest.raises(ValueError):
            TextSpan("abc", 2, 1)

    def test_equality_and_hash(self):
        a = TextSpan.borrowed("xx abc", 3, 6)
        b = TextSpan.owned("abc")
        assert a == b
        assert a == "abc"
        assert hash(a) == hash(b)
        assert a != TextSpan.owned("abd")

    def test_coerce(self):
        span = TextSpan.owned("x")
        assert TextSpan.coerce(span) is span
        assert TextSpan.coerce("y").is_owned
        with pytest.raises(TypeError):
            TextSpan.coerce(3)

    def test_to_owned(self):
        span = TextSpan.borrowed("abcdef", 1, 3)
        owned = span.to_owned()
        assert owned.is_owned
        assert owned == "bc"

    def test_bool(self):
        assert not TextSpan.owned("")
        assert TextSpan.owned("a")

    def test_deepcopy_shares_instance(self):
        span = TextSpan.owned("abc")
        assert copy.deepcopy(span) is span
