"""
Unit tests for the keyword input tokenizer and the XML helpers.
"""

import io

import pytest
from xml.etree import ElementTree

from elastIGA.io.tokenizer import (
    InputError, LineTokenizer, keyword_argument, read_line, strip_comment
)
from elastIGA.io.xmlutils import get_attribute, get_text, tag_is


class TestReadLine:
    """Tests for read_line and strip_comment."""

    def test_skips_blank_and_comment_lines(self):
        """Test that only data lines are returned."""
        stream = io.StringIO("\n# header\n   \nISOTROPIC 1  # steel\n1 2 3 4\n")
        assert read_line(stream) == "ISOTROPIC 1"
        assert read_line(stream) == "1 2 3 4"
        assert read_line(stream) is None

    def test_strip_comment(self):
        assert strip_comment("  GRAVITY 0 -9.81 # down\n") == "GRAVITY 0 -9.81"
        assert strip_comment("# only a comment") == ""

    def test_iterator_input(self):
        """Test that any iterator of lines is accepted."""
        lines = iter(["", "PATCHES 2"])
        assert read_line(lines) == "PATCHES 2"
        assert read_line(lines) is None


class TestLineTokenizer:
    """Tests for LineTokenizer."""

    def test_typed_tokens(self):
        tokens = LineTokenizer("1 2 1 -1.5e6 Ramp2")
        assert tokens.next_int("patch") == 1
        assert tokens.next_int("face") == 2
        assert tokens.next_int("direction") == 1
        assert tokens.next_float("pressure") == -1.5e6
        assert tokens.peek() == "Ramp2"
        assert tokens.next_str() == "Ramp2"
        assert not tokens.has_more

    def test_optional_token_missing(self):
        tokens = LineTokenizer("1")
        tokens.next_int("code")
        assert tokens.next_str() is None
        assert tokens.peek() is None

    def test_mandatory_token_missing(self):
        """Test that the error message names the missing token."""
        tokens = LineTokenizer("1 2.0e11")
        tokens.next_int("code")
        tokens.next_float("E")
        with pytest.raises(InputError, match="Poisson"):
            tokens.next_float("Poisson's ratio")

    def test_malformed_int(self):
        with pytest.raises(InputError, match="face"):
            LineTokenizer("1.5").next_int("face")

    def test_malformed_float(self):
        with pytest.raises(InputError, match="abc"):
            LineTokenizer("abc").next_float("pressure")

    def test_input_error_is_value_error(self):
        with pytest.raises(ValueError):
            LineTokenizer("").next_int("count")

    def test_remaining(self):
        tokens = LineTokenizer("2.1e11 0.3 7850 1 3 ALL")
        tokens.next_float("E")
        tokens.next_float("nu")
        tokens.next_float("rho")
        assert tokens.remaining() == ["1", "3", "ALL"]
        assert tokens.remaining() == []

    def test_keyword_argument(self):
        assert keyword_argument("ISOTROPIC 2", "ISOTROPIC").next_int("count") == 2
        assert keyword_argument("gravity 0 -9.81", "GRAVITY").remaining() == ["0", "-9.81"]


class TestXmlHelpers:
    """Tests for the XML attribute and text helpers."""

    def test_tag_is_case_insensitive(self):
        elem = ElementTree.fromstring("<BodyForce/>")
        assert tag_is(elem, "bodyforce")
        assert not tag_is(elem, "isotropic")

    def test_typed_attributes(self):
        elem = ElementTree.fromstring('<a n="3" x="2.5" s="Expression" b="yes"/>')
        assert get_attribute(elem, "n", 0) == 3
        assert get_attribute(elem, "x", 0.0) == 2.5
        assert get_attribute(elem, "s", "") == "Expression"
        assert get_attribute(elem, "s", "", lower_case=True) == "expression"
        assert get_attribute(elem, "b", False) is True

    def test_missing_attribute(self):
        elem = ElementTree.fromstring("<a/>")
        assert get_attribute(elem, "n", 7) == 7

    def test_invalid_attribute_keeps_default(self):
        elem = ElementTree.fromstring('<a n="three" b="maybe"/>')
        assert get_attribute(elem, "n", 7) == 7
        assert get_attribute(elem, "b", True) is True

    def test_get_text(self):
        assert get_text(ElementTree.fromstring("<a>  1 2  </a>")) == "1 2"
        assert get_text(ElementTree.fromstring("<a>   </a>")) is None
        assert get_text(ElementTree.fromstring("<a/>")) is None
