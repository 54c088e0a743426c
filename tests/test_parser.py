"""Tests for JSON parser."""

import logging

import pytest

from msgpack_lens.parser import JSONParser, line_column, parse_json_text
from msgpack_lens.types import (
    ArrayValue,
    BoolValue,
    FloatOrigin,
    FloatValue,
    IntegerValue,
    MapValue,
    NullValue,
    ParseError,
    StringValue,
)


class TestJSONParser:
    """Tests for JSONParser class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = JSONParser()

    def test_parse_nested_document(self):
        """Test parsing a document with every value kind."""
        result = self.parser.parse('{"a": [1, 2.5, "x", true, false, null]}')

        assert result == MapValue((
            (StringValue("a"), ArrayValue((
                IntegerValue(1),
                FloatValue(2.5, FloatOrigin.LITERAL),
                StringValue("x"),
                BoolValue(True),
                BoolValue(False),
                NullValue(),
            ))),
        ))

    def test_whole_valued_float_stays_float(self):
        """Test that 1.0 is kept as a float."""
        assert self.parser.parse("1.0") == FloatValue(1.0)
        assert self.parser.parse("1e2") == FloatValue(100.0)

    def test_negative_integer_is_signed(self):
        """Test the signed flag of negative literals."""
        assert self.parser.parse("-5") == IntegerValue(-5, signed=True)
        assert self.parser.parse("5") == IntegerValue(5, signed=False)

    def test_large_integers_keep_every_digit(self):
        """Test integers beyond double precision."""
        result = self.parser.parse("[9007199254740993, 18446744073709551615]")

        assert result.items[0].digits == "9007199254740993"
        assert result.items[1].value == 2 ** 64 - 1

    def test_duplicate_keys_preserved(self):
        """Test that duplicate keys are kept in order."""
        result = self.parser.parse('{"a": 1, "a": 2}')

        assert result.entries == (
            (StringValue("a"), IntegerValue(1)),
            (StringValue("a"), IntegerValue(2)),
        )

    def test_string_escapes(self):
        """Test escapes and surrogate pairs in strings."""
        assert self.parser.parse('"a\\"b\\n\\u00e9"') == StringValue('a"b\né')
        assert self.parser.parse('"\\ud83d\\ude00"') == StringValue("\U0001F600")

    def test_empty_containers(self):
        """Test empty array and object."""
        assert self.parser.parse("[ ]") == ArrayValue()
        assert self.parser.parse("{}") == MapValue()

    def test_lone_surrogate_rejected(self):
        """Test that unpaired surrogate escapes are rejected."""
        with pytest.raises(ParseError, match="Lone surrogate"):
            self.parser.parse('"\\ud800"')

    def test_trailing_comma_rejected(self):
        """Test that a trailing comma is an error at the closing bracket."""
        with pytest.raises(ParseError) as exc_info:
            self.parser.parse("[1, 2,]")

        assert exc_info.value.offset == 6
        assert exc_info.value.reason == "Expecting value"

    def test_error_line_and_column(self):
        """Test that errors carry a line and column."""
        with pytest.raises(ParseError) as exc_info:
            self.parser.parse('{\n  "a": tru\n}')

        error = exc_info.value
        assert error.offset == 9
        assert (error.line, error.column) == (2, 8)
        assert "line 2, column 8" in str(error)

    @pytest.mark.parametrize("text", ["NaN", "Infinity", "-Infinity", "'a'", "{a: 1}"])
    def test_non_json_tokens_rejected(self, text):
        """Test tokens outside strict JSON."""
        with pytest.raises(ParseError):
            self.parser.parse(text)

    def test_float_overflow_rejected(self):
        """Test that a float literal beyond double range is an error."""
        with pytest.raises(ParseError, match="out of range"):
            self.parser.parse("1e400")

    def test_empty_input(self):
        """Test empty and whitespace-only input."""
        with pytest.raises(ParseError) as exc_info:
            self.parser.parse("")
        assert exc_info.value.offset == 0

        with pytest.raises(ParseError) as exc_info:
            self.parser.parse("   ")
        assert exc_info.value.offset == 3

    def test_extra_data(self):
        """Test content after the root value."""
        with pytest.raises(ParseError, match="Extra data") as exc_info:
            self.parser.parse("[1] 2")

        assert exc_info.value.offset == 4

    def test_leading_zero(self):
        """Test that a leading zero is reported at the offending digit."""
        with pytest.raises(ParseError) as exc_info:
            self.parser.parse("[01]")

        assert exc_info.value.offset == 2

    def test_missing_colon(self):
        """Test a key without a colon."""
        with pytest.raises(ParseError, match="Expecting ':' delimiter") as exc_info:
            self.parser.parse('{"a" 1}')

        assert exc_info.value.offset == 5

    def test_unterminated_object(self):
        """Test an object that ends early."""
        with pytest.raises(ParseError, match="Expecting ',' delimiter") as exc_info:
            self.parser.parse('{"key": "value"')

        assert exc_info.value.offset == 15

    def test_raw_control_character_rejected(self):
        """Test that an unescaped newline inside a string is rejected."""
        with pytest.raises(ParseError):
            self.parser.parse('"a\nb"')

    def test_max_depth(self):
        """Test the nesting limit."""
        parser = JSONParser(max_depth=3)

        assert parser.parse("[[[1]]]") == ArrayValue((ArrayValue((ArrayValue((IntegerValue(1),)),)),))
        with pytest.raises(ParseError, match="Nesting deeper than 3"):
            parser.parse("[[[[1]]]]")

    def test_logs_at_debug(self, caplog):
        """Test that parsing logs through the supplied logger."""
        logger = logging.getLogger("test.parser")
        with caplog.at_level(logging.DEBUG, logger="test.parser"):
            JSONParser(logger=logger).parse("[1]")

        assert "Parsed 3 chars" in caplog.text


class TestHelpers:
    """Tests for module-level helpers."""

    def test_parse_json_text(self):
        """Test the module-level parse function."""
        assert parse_json_text("true") == BoolValue(True)

    def test_line_column(self):
        """Test offset to line/column conversion."""
        assert line_column("abc", 0) == (1, 1)
        assert line_column("ab\ncd", 4) == (2, 2)
