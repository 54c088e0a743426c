"""Tokenizing JSON parser that keeps numeric literal kinds."""

import json
import logging
from json.decoder import scanstring
from typing import List, Optional, Tuple

from .number_classifier import classify_number
from .types import (
    DEFAULT_MAX_DEPTH,
    ArrayValue,
    BoolValue,
    FloatOrigin,
    FloatValue,
    IntegerValue,
    MapValue,
    NullValue,
    NumberKind,
    ParseError,
    StringValue,
    Value,
)

_WHITESPACE = " \t\n\r"
_NUMBER_START = "-0123456789"
_NUMBER_CHARS = frozenset("+-0123456789.eE")
_LITERALS = (
    ("true", BoolValue(True)),
    ("false", BoolValue(False)),
    ("null", NullValue()),
)


def line_column(text: str, offset: int) -> Tuple[int, int]:
    """Return the 1-based line and column of ``offset`` in ``text``."""
    line = text.count("\n", 0, offset) + 1
    column = offset - text.rfind("\n", 0, offset)
    return line, column


class _TextScanner:
    """Cursor over one JSON document; created fresh for every parse."""

    def __init__(self, text: str, max_depth: int):
        self.text = text
        self.pos = 0
        self.max_depth = max_depth

    def error(self, reason: str, offset: int, expected: Optional[str] = None) -> ParseError:
        line, column = line_column(self.text, offset)
        return ParseError(reason, offset, expected=expected, line=line, column=column)

    def peek(self) -> str:
        return self.text[self.pos:self.pos + 1]

    def skip_whitespace(self) -> None:
        text = self.text
        while self.pos < len(text) and text[self.pos] in _WHITESPACE:
            self.pos += 1

    def parse_document(self) -> Value:
        value = self.parse_value(0)
        self.skip_whitespace()
        if self.pos != len(self.text):
            raise self.error("Extra data", self.pos, expected="end of input")
        return value

    def parse_value(self, depth: int) -> Value:
        self.skip_whitespace()
        ch = self.peek()
        if ch == "{":
            return self.parse_object(depth)
        if ch == "[":
            return self.parse_array(depth)
        if ch == '"':
            return StringValue(self.parse_string())
        if ch and ch in _NUMBER_START:
            return self.parse_number()
        for word, value in _LITERALS:
            if self.text.startswith(word, self.pos):
                self.pos += len(word)
                return value
        raise self.error("Expecting value", self.pos, expected="value")

    def parse_number(self) -> Value:
        start = self.pos
        end = start
        while end < len(self.text) and self.text[end] in _NUMBER_CHARS:
            end += 1
        literal = self.text[start:end]
        try:
            number_class = classify_number(literal, start)
        except ParseError as e:
            raise self.error(e.reason, e.offset, e.expected) from e
        self.pos = end

        if number_class.kind is NumberKind.FLOAT:
            number = float(literal)
            if number in (float("inf"), float("-inf")):
                raise self.error("Number out of range for a 64-bit float", start,
                                 expected="finite number")
            return FloatValue(number, FloatOrigin.LITERAL)
        return IntegerValue(int(literal), signed=number_class.negative)

    def parse_string(self) -> str:
        start = self.pos
        try:
            value, end = scanstring(self.text, start + 1, True)
        except json.JSONDecodeError as e:
            raise self.error(e.msg, e.pos, expected="string") from e
        for ch in value:
            if 0xD800 <= ord(ch) <= 0xDFFF:
                raise self.error(f"Lone surrogate U+{ord(ch):04X} in string", start,
                                 expected="valid Unicode")
        self.pos = end
        return value

    def _enter(self, depth: int) -> None:
        if depth >= self.max_depth:
            raise self.error(f"Nesting deeper than {self.max_depth} levels", self.pos)
        self.pos += 1

    def parse_array(self, depth: int) -> ArrayValue:
        self._enter(depth)
        self.skip_whitespace()
        if self.peek() == "]":
            self.pos += 1
            return ArrayValue()

        items: List[Value] = []
        while True:
            items.append(self.parse_value(depth + 1))
            self.skip_whitespace()
            ch = self.peek()
            if ch == ",":
                self.pos += 1
            elif ch == "]":
                self.pos += 1
                return ArrayValue(tuple(items))
            else:
                raise self.error("Expecting ',' delimiter", self.pos, expected="',' or ']'")

    def parse_object(self, depth: int) -> MapValue:
        self._enter(depth)
        self.skip_whitespace()
        if self.peek() == "}":
            self.pos += 1
            return MapValue()

        entries = []
        while True:
            self.skip_whitespace()
            if self.peek() != '"':
                raise self.error("Expecting property name enclosed in double quotes",
                                 self.pos, expected='"')
            key = StringValue(self.parse_string())
            self.skip_whitespace()
            if self.peek() != ":":
                raise self.error("Expecting ':' delimiter", self.pos, expected="':'")
            self.pos += 1
            entries.append((key, self.parse_value(depth + 1)))
            self.skip_whitespace()
            ch = self.peek()
            if ch == ",":
                self.pos += 1
            elif ch == "}":
                self.pos += 1
                return MapValue(tuple(entries))
            else:
                raise self.error("Expecting ',' delimiter", self.pos, expected="',' or '}'")


class JSONParser:
    """
    JSON parser that builds the tagged value tree.

    Unlike ``json.loads`` it keeps, for every number, whether the source
    literal was written as a float, and it keeps integers of any magnitude
    and duplicate object keys exactly as written.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the JSON parser.

        Args:
            max_depth: Maximum container nesting accepted
            logger: Optional logger instance
        """
        self.max_depth = max_depth
        self.logger = logger or logging.getLogger(__name__)

    def parse(self, json_string: str) -> Value:
        """
        Parse JSON text into a value tree.

        Args:
            json_string: JSON text to parse

        Returns:
            Root of the value tree

        Raises:
            ParseError: If the text is not well-formed JSON
        """
        value = _TextScanner(json_string, self.max_depth).parse_document()
        self.logger.debug(f"Parsed {len(json_string)} chars of JSON into {type(value).__name__}")
        return value


def parse_json_text(json_string: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Value:
    """Parse JSON text with a throwaway parser."""
    return JSONParser(max_depth).parse(json_string)
