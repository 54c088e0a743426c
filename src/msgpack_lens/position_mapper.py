"""Correlation between MessagePack byte ranges and rendered JSON text ranges.

The mapper walks the finished byte buffer and the finished JSON text in
lockstep, in the same depth-first order the reader and serializer use.
Every scalar, and every map key, yields one mapping; containers yield none.
Any disagreement between the two streams abandons the walk and produces an
empty mapping list, so a caller simply highlights nothing.
"""

import logging
from typing import List, Optional, Sequence

from .codec.reader import read_container_header, read_value
from .serializer import render_key, render_scalar
from .types import (
    DEFAULT_MAX_DEPTH,
    ByteRange,
    ContainerKind,
    DecodeError,
    MappingKind,
    PositionMapping,
    TextRange,
)

_WHITESPACE = " \t\n\r"


class _Desync(Exception):
    """The text stream does not match the byte stream."""


class _DualCursor:
    """Byte and text cursors advanced together over one document."""

    def __init__(self, data: bytes, text: str, max_depth: int):
        self.data = data
        self.text = text
        self.max_depth = max_depth
        self.byte_pos = 0
        self.text_pos = 0
        self.mappings: List[PositionMapping] = []

    def skip_whitespace(self) -> None:
        while self.text_pos < len(self.text) and self.text[self.text_pos] in _WHITESPACE:
            self.text_pos += 1

    def expect(self, delimiter: str) -> None:
        self.skip_whitespace()
        if not self.text.startswith(delimiter, self.text_pos):
            raise _Desync(f"expected {delimiter!r} at char {self.text_pos}")
        self.text_pos += len(delimiter)

    def consume_token(self, token: str, kind: MappingKind, byte_end: int) -> None:
        self.skip_whitespace()
        if not self.text.startswith(token, self.text_pos):
            raise _Desync(f"expected token {token!r} at char {self.text_pos}")
        text_end = self.text_pos + len(token)
        self.mappings.append(PositionMapping(
            text_range=TextRange(self.text_pos, text_end),
            byte_range=ByteRange(self.byte_pos, byte_end),
            kind=kind,
        ))
        self.text_pos = text_end
        self.byte_pos = byte_end

    def walk(self, depth: int) -> None:
        header = read_container_header(self.data, self.byte_pos)
        if header is None:
            value, end = read_value(self.data, self.byte_pos, self.max_depth)
            self.consume_token(render_scalar(value), MappingKind.VALUE, end)
            return

        if depth >= self.max_depth:
            raise _Desync(f"nesting deeper than {self.max_depth} levels")
        kind, count, self.byte_pos = header

        if kind is ContainerKind.ARRAY:
            self.expect("[")
            for index in range(count):
                if index:
                    self.expect(",")
                self.walk(depth + 1)
            self.expect("]")
            return

        self.expect("{")
        for index in range(count):
            if index:
                self.expect(",")
            key, end = read_value(self.data, self.byte_pos, self.max_depth)
            self.consume_token(render_key(key), MappingKind.KEY, end)
            self.expect(":")
            self.walk(depth + 1)
        self.expect("}")

    def run(self) -> List[PositionMapping]:
        self.walk(0)
        if self.byte_pos != len(self.data):
            raise _Desync(f"{len(self.data) - self.byte_pos} unmapped trailing byte(s)")
        self.skip_whitespace()
        if self.text_pos != len(self.text):
            raise _Desync(f"unmapped trailing text at char {self.text_pos}")
        return self.mappings


def _union(ranges: List[tuple]) -> Optional[tuple]:
    if not ranges:
        return None
    return min(start for start, _ in ranges), max(end for _, end in ranges)


class PositionMapper:
    """
    Builds and queries byte/text position mappings.

    Intended for interactive highlighting: building never raises, and
    queries are a linear overlap scan over the mapping list.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the position mapper.

        Args:
            max_depth: Maximum container nesting walked
            logger: Optional logger instance
        """
        self.max_depth = max_depth
        self.logger = logger or logging.getLogger(__name__)

    def build_mappings(self, data: bytes, text: str) -> List[PositionMapping]:
        """
        Correlate every key and scalar token of ``text`` with its bytes.

        Args:
            data: MessagePack bytes
            text: JSON rendering of the same value

        Returns:
            Mappings in document order, or an empty list when the two
            inputs do not describe the same structure
        """
        try:
            return _DualCursor(bytes(data), text, self.max_depth).run()
        except (_Desync, DecodeError) as e:
            self.logger.debug(f"Position mapping abandoned: {e}")
            return []

    def query_byte_range_for_text_range(self, mappings: Sequence[PositionMapping],
                                        text_start: int, text_end: int
                                        ) -> Optional[ByteRange]:
        """
        Find the bytes behind a text selection.

        Every mapping whose text range intersects ``[text_start, text_end)``
        contributes its whole byte range, so a partial selection inside a
        token resolves to the full token.

        Returns:
            Union of the matching byte ranges, or None when nothing overlaps
        """
        span = _union([
            (m.byte_range.start, m.byte_range.end) for m in mappings
            if m.text_range.start < text_end and m.text_range.end > text_start
        ])
        return ByteRange(*span) if span else None

    def query_text_range_for_byte_range(self, mappings: Sequence[PositionMapping],
                                        byte_start: int, byte_end: int
                                        ) -> Optional[TextRange]:
        """Find the text behind a byte selection; the mirror of the byte query."""
        span = _union([
            (m.text_range.start, m.text_range.end) for m in mappings
            if m.byte_range.start < byte_end and m.byte_range.end > byte_start
        ])
        return TextRange(*span) if span else None


def byte_range_to_hex_char_range(byte_start: int, byte_end: int) -> TextRange:
    """
    Convert a byte range to a character range in a space-separated hex dump.

    Each byte occupies three characters (two digits and a space); the range
    excludes the space after its last byte.
    """
    if byte_end <= byte_start:
        return TextRange(byte_start * 3, byte_start * 3)
    return TextRange(byte_start * 3, byte_end * 3 - 1)


def build_mappings(data: bytes, text: str,
                   max_depth: int = DEFAULT_MAX_DEPTH) -> List[PositionMapping]:
    """Build mappings with a throwaway mapper; never raises."""
    return PositionMapper(max_depth).build_mappings(data, text)


def query_byte_range_for_text_range(mappings: Sequence[PositionMapping],
                                    text_start: int, text_end: int) -> Optional[ByteRange]:
    return PositionMapper().query_byte_range_for_text_range(mappings, text_start, text_end)


def query_text_range_for_byte_range(mappings: Sequence[PositionMapping],
                                    byte_start: int, byte_end: int) -> Optional[TextRange]:
    return PositionMapper().query_text_range_for_byte_range(mappings, byte_start, byte_end)
