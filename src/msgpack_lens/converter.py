"""Bidirectional JSON text / MessagePack bytes converter."""

import logging
from typing import List, Optional, Sequence

from .codec.reader import decode_msgpack
from .codec.writer import write_value
from .parser import JSONParser
from .position_mapper import PositionMapper
from .serializer import JSONSerializer
from .types import (
    DEFAULT_MAX_DEPTH,
    ByteRange,
    PositionMapping,
    TextRange,
    Value,
)


class MsgpackConverter:
    """
    Lossless converter between JSON text and MessagePack bytes.

    Numbers keep their kind across both directions: integers keep every
    digit and their sign, and floats stay floats even when whole-valued.
    The converter holds configuration only; every call works on its own
    freshly built value tree.
    """

    def __init__(self, indent: Optional[int] = 2,
                 max_depth: int = DEFAULT_MAX_DEPTH,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the converter.

        Args:
            indent: Spaces per nesting level of rendered JSON, or None for
                single-line output
            max_depth: Maximum container nesting accepted on either side
            logger: Optional logger instance
        """
        self.indent = indent
        self.max_depth = max_depth
        self.logger = logger or logging.getLogger(__name__)

        self.parser = JSONParser(max_depth, self.logger)
        self.serializer = JSONSerializer(indent, self.logger)
        self.mapper = PositionMapper(max_depth, self.logger)

    def parse_json(self, json_string: str) -> Value:
        """Parse JSON text into the value tree."""
        return self.parser.parse(json_string)

    def decode(self, data: bytes) -> Value:
        """Decode MessagePack bytes into the value tree."""
        return decode_msgpack(bytes(data), self.max_depth)

    def json_to_msgpack(self, json_string: str) -> bytes:
        """
        Convert JSON text to MessagePack bytes.

        Args:
            json_string: JSON text

        Returns:
            Encoded bytes

        Raises:
            ParseError: If the text is not well-formed JSON
            EncodeError: On an internal invariant violation
        """
        value = self.parse_json(json_string)
        encoded = write_value(value)
        self.logger.debug(f"Encoded {len(json_string)} chars of JSON as {len(encoded)} bytes")
        return encoded

    def msgpack_to_json(self, data: bytes) -> str:
        """
        Convert MessagePack bytes to JSON text.

        Args:
            data: Encoded bytes holding exactly one value

        Returns:
            JSON text in the configured indentation

        Raises:
            DecodeError: If the bytes are truncated or malformed
        """
        value = self.decode(data)
        text = self.serializer.serialize(value)
        self.logger.debug(f"Rendered {len(data)} bytes of MessagePack as {len(text)} chars")
        return text

    def build_mappings(self, data: bytes, text: str) -> List[PositionMapping]:
        """Correlate byte ranges with text ranges; empty when they disagree."""
        return self.mapper.build_mappings(data, text)

    def query_byte_range_for_text_range(self, mappings: Sequence[PositionMapping],
                                        text_start: int, text_end: int
                                        ) -> Optional[ByteRange]:
        return self.mapper.query_byte_range_for_text_range(mappings, text_start, text_end)

    def query_text_range_for_byte_range(self, mappings: Sequence[PositionMapping],
                                        byte_start: int, byte_end: int
                                        ) -> Optional[TextRange]:
        return self.mapper.query_text_range_for_byte_range(mappings, byte_start, byte_end)


def json_text_to_msgpack_bytes(text: str) -> bytes:
    """Convert JSON text to MessagePack bytes with default settings."""
    return MsgpackConverter().json_to_msgpack(text)


def msgpack_bytes_to_json_text(data: bytes) -> str:
    """Convert MessagePack bytes to 2-space indented JSON text."""
    return MsgpackConverter().msgpack_to_json(data)
