"""
MessagePack Lens - Lossless JSON / MessagePack conversion.

Converts between JSON text and MessagePack bytes without losing numeric
precision or kind, and maps byte ranges of the binary form to character
ranges of the rendered text.
"""

__version__ = "1.0.0"

from .converter import (
    MsgpackConverter,
    json_text_to_msgpack_bytes,
    msgpack_bytes_to_json_text,
)
from .position_mapper import (
    PositionMapper,
    build_mappings,
    byte_range_to_hex_char_range,
    query_byte_range_for_text_range,
    query_text_range_for_byte_range,
)
from .types import (
    ByteRange,
    ConversionError,
    DecodeError,
    EncodeError,
    MappingKind,
    ParseError,
    PositionMapping,
    TextRange,
)

__all__ = [
    "MsgpackConverter",
    "PositionMapper",
    "json_text_to_msgpack_bytes",
    "msgpack_bytes_to_json_text",
    "build_mappings",
    "query_byte_range_for_text_range",
    "query_text_range_for_byte_range",
    "byte_range_to_hex_char_range",
    "ByteRange",
    "TextRange",
    "PositionMapping",
    "MappingKind",
    "ConversionError",
    "ParseError",
    "DecodeError",
    "EncodeError",
]
