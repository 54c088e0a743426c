"""MessagePack reader producing the tagged value tree.

Dispatch is strictly on the leading marker byte. Decoded floats are tagged
with ``FloatOrigin.DECODED`` so that a whole-valued float keeps rendering
as a float, and 64-bit integers are read with ``struct`` straight into
Python integers so they never pass through a double.
"""

import struct
from typing import Optional, Tuple

from . import markers
from ..types import (
    DEFAULT_MAX_DEPTH,
    ArrayValue,
    BoolValue,
    BytesValue,
    ContainerKind,
    DecodeError,
    ExtensionValue,
    FloatOrigin,
    FloatValue,
    IntegerValue,
    MapValue,
    NullValue,
    StringValue,
    Value,
)


def _take(data: bytes, pos: int, size: int, marker_pos: int) -> bytes:
    """Slice ``size`` bytes at ``pos`` or fail naming the marker that wanted them."""
    end = pos + size
    if end > len(data):
        raise DecodeError(f"Truncated data: needed {size} byte(s), "
                          f"{max(len(data) - pos, 0)} available",
                          marker_pos, data[marker_pos])
    return data[pos:end]


def _unpack(fmt: str, data: bytes, pos: int, size: int, marker_pos: int) -> int:
    return struct.unpack(fmt, _take(data, pos, size, marker_pos))[0]


def read_container_header(data: bytes, pos: int
                          ) -> Optional[Tuple[ContainerKind, int, int]]:
    """
    Read the structural header of an array or map.

    Args:
        data: Encoded bytes
        pos: Offset of the marker byte

    Returns:
        ``(kind, element_count, payload_offset)`` or None when the marker at
        ``pos`` is not a container

    Raises:
        DecodeError: If ``pos`` is past the end or the header is truncated
    """
    if pos >= len(data):
        raise DecodeError("Unexpected end of data", pos)
    marker = data[pos]
    if markers.FIXMAP <= marker <= markers.FIXMAP_MAX:
        return ContainerKind.MAP, marker & 0x0f, pos + 1
    if markers.FIXARRAY <= marker <= markers.FIXARRAY_MAX:
        return ContainerKind.ARRAY, marker & 0x0f, pos + 1
    if marker in markers.MAP_LENGTHS:
        fmt, size = markers.MAP_LENGTHS[marker]
        return ContainerKind.MAP, _unpack(fmt, data, pos + 1, size, pos), pos + 1 + size
    if marker in markers.ARRAY_LENGTHS:
        fmt, size = markers.ARRAY_LENGTHS[marker]
        return ContainerKind.ARRAY, _unpack(fmt, data, pos + 1, size, pos), pos + 1 + size
    return None


def _read_str(data: bytes, start: int, length: int, marker_pos: int) -> StringValue:
    raw = _take(data, start, length, marker_pos)
    try:
        return StringValue(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise DecodeError(f"Invalid UTF-8 in string payload: {e.reason}",
                          marker_pos, data[marker_pos]) from e


def _read_ext(data: bytes, pos: int, length: int, marker_pos: int
              ) -> Tuple[ExtensionValue, int]:
    type_code = struct.unpack(">b", _take(data, pos, 1, marker_pos))[0]
    payload = _take(data, pos + 1, length, marker_pos)
    return ExtensionValue(type_code, payload), pos + 1 + length


def _read_scalar(data: bytes, pos: int) -> Tuple[Value, int]:
    marker = data[pos]
    body = pos + 1

    if marker <= markers.POSITIVE_FIXINT_MAX:
        return IntegerValue(marker), body
    if marker >= markers.NEGATIVE_FIXINT:
        return IntegerValue(marker - 0x100, signed=True), body
    if markers.FIXSTR <= marker <= markers.FIXSTR_MAX:
        length = marker & 0x1f
        return _read_str(data, body, length, pos), body + length

    if marker == markers.NIL:
        return NullValue(), body
    if marker == markers.FALSE:
        return BoolValue(False), body
    if marker == markers.TRUE:
        return BoolValue(True), body

    if marker in markers.UINT_FORMATS:
        fmt, size = markers.UINT_FORMATS[marker]
        return IntegerValue(_unpack(fmt, data, body, size, pos)), body + size
    if marker in markers.INT_FORMATS:
        fmt, size = markers.INT_FORMATS[marker]
        return IntegerValue(_unpack(fmt, data, body, size, pos), signed=True), body + size
    if marker in markers.FLOAT_FORMATS:
        fmt, size = markers.FLOAT_FORMATS[marker]
        number = struct.unpack(fmt, _take(data, body, size, pos))[0]
        return FloatValue(number, FloatOrigin.DECODED), body + size

    if marker in markers.STR_LENGTHS:
        fmt, size = markers.STR_LENGTHS[marker]
        length = _unpack(fmt, data, body, size, pos)
        start = body + size
        return _read_str(data, start, length, pos), start + length
    if marker in markers.BIN_LENGTHS:
        fmt, size = markers.BIN_LENGTHS[marker]
        length = _unpack(fmt, data, body, size, pos)
        start = body + size
        return BytesValue(_take(data, start, length, pos)), start + length

    if marker in markers.FIXEXT_SIZES:
        return _read_ext(data, body, markers.FIXEXT_SIZES[marker], pos)
    if marker in markers.EXT_LENGTHS:
        fmt, size = markers.EXT_LENGTHS[marker]
        length = _unpack(fmt, data, body, size, pos)
        return _read_ext(data, body + size, length, pos)

    raise DecodeError("Unrecognized format marker", pos, marker)


def read_value(data: bytes, pos: int = 0, max_depth: int = DEFAULT_MAX_DEPTH,
               _depth: int = 0) -> Tuple[Value, int]:
    """
    Decode one value starting at ``pos``.

    Args:
        data: Encoded bytes
        pos: Offset of the value's marker byte
        max_depth: Maximum container nesting accepted

    Returns:
        Tuple of (value, offset just past the value)

    Raises:
        DecodeError: On truncated input, an unrecognized marker, invalid
            UTF-8 or nesting deeper than ``max_depth``
    """
    header = read_container_header(data, pos)
    if header is None:
        return _read_scalar(data, pos)

    kind, count, cursor = header
    if _depth >= max_depth:
        raise DecodeError(f"Nesting deeper than {max_depth} levels", pos, data[pos])

    if kind is ContainerKind.ARRAY:
        items = []
        for _ in range(count):
            item, cursor = read_value(data, cursor, max_depth, _depth + 1)
            items.append(item)
        return ArrayValue(tuple(items)), cursor

    entries = []
    for _ in range(count):
        key, cursor = read_value(data, cursor, max_depth, _depth + 1)
        item, cursor = read_value(data, cursor, max_depth, _depth + 1)
        entries.append((key, item))
    return MapValue(tuple(entries)), cursor


def decode_msgpack(data: bytes, max_depth: int = DEFAULT_MAX_DEPTH) -> Value:
    """
    Decode a buffer holding exactly one MessagePack value.

    Raises:
        DecodeError: If the buffer is empty, malformed or has trailing bytes
    """
    if not data:
        raise DecodeError("No data to decode", 0)
    value, end = read_value(data, 0, max_depth)
    if end != len(data):
        raise DecodeError(f"Trailing data: {len(data) - end} byte(s) after the root value",
                          end, data[end])
    return value
