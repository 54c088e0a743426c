"""MessagePack writer for the tagged value tree.

Every scalar is written with the shortest marker that represents it
exactly. Floats are the exception: they always use float64 so that a
decoded value is bit-identical to the one that was written.
"""

import struct

from . import markers
from ..types import (
    ArrayValue,
    BoolValue,
    BytesValue,
    EncodeError,
    ExtensionValue,
    FloatValue,
    IntegerValue,
    MapValue,
    NullValue,
    StringValue,
    Value,
)

_UINT_STEPS = (
    (0xff, markers.UINT8, ">B"),
    (0xffff, markers.UINT16, ">H"),
    (0xffffffff, markers.UINT32, ">I"),
    (0xffffffffffffffff, markers.UINT64, ">Q"),
)
_INT_STEPS = (
    (-(2 ** 7), markers.INT8, ">b"),
    (-(2 ** 15), markers.INT16, ">h"),
    (-(2 ** 31), markers.INT32, ">i"),
    (-(2 ** 63), markers.INT64, ">q"),
)


def _write_integer(value: int, out: bytearray) -> None:
    if 0 <= value <= markers.POSITIVE_FIXINT_MAX:
        out.append(value)
        return
    if -32 <= value < 0:
        out.append(value & 0xff)
        return

    if value > 0:
        for limit, marker, fmt in _UINT_STEPS:
            if value <= limit:
                out.append(marker)
                out += struct.pack(fmt, value)
                return
    else:
        for limit, marker, fmt in _INT_STEPS:
            if value >= limit:
                out.append(marker)
                out += struct.pack(fmt, value)
                return
    raise EncodeError(f"Integer {value} does not fit in 64 bits", context=value)


def _write_length(length: int, out: bytearray, fixed_base: int, fixed_max: int,
                  steps: tuple, what: str) -> None:
    """Write a header whose marker is chosen by ``length``.

    ``steps`` lists ``(limit, marker, format)`` in increasing size. A
    ``fixed_max`` of -1 means the family has no fix-form.
    """
    if length <= fixed_max:
        out.append(fixed_base | length)
        return
    for limit, marker, fmt in steps:
        if length <= limit:
            out.append(marker)
            out += struct.pack(fmt, length)
            return
    raise EncodeError(f"{what} of length {length} exceeds the format limit",
                      context=length)


_STR_STEPS = ((0xff, markers.STR8, ">B"), (0xffff, markers.STR16, ">H"),
              (0xffffffff, markers.STR32, ">I"))
_BIN_STEPS = ((0xff, markers.BIN8, ">B"), (0xffff, markers.BIN16, ">H"),
              (0xffffffff, markers.BIN32, ">I"))
_ARRAY_STEPS = ((0xffff, markers.ARRAY16, ">H"), (0xffffffff, markers.ARRAY32, ">I"))
_MAP_STEPS = ((0xffff, markers.MAP16, ">H"), (0xffffffff, markers.MAP32, ">I"))
_EXT_STEPS = ((0xff, markers.EXT8, ">B"), (0xffff, markers.EXT16, ">H"),
              (0xffffffff, markers.EXT32, ">I"))
_FIXEXT_MARKERS = {size: marker for marker, size in markers.FIXEXT_SIZES.items()}


def _write_extension(value: ExtensionValue, out: bytearray) -> None:
    if not -128 <= value.type_code <= 127:
        raise EncodeError(f"Extension type {value.type_code} is not a signed byte",
                          context=value.type_code)
    size = len(value.data)
    fixed = _FIXEXT_MARKERS.get(size)
    if fixed is not None:
        out.append(fixed)
    else:
        _write_length(size, out, 0, -1, _EXT_STEPS, "Extension payload")
    out += struct.pack(">b", value.type_code)
    out += value.data


def _write_into(value: Value, out: bytearray) -> None:
    if isinstance(value, NullValue):
        out.append(markers.NIL)
    elif isinstance(value, BoolValue):
        out.append(markers.TRUE if value.value else markers.FALSE)
    elif isinstance(value, IntegerValue):
        _write_integer(value.value, out)
    elif isinstance(value, FloatValue):
        out.append(markers.FLOAT64)
        out += struct.pack(">d", value.value)
    elif isinstance(value, StringValue):
        try:
            raw = value.value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodeError(f"String is not valid Unicode: {e.reason}",
                              context=value.value) from e
        _write_length(len(raw), out, markers.FIXSTR, 31, _STR_STEPS, "String")
        out += raw
    elif isinstance(value, BytesValue):
        _write_length(len(value.value), out, 0, -1, _BIN_STEPS, "Binary")
        out += value.value
    elif isinstance(value, ExtensionValue):
        _write_extension(value, out)
    elif isinstance(value, ArrayValue):
        _write_length(len(value.items), out, markers.FIXARRAY, 15, _ARRAY_STEPS, "Array")
        for item in value.items:
            _write_into(item, out)
    elif isinstance(value, MapValue):
        _write_length(len(value.entries), out, markers.FIXMAP, 15, _MAP_STEPS, "Map")
        for key, item in value.entries:
            _write_into(key, out)
            _write_into(item, out)
    else:
        raise EncodeError(f"Unsupported value type: {type(value).__name__}", context=value)


def write_value(value: Value) -> bytes:
    """
    Serialize a value tree to MessagePack bytes.

    Args:
        value: Root of the value tree

    Returns:
        Encoded bytes

    Raises:
        EncodeError: If the tree holds something the format cannot carry
    """
    out = bytearray()
    _write_into(value, out)
    return bytes(out)
