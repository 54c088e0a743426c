"""Tests for the MessagePack writer."""

import struct

import pytest

from msgpack_lens.codec import write_value
from msgpack_lens.types import (
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
)


class TestIntegerEncoding:
    """Tests for shortest-form integer markers."""

    @pytest.mark.parametrize("value,expected", [
        (0, "00"),
        (1, "01"),
        (127, "7f"),
        (128, "cc80"),
        (255, "ccff"),
        (256, "cd0100"),
        (65535, "cdffff"),
        (65536, "ce00010000"),
        (4294967295, "ceffffffff"),
        (4294967296, "cf0000000100000000"),
        (2 ** 64 - 1, "cfffffffffffffffff"),
    ])
    def test_non_negative(self, value, expected):
        """Test unsigned markers for non-negative integers."""
        assert write_value(IntegerValue(value)).hex() == expected

    @pytest.mark.parametrize("value,expected", [
        (-1, "ff"),
        (-32, "e0"),
        (-33, "d0df"),
        (-128, "d080"),
        (-129, "d1ff7f"),
        (-32768, "d18000"),
        (-32769, "d2ffff7fff"),
        (-(2 ** 31), "d280000000"),
        (-(2 ** 31) - 1, "d3ffffffff7fffffff"),
        (-(2 ** 63), "d38000000000000000"),
    ])
    def test_negative(self, value, expected):
        """Test signed markers for negative integers."""
        assert write_value(IntegerValue(value, signed=True)).hex() == expected

    def test_large_integer_uses_uint64(self):
        """Test that a large integer keeps an integer marker."""
        encoded = write_value(IntegerValue(57602261053))

        assert encoded[0] == 0xcf
        assert struct.unpack(">Q", encoded[1:])[0] == 57602261053

    @pytest.mark.parametrize("value", [2 ** 64, -(2 ** 63) - 1])
    def test_out_of_range(self, value):
        """Test integers that no marker can hold."""
        with pytest.raises(EncodeError):
            write_value(IntegerValue(value))


class TestScalarEncoding:
    """Tests for the remaining scalar markers."""

    def test_constants(self):
        """Test nil and booleans."""
        assert write_value(NullValue()) == b"\xc0"
        assert write_value(BoolValue(True)) == b"\xc3"
        assert write_value(BoolValue(False)) == b"\xc2"

    @pytest.mark.parametrize("number", [1.0, 0.5, 0.0, -2.25, 1e300])
    def test_floats_always_float64(self, number):
        """Test that every float is written as float64."""
        encoded = write_value(FloatValue(number))

        assert len(encoded) == 9
        assert encoded[0] == 0xcb
        assert struct.unpack(">d", encoded[1:])[0] == number

    def test_whole_float_bytes(self):
        """Test the exact bytes of 1.0."""
        assert write_value(FloatValue(1.0)).hex() == "cb3ff0000000000000"

    @pytest.mark.parametrize("length,header", [
        (0, "a0"),
        (31, "bf"),
        (32, "d920"),
        (255, "d9ff"),
        (256, "da0100"),
        (65536, "db00010000"),
    ])
    def test_string_headers(self, length, header):
        """Test string markers by byte length."""
        encoded = write_value(StringValue("x" * length))

        assert encoded.hex().startswith(header)
        assert len(encoded) == len(header) // 2 + length

    def test_string_utf8_length(self):
        """Test that the header counts UTF-8 bytes, not characters."""
        assert write_value(StringValue("hello")).hex() == "a568656c6c6f"
        assert write_value(StringValue("é")).hex() == "a2c3a9"

    def test_lone_surrogate_string(self):
        """Test that a string that is not valid Unicode fails."""
        with pytest.raises(EncodeError):
            write_value(StringValue("\ud800"))

    def test_binary(self):
        """Test bin markers."""
        assert write_value(BytesValue(b"")).hex() == "c400"
        assert write_value(BytesValue(b"\x01\x02")).hex() == "c4020102"
        assert write_value(BytesValue(b"\x00" * 256)).hex().startswith("c50100")

    @pytest.mark.parametrize("type_code,data,expected", [
        (5, b"\x01", "d40501"),
        (5, b"\x01\x02", "d5050102"),
        (-1, b"\x00" * 4, "d6ff00000000"),
        (1, b"\x01\x02\x03", "c70301010203"),
        (2, b"", "c70002"),
    ])
    def test_extensions(self, type_code, data, expected):
        """Test fixext and ext markers."""
        assert write_value(ExtensionValue(type_code, data)).hex() == expected

    def test_extension_type_range(self):
        """Test that the type code must fit a signed byte."""
        with pytest.raises(EncodeError):
            write_value(ExtensionValue(200, b"\x01"))


class TestContainerEncoding:
    """Tests for arrays and maps."""

    def test_hello_map(self, hello_bytes):
        """Test a one-entry map."""
        value = MapValue(((StringValue("hello"), IntegerValue(123)),))

        assert write_value(value) == hello_bytes

    def test_array_headers(self):
        """Test fixarray and array16."""
        small = write_value(ArrayValue(tuple(IntegerValue(i) for i in range(15))))
        large = write_value(ArrayValue(tuple(IntegerValue(i) for i in range(16))))

        assert small[0] == 0x9f
        assert large[:3] == b"\xdc\x00\x10"

    def test_map16_header(self):
        """Test a map with sixteen entries."""
        entries = tuple((StringValue(str(i)), NullValue()) for i in range(16))

        assert write_value(MapValue(entries))[:3] == b"\xde\x00\x10"

    def test_duplicate_keys_written_in_order(self):
        """Test that duplicate keys are written as-is."""
        value = MapValue((
            (StringValue("a"), IntegerValue(1)),
            (StringValue("a"), IntegerValue(2)),
        ))

        assert write_value(value).hex() == "82a16101a16102"

    def test_empty_containers(self):
        """Test empty array and map."""
        assert write_value(ArrayValue()) == b"\x90"
        assert write_value(MapValue()) == b"\x80"

    def test_unsupported_value(self):
        """Test that non-value objects are rejected."""
        with pytest.raises(EncodeError):
            write_value(object())
