#!/usr/bin/env python3
"""
Example usage of the MessagePack Lens.

This script converts a JSON document to MessagePack, renders it back, and
shows which bytes produce a selected piece of the rendered text.
"""

from msgpack_lens import (
    ConversionError,
    MsgpackConverter,
    byte_range_to_hex_char_range,
)


def main():
    """Main example function."""
    print("MessagePack Lens Example")
    print("=" * 50)

    json_string = """{
  "id": 57602261053,
  "name": "Widget",
  "price": 10.0,
  "tags": ["a", "b"],
  "max": 18446744073709551615
}"""
    print(f"Original JSON size: {len(json_string)} characters")

    converter = MsgpackConverter()

    try:
        encoded = converter.json_to_msgpack(json_string)
    except ConversionError as e:
        print(f"❌ Failed to encode JSON: {e}")
        return

    hex_dump = " ".join(f"{b:02X}" for b in encoded)
    print(f"✅ Encoded {len(encoded)} bytes:")
    print(f"   {hex_dump}\n")

    text = converter.msgpack_to_json(encoded)
    print("Rendered back as JSON:")
    print(text)

    mappings = converter.build_mappings(encoded, text)
    print(f"\n{len(mappings)} tokens mapped")

    # Select the "price" value in the rendered text
    start = text.index("10.0")
    byte_range = converter.query_byte_range_for_text_range(mappings, start, start + 4)
    if byte_range is not None:
        hex_range = byte_range_to_hex_char_range(byte_range.start, byte_range.end)
        print(f"Text 10.0 is bytes [{byte_range.start}:{byte_range.end}]: "
              f"{hex_dump[hex_range.start:hex_range.end]}")


if __name__ == "__main__":
    main()
