"""MessagePack reader and writer for the tagged value tree."""

from .reader import decode_msgpack, read_container_header, read_value
from .writer import write_value

__all__ = ["decode_msgpack", "read_container_header", "read_value", "write_value"]
