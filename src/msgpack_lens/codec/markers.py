"""MessagePack format marker definitions"""

# Marker families encoded in the high bits of the first byte
POSITIVE_FIXINT_MAX = 0x7f
FIXMAP = 0x80
FIXMAP_MAX = 0x8f
FIXARRAY = 0x90
FIXARRAY_MAX = 0x9f
FIXSTR = 0xa0
FIXSTR_MAX = 0xbf
NEGATIVE_FIXINT = 0xe0

# Single-byte values
NIL = 0xc0
NEVER_USED = 0xc1
FALSE = 0xc2
TRUE = 0xc3

# Binary
BIN8 = 0xc4
BIN16 = 0xc5
BIN32 = 0xc6

# Extensions
EXT8 = 0xc7
EXT16 = 0xc8
EXT32 = 0xc9
FIXEXT1 = 0xd4
FIXEXT2 = 0xd5
FIXEXT4 = 0xd6
FIXEXT8 = 0xd7
FIXEXT16 = 0xd8

# Numbers
FLOAT32 = 0xca
FLOAT64 = 0xcb
UINT8 = 0xcc
UINT16 = 0xcd
UINT32 = 0xce
UINT64 = 0xcf
INT8 = 0xd0
INT16 = 0xd1
INT32 = 0xd2
INT64 = 0xd3

# Strings
STR8 = 0xd9
STR16 = 0xda
STR32 = 0xdb

# Containers with explicit counts
ARRAY16 = 0xdc
ARRAY32 = 0xdd
MAP16 = 0xde
MAP32 = 0xdf

# Payload layouts: marker -> (struct format, payload size)
UINT_FORMATS = {
    UINT8: (">B", 1),
    UINT16: (">H", 2),
    UINT32: (">I", 4),
    UINT64: (">Q", 8),
}
INT_FORMATS = {
    INT8: (">b", 1),
    INT16: (">h", 2),
    INT32: (">i", 4),
    INT64: (">q", 8),
}
FLOAT_FORMATS = {
    FLOAT32: (">f", 4),
    FLOAT64: (">d", 8),
}

# Length-prefixed families: marker -> (length format, length size)
STR_LENGTHS = {STR8: (">B", 1), STR16: (">H", 2), STR32: (">I", 4)}
BIN_LENGTHS = {BIN8: (">B", 1), BIN16: (">H", 2), BIN32: (">I", 4)}
EXT_LENGTHS = {EXT8: (">B", 1), EXT16: (">H", 2), EXT32: (">I", 4)}
ARRAY_LENGTHS = {ARRAY16: (">H", 2), ARRAY32: (">I", 4)}
MAP_LENGTHS = {MAP16: (">H", 2), MAP32: (">I", 4)}

# fixext marker -> payload size
FIXEXT_SIZES = {FIXEXT1: 1, FIXEXT2: 2, FIXEXT4: 4, FIXEXT8: 8, FIXEXT16: 16}
