"""Core type definitions for the MessagePack Lens."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple, Union


# Nesting limit shared by the parser, reader and correlator.
DEFAULT_MAX_DEPTH = 256


class ErrorType(Enum):
    """Enumeration of error types."""
    PARSE = "parse"
    DECODE = "decode"
    ENCODE = "encode"


class NumberKind(Enum):
    """Kind of a numeric literal as written in the source text."""
    INTEGER = "integer"
    FLOAT = "float"


class IntWidth(Enum):
    """Smallest width class that holds an integer literal."""
    INT32 = "int32"
    UINT32 = "uint32"
    WIDE64 = "64-bit"


class FloatOrigin(Enum):
    """Where a float value came from."""
    LITERAL = "literal"
    DECODED = "decoded"


class MappingKind(Enum):
    """Role of a mapped token inside its container."""
    KEY = "key"
    VALUE = "value"


class ContainerKind(Enum):
    """Structural container families of the binary format."""
    ARRAY = "array"
    MAP = "map"


# Value tree

@dataclass(frozen=True)
class NullValue:
    """JSON null / MessagePack nil."""


@dataclass(frozen=True)
class BoolValue:
    value: bool


@dataclass(frozen=True)
class IntegerValue:
    """
    Integer of exact magnitude.

    Python integers are unbounded, so the exact digit sequence of values
    beyond the range of a double is simply ``str(value)``.
    """
    value: int
    signed: bool = False

    @property
    def digits(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class FloatValue:
    value: float
    origin: FloatOrigin = FloatOrigin.LITERAL


@dataclass(frozen=True)
class StringValue:
    value: str


@dataclass(frozen=True)
class BytesValue:
    value: bytes


@dataclass(frozen=True)
class ExtensionValue:
    """Opaque extension payload; never interpreted."""
    type_code: int
    data: bytes


@dataclass(frozen=True)
class ArrayValue:
    items: Tuple["Value", ...] = ()


@dataclass(frozen=True)
class MapValue:
    """Ordered key/value pairs. Duplicate keys are kept as-is."""
    entries: Tuple[Tuple["Value", "Value"], ...] = ()


Value = Union[
    NullValue,
    BoolValue,
    IntegerValue,
    FloatValue,
    StringValue,
    BytesValue,
    ExtensionValue,
    ArrayValue,
    MapValue,
]


@dataclass(frozen=True)
class NumberClass:
    """
    Classification of a numeric literal.

    ``width`` is descriptive only: the writer picks the marker from the
    integer's value, which gives the same or a narrower encoding.
    """
    kind: NumberKind
    negative: bool
    width: Optional[IntWidth] = None


# Position mapping

@dataclass(frozen=True)
class TextRange:
    """Half-open character range ``[start, end)``."""
    start: int
    end: int


@dataclass(frozen=True)
class ByteRange:
    """Half-open byte range ``[start, end)``."""
    start: int
    end: int


@dataclass(frozen=True)
class PositionMapping:
    """Correlates one rendered token with the bytes that encode it."""
    text_range: TextRange
    byte_range: ByteRange
    kind: MappingKind


# Validation results

@dataclass
class ValidationError:
    """Validation error details."""
    type: ErrorType
    message: str
    location: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of input validation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[str] = field(default_factory=list)


@dataclass
class ErrorResponse:
    """Response for error handling."""
    can_recover: bool
    suggested_action: str
    location: Optional[str] = None


# Exceptions

class ConversionError(Exception):
    """Base exception for every conversion failure."""

    def __init__(self, message: str, error_type: ErrorType,
                 offset: Optional[int] = None, context: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.offset = offset
        self.context = context


class ParseError(ConversionError):
    """Malformed JSON text."""

    def __init__(self, message: str, offset: int, expected: Optional[str] = None,
                 line: Optional[int] = None, column: Optional[int] = None):
        location = f" at line {line}, column {column}" if line is not None else ""
        super().__init__(f"{message}{location} (char {offset})", ErrorType.PARSE, offset)
        self.reason = message
        self.expected = expected
        self.line = line
        self.column = column


class DecodeError(ConversionError):
    """Malformed or truncated MessagePack bytes."""

    def __init__(self, message: str, offset: int, marker: Optional[int] = None):
        marker_text = f" (marker 0x{marker:02x})" if marker is not None else ""
        super().__init__(f"{message} at byte offset {offset}{marker_text}",
                         ErrorType.DECODE, offset)
        self.reason = message
        self.marker = marker


class EncodeError(ConversionError):
    """A value tree that cannot be written; not reachable from parsed JSON."""

    def __init__(self, message: str, context: Optional[Any] = None):
        super().__init__(message, ErrorType.ENCODE, context=context)
