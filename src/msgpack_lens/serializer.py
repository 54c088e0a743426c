"""JSON text rendering of the tagged value tree."""

import base64
import json
import logging
import math
from typing import List, Optional

from .types import (
    ArrayValue,
    BoolValue,
    BytesValue,
    ExtensionValue,
    FloatValue,
    IntegerValue,
    MapValue,
    NullValue,
    StringValue,
    Value,
)


def quote(text: str) -> str:
    """Render a JSON string literal, keeping non-ASCII characters as-is."""
    return json.dumps(text, ensure_ascii=False)


def format_float(number: float) -> str:
    """
    Render a float as the shortest decimal that round-trips to the same bits.

    A ``.0`` suffix is forced when the text would otherwise read as an
    integer. Non-finite values have no JSON form and render as ``null``.
    """
    if not math.isfinite(number):
        return "null"
    text = repr(number)
    if not any(c in text for c in ".eE"):
        text += ".0"
    return text


def _base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def render_scalar(value: Value) -> str:
    """
    Render a non-container value as its JSON token.

    Extension blobs render inline as ``{"type": <tag>, "data": "<base64>"}``
    so that they still occupy a single token of text.
    """
    if isinstance(value, NullValue):
        return "null"
    if isinstance(value, BoolValue):
        return "true" if value.value else "false"
    if isinstance(value, IntegerValue):
        return value.digits
    if isinstance(value, FloatValue):
        return format_float(value.value)
    if isinstance(value, StringValue):
        return quote(value.value)
    if isinstance(value, BytesValue):
        return quote(_base64(value.value))
    if isinstance(value, ExtensionValue):
        return f'{{"type": {value.type_code}, "data": {quote(_base64(value.data))}}}'
    raise TypeError(f"Not a scalar value: {type(value).__name__}")


def _key_text(key: Value, quote_keys: bool) -> str:
    if isinstance(key, StringValue):
        return quote(key.value)
    out: List[str] = []
    # Keys nested inside this key stay bare so the text is quoted only once.
    _render_into(key, None, 0, out, quote_keys=False)
    text = "".join(out)
    return quote(text) if quote_keys else text


def render_key(key: Value) -> str:
    """
    Render a map key; keys that are not strings are quoted as text.

    A container key renders compactly and is quoted once as a whole, so
    ``{[1]: 2}`` used as a key becomes ``"{[1]:2}"``.
    """
    return _key_text(key, quote_keys=True)


def _render_into(value: Value, indent: Optional[int], level: int,
                 out: List[str], quote_keys: bool = True) -> None:
    if isinstance(value, ArrayValue):
        children = [(None, item) for item in value.items]
        opening, closing = "[", "]"
    elif isinstance(value, MapValue):
        children = [(_key_text(key, quote_keys), item) for key, item in value.entries]
        opening, closing = "{", "}"
    else:
        out.append(render_scalar(value))
        return

    if not children:
        out.append(opening + closing)
        return

    if indent is None:
        separator, inner, outer, colon = ",", "", "", ":"
    else:
        separator = ","
        inner = "\n" + " " * (indent * (level + 1))
        outer = "\n" + " " * (indent * level)
        colon = ": "

    out.append(opening)
    for index, (key_text, item) in enumerate(children):
        if index:
            out.append(separator)
        out.append(inner)
        if key_text is not None:
            out.append(key_text)
            out.append(colon)
        _render_into(item, indent, level + 1, out, quote_keys)
    out.append(outer)
    out.append(closing)


def render(value: Value, indent: Optional[int] = 2) -> str:
    """
    Render a value tree as JSON text.

    Args:
        value: Root of the value tree
        indent: Spaces per nesting level, or None for single-line output

    Returns:
        JSON text
    """
    out: List[str] = []
    _render_into(value, indent, 0, out)
    return "".join(out)


def _count_non_finite(value: Value) -> int:
    if isinstance(value, FloatValue):
        return 0 if math.isfinite(value.value) else 1
    if isinstance(value, ArrayValue):
        return sum(_count_non_finite(item) for item in value.items)
    if isinstance(value, MapValue):
        return sum(_count_non_finite(k) + _count_non_finite(v) for k, v in value.entries)
    return 0


class JSONSerializer:
    """
    Renders value trees as indented JSON text.

    Integers print every digit at any magnitude, floats print the shortest
    round-tripping decimal, and map keys keep their stored order.
    """

    def __init__(self, indent: Optional[int] = 2, logger: Optional[logging.Logger] = None):
        """
        Initialize the serializer.

        Args:
            indent: Spaces per nesting level (2 is the reference format),
                or None for single-line output
            logger: Optional logger instance
        """
        self.indent = indent
        self.logger = logger or logging.getLogger(__name__)

    def serialize(self, value: Value) -> str:
        """Render ``value`` as JSON text."""
        non_finite = _count_non_finite(value)
        if non_finite:
            self.logger.warning(f"{non_finite} non-finite float(s) have no JSON form "
                                f"and were rendered as null")
        return render(value, self.indent)
