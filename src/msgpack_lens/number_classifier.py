"""Classification of JSON number literals from their exact source text."""

from typing import Optional

from .types import IntWidth, NumberClass, NumberKind, ParseError

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
UINT32_MAX = 2 ** 32 - 1
INT64_MIN = -(2 ** 63)
UINT64_MAX = 2 ** 64 - 1

_DIGITS = "0123456789"


def _skip_digits(literal: str, i: int) -> int:
    while i < len(literal) and literal[i] in _DIGITS:
        i += 1
    return i


def find_malformed_position(literal: str) -> Optional[int]:
    """
    Walk the JSON number grammar over ``literal``.

    Returns:
        Index of the first character that breaks the grammar, or None when
        the whole literal is a well-formed JSON number.
    """
    n = len(literal)
    i = 0
    if i < n and literal[i] == "-":
        i += 1
    if i >= n or literal[i] not in _DIGITS:
        return i
    if literal[i] == "0":
        i += 1
    else:
        i = _skip_digits(literal, i)

    if i < n and literal[i] == ".":
        i += 1
        if i >= n or literal[i] not in _DIGITS:
            return i
        i = _skip_digits(literal, i)

    if i < n and literal[i] in "eE":
        i += 1
        if i < n and literal[i] in "+-":
            i += 1
        if i >= n or literal[i] not in _DIGITS:
            return i
        i = _skip_digits(literal, i)

    return i if i < n else None


def classify_number(literal: str, offset: int = 0) -> NumberClass:
    """
    Decide whether a numeric literal denotes a float or an integer.

    A literal is a float exactly when its text contains a decimal point or an
    exponent marker, regardless of its numeric value (``1.0`` is a float).
    Integers are further classified by the smallest width that holds them.

    Args:
        literal: Exact source text of the number
        offset: Absolute position of the literal, used in error reports

    Returns:
        NumberClass describing kind, sign and width

    Raises:
        ParseError: If the literal is malformed or is an integer outside the
            64-bit range
    """
    bad = find_malformed_position(literal)
    if bad is not None:
        if bad >= len(literal):
            raise ParseError("Unexpected end of number literal", offset + bad,
                             expected="digit")
        raise ParseError(f"Invalid character {literal[bad]!r} in number literal",
                         offset + bad, expected="digit")

    negative = literal.startswith("-")
    if "." in literal or "e" in literal or "E" in literal:
        return NumberClass(kind=NumberKind.FLOAT, negative=negative)

    value = int(literal)
    if INT32_MIN <= value <= INT32_MAX:
        width = IntWidth.INT32
    elif 0 <= value <= UINT32_MAX:
        width = IntWidth.UINT32
    elif INT64_MIN <= value <= UINT64_MAX:
        width = IntWidth.WIDE64
    else:
        raise ParseError(f"Integer {literal} does not fit in 64 bits", offset,
                         expected="integer within [-2^63, 2^64-1]")
    return NumberClass(kind=NumberKind.INTEGER, negative=negative, width=width)
