"""String-to-scalar coercion for values that arrive as text (query strings, env, CLI)."""

from __future__ import annotations

import re
from typing import Final

_FLOAT_PREFIX: Final[re.Pattern[str]] = re.compile(
    r"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)"
)
_INT_PREFIX: Final[re.Pattern[str]] = re.compile(r"\s*([+-]?\d+)")
_HEX_PREFIX: Final[re.Pattern[str]] = re.compile(r"\s*([+-]?)0[xX]")
_HEX_DIGITS: Final[re.Pattern[str]] = re.compile(r"[0-9a-fA-F]+")
_TRUTHY_WORDS: Final[frozenset[str]] = frozenset({"true", "yes"})


def coerce(value: object, target_type: object) -> object:
    """Coerce ``value`` to ``target_type`` when it is a string and the type is scalar.

    Anything else passes through unchanged. Never raises: a string that cannot be
    read as the requested type is returned as-is and fails the later type check.
    """

    if not isinstance(value, str):
        return value
    if target_type == "number":
        return coerce_number(value)
    if target_type == "boolean":
        return coerce_boolean(value)
    return value


def coerce_number(text: str) -> int | float | str:
    """Read ``text`` as a number, preferring the parse with the larger magnitude.

    The float parse wins when it carries information the integer parse truncates
    (``"1.7"``, ``"1e2"``); otherwise a non-zero integer parse wins so that
    integral strings stay ``int``. ``"0"`` is special-cased because a zero parse
    is indistinguishable from a failed one.
    """

    as_float = parse_float_prefix(text)
    as_int = parse_int_prefix(text)
    if as_float is not None and (as_int is None or abs(as_float) > abs(as_int)):
        return as_float
    if as_int:
        return as_int
    if text == "0":
        return 0
    return text


def coerce_boolean(text: str) -> bool:
    """``"true"``/``"yes"`` (any case) or a positive integer string are true."""

    if text.lower() in _TRUTHY_WORDS:
        return True
    as_int = parse_int_prefix(text)
    return as_int is not None and as_int > 0


def parse_float_prefix(text: str) -> float | None:
    """Parse the longest leading decimal float literal, or return ``None``."""

    matched = _FLOAT_PREFIX.match(text)
    if matched is None:
        return None
    try:
        parsed = float(matched.group(1))
    except (OverflowError, ValueError):
        return None
    return parsed


def parse_int_prefix(text: str) -> int | None:
    """Parse the longest leading integer literal, or return ``None``.

    A ``0x``/``0X`` prefix switches to hexadecimal; a prefix with no hex digits
    after it is not a number.
    """

    hexed = _HEX_PREFIX.match(text)
    if hexed is not None:
        digits = _HEX_DIGITS.match(text, hexed.end())
        if digits is None:
            return None
        magnitude = int(digits.group(), 16)
        return -magnitude if hexed.group(1) == "-" else magnitude
    matched = _INT_PREFIX.match(text)
    if matched is None:
        return None
    try:
        return int(matched.group(1))
    except ValueError:
        # Exceeds the interpreter's int string conversion limit.
        return None


__all__ = [
    "coerce",
    "coerce_boolean",
    "coerce_number",
    "parse_float_prefix",
    "parse_int_prefix",
]
