"""Pure predicates for type-set membership, string enums, and exact values."""

from __future__ import annotations

from chek.constants import ENUM_SEPARATOR


def match(candidate: object, pipe_enum: object) -> bool:
    """True if ``candidate`` equals one token of ``pipe_enum``.

    ``match("bar", "foo|bar|baz")`` is true. Non-string enums never match, and
    neither do non-string candidates since every token is a string.
    """

    if not isinstance(pipe_enum, str):
        return False
    return any(member == candidate for member in pipe_enum.split(ENUM_SEPARATOR))


def enum_members(pipe_enum: str) -> tuple[str, ...]:
    return tuple(pipe_enum.split(ENUM_SEPARATOR))


def strict_equals(expected: object, actual: object) -> bool:
    """Value equality that never conflates booleans with numbers."""

    if isinstance(expected, bool) or isinstance(actual, bool):
        return isinstance(expected, bool) and isinstance(actual, bool) and expected is actual
    return bool(expected == actual)


__all__ = ["enum_members", "match", "strict_equals"]
