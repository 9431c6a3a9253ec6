"""
chek - unit tests for type classification

File: tests/unit/core/test_type_registry.py
Last updated: 2026-10-18

Purpose
- Pin the canonical type name of every built-in value class.

What this test file should cover
- Booleans are never numbers; ``None`` and the absent marker differ.
- Subclasses resolve to the nearest registered ancestor.
- Custom registries are isolated from each other and from the default one.
"""

from __future__ import annotations

import copy
import datetime as dt
import functools
import re
from collections import OrderedDict
from decimal import Decimal
from types import MappingProxyType

import pytest

from chek.type_registry import UNDEFINED, TypeRegistry, classify, is_missing, is_type


class _Money(Decimal):
    pass


class _Point:
    def __init__(self, x: int, y: int) -> None:
        self.x = x
        self.y = y


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (UNDEFINED, "undefined"),
        (None, "null"),
        (True, "boolean"),
        (False, "boolean"),
        (0, "number"),
        (1.5, "number"),
        (Decimal("2.5"), "number"),
        ("", "string"),
        ([], "array"),
        ((1, 2), "array"),
        ({}, "object"),
        (OrderedDict(), "object"),
        (MappingProxyType({}), "object"),
        (ValueError("boom"), "error"),
        (dt.date(2026, 1, 1), "date"),
        (dt.datetime(2026, 1, 1, 12, 0), "date"),
        (re.compile("x"), "regexp"),
        (lambda: None, "function"),
        (len, "function"),
        (functools.partial(int, base=2), "function"),
        (_Point(1, 2), "object"),
    ],
)
def test_classify_builtin_values(value: object, expected: str) -> None:
    assert classify(value) == expected


def test_subclass_resolves_to_nearest_registered_ancestor() -> None:
    assert classify(_Money("1")) == "number"

    registry = TypeRegistry({_Money: "money"})

    assert registry.classify(_Money("1")) == "money"
    assert registry.classify(Decimal("1")) == "number"


def test_custom_registry_does_not_leak_into_default() -> None:
    first = TypeRegistry()
    first.register(_Point, "point")
    second = first.copy()
    second.register(dt.timedelta, "duration")

    assert first.classify(_Point(0, 0)) == "point"
    assert first.classify(dt.timedelta(seconds=1)) == "object"
    assert second.classify(dt.timedelta(seconds=1)) == "duration"
    assert classify(_Point(0, 0)) == "object"
    assert "point" in first
    assert "point" not in TypeRegistry()
    assert is_type(_Point(0, 0), "point", first)


def test_register_rejects_bad_names_and_duplicates() -> None:
    registry = TypeRegistry()

    with pytest.raises(ValueError, match="invalid type name"):
        registry.register(_Point, "Point Type")
    with pytest.raises(ValueError, match="expected a class"):
        registry.register(_Point(0, 0), "point")  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="already registered"):
        registry.register(str, "text")


def test_names_are_sorted_and_include_builtins() -> None:
    names = TypeRegistry({_Point: "point"}).names()

    assert names == tuple(sorted(names))
    assert {"string", "number", "boolean", "object", "array", "point"} <= set(names)


def test_undefined_is_a_falsy_singleton() -> None:
    assert not UNDEFINED
    assert repr(UNDEFINED) == "UNDEFINED"
    assert copy.deepcopy(UNDEFINED) is UNDEFINED
    assert copy.copy({"x": UNDEFINED})["x"] is UNDEFINED


def test_is_missing_covers_absent_and_null_only() -> None:
    assert is_missing(UNDEFINED)
    assert is_missing(None)
    assert not is_missing(0)
    assert not is_missing("")
    assert not is_missing(False)
