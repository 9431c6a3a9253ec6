"""Canonical type-name classification with an injectable registry."""

from __future__ import annotations

import datetime as _dt
import functools
import re
import types
from collections.abc import Mapping
from decimal import Decimal
from typing import Final

from chek.constants import BUILTIN_TYPE_NAMES

_TYPE_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-z][a-zA-Z0-9_]*$")


class _Undefined:
    """Marker for a value that is absent, as opposed to ``None``."""

    __slots__ = ()
    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Undefined:
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> _Undefined:
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Final[_Undefined] = _Undefined()

_BUILTIN_CLASSES: Final[tuple[tuple[type, str], ...]] = (
    (_Undefined, "undefined"),
    (type(None), "null"),
    (bool, "boolean"),
    (int, "number"),
    (float, "number"),
    (Decimal, "number"),
    (str, "string"),
    (list, "array"),
    (tuple, "array"),
    (dict, "object"),
    (BaseException, "error"),
    (_dt.date, "date"),
    (re.Pattern, "regexp"),
    (types.FunctionType, "function"),
    (types.BuiltinFunctionType, "function"),
    (types.MethodType, "function"),
    (functools.partial, "function"),
)


class TypeRegistry:
    """Maps Python classes to canonical type names.

    Resolution walks the value's MRO, so a subclass of a registered class
    resolves to the nearest registered ancestor. Registries are plain
    objects: construct one per vocabulary and pass it where it is needed.
    """

    __slots__ = ("_by_class", "_names")

    def __init__(self, extra: Mapping[type, str] | None = None) -> None:
        self._by_class: dict[type, str] = dict(_BUILTIN_CLASSES)
        self._names: set[str] = set(BUILTIN_TYPE_NAMES)
        for cls, name in (extra or {}).items():
            self.register(cls, name)

    def register(self, cls: type, name: str) -> None:
        """Register ``cls`` under the canonical ``name``."""

        if not isinstance(cls, type):
            raise ValueError(f"expected a class, got {type(cls).__name__}")
        if not isinstance(name, str) or not _TYPE_NAME_PATTERN.fullmatch(name):
            raise ValueError(f"invalid type name {name!r}")
        if cls in self._by_class:
            raise ValueError(
                f"class {cls.__qualname__} is already registered as {self._by_class[cls]!r}"
            )
        self._by_class[cls] = name
        self._names.add(name)

    def classify(self, value: object) -> str:
        for klass in type(value).__mro__:
            name = self._by_class.get(klass)
            if name is not None:
                return name
        if isinstance(value, Mapping):
            return "object"
        if callable(value):
            return "function"
        return "object"

    def is_type(self, value: object, name: str) -> bool:
        return self.classify(value) == name

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._names))

    def copy(self) -> TypeRegistry:
        clone = TypeRegistry()
        clone._by_class = dict(self._by_class)
        clone._names = set(self._names)
        return clone

    def __contains__(self, name: object) -> bool:
        return name in self._names


_BUILTIN_REGISTRY: Final[TypeRegistry] = TypeRegistry()


def classify(value: object, registry: TypeRegistry | None = None) -> str:
    """Return the canonical type name of ``value``."""

    resolved = registry if registry is not None else _BUILTIN_REGISTRY
    return resolved.classify(value)


def is_type(value: object, name: str, registry: TypeRegistry | None = None) -> bool:
    resolved = registry if registry is not None else _BUILTIN_REGISTRY
    return resolved.is_type(value, name)


def is_missing(value: object) -> bool:
    """True for absent or ``None`` values."""

    return value is UNDEFINED or value is None


__all__ = [
    "UNDEFINED",
    "TypeRegistry",
    "classify",
    "is_missing",
    "is_type",
]
