"""
chek: recursive matcher.

File: src/chek/engine.py
Last updated: 2026-10-18

Purpose
- Walk a value and a schema node in lock-step, applying defaults, required
  checks, coercion, type checks and value rules at every position.

Functional requirements
- Order at every node: default, required, coerce, type, dispatch on kind
  (object / array / scalar), then ``validate``.
- Object fields: strict-key check first, then default-then-required for every
  declared field in schema order, then descent into present keys.
- The first failure ends the traversal and is returned unchanged.
- The schema is read-only; the value may be rewritten (defaults, coercions).

Non-functional requirements
- No shared state: everything a call needs travels in ``MatchContext``.
"""

from __future__ import annotations

import copy
import logging
import math
from collections.abc import Mapping, MutableMapping, MutableSequence
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Final

from chek.coerce import coerce
from chek.constants import COERCIBLE_TYPES, SCHEMA_NODE_KEYS
from chek.errors import ChekError, ErrorCode, describe_location, fail
from chek.invoke import invoke
from chek.matching import enum_members, match, strict_equals
from chek.options import Options
from chek.type_registry import UNDEFINED, TypeRegistry, is_missing

logger = logging.getLogger(__name__)

_MAX_DEFAULT_DEPTH: Final[int] = 64
_MAPPING_ATTRIBUTES: Final[frozenset[str]] = frozenset({"default", "value"})

MatchResult = tuple[object, ChekError | None]


@dataclass(frozen=True, slots=True)
class MatchContext:
    """Traversal bookkeeping threaded through one top-level call."""

    options: Options = field(default_factory=Options)
    registry: TypeRegistry = field(default_factory=TypeRegistry)
    root_value: object = UNDEFINED
    root_schema: object = UNDEFINED
    key: str | int | None = None
    path: str = ""
    strict: bool = False

    def child(self, key: str | int, *, strict: bool) -> MatchContext:
        return replace(self, key=key, path=join_path(self.path, key), strict=strict)

    def diagnostics(self) -> dict[str, bool]:
        return self.options.non_default()


def join_path(parent: str, key: str | int) -> str:
    """``join_path("o1", "a2")`` is ``"o1.a2"``; integer keys render as ``[i]``."""

    if isinstance(key, int) and not isinstance(key, bool):
        return f"{parent}[{key}]"
    if not parent:
        return str(key)
    return f"{parent}.{key}"


def match_node(value: object, node: object, context: MatchContext) -> MatchResult:
    """Check ``value`` against one schema node; return the (possibly rewritten) value."""

    if not isinstance(node, Mapping):
        return value, None
    options = context.options

    value, error = apply_default(value, node, context)
    if error is not None:
        return value, error
    error = check_required(value, node, context)
    if error is not None:
        return value, error

    declared = node.get("type", UNDEFINED)
    if (
        isinstance(value, str)
        and not options.do_not_coerce
        and isinstance(declared, str)
        and declared in COERCIBLE_TYPES
    ):
        value = coerce(value, declared)

    if isinstance(declared, str) and not is_missing(value):
        actual = context.registry.classify(value)
        if not match(actual, declared):
            return value, _fail(
                ErrorCode.BAD_TYPE,
                f"{describe_location(context.path)}: expected {declared}, got {actual}",
                value,
                node,
                context,
            )

    kind = value_kind(value)
    if options.log:
        logger.debug(
            "visit %s",
            describe_location(context.path),
            extra={
                "path": context.path,
                "kind": kind,
                "strict": _effective_strict(node, context),
                "schema_keys": sorted(str(key) for key in node),
            },
        )

    if kind == "object":
        value, error = _match_object(value, node, context)
    elif kind == "array":
        value, error = _match_array(value, node, context)
    else:
        error = _match_scalar(value, node, context)
    if error is not None:
        return value, error

    validator = node.get("validate", UNDEFINED)
    if callable(validator):
        error = _invoke(validator, value, node, context)
    return value, error


def value_kind(value: object) -> str:
    """Structural kind used for dispatch: ``object``, ``array`` or ``scalar``."""

    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return "scalar"


def apply_default(value: object, node: Mapping[str, object], context: MatchContext) -> MatchResult:
    """Substitute a deep copy of ``node["default"]`` when ``value`` is absent."""

    if context.options.ignore_defaults or value is not UNDEFINED or "default" not in node:
        return value, None
    if is_field_map(node):
        return value, None
    default = node["default"]
    if not is_json_compatible(default):
        return value, _fail(
            ErrorCode.BAD_SCHEMA,
            f"{describe_location(context.path)}: default is not JSON-serializable",
            value,
            node,
            context,
        )
    return copy.deepcopy(default), None


def check_required(
    value: object, node: Mapping[str, object], context: MatchContext
) -> ChekError | None:
    if context.options.ignore_required or node.get("required") is not True:
        return None
    if not is_missing(value):
        return None
    return _fail(
        ErrorCode.MISSING_PARAM,
        describe_location(context.path),
        value,
        node,
        context,
    )


def field_schema(node: Mapping[str, object]) -> Mapping[str, object]:
    """Nested ``value`` map for object-typed nodes, else the node's own keys."""

    nested = node.get("value", UNDEFINED)
    if match("object", node.get("type", UNDEFINED)) and isinstance(nested, Mapping):
        return nested
    return node


def is_field_map(node: Mapping[str, object]) -> bool:
    """True when ``node``'s own keys name fields rather than node attributes.

    Only ``default`` and ``value`` accept a mapping as an attribute, so a mapping
    under any other key marks the node as a field list, unless some attribute
    key holds a non-mapping. ``{"default": {...}, "x": {...}}`` has fields
    ``default`` and ``x``; ``{"default": {...}}`` is a node with an object default.
    """

    has_fields = False
    for key, entry in node.items():
        if not isinstance(entry, Mapping):
            if key in SCHEMA_NODE_KEYS:
                return False
        elif key not in _MAPPING_ATTRIBUTES:
            has_fields = True
    return has_fields


def is_json_compatible(value: object, _depth: int = 0) -> bool:
    """True when ``value`` survives a JSON round trip without loss."""

    if _depth > _MAX_DEFAULT_DEPTH:
        return False
    if value is None or isinstance(value, (bool, int, str)):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, (list, tuple)):
        return all(is_json_compatible(item, _depth + 1) for item in value)
    if isinstance(value, dict):
        return all(
            isinstance(key, str) and is_json_compatible(item, _depth + 1)
            for key, item in value.items()
        )
    return False


def _effective_strict(node: Mapping[str, object], context: MatchContext) -> bool:
    local = node.get("strict", UNDEFINED)
    return local if isinstance(local, bool) else context.strict


def _match_object(value: object, node: Mapping[str, object], context: MatchContext) -> MatchResult:
    assert isinstance(value, Mapping)
    fields = field_schema(node)
    strict = _effective_strict(node, context)
    updates: dict[object, object] = {}

    if strict:
        for key in value:
            if key not in fields:
                return value, _fail(
                    ErrorCode.BAD_PARAM,
                    join_path(context.path, str(key)),
                    value,
                    node,
                    context.child(str(key), strict=strict),
                )

    for name, child_node in fields.items():
        if not isinstance(child_node, Mapping):
            continue
        scoped = context.child(name, strict=strict)
        current = value.get(name, UNDEFINED)
        defaulted, error = apply_default(current, child_node, scoped)
        if error is not None:
            return _commit(value, updates), error
        if defaulted is not current:
            _store(value, updates, name, defaulted)
        error = check_required(defaulted, child_node, scoped)
        if error is not None:
            return _commit(value, updates), error

    for key in [*value, *(name for name in updates if name not in value)]:
        child_node = fields.get(key) if isinstance(key, str) else None
        if not isinstance(child_node, Mapping):
            continue
        current = updates.get(key, value.get(key, UNDEFINED))
        checked, error = match_node(current, child_node, context.child(key, strict=strict))
        if checked is not current:
            _store(value, updates, key, checked)
        if error is not None:
            return _commit(value, updates), error
    return _commit(value, updates), None


def _store(
    value: Mapping[object, object], updates: dict[object, object], key: object, item: object
) -> None:
    if isinstance(value, MutableMapping):
        value[key] = item
    else:
        updates[key] = item


def _commit(value: Mapping[object, object], updates: Mapping[object, object]) -> object:
    """Copy a read-only mapping into a ``dict`` carrying the pending ``updates``."""

    if not updates:
        return value
    return {**value, **updates}


def _match_array(value: object, node: Mapping[str, object], context: MatchContext) -> MatchResult:
    element = node.get("value", UNDEFINED)
    if not isinstance(element, Mapping) or is_field_map(node):
        return value, None
    assert isinstance(value, (list, tuple))
    strict = _effective_strict(node, context)
    items: MutableSequence[object] | None = value if isinstance(value, list) else None

    error: ChekError | None = None
    for index, item in enumerate(value):
        checked, error = match_node(item, element, context.child(index, strict=strict))
        if checked is not item:
            if items is None:
                items = list(value)
            items[index] = checked
        if error is not None:
            break
    if items is None or items is value:
        return value, error
    return tuple(items), error


def _match_scalar(
    value: object, node: Mapping[str, object], context: MatchContext
) -> ChekError | None:
    if is_missing(value):
        return None
    rule = node.get("value", UNDEFINED)
    if rule is UNDEFINED or isinstance(rule, Mapping):
        return None
    if callable(rule):
        return _invoke(rule, value, node, context)
    if isinstance(rule, str):
        if match(value, rule):
            return None
        return _fail(
            ErrorCode.BAD_VALUE,
            f"{describe_location(context.path)}: {value!r} is not one of "
            f"{', '.join(repr(member) for member in enum_members(rule))}",
            value,
            node,
            context,
        )
    if isinstance(rule, (bool, int, float, Decimal)):
        if strict_equals(rule, value):
            return None
        return _fail(
            ErrorCode.BAD_VALUE,
            f"{describe_location(context.path)}: expected {rule!r}, got {value!r}",
            value,
            node,
            context,
        )
    return _fail(
        ErrorCode.BAD_SCHEMA,
        f"{describe_location(context.path)}: unsupported value rule of type {type(rule).__name__}",
        value,
        node,
        context,
    )


def _invoke(
    fn: object, value: object, node: Mapping[str, object], context: MatchContext
) -> ChekError | None:
    assert callable(fn)
    return invoke(
        fn,
        value,
        root_value=context.root_value,
        key=context.key,
        path=context.path,
        untrusted=context.options.untrusted,
        schema=node,
        options=context.diagnostics(),
    )


def _fail(
    code: ErrorCode,
    detail: str,
    value: object,
    node: Mapping[str, object],
    context: MatchContext,
) -> ChekError:
    return fail(
        code,
        detail,
        value=value,
        schema=node,
        key=context.key,
        path=context.path,
        options=context.diagnostics(),
    )


__all__ = [
    "MatchContext",
    "MatchResult",
    "apply_default",
    "check_required",
    "field_schema",
    "is_field_map",
    "is_json_compatible",
    "join_path",
    "match_node",
    "value_kind",
]
