"""
chek: schema self-check.

File: src/chek/meta_schema.py
Last updated: 2026-10-18

Purpose
- Reject malformed schemas before any value is examined, so that callers can
  tell "your rules are invalid" (``badSchema``) from "your data is invalid".

Functional requirements
- Every schema node is checked against ``META_SCHEMA`` using the recursive
  matcher itself, with defaults and coercion disabled.
- A mapping whose own keys name fields (``is_field_map``) has every mapping
  entry checked as a node, including fields literally called ``type``,
  ``value`` or ``default``. Any other mapping is checked as a node.
- Nested ``value`` schemas and field entries are checked recursively.
- ``default`` values must survive a JSON round trip.
- Under ``untrusted``, any function ``value`` or ``validate`` is rejected.
- Self-referential schemas are rejected instead of recursing forever.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from chek.constants import SCHEMA_NODE_KEYS
from chek.engine import MatchContext, is_field_map, is_json_compatible, join_path, match_node
from chek.errors import ChekError, ErrorCode, describe_location, fail
from chek.options import Options
from chek.type_registry import TypeRegistry, classify, is_missing

META_SCHEMA: Final[Mapping[str, Mapping[str, object]]] = MappingProxyType(
    {
        "type": MappingProxyType({"type": "string"}),
        "required": MappingProxyType({"type": "boolean"}),
        "default": MappingProxyType({}),
        "value": MappingProxyType({"type": "string|number|boolean|object|function"}),
        "strict": MappingProxyType({"type": "boolean"}),
        "validate": MappingProxyType({"type": "function"}),
    }
)

_META_OPTIONS: Final[Options] = Options(ignore_defaults=True, do_not_coerce=True)


def check_schema(
    schema: object,
    *,
    untrusted: bool = False,
    registry: TypeRegistry | None = None,
) -> ChekError | None:
    """Return ``None`` when ``schema`` is well-formed, else a ``ChekError``."""

    if is_missing(schema):
        return fail(ErrorCode.MISSING_PARAM, "schema is required", schema=schema)
    if not isinstance(schema, Mapping):
        return fail(
            ErrorCode.BAD_SCHEMA,
            f"schema must be an object, got {classify(schema)}",
            schema=schema,
        )
    checker = _SchemaChecker(untrusted=untrusted, registry=registry or TypeRegistry())
    return checker.check(schema, "")


class _SchemaChecker:
    __slots__ = ("_active", "_registry", "_untrusted")

    def __init__(self, *, untrusted: bool, registry: TypeRegistry) -> None:
        self._untrusted = untrusted
        self._registry = registry
        self._active: set[int] = set()

    def check(self, schema: Mapping[str, object], path: str) -> ChekError | None:
        marker = id(schema)
        if marker in self._active:
            return _schema_error(
                f"{describe_location(path)}: schema is self-referential", schema, path
            )
        self._active.add(marker)
        try:
            if is_field_map(schema):
                return self._check_fields(schema, path)
            node_error = self._check_node(schema, path)
            if node_error is not None:
                return node_error
            return self._check_children(schema, path)
        finally:
            self._active.discard(marker)

    def _check_node(self, node: Mapping[str, object], path: str) -> ChekError | None:
        context = MatchContext(
            options=_META_OPTIONS,
            registry=self._registry,
            root_value=node,
            root_schema=META_SCHEMA,
            path=path,
        )
        _, error = match_node(node, META_SCHEMA, context)
        if error is not None:
            return fail(
                ErrorCode.BAD_SCHEMA,
                error.message,
                value=error.info.value,
                schema=node,
                key=error.info.key,
                path=error.path,
                cause=error,
            )

        if "default" in node and not is_json_compatible(node["default"]):
            return _schema_error(
                f"{join_path(path, 'default')}: default is not JSON-serializable",
                node,
                path,
            )
        if self._untrusted:
            for attribute in ("value", "validate"):
                if callable(node.get(attribute)):
                    return _schema_error(
                        f"{describe_location(path)}: function {attribute} is not allowed "
                        "for untrusted schemas",
                        node,
                        path,
                    )
        return None

    def _check_children(self, node: Mapping[str, object], path: str) -> ChekError | None:
        nested = node.get("value")
        if isinstance(nested, Mapping):
            error = self.check(nested, path)
            if error is not None:
                return error
        for key, entry in node.items():
            if key in SCHEMA_NODE_KEYS or not isinstance(entry, Mapping):
                continue
            error = self.check(entry, join_path(path, key))
            if error is not None:
                return error
        return None

    def _check_fields(self, fields: Mapping[str, object], path: str) -> ChekError | None:
        for key, entry in fields.items():
            if not isinstance(entry, Mapping):
                continue
            error = self.check(entry, join_path(path, key))
            if error is not None:
                return error
        return None


def _schema_error(detail: str, schema: Mapping[str, object], path: str) -> ChekError:
    return fail(ErrorCode.BAD_SCHEMA, detail, schema=schema, path=path)


__all__ = ["META_SCHEMA", "check_schema"]
