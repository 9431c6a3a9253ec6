"""Stable constants shared across the chek engine, config, and CLI."""

from __future__ import annotations

from typing import Final

# Schema versions for persisted contracts.
CONFIG_SCHEMA_VERSION: Final[int] = 1

# Root logger namespace for every library module.
LOGGER_NAME: Final[str] = "chek"

# Separator for type sets ("string|number") and string enums ("foo|bar").
ENUM_SEPARATOR: Final[str] = "|"

# Canonical type names known to every registry.
BUILTIN_TYPE_NAMES: Final[tuple[str, ...]] = (
    "undefined",
    "null",
    "boolean",
    "number",
    "string",
    "array",
    "object",
    "function",
    "error",
    "date",
    "regexp",
)

# Declared types that trigger string coercion.
COERCIBLE_TYPES: Final[frozenset[str]] = frozenset({"number", "boolean"})

# Node attributes understood by the engine.
SCHEMA_NODE_KEYS: Final[tuple[str, ...]] = (
    "type",
    "required",
    "default",
    "value",
    "strict",
    "validate",
)

__all__ = [
    "BUILTIN_TYPE_NAMES",
    "COERCIBLE_TYPES",
    "CONFIG_SCHEMA_VERSION",
    "ENUM_SEPARATOR",
    "LOGGER_NAME",
    "SCHEMA_NODE_KEYS",
]
