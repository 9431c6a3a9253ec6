"""
chek: schema-driven value validation and normalization.

File: src/chek/__init__.py
Last updated: 2026-10-18

Purpose
- Package root. Re-exports the small public API.

Functional requirements
- Must not have side effects at import time (no config loading, no logging init).

Key interfaces
- ``validate(value, schema, options)`` returns ``None`` or a ``ChekError``.
- ``normalize`` / ``assert_valid`` / ``check_schema`` / ``Validator``.
"""

from chek.errors import ChekError, ErrorCode, ErrorInfo
from chek.matching import match
from chek.meta_schema import META_SCHEMA
from chek.options import Options
from chek.type_registry import UNDEFINED, TypeRegistry, classify, is_type
from chek.validator import (
    ValidationResult,
    Validator,
    assert_valid,
    check_schema,
    normalize,
    validate,
)

__version__ = "0.4.0"

__all__ = [
    "META_SCHEMA",
    "UNDEFINED",
    "ChekError",
    "ErrorCode",
    "ErrorInfo",
    "Options",
    "TypeRegistry",
    "ValidationResult",
    "Validator",
    "__version__",
    "assert_valid",
    "check_schema",
    "classify",
    "is_type",
    "match",
    "normalize",
    "validate",
]
