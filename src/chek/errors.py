"""
chek: error taxonomy and failure factory.

File: src/chek/errors.py
Last updated: 2026-10-18

Purpose
- Define the closed set of machine-checkable failure codes.
- Build structured failures carrying a human message plus diagnostic context.

Functional requirements
- ``code`` is the only field callers should branch on.
- ``info`` (value, schema fragment, key, path, non-default options) is for
  diagnostics only and may be arbitrarily large.

Non-functional requirements
- Errors are returned as values; constructing one never raises.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Final

from chek.type_registry import UNDEFINED


class ErrorCode(StrEnum):
    MISSING_PARAM = "missingParam"
    BAD_PARAM = "badParam"
    BAD_KEY = "badParam"
    BAD_TYPE = "badType"
    BAD_VALUE = "badValue"
    BAD_SCHEMA = "badSchema"

    @classmethod
    def _missing_(cls, value: object) -> ErrorCode | None:
        # "badKey" is the historical spelling of "badParam".
        if value == "badKey":
            return cls.BAD_PARAM
        return None


CODE_DESCRIPTIONS: Final[dict[ErrorCode, str]] = {
    ErrorCode.MISSING_PARAM: "Missing Required Parameter",
    ErrorCode.BAD_PARAM: "Unrecognized Parameter",
    ErrorCode.BAD_TYPE: "Invalid Type",
    ErrorCode.BAD_VALUE: "Invalid Value",
    ErrorCode.BAD_SCHEMA: "Invalid Schema",
}


@dataclass(frozen=True, slots=True)
class ErrorInfo:
    """Diagnostic context captured at the failing position."""

    value: object = UNDEFINED
    schema: object = UNDEFINED
    key: str | int | None = None
    path: str = ""
    options: Mapping[str, bool] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"path": self.path}
        if self.key is not None:
            payload["key"] = self.key
        if self.value is not UNDEFINED:
            payload["value"] = _jsonable(self.value)
        if self.schema is not UNDEFINED:
            payload["schema"] = _jsonable(self.schema)
        if self.options:
            payload["options"] = dict(sorted(self.options.items()))
        return payload


class ChekError(ValueError):
    """A single validation failure.

    ``str(error)`` is ``"<description>: <detail>"``, for example
    ``"Missing Required Parameter: o1.s1"``.
    """

    def __init__(
        self,
        code: ErrorCode | str,
        detail: str,
        *,
        info: ErrorInfo | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.code = ErrorCode(code)
        self.detail = detail
        self.info = info if info is not None else ErrorInfo()
        self.cause = cause
        self.message = f"{CODE_DESCRIPTIONS[self.code]}: {detail}"
        super().__init__(self.message)
        if cause is not None:
            self.__cause__ = cause

    @property
    def path(self) -> str:
        return self.info.path

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": str(self.code),
            "message": self.message,
            "info": self.info.to_dict(),
        }
        if self.cause is not None:
            payload["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return payload

    def __repr__(self) -> str:
        return f"ChekError(code={str(self.code)!r}, message={self.message!r})"


def fail(
    code: ErrorCode | str,
    detail: str,
    *,
    value: object = UNDEFINED,
    schema: object = UNDEFINED,
    key: str | int | None = None,
    path: str = "",
    options: Mapping[str, bool] | None = None,
    cause: BaseException | None = None,
) -> ChekError:
    """Build a ``ChekError`` with diagnostic context."""

    return ChekError(
        code,
        detail,
        info=ErrorInfo(
            value=value,
            schema=schema,
            key=key,
            path=path,
            options=dict(options or {}),
        ),
        cause=cause,
    )


def is_error_code(value: object) -> bool:
    if not isinstance(value, str):
        return False
    try:
        ErrorCode(value)
    except ValueError:
        return False
    return True


def describe_location(path: str) -> str:
    """Render a dotted path for messages, naming the root explicitly."""

    return path or "<root>"


def _jsonable(value: object, depth: int = 0) -> Any:
    if depth > 32:
        return "..."
    if value is UNDEFINED:
        return "<undefined>"
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else repr(value)
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item, depth + 1) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item, depth + 1) for item in value]
    if callable(value):
        name = getattr(value, "__qualname__", None) or type(value).__name__
        return f"<function {name}>"
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)
    return value


__all__ = [
    "CODE_DESCRIPTIONS",
    "ChekError",
    "ErrorCode",
    "ErrorInfo",
    "describe_location",
    "fail",
    "is_error_code",
]
