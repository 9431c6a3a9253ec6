"""
chek: isolated invocation of caller-supplied validator functions.

File: src/chek/invoke.py
Last updated: 2026-10-18

Purpose
- Run a schema's function ``value`` or ``validate`` against a candidate value.
- Normalize whatever the function returns into ``ChekError | None``.

Functional requirements
- Under the ``untrusted`` policy the function is never called.
- An exception raised by the function is a broken schema (``badSchema``), not
  an invalid value, and never escapes to the caller.
- Falsy return means success; a returned ``ChekError`` is used as is; any other
  truthy return is wrapped.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from typing import Final

from chek.errors import ChekError, ErrorCode, describe_location, fail, is_error_code
from chek.type_registry import UNDEFINED

_MAX_ARGUMENTS: Final[int] = 3
_POSITIONAL_KINDS: Final = frozenset(
    {inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD}
)


def invoke(
    fn: Callable[..., object],
    value: object,
    *,
    root_value: object = UNDEFINED,
    key: str | int | None = None,
    path: str = "",
    untrusted: bool = False,
    schema: object = UNDEFINED,
    options: Mapping[str, bool] | None = None,
) -> ChekError | None:
    """Call ``fn`` against ``value`` and translate the outcome."""

    context = {
        "value": value,
        "schema": schema,
        "key": key,
        "path": path,
        "options": options,
    }
    where = describe_location(path)
    if untrusted:
        return fail(
            ErrorCode.BAD_SCHEMA,
            f"{where}: function validators are not allowed for untrusted schemas",
            **context,
        )

    arguments = (value, root_value, key)[: accepted_arity(fn)]
    try:
        outcome = fn(*arguments)
    except Exception as exc:
        return fail(
            ErrorCode.BAD_SCHEMA,
            f"{where}: validator raised {type(exc).__name__}: {exc}",
            cause=exc,
            **context,
        )

    if not outcome:
        return None
    if isinstance(outcome, ChekError):
        return outcome
    if isinstance(outcome, BaseException):
        raw_code = getattr(outcome, "code", None)
        code = ErrorCode(raw_code) if is_error_code(raw_code) else ErrorCode.BAD_VALUE
        return fail(code, f"{where}: {outcome}", cause=outcome, **context)
    return fail(ErrorCode.BAD_VALUE, f"{where}: {outcome}", **context)


def accepted_arity(fn: Callable[..., object]) -> int:
    """How many of ``(value, root_value, key)`` ``fn`` can take positionally.

    Callables whose signature cannot be introspected (some builtins) get the
    value only.
    """

    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return 1
    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return _MAX_ARGUMENTS
        if parameter.kind in _POSITIONAL_KINDS:
            count += 1
    return max(1, min(count, _MAX_ARGUMENTS))


__all__ = ["accepted_arity", "invoke"]
