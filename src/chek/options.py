"""Validation options threaded through a single top-level call."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Final

from chek.errors import ErrorCode, fail

_CAMEL_CASE_BOUNDARY: Final[re.Pattern[str]] = re.compile(r"([a-z0-9])([A-Z])")

# Option spellings as they appear in error payloads and schemas from other tools.
_CAMEL_NAMES: Final[dict[str, str]] = {
    "strict": "strict",
    "ignore_defaults": "ignoreDefaults",
    "ignore_required": "ignoreRequired",
    "do_not_coerce": "doNotCoerce",
    "untrusted": "untrusted",
    "log": "log",
}


@dataclass(frozen=True, slots=True)
class Options:
    """Ambient validation options; every flag defaults to ``False``."""

    strict: bool = False
    ignore_defaults: bool = False
    ignore_required: bool = False
    do_not_coerce: bool = False
    untrusted: bool = False
    log: bool = False

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object] | None) -> Options:
        """Build options from camelCase or snake_case keys.

        Raises ``ChekError`` (``badParam`` for unknown keys, ``badType`` for
        non-boolean values); the public entry points return it instead.
        """

        if raw is None:
            return cls()
        return cls().overlay(raw)

    def overlay(self, raw: Mapping[str, object]) -> Options:
        """Return a copy with ``raw`` applied on top of these options."""

        known = {item.name for item in fields(self)}
        changes: dict[str, bool] = {}
        for key in raw:
            name = _snake_name(key) if isinstance(key, str) else ""
            if name not in known:
                raise fail(
                    ErrorCode.BAD_PARAM,
                    f"options.{key}",
                    value=dict(raw),
                    key=str(key),
                    path=f"options.{key}",
                )
            flag = raw[key]
            if not isinstance(flag, bool):
                raise fail(
                    ErrorCode.BAD_TYPE,
                    f"options.{key}: expected boolean, got {type(flag).__name__}",
                    value=flag,
                    key=str(key),
                    path=f"options.{key}",
                )
            changes[name] = flag
        return replace(self, **changes)

    def merge(self, other: Options | Mapping[str, object] | None) -> Options:
        """Apply per-call options on top of these instance defaults."""

        if other is None:
            return self
        if isinstance(other, Options):
            return other
        if not isinstance(other, Mapping):
            raise fail(
                ErrorCode.BAD_TYPE,
                f"options: expected object, got {type(other).__name__}",
                value=other,
                path="options",
            )
        return self.overlay(other)

    def with_policy(self, *, untrusted: bool) -> Options:
        if untrusted == self.untrusted:
            return self
        return replace(self, untrusted=untrusted)

    def non_default(self) -> dict[str, bool]:
        """Options that differ from the defaults, keyed by their camelCase names."""

        return {
            _CAMEL_NAMES[item.name]: True
            for item in fields(self)
            if getattr(self, item.name)
        }


def coerce_options(raw: Options | Mapping[str, object] | None) -> Options:
    return Options().merge(raw)


def _snake_name(key: str) -> str:
    return _CAMEL_CASE_BOUNDARY.sub(r"\1_\2", key.strip()).lower()


__all__ = ["Options", "coerce_options"]
