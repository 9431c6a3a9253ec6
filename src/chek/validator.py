"""Public entry points: ``validate``, ``normalize``, ``assert_valid`` and ``Validator``."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

from chek.engine import MatchContext, MatchResult, match_node
from chek.errors import ChekError, ErrorCode, fail
from chek.meta_schema import check_schema
from chek.options import Options, coerce_options
from chek.type_registry import UNDEFINED, TypeRegistry

logger = logging.getLogger(__name__)

OptionsLike = Options | Mapping[str, object] | None


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of ``normalize``: the normalized value tree and the first failure."""

    value: object
    error: ChekError | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None


class Validator:
    """A validation engine bound to one type vocabulary and one trust policy.

    ``untrusted`` is fixed at construction: per-call options may turn it on
    but never off. ``options`` are instance defaults; per-call options are
    applied on top of them.
    """

    __slots__ = ("_options", "_registry", "_untrusted")

    def __init__(
        self,
        *,
        untrusted: bool = False,
        registry: TypeRegistry | None = None,
        options: OptionsLike = None,
    ) -> None:
        self._options = coerce_options(options)
        self._untrusted = untrusted or self._options.untrusted
        self._registry = registry if registry is not None else TypeRegistry()

    @property
    def untrusted(self) -> bool:
        return self._untrusted

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    @property
    def options(self) -> Options:
        return self._options.with_policy(untrusted=self._untrusted)

    def register_type(self, cls: type, name: str) -> None:
        """Teach this validator's registry a custom type name."""

        self._registry.register(cls, name)

    def check_schema(self, schema: object) -> ChekError | None:
        return check_schema(schema, untrusted=self._untrusted, registry=self._registry)

    def validate(
        self,
        value: object = UNDEFINED,
        schema: object = UNDEFINED,
        options: OptionsLike = None,
    ) -> ChekError | None:
        """Check ``value`` in place; return ``None`` on success or the first failure.

        Defaults and coercions are written into ``value`` itself. A read-only
        mapping (or a tuple) that needs rewriting is replaced by a copy, which
        only ``normalize`` hands back.
        """

        _, error = self._run(value, schema, options)
        return error

    def normalize(
        self,
        value: object,
        schema: object,
        options: OptionsLike = None,
    ) -> ValidationResult:
        """Check a deep copy of ``value`` and return the normalized copy.

        The caller's value is never touched.
        """

        try:
            candidate = copy.deepcopy(value)
        except (TypeError, copy.Error) as exc:
            return ValidationResult(
                value,
                fail(
                    ErrorCode.BAD_VALUE,
                    f"value cannot be copied: {exc}",
                    value=value,
                    cause=exc,
                ),
            )
        checked, error = self._run(candidate, schema, options)
        return ValidationResult(checked, error)

    def assert_valid(
        self,
        value: object,
        schema: object,
        options: OptionsLike = None,
    ) -> object:
        """Like ``validate`` but raise the ``ChekError``; return the checked value."""

        checked, error = self._run(value, schema, options)
        if error is not None:
            raise error
        return checked

    def _run(self, value: object, schema: object, options: OptionsLike) -> MatchResult:
        try:
            resolved = self._resolve_options(options)
        except ChekError as exc:
            return value, exc

        error = check_schema(schema, untrusted=resolved.untrusted, registry=self._registry)
        if error is None:
            context = MatchContext(
                options=resolved,
                registry=self._registry,
                root_value=value,
                root_schema=schema,
                strict=resolved.strict,
            )
            value, error = match_node(value, schema, context)

        if error is not None:
            logger.debug(
                "validation failed: %s",
                error.message,
                extra={"code": str(error.code), "path": error.path},
            )
        return value, error

    def _resolve_options(self, options: OptionsLike) -> Options:
        merged = self._options.merge(options)
        return merged.with_policy(untrusted=self._untrusted or merged.untrusted)


_DEFAULT_VALIDATOR: Final[Validator] = Validator()


def validate(
    value: object = UNDEFINED,
    schema: object = UNDEFINED,
    options: OptionsLike = None,
) -> ChekError | None:
    """Check ``value`` against ``schema`` in place.

    Returns ``None`` when the value conforms, otherwise the first
    ``ChekError``. Never raises for invalid input, schemas or options.
    """

    return _DEFAULT_VALIDATOR.validate(value, schema, options)


def normalize(value: object, schema: object, options: OptionsLike = None) -> ValidationResult:
    return _DEFAULT_VALIDATOR.normalize(value, schema, options)


def assert_valid(value: object, schema: object, options: OptionsLike = None) -> object:
    return _DEFAULT_VALIDATOR.assert_valid(value, schema, options)


__all__ = [
    "OptionsLike",
    "ValidationResult",
    "Validator",
    "assert_valid",
    "check_schema",
    "normalize",
    "validate",
]
