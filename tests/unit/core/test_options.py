"""
chek - unit tests for validation options

File: tests/unit/core/test_options.py
Last updated: 2026-10-18

Purpose
- Validate option parsing from camelCase and snake_case mappings.

What this test file should cover
- Unknown keys are ``badParam``; non-boolean values are ``badType``.
- Per-call overlays, whole-object replacement and the untrusted policy.
"""

from __future__ import annotations

import pytest

from chek.errors import ChekError, ErrorCode
from chek.options import Options, coerce_options


def test_defaults_are_all_false() -> None:
    options = Options()

    assert not any(
        (
            options.strict,
            options.ignore_defaults,
            options.ignore_required,
            options.do_not_coerce,
            options.untrusted,
            options.log,
        )
    )
    assert options.non_default() == {}


def test_from_mapping_accepts_both_spellings() -> None:
    options = Options.from_mapping(
        {"strict": True, "ignoreDefaults": True, "ignore_required": True, "doNotCoerce": True}
    )

    assert options.strict
    assert options.ignore_defaults
    assert options.ignore_required
    assert options.do_not_coerce
    assert options.non_default() == {
        "strict": True,
        "ignoreDefaults": True,
        "ignoreRequired": True,
        "doNotCoerce": True,
    }


def test_unknown_option_is_bad_param() -> None:
    with pytest.raises(ChekError) as excinfo:
        Options.from_mapping({"stric": True})

    assert excinfo.value.code is ErrorCode.BAD_PARAM
    assert excinfo.value.path == "options.stric"


def test_non_boolean_option_is_bad_type() -> None:
    with pytest.raises(ChekError, match="expected boolean, got str") as excinfo:
        Options.from_mapping({"strict": "yes"})

    assert excinfo.value.code is ErrorCode.BAD_TYPE


def test_merge_overlays_mappings_and_replaces_with_instances() -> None:
    base = Options(strict=True)

    assert base.merge(None) is base
    assert base.merge({"log": True}) == Options(strict=True, log=True)
    assert base.merge(Options(log=True)) == Options(log=True)


def test_merge_rejects_non_mapping() -> None:
    with pytest.raises(ChekError, match="expected object, got list") as excinfo:
        coerce_options(["strict"])  # type: ignore[arg-type]

    assert excinfo.value.code is ErrorCode.BAD_TYPE


def test_with_policy_returns_self_when_unchanged() -> None:
    options = Options(untrusted=True)

    assert options.with_policy(untrusted=True) is options
    assert options.with_policy(untrusted=False) == Options()
