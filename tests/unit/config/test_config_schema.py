"""
chek - unit tests for config schema validation

File: tests/unit/config/test_config_schema.py
Last updated: 2026-10-18

Purpose
- Validate strict config validation, profile overlays, and deterministic merges.

What this test file should cover
- Defaults validate cleanly.
- Unknown keys, wrong types, and missing sections yield structured issues.
- Built-in profiles (strict, untrusted, lenient) resolve to the documented options.

Functional requirements
- Issues carry dotted field paths.
"""

from __future__ import annotations

import pytest

from chek.config.schema import (
    BUILTIN_PROFILE_NAMES,
    DEFAULT_CONFIG,
    ConfigValidationError,
    apply_profile_overlay,
    assert_valid_config,
    default_config,
    merge_config,
    migration_guidance,
    validate_config,
)


def _issue_map(config: object, **kwargs: object) -> dict[str, str]:
    result = validate_config(config, **kwargs)  # type: ignore[arg-type]
    assert not result.is_valid
    return {issue.path: issue.message for issue in result.issues}


def test_default_config_is_valid() -> None:
    validated = assert_valid_config(default_config())

    assert validated["options"] == DEFAULT_CONFIG["options"]
    assert validated["logging"] == {"level": "WARNING", "format": "text"}
    assert sorted(validated["profiles"]) == sorted(BUILTIN_PROFILE_NAMES)


def test_default_config_returns_independent_copies() -> None:
    first = default_config()
    first["options"]["strict"] = True

    assert default_config()["options"]["strict"] is False


def test_unknown_fields_are_rejected() -> None:
    config = merge_config(default_config(), {"options": {"bogus": True}, "extra": {}})

    issues = _issue_map(config)

    assert issues["options.bogus"] == "unknown field"
    assert issues["extra"] == "unknown field"


def test_option_values_must_be_booleans() -> None:
    config = merge_config(default_config(), {"options": {"strict": "yes"}})

    assert _issue_map(config) == {"options.strict": "expected boolean, got str"}


def test_missing_sections_are_reported() -> None:
    issues = _issue_map({"meta": {"schema_version": 1}})

    assert issues["options"] == "missing required field"
    assert issues["logging"] == "missing required field"


def test_non_mapping_root_is_rejected() -> None:
    assert _issue_map(["not", "a", "table"]) == {"<root>": "expected object, got list"}


def test_logging_level_is_normalized_and_checked() -> None:
    lowered = merge_config(default_config(), {"logging": {"level": "debug"}})
    bogus = merge_config(default_config(), {"logging": {"level": "LOUD", "format": "xml"}})

    assert assert_valid_config(lowered)["logging"]["level"] == "DEBUG"
    issues = _issue_map(bogus)
    assert "expected one of" in issues["logging.level"]
    assert "expected one of" in issues["logging.format"]


def test_schema_version_mismatch_includes_migration_guidance() -> None:
    config = merge_config(default_config(), {"meta": {"schema_version": 2}})

    assert _issue_map(config) == {"meta.schema_version": migration_guidance(2)}
    assert "upgrade chek" in migration_guidance(2)
    assert "older" in migration_guidance(0)


def test_profile_names_and_overlays_are_validated() -> None:
    config = merge_config(
        default_config(),
        {"profiles": {"Bad Name": {}, "custom": {"options": {"strict": 1}, "other": {}}}},
    )

    issues = _issue_map(config)

    assert issues["profiles.Bad Name"].startswith("profile name must match")
    assert issues["profiles.custom.options.strict"] == "expected boolean, got int"
    assert issues["profiles.custom.other"] == "unknown field"


@pytest.mark.parametrize(
    ("profile", "expected"),
    [
        ("strict", {"strict": True, "untrusted": False, "ignore_required": False}),
        ("untrusted", {"strict": True, "untrusted": True, "ignore_required": False}),
        ("lenient", {"strict": False, "untrusted": False, "ignore_required": True}),
    ],
)
def test_builtin_profiles(profile: str, expected: dict[str, bool]) -> None:
    resolved = apply_profile_overlay(default_config(), profile)

    for name, flag in expected.items():
        assert resolved["options"][name] is flag


def test_unknown_profile_is_rejected() -> None:
    with pytest.raises(ConfigValidationError, match="profile 'paranoid' is not defined"):
        apply_profile_overlay(default_config(), "paranoid")

    issues = _issue_map(default_config(), active_profile="paranoid")
    assert issues == {"profiles": "profile 'paranoid' is not defined"}


def test_blank_profile_is_a_no_op() -> None:
    assert apply_profile_overlay(default_config(), "  ") == assert_valid_config(default_config())


def test_merge_config_is_deep_and_leaves_inputs_untouched() -> None:
    base = default_config()
    overlay = {"options": {"strict": True}}

    merged = merge_config(base, overlay)

    assert merged["options"]["strict"] is True
    assert merged["options"]["untrusted"] is False
    assert base["options"]["strict"] is False
    assert overlay == {"options": {"strict": True}}


def test_validation_error_renders_every_issue() -> None:
    config = merge_config(default_config(), {"options": {"strict": "x", "log": "y"}})

    with pytest.raises(ConfigValidationError) as excinfo:
        assert_valid_config(config)

    rendered = str(excinfo.value)
    assert "- options.log: expected boolean, got str" in rendered
    assert "- options.strict: expected boolean, got str" in rendered
    assert len(excinfo.value.issues) == 2
