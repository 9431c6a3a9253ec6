"""
chek - unit tests for config loader

File: tests/unit/config/test_config_loader.py
Last updated: 2026-10-18

Purpose
- Validate deterministic config loading from defaults, TOML, env overrides, and CLI overrides.

What this test file should cover
- Precedence: CLI > env > file > defaults.
- File discovery: ``chek.toml`` first, then ``[tool.chek]`` in ``pyproject.toml``.
- Deterministic env var path mapping and boolean coercion.
- Profile selection by argument or ``CHEK_PROFILE``.

Non-functional requirements
- Deterministic output across repeated loads; never reads the real process environment.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from chek.config.loader import (
    ConfigLoadError,
    dump_effective_config,
    find_config_file,
    load_config,
    options_from_config,
)
from chek.config.schema import ConfigValidationError
from chek.options import Options


def _write_config(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_defaults_without_any_file(tmp_path: Path) -> None:
    config = load_config(search_dir=tmp_path, environ={})

    assert find_config_file(tmp_path) is None
    assert config["options"]["strict"] is False
    assert config["logging"] == {"level": "WARNING", "format": "text"}
    assert options_from_config(config) == Options()


def test_loader_precedence_default_file_env_cli(tmp_path: Path) -> None:
    _write_config(
        tmp_path / "chek.toml",
        """
[options]
strict = true
ignore_defaults = true

[logging]
level = "info"
""".strip(),
    )

    from_file = load_config(search_dir=tmp_path, environ={})
    from_env = load_config(
        search_dir=tmp_path,
        environ={"CHEK_OPTIONS_STRICT": "false", "CHEK_LOGGING_LEVEL": "error"},
    )
    from_cli = load_config(
        search_dir=tmp_path,
        environ={"CHEK_OPTIONS_STRICT": "false"},
        cli_overrides={"options.strict": True, "logging.format": "json"},
    )

    assert from_file["options"]["strict"] is True
    assert from_file["options"]["ignore_defaults"] is True
    assert from_file["logging"]["level"] == "INFO"
    assert from_env["options"]["strict"] is False
    assert from_env["logging"]["level"] == "ERROR"
    assert from_cli["options"]["strict"] is True
    assert from_cli["logging"]["format"] == "json"


def test_explicit_config_path(tmp_path: Path) -> None:
    config_path = tmp_path / "configs" / "custom.toml"
    _write_config(config_path, "[options]\ndo_not_coerce = true\n")

    config = load_config(config_path, environ={})

    assert options_from_config(config) == Options(do_not_coerce=True)


def test_missing_explicit_path_is_a_load_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="config file not found"):
        load_config(tmp_path / "absent.toml", environ={})


def test_invalid_toml_is_a_load_error(tmp_path: Path) -> None:
    _write_config(tmp_path / "chek.toml", "[options\nstrict = true\n")

    with pytest.raises(ConfigLoadError, match="invalid TOML"):
        load_config(search_dir=tmp_path, environ={})


def test_invalid_values_in_file_fail_validation(tmp_path: Path) -> None:
    _write_config(tmp_path / "chek.toml", '[options]\nstrict = "sometimes"\n')

    with pytest.raises(ConfigValidationError, match="options.strict"):
        load_config(search_dir=tmp_path, environ={})


def test_pyproject_tool_table_is_discovered(tmp_path: Path) -> None:
    _write_config(
        tmp_path / "pyproject.toml",
        """
[project]
name = "demo"

[tool.chek.options]
untrusted = true
""".strip(),
    )

    assert find_config_file(tmp_path) == (tmp_path / "pyproject.toml").resolve()
    assert load_config(search_dir=tmp_path, environ={})["options"]["untrusted"] is True


def test_pyproject_without_tool_table_is_ignored(tmp_path: Path) -> None:
    _write_config(tmp_path / "pyproject.toml", '[project]\nname = "demo"\n')

    assert find_config_file(tmp_path) is None
    assert load_config(search_dir=tmp_path, environ={})["options"]["untrusted"] is False


def test_chek_toml_wins_over_pyproject(tmp_path: Path) -> None:
    _write_config(tmp_path / "pyproject.toml", "[tool.chek.options]\nstrict = true\n")
    _write_config(tmp_path / "chek.toml", "[options]\nlog = true\n")

    config = load_config(search_dir=tmp_path, environ={})

    assert find_config_file(tmp_path) == (tmp_path / "chek.toml").resolve()
    assert config["options"]["log"] is True
    assert config["options"]["strict"] is False


def test_env_boolean_values_are_coerced(tmp_path: Path) -> None:
    config = load_config(
        search_dir=tmp_path,
        environ={"CHEK_OPTIONS_IGNORE_REQUIRED": "YES", "CHEK_OPTIONS_LOG": " on "},
    )

    assert config["options"]["ignore_required"] is True
    assert config["options"]["log"] is True


def test_env_boolean_rejects_garbage(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="CHEK_OPTIONS_STRICT -> options.strict"):
        load_config(search_dir=tmp_path, environ={"CHEK_OPTIONS_STRICT": "maybe"})


def test_profile_selected_by_env_and_overridden_by_argument(tmp_path: Path) -> None:
    from_env = load_config(search_dir=tmp_path, environ={"CHEK_PROFILE": "untrusted"})
    from_arg = load_config(
        search_dir=tmp_path, profile="lenient", environ={"CHEK_PROFILE": "untrusted"}
    )

    assert from_env["options"]["untrusted"] is True
    assert from_env["options"]["strict"] is True
    assert from_arg["options"]["untrusted"] is False
    assert from_arg["options"]["ignore_required"] is True


def test_env_overrides_apply_after_profile(tmp_path: Path) -> None:
    config = load_config(
        search_dir=tmp_path,
        profile="strict",
        environ={"CHEK_OPTIONS_STRICT": "0"},
    )

    assert config["options"]["strict"] is False


def test_custom_profile_from_file(tmp_path: Path) -> None:
    _write_config(
        tmp_path / "chek.toml",
        """
[profiles.ci.options]
strict = true
do_not_coerce = true

[profiles.ci.logging]
format = "json"
""".strip(),
    )

    config = load_config(search_dir=tmp_path, profile="ci", environ={})

    assert options_from_config(config) == Options(strict=True, do_not_coerce=True)
    assert config["logging"]["format"] == "json"


def test_unknown_profile_fails(tmp_path: Path) -> None:
    with pytest.raises(ConfigValidationError, match="not defined"):
        load_config(search_dir=tmp_path, profile="paranoid", environ={})


def test_dump_effective_config_is_deterministic(tmp_path: Path) -> None:
    first = dump_effective_config(load_config(search_dir=tmp_path, environ={}))
    second = dump_effective_config(load_config(search_dir=tmp_path, environ={}))

    assert first == second
    assert json.loads(first)["meta"] == {"schema_version": 1}
    assert first == json.dumps(json.loads(first), sort_keys=True, separators=(",", ":"))
