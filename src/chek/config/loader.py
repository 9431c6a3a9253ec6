"""
chek: runtime config loader.

File: src/chek/config/loader.py
Last updated: 2026-10-18

Purpose
- Load effective runtime config from defaults, TOML file, env vars, and CLI overrides.

What should be included in this file
- Precedence logic: CLI > env (CHEK_) > file > defaults.
- TOML loading via ``tomllib`` from ``chek.toml`` or ``[tool.chek]`` in
  ``pyproject.toml``.
- Deterministic environment variable mapping and coercion.
- Deterministic dump of effective config.

Functional requirements
- Reject invalid config via schema validation.
- Support profile overlays selected by CLI/env.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Literal

from chek.config.schema import (
    apply_profile_overlay,
    assert_valid_config,
    default_config,
    merge_config,
)
from chek.options import Options

DEFAULT_CONFIG_FILE: Final[str] = "chek.toml"
PYPROJECT_FILE: Final[str] = "pyproject.toml"
ENV_PREFIX: Final[str] = "CHEK_"

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})


@dataclass(frozen=True, slots=True)
class _Binding:
    path: tuple[str, ...]
    value_type: Literal["str", "bool"]


class ConfigLoadError(ValueError):
    """Raised when config cannot be loaded or overrides cannot be coerced."""


def load_config(
    config_path: str | Path | None = None,
    *,
    profile: str | None = None,
    cli_overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
    search_dir: str | Path | None = None,
) -> dict[str, Any]:
    """Load effective config with deterministic precedence: CLI > env > file > defaults."""

    env_map = dict(os.environ if environ is None else environ)
    cli_map = dict(cli_overrides or {})

    file_payload = _load_file_payload(config_path, search_dir=search_dir)
    selected_profile = _resolve_profile(profile=profile, cli_overrides=cli_map, environ=env_map)

    merged = merge_config(default_config(), file_payload)
    merged = assert_valid_config(merged)

    if selected_profile is not None:
        merged = apply_profile_overlay(merged, selected_profile)

    env_overrides = _collect_env_overrides(merged, env_map)
    cli_payload = _materialize_cli_overrides(cli_map)

    merged = merge_config(merged, env_overrides)
    merged = merge_config(merged, cli_payload)
    return assert_valid_config(merged, active_profile=selected_profile)


def find_config_file(search_dir: str | Path | None = None) -> Path | None:
    """Locate ``chek.toml``, then a ``pyproject.toml`` carrying ``[tool.chek]``."""

    base = Path.cwd() if search_dir is None else Path(search_dir).expanduser()
    candidate = (base / DEFAULT_CONFIG_FILE).resolve()
    if candidate.is_file():
        return candidate
    pyproject = (base / PYPROJECT_FILE).resolve()
    if pyproject.is_file() and _tool_table(_read_toml(pyproject), pyproject) is not None:
        return pyproject
    return None


def options_from_config(config: Mapping[str, object]) -> Options:
    """Build validation ``Options`` from the ``options`` section of a loaded config."""

    section = config.get("options")
    if not isinstance(section, Mapping):
        return Options()
    return Options.from_mapping({key: value for key, value in section.items()})


def dump_effective_config(config: Mapping[str, object]) -> str:
    """Return deterministic JSON dump of effective config."""

    return json.dumps(config, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _load_file_payload(
    config_path: str | Path | None, *, search_dir: str | Path | None
) -> dict[str, Any]:
    if config_path is not None:
        path = Path(config_path).expanduser().resolve()
        if not path.exists():
            raise ConfigLoadError(f"config file not found: {path}")
    else:
        found = find_config_file(search_dir)
        if found is None:
            return {}
        path = found

    parsed = _read_toml(path)
    if path.name == PYPROJECT_FILE:
        table = _tool_table(parsed, path)
        return {} if table is None else table
    return parsed


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            parsed = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc
    return parsed


def _tool_table(parsed: Mapping[str, object], path: Path) -> dict[str, Any] | None:
    tool = parsed.get("tool")
    if not isinstance(tool, Mapping) or "chek" not in tool:
        return None
    table = tool["chek"]
    if not isinstance(table, dict):
        raise ConfigLoadError(f"[tool.chek] must be a table: {path}")
    return table


def _resolve_profile(
    *,
    profile: str | None,
    cli_overrides: Mapping[str, object],
    environ: Mapping[str, str],
) -> str | None:
    if profile is not None:
        selected = profile.strip()
        return selected or None

    cli_profile = cli_overrides.get("profile")
    if cli_profile is not None:
        if not isinstance(cli_profile, str):
            raise ConfigLoadError("cli override 'profile' must be a string")
        selected = cli_profile.strip()
        return selected or None

    env_profile = environ.get(f"{ENV_PREFIX}PROFILE")
    if env_profile is None:
        return None
    selected = env_profile.strip()
    return selected or None


def _collect_env_overrides(
    config: Mapping[str, object], environ: Mapping[str, str]
) -> dict[str, Any]:
    bindings = _build_bindings(config)
    overrides: dict[str, Any] = {}
    for env_name in sorted(bindings):
        raw = environ.get(env_name)
        if raw is None:
            continue
        binding = bindings[env_name]
        value = _coerce_env(raw, binding.value_type, env_name, binding.path)
        _set_nested(overrides, binding.path, value)
    return overrides


def _build_bindings(config: Mapping[str, object]) -> dict[str, _Binding]:
    bindings: dict[str, _Binding] = {}
    for path, value in _iter_scalar_paths(config):
        if path[0] in {"profiles", "meta"}:
            continue
        if isinstance(value, bool):
            bindings[_env_name_for_path(path)] = _Binding(path=path, value_type="bool")
        elif isinstance(value, str):
            bindings[_env_name_for_path(path)] = _Binding(path=path, value_type="str")
    return bindings


def _iter_scalar_paths(
    payload: Mapping[str, object],
    prefix: tuple[str, ...] = (),
) -> list[tuple[tuple[str, ...], object]]:
    pairs: list[tuple[tuple[str, ...], object]] = []
    for key in sorted(payload):
        value = payload[key]
        path = (*prefix, key)
        if isinstance(value, Mapping):
            pairs.extend(_iter_scalar_paths(value, path))
        else:
            pairs.append((path, value))
    return pairs


def _coerce_env(
    raw: str,
    value_type: Literal["str", "bool"],
    env_name: str,
    path: tuple[str, ...],
) -> object:
    value = raw.strip()
    if value_type == "str":
        return value

    lowered = value.lower()
    if lowered in _BOOLEAN_TRUE:
        return True
    if lowered in _BOOLEAN_FALSE:
        return False
    raise ConfigLoadError(
        f"{env_name} -> {'.'.join(path)} must be a boolean (true/false/1/0/yes/no/on/off)"
    )


def _materialize_cli_overrides(cli_overrides: Mapping[str, object]) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for key in sorted(cli_overrides):
        if key == "profile":
            continue
        value = cli_overrides[key]
        if "." in key:
            path = tuple(part for part in key.split(".") if part)
            if not path:
                raise ConfigLoadError(f"invalid CLI override key {key!r}")
            _set_nested(payload, path, value)
            continue
        if isinstance(value, Mapping):
            payload[key] = merge_config({}, value)
            continue
        payload[key] = value
    return payload


def _set_nested(target: dict[str, Any], path: tuple[str, ...], value: object) -> None:
    cursor = target
    for part in path[:-1]:
        next_node = cursor.get(part)
        if not isinstance(next_node, dict):
            next_node = {}
            cursor[part] = next_node
        cursor = next_node
    cursor[path[-1]] = value


def _env_name_for_path(path: tuple[str, ...]) -> str:
    return ENV_PREFIX + "_".join(part.upper() for part in path)


__all__ = [
    "ConfigLoadError",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "PYPROJECT_FILE",
    "dump_effective_config",
    "find_config_file",
    "load_config",
    "options_from_config",
]
