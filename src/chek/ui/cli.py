"""Command-line interface router for chek."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

import yaml

from chek.config import (
    ConfigLoadError,
    ConfigValidationError,
    dump_effective_config,
    load_config,
    options_from_config,
)
from chek.errors import ChekError
from chek.main import ExitCode
from chek.observability import LoggingConfig, setup_logging, shutdown_logging
from chek.options import Options
from chek.validator import Validator

STDIN_ARGUMENT: Final[str] = "-"
_JSON_SUFFIXES: Final[frozenset[str]] = frozenset({".json"})

# CLI flag -> config override path.
_OPTION_FLAGS: Final[tuple[tuple[str, str], ...]] = (
    ("strict", "options.strict"),
    ("ignore_defaults", "options.ignore_defaults"),
    ("ignore_required", "options.ignore_required"),
    ("no_coerce", "options.do_not_coerce"),
    ("untrusted", "options.untrusted"),
    ("log_nodes", "options.log"),
)


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = int(ExitCode.CONFIG_ERROR)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="chek",
        description=(
            "chek: schema-driven value validation.\n\n"
            "Common workflows:\n"
            "  chek check value.json --schema schema.yaml   Validate and normalize a value\n"
            "  chek schema schema.yaml                      Check a schema is well-formed\n"
            "  chek config                                  Show effective configuration\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to chek TOML config (default: ./chek.toml or [tool.chek] in ./pyproject.toml).",
    )
    common.add_argument(
        "--profile",
        default=None,
        help="Optional config profile overlay name (strict, untrusted, lenient, ...).",
    )
    common.add_argument(
        "--log-level",
        default=None,
        help="Override logging.level (DEBUG, INFO, WARNING, ERROR).",
    )
    common.add_argument(
        "--log-format",
        choices=("text", "json"),
        default=None,
        help="Override logging.format.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # check ---------------------------------------------------------------
    check_parser = subparsers.add_parser(
        "check",
        parents=[common],
        help="Validate a JSON/YAML value against a schema",
        description=(
            "Validate VALUE against SCHEMA, applying defaults and coercions.\n"
            "Exit status is 0 when the value conforms and 1 when it does not.\n\n"
            "Examples:\n"
            "  chek check payload.json --schema schema.yaml\n"
            "  cat payload.json | chek check - --schema schema.json --strict --print-value\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    check_parser.add_argument("value", help="Value document (JSON or YAML); '-' reads stdin.")
    check_parser.add_argument("--schema", required=True, help="Schema document (JSON or YAML).")
    check_parser.add_argument(
        "--strict", action="store_true", default=None, help="Reject undeclared object keys."
    )
    check_parser.add_argument(
        "--ignore-defaults", action="store_true", default=None, help="Skip default substitution."
    )
    check_parser.add_argument(
        "--ignore-required",
        action="store_true",
        default=None,
        help="Skip required-field enforcement.",
    )
    check_parser.add_argument(
        "--no-coerce",
        action="store_true",
        default=None,
        help="Skip string to number/boolean coercion.",
    )
    check_parser.add_argument(
        "--untrusted",
        action="store_true",
        default=None,
        help="Reject schemas carrying executable validators.",
    )
    check_parser.add_argument(
        "--log-nodes",
        action="store_true",
        default=None,
        help="Log every visited schema node at DEBUG level.",
    )
    check_parser.add_argument(
        "--print-value",
        action="store_true",
        help="Print the normalized value on success.",
    )
    check_parser.add_argument("--json", action="store_true", help="Emit JSON output")
    check_parser.set_defaults(handler=_cmd_check)

    # schema --------------------------------------------------------------
    schema_parser = subparsers.add_parser(
        "schema",
        parents=[common],
        help="Check that a schema document is well-formed",
        description=(
            "Run the schema self-check only; no value is examined.\n\n"
            "Examples:\n"
            "  chek schema schema.yaml\n"
            "  chek schema schema.json --json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    schema_parser.add_argument("schema", help="Schema document (JSON or YAML); '-' reads stdin.")
    schema_parser.add_argument(
        "--untrusted",
        action="store_true",
        default=None,
        help="Reject schemas carrying executable validators.",
    )
    schema_parser.add_argument("--json", action="store_true", help="Emit JSON output")
    schema_parser.set_defaults(handler=_cmd_schema)

    # config --------------------------------------------------------------
    config_parser = subparsers.add_parser(
        "config",
        parents=[common],
        help="Show effective configuration",
        description=(
            "Display the effective config after merging defaults, file, env, and profile.\n\n"
            "Examples:\n"
            "  chek config\n"
            "  chek config --json\n"
            "  chek config --profile strict\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    config_parser.add_argument("--json", action="store_true", help="Emit JSON output")
    config_parser.set_defaults(handler=_cmd_config)

    return parser


# ---------------------------------------------------------------------------
# Entrypoints
# ---------------------------------------------------------------------------


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return int(ExitCode.CONFIG_ERROR)

    try:
        config = _load_effective_config(namespace)
        setup_logging(
            LoggingConfig(
                level=config["logging"]["level"],
                log_format=config["logging"]["format"],
            )
        )
        try:
            result = handler(namespace, config)
        finally:
            shutdown_logging()
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_check(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    options = _options(config)
    value = _load_document(_require_str(args.value, "value"), "value")
    schema = _load_document(_require_str(args.schema, "schema"), "schema")

    validator = Validator(untrusted=options.untrusted, options=options)
    result = validator.normalize(value, schema)

    if result.error is not None:
        _report_error("check", result.error, as_json=_flag(args, "json"))
        return int(ExitCode.VALIDATION_REJECTED)

    if _flag(args, "json"):
        payload: dict[str, object] = {"command": "check", "valid": True}
        if _flag(args, "print_value"):
            payload["value"] = result.value
        _emit_json(payload)
    elif _flag(args, "print_value"):
        print(json.dumps(result.value, indent=2, sort_keys=True, ensure_ascii=False, default=str))
    return int(ExitCode.SUCCESS)


def _cmd_schema(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    options = _options(config)
    schema = _load_document(_require_str(args.schema, "schema"), "schema")

    error = Validator(untrusted=options.untrusted).check_schema(schema)
    if error is not None:
        _report_error("schema", error, as_json=_flag(args, "json"))
        return int(ExitCode.VALIDATION_REJECTED)

    if _flag(args, "json"):
        _emit_json({"command": "schema", "valid": True})
    else:
        print("schema ok")
    return int(ExitCode.SUCCESS)


def _cmd_config(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    profile = _optional_str(getattr(args, "profile", None))

    if _flag(args, "json"):
        _emit_json({"command": "config", "active_profile": profile, "config": config})
        return int(ExitCode.SUCCESS)

    print(f"Active profile: {profile or '(default)'}")
    print(json.dumps(json.loads(dump_effective_config(config)), indent=2, sort_keys=True))
    return int(ExitCode.SUCCESS)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(
        json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)
    )


def _report_error(command: str, error: ChekError, *, as_json: bool) -> None:
    if as_json:
        _emit_json({"command": command, "valid": False, "error": error.to_dict()})
        return
    print(f"invalid: {error.message}", file=sys.stderr)


def _load_effective_config(args: argparse.Namespace) -> dict[str, Any]:
    config_path = _optional_str(getattr(args, "config_path", None))
    profile = _optional_str(getattr(args, "profile", None))

    overrides: dict[str, object] = {}
    for flag_name, config_key in _OPTION_FLAGS:
        if getattr(args, flag_name, None):
            overrides[config_key] = True
    log_level = _optional_str(getattr(args, "log_level", None))
    if log_level is not None:
        overrides["logging.level"] = log_level
    log_format = _optional_str(getattr(args, "log_format", None))
    if log_format is not None:
        overrides["logging.format"] = log_format

    try:
        return load_config(config_path, profile=profile, cli_overrides=overrides)
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc)) from exc


def _options(config: Mapping[str, Any]) -> Options:
    try:
        return options_from_config(config)
    except ChekError as exc:
        raise CLIError(f"invalid options: {exc}") from exc


def _load_document(path_arg: str, label: str) -> object:
    if path_arg == STDIN_ARGUMENT:
        text = sys.stdin.read()
        suffix = ""
    else:
        path = Path(path_arg).expanduser()
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CLIError(f"unable to read {label} file {path}: {exc}") from exc
        suffix = path.suffix.lower()

    try:
        if suffix in _JSON_SUFFIXES:
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise CLIError(f"unable to parse {label} document {path_arg}: {exc}") from exc


def _require_str(value: object, name: str) -> str:
    if not isinstance(value, str):
        raise CLIError(f"invalid {name}: expected string")
    cleaned = value.strip()
    if not cleaned:
        raise CLIError(f"invalid {name}: value cannot be empty")
    return cleaned


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise CLIError("invalid optional string argument")
    cleaned = value.strip()
    return cleaned or None


def _flag(args: argparse.Namespace, name: str) -> bool:
    value = getattr(args, name, False)
    return bool(value)


__all__ = ["CLIError", "build_parser", "run_cli"]
