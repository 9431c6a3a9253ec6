"""
chek - unit tests for the process entrypoint

File: tests/unit/core/test_main.py
Last updated: 2026-10-18

Purpose
- Pin how CLI return values and escaping exceptions become exit codes.

What this test file should cover
- Return values and ``SystemExit`` codes pass through only when they are known codes.
- Rejections, config problems and unexpected failures each get their own code and output.
- The exception chain is followed to the first recognised cause.
"""

from __future__ import annotations

import pytest

import chek.ui.cli
from chek.config.loader import ConfigLoadError
from chek.errors import ErrorCode, fail
from chek.main import ExitCode, classify_exception, cli_entrypoint, exit_code_for


@pytest.mark.parametrize(
    ("returned", "expected"),
    [(None, 0), (0, 0), (1, 1), (2, 2), (4, 4), (3, 4), (99, 4), ("", 4)],
)
def test_exit_code_for_return_values(returned: object, expected: int) -> None:
    assert exit_code_for(returned) == expected


def test_string_exit_code_is_printed(capsys: pytest.CaptureFixture[str]) -> None:
    assert exit_code_for("  usage: chek check  ") == ExitCode.INTERNAL_ERROR
    assert capsys.readouterr().err == "usage: chek check\n"


def test_classify_exception_follows_the_cause_chain() -> None:
    rejected = fail(ErrorCode.BAD_TYPE, "n1: expected number, got string")
    try:
        try:
            raise rejected
        except ValueError as exc:
            raise RuntimeError("wrapped") from exc
    except RuntimeError as outer:
        wrapped = outer

    assert classify_exception(wrapped) is ExitCode.VALIDATION_REJECTED
    assert classify_exception(ConfigLoadError("bad env")) is ExitCode.CONFIG_ERROR
    assert classify_exception(FileNotFoundError("chek.toml")) is ExitCode.CONFIG_ERROR
    assert classify_exception(KeyError("boom")) is ExitCode.INTERNAL_ERROR


def test_suppressed_context_is_not_followed() -> None:
    try:
        try:
            raise ConfigLoadError("hidden")
        except ConfigLoadError:
            raise RuntimeError("visible") from None
    except RuntimeError as exc:
        assert classify_exception(exc) is ExitCode.INTERNAL_ERROR


def test_entrypoint_reports_rejections_in_one_line(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def reject(argv: object) -> int:
        raise fail(ErrorCode.MISSING_PARAM, "s1")

    monkeypatch.setattr(chek.ui.cli, "run_cli", reject)

    assert cli_entrypoint([]) == ExitCode.VALIDATION_REJECTED
    assert capsys.readouterr().err == "Missing Required Parameter: s1\n"


def test_entrypoint_prints_traceback_for_unexpected_errors(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def explode(argv: object) -> int:
        raise KeyError("boom")

    monkeypatch.setattr(chek.ui.cli, "run_cli", explode)

    assert cli_entrypoint([]) == ExitCode.INTERNAL_ERROR
    err = capsys.readouterr().err
    assert "Traceback" in err
    assert "KeyError: 'boom'" in err


def test_entrypoint_passes_system_exit_codes(monkeypatch: pytest.MonkeyPatch) -> None:
    def usage(argv: object) -> int:
        raise SystemExit(2)

    monkeypatch.setattr(chek.ui.cli, "run_cli", usage)

    assert cli_entrypoint(["--bogus"]) == ExitCode.CONFIG_ERROR
