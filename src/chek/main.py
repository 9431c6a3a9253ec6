"""
chek: process entrypoint and exit codes.

File: src/chek/main.py
Last updated: 2026-10-18

Purpose
- Run the ``chek`` CLI and turn whatever it returns or raises into one of the
  documented exit codes.

Functional requirements
- 0 when the document is valid, 1 when it is rejected, 2 for config, usage or
  input problems, 4 for anything unexpected.
- Rejections and config problems print a one-line message; unexpected errors
  print the full traceback.
- The exit code is decided by the first recognised exception in the
  ``__cause__``/``__context__`` chain.
"""

from __future__ import annotations

import sys
import traceback
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


class ExitCode(IntEnum):
    """Process exit codes for ``chek``."""

    SUCCESS = 0
    VALIDATION_REJECTED = 1
    CONFIG_ERROR = 2
    INTERNAL_ERROR = 4


def cli_entrypoint(argv: Sequence[str] | None = None) -> int:
    """Entrypoint used by ``python -m chek`` and the ``chek`` console script."""

    try:
        from chek.ui.cli import run_cli

        return exit_code_for(run_cli(argv))
    except SystemExit as exc:
        return exit_code_for(exc.code)
    except BaseException as exc:  # noqa: BLE001 - every failure becomes an exit code.
        code = classify_exception(exc)
        _report(exc, code)
        return int(code)


def exit_code_for(returned: object) -> int:
    """Map a handler return value (or ``SystemExit.code``) onto ``ExitCode``."""

    if returned is None:
        return int(ExitCode.SUCCESS)
    if isinstance(returned, int) and returned in frozenset(ExitCode):
        return returned
    if isinstance(returned, str) and returned.strip():
        _write_stderr(returned.strip())
    return int(ExitCode.INTERNAL_ERROR)


def classify_exception(exc: BaseException) -> ExitCode:
    """Exit code for an exception escaping the CLI."""

    from chek.config.loader import ConfigLoadError
    from chek.config.schema import ConfigValidationError
    from chek.errors import ChekError

    for link in _causes(exc):
        if isinstance(link, ChekError):
            return ExitCode.VALIDATION_REJECTED
        if isinstance(link, (ConfigLoadError, ConfigValidationError, OSError)):
            return ExitCode.CONFIG_ERROR
    return ExitCode.INTERNAL_ERROR


def _causes(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    link: BaseException | None = exc
    while link is not None and id(link) not in seen:
        seen.add(id(link))
        yield link
        if link.__cause__ is not None:
            link = link.__cause__
        elif not link.__suppress_context__:
            link = link.__context__
        else:
            link = None


def _report(exc: BaseException, code: ExitCode) -> None:
    if code is ExitCode.INTERNAL_ERROR:
        traceback.print_exception(exc, file=sys.stderr)
        return
    _write_stderr(str(exc).strip() or type(exc).__name__)


def _write_stderr(message: str) -> None:
    sys.stderr.write(message.rstrip("\n") + "\n")


__all__ = ["ExitCode", "classify_exception", "cli_entrypoint", "exit_code_for"]
