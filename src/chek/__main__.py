"""Module entrypoint for ``python -m chek``."""

from __future__ import annotations

from chek.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
