"""UI package exports for the command-line surface."""

from chek.ui.cli import CLIError, build_parser, run_cli

__all__ = ["CLIError", "build_parser", "run_cli"]
