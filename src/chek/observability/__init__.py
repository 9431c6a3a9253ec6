"""Public observability primitives: structured logging with redaction."""

from chek.observability.logging import (
    LoggingConfig,
    LogRedactor,
    default_log_redactor,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "LogRedactor",
    "LoggingConfig",
    "default_log_redactor",
    "setup_logging",
    "shutdown_logging",
]
