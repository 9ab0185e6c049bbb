"""
Structured logging for ReelVault.

Console output goes through Rich; an optional log file receives one JSON
object per line. The ``log_*`` helpers attach ``operation``, ``context`` and
related fields to the record so both outputs carry the same details.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from reelvault.shared.errors import ErrorContext, ReelVaultError

# Record attributes copied into the JSON line when present
_STRUCTURED_FIELDS = ("error_code", "operation", "context", "duration_ms", "result_info")


class StructuredFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _STRUCTURED_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_structured_logger(
    name: str = "reelvault",
    level: str = "INFO",
    log_file: str | None = None,
    *,
    use_rich_console: bool = True,
) -> logging.Logger:
    """
    Configure the package logger, replacing any handlers set up earlier.

    Args:
        name: Logger name (default: "reelvault")
        level: Level name, case-insensitive
        log_file: Optional path of a JSON-lines log file
        use_rich_console: Rich console on stderr when True, plain JSON
            lines on stderr otherwise

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.handlers.clear()

    log_level = getattr(logging, level.upper())
    logger.setLevel(log_level)

    console_handler: logging.Handler
    if use_rich_console:
        console_handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            log_time_format="[%H:%M:%S]",
        )
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(StructuredFormatter())
    console_handler.setLevel(log_level)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def _context_dict(*contexts: dict[str, Any] | ErrorContext | None) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for context in contexts:
        if isinstance(context, ErrorContext):
            merged.update(context.safe_dict())
        elif context:
            merged.update(context)
    return merged


def log_operation_error(
    logger: logging.Logger,
    error: ReelVaultError,
    operation: str | None = None,
    context: dict[str, Any] | ErrorContext | None = None,
) -> None:
    """
    Log ``error`` at ERROR with its code and context.

    The traceback of the wrapped exception is included when there is one.
    ``context`` is merged over the error's own context.
    """
    logger.error(
        error.message,
        extra={
            "error_code": error.code.value,
            "operation": operation or error.context.operation,
            "context": _context_dict(error.context, context),
        },
        exc_info=error.original_error is not None,
    )


def log_operation_start(
    logger: logging.Logger,
    operation: str,
    context: dict[str, Any] | None = None,
) -> None:
    logger.debug(
        "Starting operation '%s'",
        operation,
        extra={"operation": operation, "context": context or {}},
    )


def log_operation_success(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    result_info: dict[str, Any] | None = None,
    context: dict[str, Any] | ErrorContext | None = None,
) -> None:
    """Log the successful end of ``operation`` at DEBUG with its duration."""
    logger.debug(
        "Operation '%s' completed in %.1f ms",
        operation,
        duration_ms,
        extra={
            "operation": operation,
            "duration_ms": duration_ms,
            "result_info": result_info or {},
            "context": _context_dict(context),
        },
    )


def log_file_operation(
    logger: logging.Logger,
    action: str,
    path: str,
    success: bool = True,
    error_message: str | None = None,
) -> None:
    """
    Log one cache file action (delete, clear, prune).

    Failures are logged at WARNING since the cache carries on without
    the file; successes at DEBUG.
    """
    extra = {"operation": f"cache_file_{action}", "context": {"action": action, "path": path}}
    if success:
        logger.debug("Cache file %s: %s", action, path, extra=extra)
    else:
        logger.warning("Cache file %s failed for %s: %s", action, path, error_message, extra=extra)


__all__ = [
    "StructuredFormatter",
    "log_file_operation",
    "log_operation_error",
    "log_operation_start",
    "log_operation_success",
    "setup_structured_logger",
]
