"""
CLI Error Handling Utilities

Maps exceptions raised by commands onto exit codes and prints them either as
a Rich message on stderr or as a JSON document on stdout.
"""

from __future__ import annotations

import logging
from typing import Any

import orjson
import typer
from rich.console import Console
from rich.markup import escape

from reelvault.shared.constants import CLIDefaults
from reelvault.shared.errors import (
    ErrorCode,
    MultipleSearchResultsError,
    NoSearchResultsError,
    ReelVaultError,
)

logger = logging.getLogger(__name__)

error_console = Console(stderr=True)


def format_json_output(
    command: str,
    *,
    success: bool,
    errors: list[str] | None = None,
    data: Any = None,
) -> str:
    """Render a command result as the JSON envelope used by ``--json``."""
    output: dict[str, Any] = {
        "success": success,
        "command": command,
    }

    if errors:
        output["errors"] = errors

    if data is not None:
        output["data"] = data

    return orjson.dumps(output, option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS).decode("utf-8")


def exit_code_for(error: Exception) -> int:
    if isinstance(error, (NoSearchResultsError, MultipleSearchResultsError)):
        return CLIDefaults.EXIT_NO_MATCH
    return CLIDefaults.EXIT_ERROR


def handle_cli_error(
    error: Exception,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Log and print ``error``; return the exit code for the command."""
    if isinstance(error, ReelVaultError):
        code = error.code.value
        message = error.message
        logger.debug("Command '%s' failed", command, extra={"error_code": code, "context": error.context.safe_dict()})
    else:
        code = ErrorCode.CLI_UNEXPECTED_ERROR.value
        message = f"Unexpected error: {error}"
        logger.exception("Unexpected error in command '%s'", command)

    if json_output:
        typer.echo(format_json_output(command, success=False, errors=[f"{code}: {message}"]))
    else:
        error_console.print(f"[red bold]Error:[/red bold] {escape(message)}", markup=True, highlight=False)

    return exit_code_for(error)


__all__ = ["exit_code_for", "format_json_output", "handle_cli_error"]
