"""
CLI Error Handling Utilities

Maps exceptions raised by commands to exit codes and a one-line message
on stderr, logging the details.
"""

from __future__ import annotations

import logging

import typer

from tootcomments.shared.constants import CLIDefaults
from tootcomments.shared.errors import (
    ApplicationError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    TootCommentsError,
)
from tootcomments.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


def handle_cli_error(error: Exception, command: str) -> int:
    """Log an error raised by a command and report it on stderr.

    Args:
        error: The exception that occurred
        command: The CLI command being executed

    Returns:
        Exit code for the CLI command
    """
    if isinstance(error, TootCommentsError):
        tc_error = error
    else:
        tc_error = TootCommentsError(
            ErrorCode.CLI_UNEXPECTED_ERROR,
            f"Unexpected error: {error}",
            ErrorContext(operation=command),
            error,
        )

    log_operation_error(logger, tc_error, operation=command)

    if isinstance(tc_error, ApplicationError):
        prefix = "Configuration error"
    elif isinstance(tc_error, InfrastructureError):
        prefix = "Remote or storage error"
    else:
        prefix = "Error"
    typer.echo(f"{prefix}: {tc_error.message}", err=True)

    return CLIDefaults.EXIT_ERROR


__all__ = ["handle_cli_error"]
