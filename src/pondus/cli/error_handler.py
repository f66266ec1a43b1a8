"""
CLI Error Handling Utilities

Maps exceptions raised while running a command onto ``CliError`` exit codes,
logs them, and prints a one-line message to stderr.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from pondus.shared.constants import CLIMessages
from pondus.shared.errors import CliError, PondusError, create_cli_error

logger = logging.getLogger(__name__)


def handle_cli_error(error: BaseException, command: str) -> int:
    """Handle a command failure with consistent logging and output.

    Args:
        error: The exception that occurred
        command: The CLI command being executed

    Returns:
        Exit code for the CLI command
    """
    error_context: dict[str, Any] = {
        "command": command,
        "error_type": type(error).__name__,
    }
    cli_error = _map_error_to_cli_error(error, command, error_context)
    _log_error(error, command, cli_error, error_context)
    sys.stderr.write(CLIMessages.ERROR_PREFIX.format(message=cli_error.message) + "\n")
    return cli_error.exit_code


def _map_error_to_cli_error(
    error: BaseException,
    command: str,
    error_context: dict[str, Any],
) -> CliError:
    if isinstance(error, CliError):
        error_context["error_code"] = error.code.value
        return error

    if isinstance(error, PondusError):
        error_context["error_code"] = error.code.value
        return create_cli_error(
            message=error.message,
            command=command,
            original_error=error,
        )

    if isinstance(error, OSError):
        error_context["error_category"] = "file_system"
        return create_cli_error(
            message=f"File system error: {error}",
            command=command,
            original_error=error,
        )

    if isinstance(error, KeyboardInterrupt):
        error_context["interrupt_type"] = "user_interrupt"
        return create_cli_error(
            message="Command interrupted by user",
            command=command,
            original_error=error,
            exit_code=130,
        )

    error_context["error_category"] = "unexpected"
    return create_cli_error(
        message=f"Unexpected error: {error}",
        command=command,
        original_error=error,
    )


def _log_error(
    error: BaseException,
    command: str,
    cli_error: CliError,
    error_context: dict[str, Any],
) -> None:
    if isinstance(error, KeyboardInterrupt) or cli_error.exit_code == 2:
        logger.warning(
            "Command %s stopped: %s",
            command,
            cli_error.message,
            extra={"context": error_context},
        )
    else:
        logger.error(
            "CLI error in %s: %s",
            command,
            cli_error.message,
            extra={"context": error_context},
        )
        logger.debug("Traceback for %s", command, exc_info=error)
