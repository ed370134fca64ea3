"""
CLI Error Handling Utilities

Consistent error output and exit codes for CLI commands.
"""

from __future__ import annotations

import logging
import sys

from tornsentinel.cli.json_formatter import format_json_output
from tornsentinel.shared.errors import TornSentinelError
from tornsentinel.shared.logging import redact_credential

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def handle_cli_error(
    error: Exception,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Log and print an error, returning the exit code for the command.

    Args:
        error: The exception that occurred
        command: The CLI command being executed
        json_output: Whether to output JSON format

    Returns:
        Exit code for the CLI command
    """
    if isinstance(error, KeyboardInterrupt):
        message = "Command interrupted by user"
        exit_code = EXIT_INTERRUPTED
        logger.warning(message, extra={"context": {"command": command}})
    elif isinstance(error, TornSentinelError):
        message = redact_credential(error.message)
        exit_code = EXIT_ERROR
        logger.error(
            "CLI error in %s: %s",
            command,
            message,
            extra={"error_code": error.code.name, "context": {"command": command}},
        )
    else:
        message = f"Unexpected error: {redact_credential(str(error))}"
        exit_code = EXIT_ERROR
        logger.exception("CLI error in %s", command, extra={"context": {"command": command}})

    if json_output:
        sys.stdout.write(
            format_json_output(success=False, command=command, errors=[message]).decode()
        )
        sys.stdout.write("\n")
    else:
        sys.stderr.write(f"Error: {message}\n")
    return exit_code


__all__ = ["handle_cli_error"]
