"""CLI error handling for binship.

Wraps binship exceptions in user-friendly messages with sysexits-style
exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click
from pydantic import ValidationError as PydanticValidationError

from binship.cli.output import error

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


EXIT_USER_ERROR = 1  # User error (validation, bad option)
EXIT_SYSTEM_ERROR = 2  # System error (missing file, permissions)
EXIT_INTERRUPTED = 130  # 128 + SIGINT


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting.

        Args:
            file: Output file (unused, for Click compatibility).
        """
        error(self.format_message())


def format_pydantic_error(err: PydanticValidationError) -> str:
    """Format Pydantic validation error into user-friendly message.

    Example:
        >>> format_pydantic_error(err)
        "Validation failed:\\n  - remote.host: String should have at least 1 character"
    """
    errors: list[ErrorDetails] = err.errors()
    lines = ["Validation failed:"]

    for e in errors:
        loc = ".".join(str(x) for x in e["loc"])
        lines.append(f"  - {loc}: {e['msg']}")

    return "\n".join(lines)


def handle_validation_error(err: PydanticValidationError, source: str) -> NoReturn:
    """Handle Pydantic validation errors with user-friendly messages.

    Raises:
        CLIError: Always raises with formatted error message.
    """
    formatted = format_pydantic_error(err)
    raise CLIError(f"Invalid configuration from {source}:\n{formatted}")


def handle_file_not_found(file_path: str) -> NoReturn:
    """Handle a missing configuration file.

    Raises:
        CLIError: Always raises with exit code 2.
    """
    raise CLIError(
        f"File not found: {file_path}\n\n"
        "Run 'binship init' to create a configuration file, or drop --config to use defaults.",
        exit_code=EXIT_SYSTEM_ERROR,
    )
