"""CLI error handling for protopath-cli.

Wraps protopath-core exceptions in a click exception carrying the exit code:
- 1 for user errors (configuration, unusable input, protoc failures)
- 2 for system errors (filesystem or process failures)
"""

from __future__ import annotations

from typing import NoReturn

import click
from rich.markup import escape

from protopath_cli.output import error, info
from protopath_core.errors import CompilationError, ProtopathError, ProtopathIOError

EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1
EXIT_SYSTEM_ERROR = 2


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
        details: Extra text printed verbatim after the message, such as
            protoc diagnostics. Part of ``format_message`` so every error
            renderer shows it.
    """

    def __init__(
        self,
        message: str,
        exit_code: int = EXIT_USER_ERROR,
        details: str | None = None,
    ) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.details = details

    def format_message(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message}\n\n{self.details}"

    def show(self, file: object = None) -> None:
        """Display the error with Rich formatting.

        Args:
            file: Output file (unused, for Click compatibility).
        """
        error(escape(self.message))
        if self.details:
            info(self.details, markup=False, highlight=False)


def handle_protopath_error(err: ProtopathError) -> NoReturn:
    """Convert a protopath-core exception into a CLIError.

    For protoc failures both captured streams are shown, stdout first.

    Raises:
        CLIError: Always.
    """
    if isinstance(err, CompilationError):
        streams = [text.rstrip() for text in (err.stdout, err.stderr) if text.strip()]
        raise CLIError(str(err), details="\n".join(streams) or None) from err

    exit_code = EXIT_SYSTEM_ERROR if isinstance(err, ProtopathIOError) else EXIT_USER_ERROR
    raise CLIError(str(err), exit_code=exit_code) from err
