"""Custom exception hierarchy for protopath-core.

This module defines the exception classes raised by the protoc orchestration:
- ProtopathError: Base exception for all protopath errors
- ConfigurationError: Required input missing or invalid, raised before any work
- InvalidInputError: A supplied path or dependency artifact is unusable
- ProtopathIOError: A filesystem or process operation failed mid-run
- CompilationError: protoc exited with a non-zero status

User-facing messages are safe to display. Technical details passed as
``internal_details`` are logged via structlog and kept out of ``str(error)``.
"""

from __future__ import annotations

from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


class ProtopathError(Exception):
    """Base exception for protopath.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details, logged but never
            included in the exception message.

    Example:
        >>> raise ProtopathError(
        ...     "Extraction failed",
        ...     internal_details="zipfile.BadZipFile: File is not a zip file",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ProtopathError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details

        if internal_details:
            logger.error(
                "protopath_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ConfigurationError(ProtopathError):
    """Raised when required configuration is missing or invalid.

    Use this exception when:
    - The YAML configuration file cannot be parsed or validated
    - The proto source root, staging directory or output directory
      points at a regular file instead of a directory

    Attributes:
        file_path: Path to the configuration file (if known).
        field_path: Dot-separated path to the invalid field (if known).

    Example:
        >>> raise ConfigurationError(
        ...     "proto_source_root is a file, not a directory",
        ...     field_path="proto_source_root",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: str | None = None,
        field_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ConfigurationError with context.

        Args:
            user_message: Safe message to display to the user.
            file_path: Path to the configuration file (optional).
            field_path: Dot-separated path to the field (optional).
            internal_details: Technical details for internal logging only.
        """
        context_parts: list[str] = []
        if file_path:
            context_parts.append(f"in {file_path}")
        if field_path:
            context_parts.append(f"field '{field_path}'")

        if context_parts:
            full_message = f"{user_message} ({', '.join(context_parts)})"
        else:
            full_message = user_message

        super().__init__(full_message, internal_details=internal_details)

        self.file_path = file_path
        self.field_path = field_path


class InvalidInputError(ProtopathError):
    """Raised when a supplied path or dependency artifact cannot be used.

    The offending path is always part of the message.

    Attributes:
        path: The unusable path.

    Example:
        >>> raise InvalidInputError("was not a readable artifact", path=Path("lib/x.jar"))
        # User sees: "lib/x.jar was not a readable artifact"
    """

    def __init__(
        self,
        reason: str,
        *,
        path: Path | str,
        internal_details: str | None = None,
    ) -> None:
        """Initialize InvalidInputError.

        Args:
            reason: What is wrong with the path.
            path: The offending path.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(f"{path} {reason}", internal_details=internal_details)
        self.path = Path(path)


class ProtopathIOError(ProtopathError):
    """Raised when a filesystem or process operation fails mid-run.

    The underlying ``OSError`` is chained as ``__cause__``. Any partially
    populated staging directory is left behind; the next run cleans it.
    """

    pass


class CompilationError(ProtopathError):
    """Raised when protoc exits with a non-zero status.

    Both captured output streams are kept verbatim for diagnostics.

    Attributes:
        exit_code: protoc exit status.
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    def __init__(self, exit_code: int, stdout: str, stderr: str) -> None:
        """Initialize CompilationError.

        Args:
            exit_code: protoc exit status.
            stdout: Captured standard output.
            stderr: Captured standard error.
        """
        super().__init__(
            f"protoc did not exit cleanly (exit code {exit_code}). "
            "Review output for more information."
        )
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
