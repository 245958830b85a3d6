"""Custom exception hierarchy for binship.

This module defines the exception classes used throughout binship:
- BinshipError: Base exception for all binship errors
- ConfigurationError: Raised when binship.yaml cannot be loaded or validated
- StepFailedError: Raised when a deployment step exits non-zero
- BuildFailed, TransferFailed, ActivationFailed: One per deployment step

User-facing messages are safe to display. Technical details are logged
internally via structlog and never shown to the user.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

logger = structlog.get_logger(__name__)


class BinshipError(Exception):
    """Base exception for binship.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details for logging only.

    Example:
        >>> raise BinshipError(
        ...     "Deployment aborted",
        ...     internal_details="ssh exited 255 for host titanic"
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize BinshipError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "binship_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ConfigurationError(BinshipError):
    """Raised when configuration file parsing or validation fails.

    Attributes:
        file_path: Path to the configuration file (if known).
        field_path: Dot-separated path to the invalid field (e.g., "remote.host").
        field_errors: Every invalid field as ``(field_path, message)`` pairs.

    Example:
        >>> raise ConfigurationError(
        ...     "Unknown field",
        ...     file_path="binship.yaml",
        ...     field_path="remote.hots",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: str | None = None,
        field_path: str | None = None,
        field_errors: Sequence[tuple[str, str]] = (),
        internal_details: str | None = None,
    ) -> None:
        """Initialize ConfigurationError with context.

        Args:
            user_message: Safe message to display to the user.
            file_path: Path to the configuration file (optional).
            field_path: Dot-separated path to the field (optional).
            field_errors: Per-field problems, listed one per line after the
                message. The first one supplies field_path when it is not given.
            internal_details: Technical details for internal logging only.
        """
        field_errors = list(field_errors)
        if field_path is None and field_errors:
            field_path = field_errors[0][0]

        context_parts: list[str] = []
        if file_path:
            context_parts.append(f"in {file_path}")
        if field_path and not field_errors:
            context_parts.append(f"field '{field_path}'")

        if context_parts:
            full_message = f"{user_message} ({', '.join(context_parts)})"
        else:
            full_message = user_message
        for path, problem in field_errors:
            full_message += f"\n  - {path}: {problem}"

        super().__init__(full_message, internal_details=internal_details)

        self.file_path = file_path
        self.field_path = field_path
        self.field_errors = field_errors


class StepFailedError(BinshipError):
    """Raised when a deployment step does not complete successfully.

    Attributes:
        step: Name of the failing step ("build", "transfer", "activate").
        exit_code: Exit status of the external tool. Never 0.
    """

    def __init__(
        self,
        step: str,
        exit_code: int,
        user_message: str | None = None,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize StepFailedError.

        Args:
            step: Name of the failing step.
            exit_code: Exit status of the external tool.
            user_message: Optional message; defaults to a generic one.
            internal_details: Technical details for internal logging only.
        """
        message = user_message or f"Step '{step}' failed with exit status {exit_code}"
        super().__init__(message, internal_details=internal_details)
        self.step = step
        self.exit_code = exit_code if exit_code != 0 else 1


class BuildFailed(StepFailedError):
    """Raised when the compiler exits non-zero or leaves no artifact behind."""


class TransferFailed(StepFailedError):
    """Raised when copying the artifact to the remote host fails."""


class ActivationFailed(StepFailedError):
    """Raised when the elevated remote move into the service directory fails."""
