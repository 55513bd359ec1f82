"""Error taxonomy shared by the task feature and the HTTP error handlers."""

from __future__ import annotations

from typing import ClassVar


class ShellkitError(Exception):
    """Base class for errors that map onto an HTTP error response."""

    status_code: ClassVar[int] = 500
    error: ClassVar[str] = "Internal Server Error"

    def __init__(self, message: str) -> None:
        """Store the user-facing message."""
        super().__init__(message)
        self.message = message


class ValidationFailedError(ShellkitError, ValueError):
    """A required input was missing or blank."""

    status_code = 400
    error = "Bad Request"


class CommandRejectedError(ShellkitError, ValueError):
    """A command failed the denylist safety check."""

    status_code = 400
    error = "Bad Request"

    def __init__(self, message: str, *, reason: str | None = None) -> None:
        """Store the message and the validator's reason."""
        super().__init__(message)
        self.reason = reason


class TaskNotFoundError(ShellkitError, LookupError):
    """A task lookup by id or name yielded nothing."""

    status_code = 404
    error = "Not Found"


class ExecutionTimeoutError(ShellkitError, TimeoutError):
    """A subprocess exceeded its wall-clock deadline and was killed."""

    status_code = 500
    error = "Execution Timeout"

    def __init__(self, message: str, *, timeout_seconds: float) -> None:
        """Store the message and the deadline that was exceeded."""
        super().__init__(message)
        self.timeout_seconds = timeout_seconds
