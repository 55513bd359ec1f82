"""Core framework - database, ORM base, repositories, errors and logging."""

from .database import Database
from .exceptions import (
    CommandRejectedError,
    ExecutionTimeoutError,
    ShellkitError,
    TaskNotFoundError,
    ValidationFailedError,
)
from .logging import configure_logging, get_logger
from .models import Base, Entity, utcnow
from .repository import BaseRepository
from .types import ULIDType, UTCDateTime

__all__ = [
    # Database
    "Database",
    "Base",
    "Entity",
    "BaseRepository",
    "ULIDType",
    "UTCDateTime",
    "utcnow",
    # Errors
    "ShellkitError",
    "ValidationFailedError",
    "CommandRejectedError",
    "TaskNotFoundError",
    "ExecutionTimeoutError",
    # Logging
    "configure_logging",
    "get_logger",
]
