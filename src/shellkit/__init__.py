"""Shellkit - register, validate and execute shell command tasks over a REST API."""

# Core framework
from shellkit.core import (
    Base,
    BaseRepository,
    CommandRejectedError,
    Database,
    Entity,
    ExecutionTimeoutError,
    ShellkitError,
    TaskNotFoundError,
    ULIDType,
    ValidationFailedError,
)

# Task feature
from shellkit.modules.task import (
    CommandValidator,
    ExecutionRecord,
    ExecutionRecordOut,
    Task,
    TaskExecution,
    TaskExecutor,
    TaskIn,
    TaskManager,
    TaskOut,
    TaskRepository,
)

__version__ = "0.1.0"

__all__ = [
    # Core framework
    "Database",
    "Base",
    "Entity",
    "BaseRepository",
    "ULIDType",
    # Errors
    "ShellkitError",
    "ValidationFailedError",
    "CommandRejectedError",
    "TaskNotFoundError",
    "ExecutionTimeoutError",
    # Task feature
    "Task",
    "TaskExecution",
    "TaskIn",
    "TaskOut",
    "ExecutionRecord",
    "ExecutionRecordOut",
    "TaskRepository",
    "TaskManager",
    "TaskExecutor",
    "CommandValidator",
    # Version
    "__version__",
]
