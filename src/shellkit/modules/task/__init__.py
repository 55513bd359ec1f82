"""Task feature - named shell commands with validated, time-limited execution."""

from .executor import DEFAULT_TIMEOUT_SECONDS, CompletedProcess, ExecutionRecord, TaskExecutor, format_output
from .manager import TaskExecutionLocks, TaskManager
from .models import Task, TaskExecution
from .repository import TaskRepository
from .router import TaskRouter
from .schemas import (
    CommandValidationResult,
    ExecutionRecordOut,
    TaskDeleteResponse,
    TaskIn,
    TaskOut,
    TaskServiceStatus,
)
from .validator import DANGEROUS_COMMANDS, DANGEROUS_PATTERNS, SAFE_COMMAND_EXAMPLES, CommandValidator

__all__ = [
    "Task",
    "TaskExecution",
    "TaskIn",
    "TaskOut",
    "ExecutionRecordOut",
    "TaskDeleteResponse",
    "CommandValidationResult",
    "TaskServiceStatus",
    "TaskRepository",
    "TaskManager",
    "TaskExecutionLocks",
    "TaskRouter",
    "TaskExecutor",
    "ExecutionRecord",
    "CompletedProcess",
    "format_output",
    "DEFAULT_TIMEOUT_SECONDS",
    "CommandValidator",
    "DANGEROUS_COMMANDS",
    "DANGEROUS_PATTERNS",
    "SAFE_COMMAND_EXAMPLES",
]
