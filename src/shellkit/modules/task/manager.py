"""Task manager: command validation, upsert, lookup and serialized execution."""

from __future__ import annotations

import asyncio
import weakref

from shellkit.core.exceptions import CommandRejectedError, TaskNotFoundError
from shellkit.core.logging import get_logger

from .executor import TaskExecutor
from .models import Task
from .repository import TaskRepository
from .schemas import ExecutionRecordOut, TaskIn, TaskOut
from .validator import CommandValidator

logger = get_logger(__name__)


class TaskExecutionLocks:
    """Process-wide registry of per-task locks serializing executions of the same task."""

    def __init__(self) -> None:
        """Initialize an empty registry; unused locks are dropped automatically."""
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def for_task(self, task_id: str) -> asyncio.Lock:
        """Return the lock for a task, creating it on first use."""
        lock = self._locks.get(task_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[task_id] = lock
        return lock


class TaskManager:
    """Service layer for Task entities and their execution."""

    def __init__(
        self,
        repo: TaskRepository,
        *,
        validator: CommandValidator | None = None,
        executor: TaskExecutor | None = None,
        locks: TaskExecutionLocks | None = None,
    ) -> None:
        """Initialize task manager with repository, validator, executor and execution locks."""
        self.repo = repo
        self.validator = validator or CommandValidator()
        self.executor = executor or TaskExecutor(self.validator)
        self.locks = locks or TaskExecutionLocks()

    async def find_all(self) -> list[TaskOut]:
        """Return all tasks."""
        tasks = await self.repo.find_all()
        return [TaskOut.model_validate(task) for task in tasks]

    async def find_by_id(self, task_id: str) -> TaskOut | None:
        """Return a task by id, or None."""
        task = await self.repo.find_by_id(task_id)
        return TaskOut.model_validate(task) if task is not None else None

    async def get(self, task_id: str) -> TaskOut:
        """Return a task by id or raise TaskNotFoundError."""
        task = await self.find_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(f"Task with ID '{task_id}' not found")
        return task

    async def find_by_name(self, pattern: str) -> list[TaskOut]:
        """Return tasks whose name contains the pattern, ignoring case."""
        tasks = await self.repo.find_by_name_containing(pattern)
        return [TaskOut.model_validate(task) for task in tasks]

    async def create_or_update(self, data: TaskIn) -> TaskOut:
        """Validate the command and upsert the task, keeping any existing execution history."""
        reason = self.validator.unsafe_reason(data.command)
        if reason is not None:
            logger.warning("task.rejected", task_id=data.id, reason=reason)
            raise CommandRejectedError(f"Unsafe command detected: {reason}", reason=reason)

        task = await self.repo.save(Task(id=data.id, name=data.name, owner=data.owner, command=data.command))
        await self.repo.commit()
        await self.repo.refresh_many([task])
        logger.info("task.saved", task_id=task.id, name=task.name, owner=task.owner)
        return TaskOut.model_validate(task)

    async def delete(self, task_id: str) -> bool:
        """Delete a task and its history; return False when it did not exist."""
        if not await self.repo.exists_by_id(task_id):
            return False
        await self.repo.delete_by_id(task_id)
        await self.repo.commit()
        logger.info("task.deleted", task_id=task_id)
        return True

    async def executions(self, task_id: str) -> list[ExecutionRecordOut]:
        """Return a task's execution history or raise TaskNotFoundError."""
        if not await self.repo.exists_by_id(task_id):
            raise TaskNotFoundError(f"Task with ID '{task_id}' not found")
        executions = await self.repo.find_executions(task_id)
        return [ExecutionRecordOut.model_validate(execution) for execution in executions]

    async def execute_task(self, task_id: str) -> ExecutionRecordOut:
        """Run a task's command and append the resulting record to its history.

        Raises TaskNotFoundError, CommandRejectedError or ExecutionTimeoutError.
        Executions of the same task are serialized; different tasks run
        concurrently.
        """
        async with self.locks.for_task(task_id):
            task = await self.repo.find_by_id(task_id)
            if task is None:
                raise TaskNotFoundError(f"Task with ID {task_id} not found")

            record = await self.executor.execute(task)

            # The task may have been deleted by another request while the command ran
            if not await self.repo.exists_by_id(task_id):
                logger.warning("task.execution.discarded", task_id=task_id, reason="task deleted during execution")
                raise TaskNotFoundError(f"Task with ID {task_id} not found")

            execution = await self.repo.add_execution(task_id, record)
            await self.repo.commit()

        return ExecutionRecordOut.model_validate(execution)

    def is_command_safe(self, command: str) -> bool:
        """Return True when the command passes the safety check."""
        return self.validator.is_safe(command)

    def unsafe_reason(self, command: str) -> str | None:
        """Return why the command is unsafe, or None."""
        return self.validator.unsafe_reason(command)

    def safe_command_examples(self) -> list[str]:
        """Return example commands that pass the safety check."""
        return self.validator.safe_command_examples()
