"""Task repository for database access and querying."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shellkit.core.repository import BaseRepository

from .executor import ExecutionRecord
from .models import Task, TaskExecution


class TaskRepository(BaseRepository[Task, str]):
    """Repository for Task entities and their execution history."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize task repository with database session."""
        super().__init__(session, Task)

    async def find_all(self) -> list[Task]:
        """Return all tasks ordered by id."""
        result = await self.s.scalars(select(Task).order_by(Task.id))
        return list(result.all())

    async def find_by_name_containing(self, pattern: str) -> list[Task]:
        """Find tasks whose name contains the pattern, ignoring case."""
        escaped = pattern.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        stmt = select(Task).where(func.lower(Task.name).like(f"%{escaped}%", escape="\\")).order_by(Task.id)
        result = await self.s.scalars(stmt)
        return list(result.all())

    async def save(self, entity: Task) -> Task:
        """Insert or update a task by id, leaving its execution history untouched."""
        existing = await self.find_by_id(entity.id)
        if existing is None:
            self.s.add(entity)
            return entity

        existing.name = entity.name
        existing.owner = entity.owner
        existing.command = entity.command
        return existing

    async def add_execution(self, task_id: str, record: ExecutionRecord) -> TaskExecution:
        """Append an execution record to a task's history."""
        execution = TaskExecution(
            task_id=task_id,
            start_time=record.start_time,
            end_time=record.end_time,
            output=record.output,
        )
        self.s.add(execution)
        return execution

    async def find_executions(self, task_id: str) -> list[TaskExecution]:
        """Return a task's execution history in insertion order."""
        stmt = (
            select(TaskExecution)
            .where(TaskExecution.task_id == task_id)
            .order_by(TaskExecution.start_time, TaskExecution.id)
        )
        result = await self.s.scalars(stmt)
        return list(result.all())
