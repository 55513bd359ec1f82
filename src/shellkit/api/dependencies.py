"""Feature-specific FastAPI dependency injection for managers."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shellkit.core.api.dependencies import get_session
from shellkit.modules.task import TaskExecutionLocks, TaskManager, TaskRepository

# Shared across requests so executions of one task are serialized app-wide
_default_execution_locks = TaskExecutionLocks()


async def get_task_manager(session: Annotated[AsyncSession, Depends(get_session)]) -> TaskManager:
    """Get a task manager with the default executor for dependency injection.

    ServiceBuilder.with_tasks() overrides this with a manager using the configured timeout.
    """
    repo = TaskRepository(session)
    return TaskManager(repo, locks=_default_execution_locks)
