"""Task router: upsert, lookup, search, delete, execute and command validation."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from fastapi import Depends, status
from fastapi.responses import JSONResponse

from shellkit.core.api.router import Router
from shellkit.core.exceptions import TaskNotFoundError, ValidationFailedError

from .manager import TaskManager
from .schemas import (
    CommandValidationResult,
    ExecutionRecordOut,
    TaskDeleteResponse,
    TaskIn,
    TaskOut,
    TaskServiceStatus,
)


class TaskRouter(Router):
    """Router for Task entities with execution and validation operations."""

    def __init__(
        self,
        prefix: str,
        tags: Sequence[str],
        manager_factory: Callable[..., Any],
        **kwargs: Any,
    ) -> None:
        """Initialize task router with a manager factory dependency."""
        self.manager_factory = manager_factory
        super().__init__(prefix=prefix, tags=list(tags), **kwargs)

    def _register_routes(self) -> None:
        """Register task routes."""
        manager_dependency = Depends(self.manager_factory)

        @self.router.get(
            "",
            summary="List tasks or get one by id",
            response_model=list[TaskOut] | TaskOut,
        )
        async def get_tasks(
            id: str | None = None,
            manager: TaskManager = manager_dependency,
        ) -> list[TaskOut] | TaskOut:
            if id is not None and id.strip():
                return await manager.get(id.strip())
            return await manager.find_all()

        @self.router.put(
            "",
            summary="Create or update task",
            description="Upsert a task by id; the command must pass the safety check and history is preserved",
            response_model=TaskOut,
        )
        async def create_or_update_task(
            data: TaskIn,
            manager: TaskManager = manager_dependency,
        ) -> TaskOut:
            return await manager.create_or_update(data)

        @self.router.get(
            "/search",
            summary="Find tasks by name",
            description="Case-insensitive substring match on task names",
            response_model=list[TaskOut],
        )
        async def find_tasks_by_name(
            name: str | None = None,
            manager: TaskManager = manager_dependency,
        ) -> list[TaskOut]:
            if name is None or not name.strip():
                raise ValidationFailedError("Search parameter 'name' cannot be empty")

            tasks = await manager.find_by_name(name.strip())
            if not tasks:
                raise TaskNotFoundError(f"No tasks found with name containing '{name}'")
            return tasks

        @self.router.get(
            "/validate",
            summary="Validate command",
            description="Check a command against the denylist without storing or running it",
            response_model=CommandValidationResult,
            responses={status.HTTP_400_BAD_REQUEST: {"model": CommandValidationResult}},
        )
        async def validate_command(
            command: str | None = None,
            manager: TaskManager = manager_dependency,
        ) -> CommandValidationResult | JSONResponse:
            if command is None or not command.strip():
                raise ValidationFailedError("Command parameter cannot be empty")

            reason = manager.unsafe_reason(command)
            if reason is None:
                return CommandValidationResult(command=command, safe=True, message="Command is safe to execute")

            result = CommandValidationResult(
                command=command,
                safe=False,
                reason=reason,
                message="Command is not safe: contains dangerous operations or patterns",
            )
            return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=result.model_dump())

        @self.router.get(
            "/validate/examples",
            summary="Safe command examples",
            response_model=list[str],
        )
        async def safe_command_examples(manager: TaskManager = manager_dependency) -> list[str]:
            return manager.safe_command_examples()

        @self.router.get(
            "/health",
            summary="Task service status",
            response_model=TaskServiceStatus,
        )
        async def task_service_status() -> TaskServiceStatus:
            return TaskServiceStatus()

        @self.router.delete(
            "/{task_id}",
            summary="Delete task",
            response_model=TaskDeleteResponse,
        )
        async def delete_task(
            task_id: str,
            manager: TaskManager = manager_dependency,
        ) -> TaskDeleteResponse:
            if not await manager.delete(task_id):
                raise TaskNotFoundError(f"Task with ID '{task_id}' not found")
            return TaskDeleteResponse(message=f"Task with ID '{task_id}' has been deleted successfully")

        @self.router.put(
            "/{task_id}/execute",
            summary="Execute task",
            description="Run the task's command synchronously and append the result to its history",
            response_model=ExecutionRecordOut,
        )
        async def execute_task(
            task_id: str,
            manager: TaskManager = manager_dependency,
        ) -> ExecutionRecordOut:
            return await manager.execute_task(task_id)

        @self.router.get(
            "/{task_id}/executions",
            summary="Task execution history",
            response_model=list[ExecutionRecordOut],
        )
        async def get_task_executions(
            task_id: str,
            manager: TaskManager = manager_dependency,
        ) -> list[ExecutionRecordOut]:
            return await manager.executions(task_id)
