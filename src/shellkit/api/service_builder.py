"""Service builder with task module integration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Coroutine, List, Self

from fastapi import Depends, FastAPI
from sqlalchemy.ext.asyncio import AsyncSession

from shellkit.core.api.dependencies import get_session
from shellkit.core.api.service_builder import BaseServiceBuilder
from shellkit.modules.task import (
    DEFAULT_TIMEOUT_SECONDS,
    CommandValidator,
    TaskExecutionLocks,
    TaskExecutor,
    TaskManager,
    TaskRepository,
    TaskRouter,
)

from .dependencies import get_task_manager as default_get_task_manager

# Type alias for dependency factory functions
type DependencyFactory = Callable[..., Coroutine[Any, Any, Any]]


@dataclass(slots=True)
class _TaskOptions:
    """Internal task options for ServiceBuilder."""

    prefix: str = "/api/v1/tasks"
    tags: List[str] = field(default_factory=lambda: ["Tasks"])
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


class ServiceBuilder(BaseServiceBuilder):
    """Service builder with integrated task module support."""

    def __init__(self, **kwargs: Any) -> None:
        """Initialize service builder with module-specific state."""
        super().__init__(**kwargs)
        self._task_options: _TaskOptions | None = None

    # --------------------------------------------------------------------- Module-specific fluent methods

    def with_tasks(
        self,
        *,
        prefix: str = "/api/v1/tasks",
        tags: List[str] | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> Self:
        """Enable task registration, validation and execution endpoints."""
        self._task_options = _TaskOptions(
            prefix=prefix,
            tags=list(tags) if tags else ["Tasks"],
            timeout_seconds=timeout_seconds,
        )
        return self

    # --------------------------------------------------------------------- Extension point implementations

    def _validate_module_configuration(self) -> None:
        """Validate module-specific configuration."""
        if self._task_options and self._task_options.timeout_seconds <= 0:
            raise ValueError("Task execution timeout must be positive.")

    def _register_module_routers(self, app: FastAPI) -> None:
        """Register the task router."""
        if self._task_options:
            task_options = self._task_options
            task_dep = self._build_task_dependency(timeout_seconds=task_options.timeout_seconds)
            task_router = TaskRouter.create(
                prefix=task_options.prefix,
                tags=task_options.tags,
                manager_factory=task_dep,
            )
            app.include_router(task_router)
            app.dependency_overrides[default_get_task_manager] = task_dep

    def _execution_timeout_seconds(self) -> float | None:
        """Report the configured task execution timeout."""
        return self._task_options.timeout_seconds if self._task_options else None

    # --------------------------------------------------------------------- Module dependency builders

    @staticmethod
    def _build_task_dependency(*, timeout_seconds: float) -> DependencyFactory:
        validator = CommandValidator()
        executor = TaskExecutor(validator, timeout_seconds=timeout_seconds)
        locks = TaskExecutionLocks()

        async def _dependency(session: AsyncSession = Depends(get_session)) -> TaskManager:
            repo = TaskRepository(session)
            return TaskManager(repo, validator=validator, executor=executor, locks=locks)

        return _dependency
