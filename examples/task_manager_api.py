"""FastAPI service demonstrating task registration, validation and execution."""

from __future__ import annotations

from fastapi import FastAPI

from shellkit import TaskIn, TaskManager, TaskRepository
from shellkit.api import ServiceBuilder, ServiceInfo
from shellkit.core import Database


async def seed_example_tasks(app: FastAPI) -> None:
    """Seed example tasks with stable ids."""
    database: Database | None = getattr(app.state, "database", None)
    if database is None:
        return

    async with database.session() as session:
        task_manager = TaskManager(TaskRepository(session))

        # Skip seeding if tasks already exist
        if await task_manager.find_all():
            return

        await task_manager.create_or_update(
            TaskIn(id="hello", name="Say hello", owner="examples", command="echo Hello World")
        )
        await task_manager.create_or_update(
            TaskIn(id="clock", name="Server clock", owner="examples", command="date")
        )
        await task_manager.create_or_update(
            TaskIn(id="whoami", name="Current user", owner="examples", command="whoami")
        )

        # Fails with a non-zero exit code; the error is captured in the execution record
        await task_manager.create_or_update(
            TaskIn(id="missing-dir", name="List missing directory", owner="examples", command="ls /nonexistent/dir")
        )


info = ServiceInfo(
    display_name="Task Manager Service",
    summary="Register named shell commands and run them on demand with recorded history",
    version="1.0.0",
)

app = (
    ServiceBuilder(info=info)
    .with_logging()
    .with_health()
    .with_system()
    .with_tasks()
    .on_startup(seed_example_tasks)
    .build()
)

if __name__ == "__main__":
    from shellkit.api import run_app

    run_app("task_manager_api:app")
