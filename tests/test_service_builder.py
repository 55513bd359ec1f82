"""End-to-end tests for ServiceBuilder task services."""

from __future__ import annotations

import os

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import text

from shellkit.api import ServiceBuilder, ServiceInfo, get_task_manager
from shellkit.core import Database
from shellkit.core.api import BaseServiceBuilder

from .conftest import task_payload

posix_only = pytest.mark.skipif(os.name != "posix", reason="relies on POSIX shell utilities")


def test_put_then_list_and_get(client: TestClient) -> None:
    response = client.put("/api/v1/tasks", json=task_payload())
    assert response.status_code == 200
    created = response.json()
    assert created["id"] == "task-1"
    assert created["executions"] == []

    assert [task["id"] for task in client.get("/api/v1/tasks").json()] == ["task-1"]
    assert client.get("/api/v1/tasks", params={"id": "task-1"}).json()["name"] == "Say hello"


def test_get_unknown_id_returns_404(client: TestClient) -> None:
    response = client.get("/api/v1/tasks", params={"id": "zzz"})

    assert response.status_code == 404
    assert response.json()["path"] == "/api/v1/tasks"


def test_put_unsafe_command_is_rejected_and_not_stored(client: TestClient) -> None:
    response = client.put("/api/v1/tasks", json=task_payload(command="rm -rf /"))

    assert response.status_code == 400
    assert "rm" in response.json()["message"]
    assert client.get("/api/v1/tasks").json() == []


def test_put_blank_field_is_validation_failure(client: TestClient) -> None:
    response = client.put("/api/v1/tasks", json=task_payload(owner=""))

    assert response.status_code == 400
    assert response.json()["validation_errors"] == {"owner": "Task owner is required"}


@posix_only
def test_execute_appends_history(client: TestClient) -> None:
    client.put("/api/v1/tasks", json=task_payload())

    first = client.put("/api/v1/tasks/task-1/execute")
    second = client.put("/api/v1/tasks/task-1/execute")

    assert first.status_code == 200
    assert first.json()["output"] == "hello\n"
    history = client.get("/api/v1/tasks/task-1/executions").json()
    assert [record["id"] for record in history] == [first.json()["id"], second.json()["id"]]
    assert len(client.get("/api/v1/tasks", params={"id": "task-1"}).json()["executions"]) == 2


@posix_only
def test_failing_command_is_recorded_in_band(client: TestClient) -> None:
    client.put("/api/v1/tasks", json=task_payload(command="ls /nonexistent/shellkit-dir"))

    response = client.put("/api/v1/tasks/task-1/execute")

    assert response.status_code == 200
    assert response.json()["output"].startswith("Error: ")


@posix_only
def test_update_keeps_history(client: TestClient) -> None:
    client.put("/api/v1/tasks", json=task_payload())
    client.put("/api/v1/tasks/task-1/execute")

    response = client.put("/api/v1/tasks", json=task_payload(name="Renamed", command="date"))

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Renamed"
    assert len(body["executions"]) == 1


@posix_only
def test_execute_timeout_returns_500_and_records_nothing(client: TestClient) -> None:
    client.put("/api/v1/tasks", json=task_payload(command="sleep 10"))

    response = client.put("/api/v1/tasks/task-1/execute")

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Execution Timeout"
    assert body["message"] == "Command execution timed out after 2 seconds"
    assert client.get("/api/v1/tasks/task-1/executions").json() == []


def test_execute_unknown_task_returns_404(client: TestClient) -> None:
    assert client.put("/api/v1/tasks/ghost/execute").status_code == 404


def test_delete_then_lookup_returns_404(client: TestClient) -> None:
    client.put("/api/v1/tasks", json=task_payload())

    response = client.delete("/api/v1/tasks/task-1")

    assert response.status_code == 200
    assert response.json()["message"] == "Task with ID 'task-1' has been deleted successfully"
    assert client.get("/api/v1/tasks", params={"id": "task-1"}).status_code == 404
    assert client.get("/api/v1/tasks/task-1/executions").status_code == 404
    assert client.delete("/api/v1/tasks/task-1").status_code == 404


def test_search(client: TestClient) -> None:
    client.put("/api/v1/tasks", json=task_payload("a", name="Nightly Backup"))
    client.put("/api/v1/tasks", json=task_payload("b", name="Cleanup"))

    found = client.get("/api/v1/tasks/search", params={"name": "backup"})

    assert found.status_code == 200
    assert [task["id"] for task in found.json()] == ["a"]
    assert client.get("/api/v1/tasks/search", params={"name": "restore"}).status_code == 404
    assert client.get("/api/v1/tasks/search", params={"name": ""}).status_code == 400


def test_validate_endpoint(client: TestClient) -> None:
    safe = client.get("/api/v1/tasks/validate", params={"command": "echo hi"})
    unsafe = client.get("/api/v1/tasks/validate", params={"command": "echo hi; reboot"})

    assert safe.status_code == 200
    assert safe.json()["safe"] is True
    assert unsafe.status_code == 400
    assert unsafe.json()["reason"] == "Command contains dangerous pattern: ;"


def test_validate_examples_are_safe(client: TestClient) -> None:
    examples = client.get("/api/v1/tasks/validate/examples").json()

    assert examples
    for example in examples:
        assert client.get("/api/v1/tasks/validate", params={"command": example}).status_code == 200


def test_task_service_health(client: TestClient) -> None:
    assert client.get("/api/v1/tasks/health").json() == {
        "status": "healthy",
        "message": "Task Manager API is running",
    }


def test_aggregate_health_includes_database_and_shell(client: TestClient) -> None:
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert set(body["checks"]) == {"database", "shell"}


def test_system_info_reports_timeout(client: TestClient) -> None:
    body = client.get("/api/v1/system").json()

    assert body["execution_timeout_seconds"] == 2.0
    assert body["shell"]


def test_info_endpoint(client: TestClient) -> None:
    assert client.get("/api/v1/info").json()["display_name"] == "Test Task Service"


def test_non_positive_timeout_is_rejected() -> None:
    builder = ServiceBuilder(info=ServiceInfo(display_name="Bad")).with_tasks(timeout_seconds=0)

    with pytest.raises(ValueError, match="Task execution timeout must be positive"):
        builder.build()


def test_invalid_health_check_name_is_rejected() -> None:
    async def check() -> tuple[str, None]:
        raise AssertionError("not called")

    builder = BaseServiceBuilder(info=ServiceInfo(display_name="Bad")).with_health(checks={"bad name!": check})  # type: ignore[dict-item]

    with pytest.raises(ValueError, match="invalid characters"):
        builder.build()


def test_with_tasks_overrides_default_manager_dependency() -> None:
    app = ServiceBuilder(info=ServiceInfo(display_name="Svc")).with_tasks().build()

    assert get_task_manager in app.dependency_overrides


def test_custom_prefix_and_hooks() -> None:
    calls: list[str] = []

    async def on_start(app: FastAPI) -> None:
        calls.append("start")

    async def on_stop(app: FastAPI) -> None:
        calls.append("stop")

    app = (
        ServiceBuilder(info=ServiceInfo(display_name="Svc"))
        .with_tasks(prefix="/tasks")
        .on_startup(on_start)
        .on_shutdown(on_stop)
        .build()
    )

    with TestClient(app) as test_client:
        assert test_client.get("/tasks").json() == []

    assert calls == ["start", "stop"]


async def test_injected_database_is_not_disposed(database: Database) -> None:
    app = ServiceBuilder(info=ServiceInfo(display_name="Svc")).with_database_instance(database).with_tasks().build()

    async with app.router.lifespan_context(app):
        assert app.state.database is database

    async with database.session() as session:
        assert (await session.execute(text("SELECT 1"))).scalar_one() == 1
    assert app.state.database is None
