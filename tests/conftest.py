"""Test configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator

import pytest
from fastapi.testclient import TestClient

from shellkit.api import ServiceBuilder, ServiceInfo
from shellkit.core import Database


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    """Create and initialize an in-memory database."""
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.init()
    try:
        yield db
    finally:
        await db.dispose()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """TestClient for a full task service with a short execution timeout."""
    app = (
        ServiceBuilder(info=ServiceInfo(display_name="Test Task Service"))
        .with_health()
        .with_system()
        .with_tasks(timeout_seconds=2.0)
        .build()
    )
    with TestClient(app) as test_client:
        yield test_client


def task_payload(task_id: str = "task-1", **overrides: str) -> dict[str, str]:
    """Build a valid task request body."""
    payload = {"id": task_id, "name": "Say hello", "owner": "alice", "command": "echo hello"}
    payload.update(overrides)
    return payload
