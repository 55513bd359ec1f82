"""Tests for dependency injection utilities."""

from __future__ import annotations

import pytest

import shellkit.core.api.dependencies as deps
from shellkit.api import get_task_manager
from shellkit.core import Database
from shellkit.core.api.dependencies import get_database, get_session, set_database
from shellkit.modules.task import TaskManager


def test_get_database_uninitialized() -> None:
    """Test get_database raises error when database is not initialized."""
    original_db = deps._database
    set_database(None)

    try:
        with pytest.raises(RuntimeError, match="Database not initialized"):
            get_database()
    finally:
        deps._database = original_db


async def test_set_and_get_database(database: Database) -> None:
    """Test setting and getting the database instance."""
    original_db = deps._database
    try:
        set_database(database)
        assert get_database() is database
    finally:
        deps._database = original_db


async def test_get_session_yields_session_bound_to_database(database: Database) -> None:
    sessions = get_session(database)
    session = await anext(sessions)

    assert session.bind is database.engine
    await sessions.aclose()


async def test_default_task_managers_share_execution_locks(database: Database) -> None:
    """Test the default dependency serializes executions across requests."""
    async with database.session() as session:
        first = await get_task_manager(session)
        second = await get_task_manager(session)

    assert isinstance(first, TaskManager)
    assert first.locks is second.locks
    assert first.executor.timeout_seconds == 30.0
