"""Tests for TaskRepository against an in-memory database."""

from __future__ import annotations

from datetime import timedelta

from shellkit.core import Database
from shellkit.core.models import utcnow
from shellkit.modules.task import ExecutionRecord, Task, TaskRepository


async def seed(database: Database, *tasks: Task) -> None:
    async with database.session() as session:
        repo = TaskRepository(session)
        for task in tasks:
            await repo.save(task)
        await repo.commit()


async def test_save_and_find_by_id(database: Database) -> None:
    await seed(database, Task(id="t1", name="Backup", owner="alice", command="date"))

    async with database.session() as session:
        repo = TaskRepository(session)
        task = await repo.find_by_id("t1")

        assert task is not None
        assert task.name == "Backup"
        assert task.executions == []
        assert task.created_at.tzinfo is not None


async def test_find_by_id_missing_returns_none(database: Database) -> None:
    async with database.session() as session:
        assert await TaskRepository(session).find_by_id("missing") is None


async def test_exists_by_id_and_count(database: Database) -> None:
    await seed(
        database,
        Task(id="t1", name="a", owner="o", command="date"),
        Task(id="t2", name="b", owner="o", command="ls"),
    )

    async with database.session() as session:
        repo = TaskRepository(session)
        assert await repo.exists_by_id("t1") is True
        assert await repo.exists_by_id("nope") is False
        assert await repo.count() == 2


async def test_find_all_ordered_by_id(database: Database) -> None:
    await seed(
        database,
        Task(id="b", name="second", owner="o", command="date"),
        Task(id="a", name="first", owner="o", command="date"),
    )

    async with database.session() as session:
        tasks = await TaskRepository(session).find_all()

    assert [task.id for task in tasks] == ["a", "b"]


async def test_find_by_name_containing_is_case_insensitive(database: Database) -> None:
    await seed(
        database,
        Task(id="t1", name="Nightly Backup", owner="o", command="date"),
        Task(id="t2", name="backup-weekly", owner="o", command="date"),
        Task(id="t3", name="Cleanup", owner="o", command="date"),
    )

    async with database.session() as session:
        repo = TaskRepository(session)
        matches = await repo.find_by_name_containing("BACKUP")
        none = await repo.find_by_name_containing("restore")

    assert [task.id for task in matches] == ["t1", "t2"]
    assert none == []


async def test_find_by_name_treats_wildcards_literally(database: Database) -> None:
    await seed(
        database,
        Task(id="t1", name="100% done", owner="o", command="date"),
        Task(id="t2", name="1000 done", owner="o", command="date"),
        Task(id="t3", name="a_b", owner="o", command="date"),
        Task(id="t4", name="axb", owner="o", command="date"),
    )

    async with database.session() as session:
        repo = TaskRepository(session)
        assert [t.id for t in await repo.find_by_name_containing("0%")] == ["t1"]
        assert [t.id for t in await repo.find_by_name_containing("a_b")] == ["t3"]


async def test_save_existing_updates_fields_and_keeps_executions(database: Database) -> None:
    await seed(database, Task(id="t1", name="old", owner="alice", command="date"))
    now = utcnow()

    async with database.session() as session:
        repo = TaskRepository(session)
        await repo.add_execution("t1", ExecutionRecord(now, now, "first"))
        await repo.commit()

    async with database.session() as session:
        repo = TaskRepository(session)
        await repo.save(Task(id="t1", name="new", owner="bob", command="ls"))
        await repo.commit()

    async with database.session() as session:
        task = await TaskRepository(session).find_by_id("t1")
        assert task is not None
        assert (task.name, task.owner, task.command) == ("new", "bob", "ls")
        assert [execution.output for execution in task.executions] == ["first"]


async def test_executions_returned_in_insertion_order(database: Database) -> None:
    await seed(database, Task(id="t1", name="n", owner="o", command="date"))
    base = utcnow()

    async with database.session() as session:
        repo = TaskRepository(session)
        for i in range(3):
            start = base + timedelta(seconds=i)
            await repo.add_execution("t1", ExecutionRecord(start, start, f"run-{i}"))
        await repo.commit()

    async with database.session() as session:
        executions = await TaskRepository(session).find_executions("t1")

    assert [execution.output for execution in executions] == ["run-0", "run-1", "run-2"]
    assert executions[0].start_time == base


async def test_delete_by_id_removes_task_and_history(database: Database) -> None:
    await seed(database, Task(id="t1", name="n", owner="o", command="date"))
    now = utcnow()

    async with database.session() as session:
        repo = TaskRepository(session)
        await repo.add_execution("t1", ExecutionRecord(now, now, "out"))
        await repo.commit()

    async with database.session() as session:
        repo = TaskRepository(session)
        await repo.delete_by_id("t1")
        await repo.commit()

    async with database.session() as session:
        repo = TaskRepository(session)
        assert await repo.find_by_id("t1") is None
        assert await repo.find_executions("t1") == []
