"""Task ORM models: named shell commands and their execution history."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import Text
from ulid import ULID

from shellkit.core.models import Base, Entity
from shellkit.core.types import ULIDType, UTCDateTime


class Task(Entity):
    """ORM model for a named, owned shell command."""

    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    owner: Mapped[str] = mapped_column(String(255), nullable=False)
    command: Mapped[str] = mapped_column(Text, nullable=False)

    executions: Mapped[list[TaskExecution]] = relationship(
        back_populates="task",
        cascade="all, delete-orphan",
        order_by=lambda: [TaskExecution.start_time, TaskExecution.id],
        lazy="selectin",
    )


class TaskExecution(Base):
    """ORM model for one immutable run of a task's command."""

    __tablename__ = "task_executions"

    id: Mapped[ULID] = mapped_column(ULIDType, primary_key=True, default=ULID)
    task_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    start_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    output: Mapped[str] = mapped_column(Text, nullable=False, default="")

    task: Mapped[Task] = relationship(back_populates="executions")
