"""Task schemas for command registration, execution records and validation results."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core.core_schema import ValidationInfo
from ulid import ULID


_REQUIRED_MESSAGES = {
    "id": "Task ID is required",
    "name": "Task name is required",
    "owner": "Task owner is required",
    "command": "Command is required",
}


class TaskIn(BaseModel):
    """Input schema for creating or updating a task (upsert by id)."""

    id: str = Field(description="Caller-supplied unique task identifier")
    name: str = Field(description="Human-readable task name")
    owner: str = Field(description="Owner of the task")
    command: str = Field(description="Shell command to execute")

    @field_validator("id", "name", "owner", "command")
    @classmethod
    def require_non_blank(cls, v: str, info: ValidationInfo) -> str:
        """Reject empty or whitespace-only values."""
        if not v.strip():
            raise ValueError(_REQUIRED_MESSAGES[str(info.field_name)])
        return v


class ExecutionRecordOut(BaseModel):
    """Output schema for a single task execution."""

    model_config = ConfigDict(from_attributes=True)

    id: ULID
    start_time: datetime = Field(description="UTC time immediately before the process was spawned")
    end_time: datetime = Field(description="UTC time immediately after the process terminated")
    output: str = Field(description="Captured stdout, or an in-band error description")


class TaskOut(BaseModel):
    """Output schema for task entities with their execution history."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    owner: str
    command: str
    executions: list[ExecutionRecordOut] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class TaskDeleteResponse(BaseModel):
    """Response schema for task deletion."""

    message: str


class CommandValidationResult(BaseModel):
    """Response schema for the command validation utility endpoint."""

    command: str
    safe: bool
    reason: str | None = None
    message: str


class TaskServiceStatus(BaseModel):
    """Response schema for the task service liveness endpoint."""

    status: str = "healthy"
    message: str = "Task Manager API is running"
