"""Subprocess execution of task commands with timeout and in-band error capture."""

from __future__ import annotations

import asyncio
import os
import signal
from dataclasses import dataclass
from datetime import datetime

from shellkit.core.exceptions import CommandRejectedError, ExecutionTimeoutError
from shellkit.core.logging import get_logger
from shellkit.core.models import utcnow

from .models import Task
from .validator import CommandValidator

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

# On POSIX the shell leads its own process group so a timeout can kill the whole tree
_USE_PROCESS_GROUP = os.name == "posix"


@dataclass(frozen=True, slots=True)
class ExecutionRecord:
    """Result of one run of a task's command."""

    start_time: datetime
    end_time: datetime
    output: str


@dataclass(frozen=True, slots=True)
class CompletedProcess:
    """Exit code and decoded streams of a process that terminated on its own."""

    exit_code: int
    stdout: str
    stderr: str


def format_output(result: CompletedProcess) -> str:
    """Build the record output: stdout on success, an "Error: " string otherwise."""
    if result.exit_code == 0:
        return result.stdout

    error_msg = result.stderr if result.stderr else f"Command failed with exit code {result.exit_code}"
    output = f"Error: {error_msg}"
    if result.stdout:
        output += f"\nOutput: {result.stdout}"
    return output


def _decode(data: bytes | None) -> str:
    return data.decode("utf-8", errors="replace") if data else ""


class TaskExecutor:
    """Runs a task's command through the platform shell and produces an ExecutionRecord."""

    def __init__(
        self,
        validator: CommandValidator | None = None,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize executor with a validator and a wall-clock timeout."""
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self.validator = validator or CommandValidator()
        self.timeout_seconds = timeout_seconds

    async def execute(self, task: Task) -> ExecutionRecord:
        """Validate and run the task's command, raising on rejection or timeout.

        Launch and I/O failures do not raise; they are returned as a record
        whose output starts with "Error executing command: ". Nothing is
        persisted here.
        """
        command = task.command
        reason = self.validator.unsafe_reason(command)
        if reason is not None:
            logger.warning("task.execution.rejected", task_id=task.id, command=command, reason=reason)
            raise CommandRejectedError(f"Cannot execute unsafe command: {reason}", reason=reason)

        start_time = utcnow()
        logger.info("task.execution.started", task_id=task.id, command=command)

        try:
            result = await self._run(command)
        except ExecutionTimeoutError:
            logger.warning("task.execution.timed_out", task_id=task.id, timeout_seconds=self.timeout_seconds)
            raise
        except Exception as e:
            end_time = utcnow()
            logger.error(
                "task.execution.failed_to_run",
                task_id=task.id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return ExecutionRecord(start_time, end_time, f"Error executing command: {e}")

        end_time = utcnow()
        logger.info(
            "task.execution.completed",
            task_id=task.id,
            exit_code=result.exit_code,
            duration_seconds=(end_time - start_time).total_seconds(),
        )
        return ExecutionRecord(start_time, end_time, format_output(result))

    async def _run(self, command: str) -> CompletedProcess:
        """Spawn the process, drain both pipes while waiting, and kill it at the deadline."""
        process = await asyncio.create_subprocess_shell(
            command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=_USE_PROCESS_GROUP,
        )

        try:
            # communicate() reads stdout and stderr concurrently with the exit wait
            stdout_bytes, stderr_bytes = await asyncio.wait_for(process.communicate(), timeout=self.timeout_seconds)
        except TimeoutError:
            await self._kill(process)
            raise ExecutionTimeoutError(
                f"Command execution timed out after {self.timeout_seconds:g} seconds",
                timeout_seconds=self.timeout_seconds,
            ) from None
        except BaseException:
            await self._kill(process)
            raise

        assert process.returncode is not None
        return CompletedProcess(process.returncode, _decode(stdout_bytes), _decode(stderr_bytes))

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        """Forcibly terminate the process, then reap it.

        On POSIX the whole process group is killed. On Windows only the shell
        itself is killed; commands it started may outlive the timeout.
        """
        try:
            if _USE_PROCESS_GROUP:
                os.killpg(process.pid, signal.SIGKILL)
            elif process.returncode is None:
                process.kill()
        except ProcessLookupError:
            pass
        await process.wait()
