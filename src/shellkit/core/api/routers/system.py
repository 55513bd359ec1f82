"""System information router."""

from __future__ import annotations

import os
import platform
import sys
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from ..router import Router


def platform_shell() -> str:
    """Return the shell that asyncio uses to run command strings on this host."""
    if os.name == "nt":
        return os.environ.get("COMSPEC", "cmd.exe")
    return "/bin/sh"


class SystemInfo(BaseModel):
    """System information response."""

    current_time: datetime = Field(description="Current server time in UTC")
    timezone: str = Field(description="Server timezone")
    python_version: str = Field(description="Python version")
    platform: str = Field(description="Operating system platform")
    hostname: str = Field(description="Server hostname")
    shell: str = Field(description="Shell used to run task commands")
    execution_timeout_seconds: float | None = Field(
        default=None, description="Wall-clock limit for a single task execution"
    )


class SystemRouter(Router):
    """System information router."""

    default_response_model_exclude_none = True

    def __init__(
        self,
        prefix: str,
        tags: list[str],
        execution_timeout_seconds: float | None = None,
        **kwargs: object,
    ) -> None:
        """Initialize system router with the configured execution timeout."""
        self.execution_timeout_seconds = execution_timeout_seconds
        super().__init__(prefix=prefix, tags=tags, **kwargs)

    def _register_routes(self) -> None:
        """Register system info endpoint."""
        execution_timeout_seconds = self.execution_timeout_seconds

        @self.router.get(
            "",
            summary="System information",
            response_model=SystemInfo,
            response_model_exclude_none=self.default_response_model_exclude_none,
        )
        async def get_system_info() -> SystemInfo:
            return SystemInfo(
                current_time=datetime.now(timezone.utc),
                timezone=str(datetime.now().astimezone().tzinfo),
                python_version=f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
                platform=platform.platform(),
                hostname=platform.node(),
                shell=platform_shell(),
                execution_timeout_seconds=execution_timeout_seconds,
            )
