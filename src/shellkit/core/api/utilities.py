"""Utilities for running shellkit applications."""

from __future__ import annotations

import os
from typing import Any

import uvicorn
from fastapi import FastAPI


def run_app(
    app: FastAPI | str,
    *,
    host: str | None = None,
    port: int | None = None,
    reload: bool = False,
    **uvicorn_kwargs: Any,
) -> None:
    """Run an app with uvicorn; HOST and PORT environment variables supply the defaults.

    Pass an import string such as "module:app" when reload is enabled.
    """
    resolved_host = host or os.getenv("HOST", "127.0.0.1")
    resolved_port = port or int(os.getenv("PORT", "8000"))

    if reload and not isinstance(app, str):
        raise ValueError("reload=True requires the app as an import string, e.g. 'main:app'")

    # structlog handles formatting; keep uvicorn from installing its own handlers
    uvicorn_kwargs.setdefault("log_config", None)
    uvicorn.run(app, host=resolved_host, port=resolved_port, reload=reload, **uvicorn_kwargs)
