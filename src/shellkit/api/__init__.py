"""FastAPI routers and related presentation logic."""

from shellkit.core.api import Router
from shellkit.core.api.middleware import (
    add_error_handlers,
    add_logging_middleware,
    database_error_handler,
    validation_error_handler,
)
from shellkit.core.api.routers import HealthRouter, HealthState, HealthStatus, SystemInfo, SystemRouter
from shellkit.core.api.service_builder import ServiceInfo
from shellkit.core.api.utilities import run_app
from shellkit.core.logging import (
    add_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
    reset_request_context,
)
from shellkit.modules.task import TaskRouter

from .dependencies import get_task_manager
from .service_builder import ServiceBuilder

__all__ = [
    # Base classes
    "Router",
    # Routers
    "HealthRouter",
    "HealthStatus",
    "HealthState",
    "SystemRouter",
    "SystemInfo",
    "TaskRouter",
    # Dependencies
    "get_task_manager",
    # Middleware
    "add_error_handlers",
    "add_logging_middleware",
    "database_error_handler",
    "validation_error_handler",
    # Logging
    "configure_logging",
    "get_logger",
    "add_request_context",
    "clear_request_context",
    "reset_request_context",
    # Builders
    "ServiceBuilder",
    "ServiceInfo",
    # Utilities
    "run_app",
]
