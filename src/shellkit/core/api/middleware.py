"""Error handlers and request logging middleware."""

from __future__ import annotations

import time
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from ulid import ULID

from shellkit.core.exceptions import ShellkitError
from shellkit.core.logging import add_request_context, get_logger, reset_request_context
from shellkit.core.models import utcnow

logger = get_logger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def error_response(
    request: Request,
    *,
    status_code: int,
    error: str,
    message: str,
    **extra: Any,
) -> JSONResponse:
    """Build the JSON error body shared by every handler."""
    body: dict[str, Any] = {
        "timestamp": utcnow().isoformat(),
        "status": status_code,
        "error": error,
        "message": message,
        "path": request.url.path,
    }
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


async def shellkit_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map taxonomy errors onto their status code and title."""
    assert isinstance(exc, ShellkitError)
    return error_response(request, status_code=exc.status_code, error=exc.error, message=exc.message)


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 400 with per-field messages for request validation failures."""
    assert isinstance(exc, RequestValidationError)
    validation_errors: dict[str, str] = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        validation_errors[field or "request"] = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")

    return error_response(
        request,
        status_code=status.HTTP_400_BAD_REQUEST,
        error="Validation Failed",
        message="Invalid input provided",
        validation_errors=validation_errors,
    )


async def database_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log database errors and return a generic 500."""
    logger.error("database.error", path=request.url.path, error=str(exc), error_type=type(exc).__name__)
    return error_response(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error="Internal Server Error",
        message=UNEXPECTED_ERROR_MESSAGE,
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors with traceback and return a generic 500."""
    logger.exception("http.unexpected_error", path=request.url.path, error_type=type(exc).__name__)
    return error_response(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error="Internal Server Error",
        message=UNEXPECTED_ERROR_MESSAGE,
    )


def add_error_handlers(app: FastAPI) -> None:
    """Install the error handlers on a FastAPI application."""
    app.add_exception_handler(ShellkitError, shellkit_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind a request id to the logging context and log request timing."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Log request start and completion with a ULID request id."""
        request_id = str(ULID())
        reset_request_context()
        add_request_context(request_id=request_id, method=request.method, path=request.url.path)

        start = time.perf_counter()
        logger.info("http.request.start", query=str(request.url.query) or None)
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("http.request.error", duration_ms=round((time.perf_counter() - start) * 1000, 2))
            raise

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.info("http.request.complete", status_code=response.status_code, duration_ms=duration_ms)
        response.headers["X-Request-ID"] = request_id
        reset_request_context()
        return response


def add_logging_middleware(app: FastAPI) -> None:
    """Install request logging middleware."""
    app.add_middleware(RequestLoggingMiddleware)
