"""Tests for health check router."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from shellkit.core.api.routers.health import CheckResult, HealthRouter, HealthState, HealthStatus


@pytest.fixture
def app_no_checks() -> FastAPI:
    """FastAPI app with health router but no checks."""
    app = FastAPI()
    app.include_router(HealthRouter.create(prefix="/health", tags=["health"]))
    return app


@pytest.fixture
def app_with_checks() -> FastAPI:
    """FastAPI app with health router and one check of every outcome."""

    async def check_healthy() -> tuple[HealthState, str | None]:
        return (HealthState.HEALTHY, None)

    async def check_degraded() -> tuple[HealthState, str | None]:
        return (HealthState.DEGRADED, "Partial outage")

    async def check_unhealthy() -> tuple[HealthState, str | None]:
        return (HealthState.UNHEALTHY, "Shell missing")

    async def check_exception() -> tuple[HealthState, str | None]:
        raise RuntimeError("boom")

    app = FastAPI()
    app.include_router(
        HealthRouter.create(
            prefix="/health",
            tags=["health"],
            checks={
                "healthy_check": check_healthy,
                "degraded_check": check_degraded,
                "unhealthy_check": check_unhealthy,
                "exception_check": check_exception,
            },
        )
    )
    return app


def test_health_check_no_checks(app_no_checks: FastAPI) -> None:
    """Test health check with no checks returns healthy and omits checks."""
    response = TestClient(app_no_checks).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_health_check_reports_worst_state(app_with_checks: FastAPI) -> None:
    """Test overall status is the most severe check state."""
    response = TestClient(app_with_checks).get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["checks"]["healthy_check"] == {"state": "healthy"}
    assert data["checks"]["degraded_check"] == {"state": "degraded", "message": "Partial outage"}
    assert data["checks"]["unhealthy_check"]["message"] == "Shell missing"


def test_health_check_exception_becomes_unhealthy(app_with_checks: FastAPI) -> None:
    """Test a check that raises is reported as unhealthy with its error."""
    data = TestClient(app_with_checks).get("/health").json()

    assert data["checks"]["exception_check"] == {"state": "unhealthy", "message": "Check failed: boom"}


def test_only_degraded_checks_report_degraded() -> None:
    async def check_degraded() -> tuple[HealthState, str | None]:
        return (HealthState.DEGRADED, "slow")

    async def check_healthy() -> tuple[HealthState, str | None]:
        return (HealthState.HEALTHY, None)

    app = FastAPI()
    app.include_router(
        HealthRouter.create(prefix="/health", tags=["health"], checks={"a": check_healthy, "b": check_degraded})
    )

    assert TestClient(app).get("/health").json()["status"] == "degraded"


def test_health_models() -> None:
    status = HealthStatus(status=HealthState.HEALTHY, checks={"db": CheckResult(state=HealthState.HEALTHY)})

    assert status.checks is not None
    assert status.checks["db"].message is None
