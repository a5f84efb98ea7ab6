"""
Test suite for health check endpoint.

System role: Verification of liveness check
"""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from docagents.api.routers.health import router


def test_health_check_returns_ok() -> None:
    app = FastAPI()
    app.include_router(router)

    response = TestClient(app).get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
