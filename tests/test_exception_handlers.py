"""Tests for global exception handlers.

Validates that each domain error maps to its HTTP status code with a
consistent error body and no information leakage.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from github_stats.core.errors import (
    AppError,
    RateLimitAppError,
    UpstreamAppError,
    ValidationAppError,
)
from github_stats.core.exception_handlers import general_exception_handler, setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers)


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    def test_validation_error_returns_400(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-validation")
        async def endpoint():
            raise ValidationAppError(code="username_required", message="username is required")

        response = client.get("/test-validation")

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "username_required"
        assert data["error"]["message"] == "username is required"
        assert "request_id" in data["error"]

    def test_rate_limit_error_returns_429_with_headers(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-rate-limit")
        async def endpoint():
            raise RateLimitAppError(
                code="rate_limit_exceeded",
                message="Request limit exceeded. Try again later.",
                details={"limit": 10, "remaining": 0, "reset_at": 1060, "retry_after": 42},
            )

        response = client.get("/test-rate-limit")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "42"
        assert response.headers["X-RateLimit-Limit"] == "10"
        assert response.headers["X-RateLimit-Reset"] == "1060"
        assert response.json()["error"]["details"]["retry_after"] == 42

    def test_upstream_error_returns_500_without_details(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-upstream")
        async def endpoint():
            raise UpstreamAppError(
                code="upstream_error",
                message="Failed to retrieve data from GitHub.",
                details={"upstream_error": "401 Bad credentials"},
            )

        response = client.get("/test-upstream")

        assert response.status_code == 500
        data = response.json()
        assert data["error"]["code"] == "upstream_error"
        assert "details" not in data["error"]
        assert "Bad credentials" not in response.text

    def test_base_app_error_defaults_to_400(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-base")
        async def endpoint():
            raise AppError(code="generic", message="generic failure")

        assert client.get("/test-base").status_code == 400


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_general_exception_handler_hides_message(self):
        request = AsyncMock()
        request.url.path = "/stats"
        request.method = "GET"

        response = asyncio.run(general_exception_handler(request, RuntimeError("token=abc leaked")))

        body = bytes(response.body).decode()
        data = json.loads(body)
        assert response.status_code == 500
        assert data["error"]["code"] == "internal_server_error"
        assert "leaked" not in body
        assert "RuntimeError" not in body

    def test_handlers_registered(self, app_with_handlers: FastAPI):
        assert AppError in app_with_handlers.exception_handlers
        assert Exception in app_with_handlers.exception_handlers
