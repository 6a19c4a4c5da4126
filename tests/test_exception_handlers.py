"""Tests for global exception handlers.

Validates that all exception types are handled consistently with
proper HTTP status codes, error format, and no information leakage.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.errors import (
    AppError,
    ConfigurationAppError,
    MalformedPayloadError,
    RateLimitedAppError,
    StoreAppError,
    ValidationAppError,
)
from app.core.exception_handlers import general_exception_handler, setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    """Create test client with handlers enabled."""
    return TestClient(app_with_handlers)


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (ValidationAppError(code="content_too_long", message="Message is too long."), 400),
            (MalformedPayloadError(code="invalid_payload", message="Invalid JSON payload."), 400),
            (StoreAppError(code="store_error", message="relation does not exist"), 500),
            (ConfigurationAppError(code="configuration_missing", message="missing"), 500),
            (RateLimitedAppError(code="rate_limited", message="slow down", retry_after_seconds=9), 429),
        ],
    )
    def test_status_codes(
        self,
        client: TestClient,
        app_with_handlers: FastAPI,
        error: AppError,
        status_code: int,
    ) -> None:
        @app_with_handlers.get("/boom")
        async def boom():
            raise error

        response = client.get("/boom")

        assert response.status_code == status_code
        body = response.json()
        assert body["error"] == error.message
        assert body["code"] == error.code
        assert "request_id" in body

    def test_rate_limited_sets_retry_after(self, client: TestClient, app_with_handlers: FastAPI) -> None:
        @app_with_handlers.get("/limited")
        async def limited():
            raise RateLimitedAppError(
                code="rate_limited",
                message="Too many posts. Try again in 42s.",
                retry_after_seconds=42,
            )

        response = client.get("/limited")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "42"

    def test_details_included_when_present(self, client: TestClient, app_with_handlers: FastAPI) -> None:
        @app_with_handlers.get("/details")
        async def details():
            raise ValidationAppError(
                code="content_too_long",
                message="Comment is too long.",
                details={"field": "comment", "max_length": 200, "actual_length": 201},
            )

        body = client.get("/details").json()

        assert body["details"] == {"field": "comment", "max_length": 200, "actual_length": 201}

    def test_details_omitted_when_absent(self, client: TestClient, app_with_handlers: FastAPI) -> None:
        @app_with_handlers.get("/plain")
        async def plain():
            raise ValidationAppError(code="x", message="y")

        assert "details" not in client.get("/plain").json()


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_unexpected_exception_handler_registered(self, app_with_handlers: FastAPI) -> None:
        assert Exception in app_with_handlers.exception_handlers

    def test_general_exception_handler_hides_details(self) -> None:
        request = AsyncMock()
        request.url.path = "/love-wall"
        request.method = "POST"

        exc = RuntimeError("Unexpected error: database connection failed")
        response = asyncio.run(general_exception_handler(request, exc))

        data = json.loads(bytes(response.body).decode())
        assert response.status_code == 500
        assert data["code"] == "internal_server_error"
        assert "database connection" not in data["error"]
        assert "RuntimeError" not in json.dumps(data)


class TestErrorTypes:
    def test_str_is_message(self) -> None:
        assert str(StoreAppError(code="store_error", message="down")) == "down"

    def test_malformed_payload_is_a_validation_error(self) -> None:
        assert issubclass(MalformedPayloadError, ValidationAppError)

    def test_setup_is_idempotent(self) -> None:
        app = FastAPI()

        setup_exception_handlers(app)
        setup_exception_handlers(app)

        assert AppError in app.exception_handlers
