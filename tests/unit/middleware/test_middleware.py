"""Unit tests for middleware."""

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.middleware import logging as logging_middleware
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import MAX_REQUEST_ID_LENGTH, RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware


def _create_app_with_middleware() -> FastAPI:
    """Create a minimal app with the same middleware order as main.py."""
    app = FastAPI()
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/recipes")
    async def _recipes():
        return {"data": []}

    @app.get("/health")
    async def _health():
        return {"status": "healthy"}

    @app.get("/broken")
    async def _broken():
        from fastapi.responses import JSONResponse

        return JSONResponse({"error_code": "DATABASE_ERROR"}, status_code=503)

    return app


@pytest.fixture
async def client():
    transport = ASGITransport(app=_create_app_with_middleware())
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


class TestSecurityHeadersMiddleware:
    """Tests for SecurityHeadersMiddleware."""

    @pytest.mark.asyncio
    async def test_adds_security_headers(self, client: AsyncClient):
        response = await client.get("/recipes")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert response.headers["referrer-policy"] == "strict-origin-when-cross-origin"

    @pytest.mark.asyncio
    async def test_does_not_override_route_headers(self):
        from fastapi.responses import JSONResponse

        app = FastAPI()
        app.add_middleware(SecurityHeadersMiddleware)

        @app.get("/embed")
        async def _():
            return JSONResponse({}, headers={"X-Frame-Options": "SAMEORIGIN"})

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            response = await c.get("/embed")

        assert response.headers["x-frame-options"] == "SAMEORIGIN"


class TestRequestIDMiddleware:
    """Tests for RequestIDMiddleware."""

    @pytest.mark.asyncio
    async def test_generates_distinct_ids_when_not_provided(self, client: AsyncClient):
        r1 = await client.get("/recipes")
        r2 = await client.get("/recipes")

        assert r1.headers["x-request-id"]
        assert r1.headers["x-request-id"] != r2.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_propagates_existing_request_id(self, client: AsyncClient):
        response = await client.get("/recipes", headers={"X-Request-ID": "custom-req-123"})

        assert response.headers["x-request-id"] == "custom-req-123"

    @pytest.mark.asyncio
    async def test_replaces_oversized_request_id(self, client: AsyncClient):
        oversized = "r" * (MAX_REQUEST_ID_LENGTH + 1)

        response = await client.get("/recipes", headers={"X-Request-ID": oversized})

        assert response.headers["x-request-id"] != oversized
        assert len(response.headers["x-request-id"]) == 36


class TestRequestLoggingMiddleware:
    """Tests for RequestLoggingMiddleware."""

    @pytest.mark.asyncio
    async def test_logs_completed_request(self, client: AsyncClient):
        with patch.object(logging_middleware, "logger") as logger:
            await client.get("/recipes")

        logger.info.assert_called_once()
        args, kwargs = logger.info.call_args
        assert args == ("request_completed",)
        assert kwargs["status_code"] == 200

    @pytest.mark.asyncio
    async def test_health_checks_are_not_logged(self, client: AsyncClient):
        with patch.object(logging_middleware, "logger") as logger:
            await client.get("/health")

        logger.info.assert_not_called()

    @pytest.mark.asyncio
    async def test_server_errors_log_as_warning(self, client: AsyncClient):
        with patch.object(logging_middleware, "logger") as logger:
            await client.get("/broken")

        logger.info.assert_not_called()
        assert logger.warning.call_args.kwargs["status_code"] == 503
