"""Unit tests for exception handlers."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from api.exception_handlers import setup_exception_handlers
from core.exceptions import CommentValidationError, PersistenceError, RecipeNotFoundError


def _create_test_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


async def _get(app: FastAPI, path: str):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path)


class TestExceptionHandlers:
    @pytest.mark.asyncio
    async def test_app_exception_returns_error_code_and_message(self) -> None:
        app = _create_test_app()

        @app.get("/raise-app")
        async def _() -> None:
            raise RecipeNotFoundError("some-id")

        response = await _get(app, "/raise-app")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "RECIPE_NOT_FOUND"
        assert "some-id" in body["message"]
        assert body["details"]["recipe_id"] == "some-id"

    @pytest.mark.asyncio
    async def test_comment_validation_error_reports_lengths(self) -> None:
        app = _create_test_app()

        @app.get("/raise-comment")
        async def _() -> None:
            raise CommentValidationError(1001, 1000)

        response = await _get(app, "/raise-comment")

        assert response.status_code == 400
        assert response.json()["details"] == {"length": 1001, "max_length": 1000}

    @pytest.mark.asyncio
    async def test_persistence_error_is_503(self) -> None:
        app = _create_test_app()

        @app.get("/raise-persistence")
        async def _() -> None:
            raise PersistenceError("toggle_recipe_like")

        response = await _get(app, "/raise-persistence")

        assert response.status_code == 503
        body = response.json()
        assert body["error_code"] == "DATABASE_ERROR"
        assert body["details"]["operation"] == "toggle_recipe_like"

    @pytest.mark.asyncio
    async def test_untranslated_database_error_is_503(self) -> None:
        app = _create_test_app()

        @app.get("/raise-sqlalchemy")
        async def _() -> None:
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        response = await _get(app, "/raise-sqlalchemy")

        assert response.status_code == 503
        body = response.json()
        assert body["error_code"] == "DATABASE_ERROR"
        assert "connection refused" not in body["message"]

    @pytest.mark.asyncio
    async def test_http_exception_returns_standard_format(self) -> None:
        from starlette.exceptions import HTTPException

        app = _create_test_app()

        @app.get("/raise-http")
        async def _() -> None:
            raise HTTPException(status_code=403, detail="Forbidden")

        response = await _get(app, "/raise-http")

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "HTTP_ERROR"
        assert body["message"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_validation_error_returns_field_details(self) -> None:
        from pydantic import BaseModel, Field

        app = _create_test_app()

        class Body(BaseModel):
            content: str = Field(..., min_length=1, max_length=1000)

        @app.post("/validate")
        async def _(body: Body) -> dict[str, bool]:
            return {"ok": True}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.post("/validate", json={"content": ""})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "body.content"

    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500(self) -> None:
        import json
        from unittest.mock import MagicMock

        app = _create_test_app()

        mock_request = MagicMock()
        mock_request.state.request_id = "test-req-id"

        handler = app.exception_handlers.get(Exception)
        assert handler is not None, "Global exception handler not registered"

        response = await handler(mock_request, RuntimeError("Something went wrong"))  # type: ignore[misc]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["details"]["request_id"] == "test-req-id"
