"""Tests for RFC 7807 exception handling."""

import pytest
from fastapi import FastAPI, Query
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from app.core.exceptions import (
    BadRequestError,
    DatabaseError,
    RepairDeskError,
    ValidationError,
    register_exception_handlers,
)
from app.core.logging import request_id_ctx
from app.core.problem_details import ERROR_TYPES, create_problem_detail


def _build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/bad")
    async def bad() -> None:
        raise BadRequestError("end_date before start_date", details={"period": "custom"})

    @app.get("/db")
    async def db() -> None:
        raise OperationalError("SELECT 1", {}, OSError("connection refused"))

    @app.get("/typed")
    async def typed(limit: int = Query(..., ge=1)) -> dict[str, int]:
        return {"limit": limit}

    return app


@pytest.fixture
async def error_client():
    """Client for an app that only raises errors."""
    async with AsyncClient(
        transport=ASGITransport(app=_build_app()),
        base_url="http://test",
    ) as ac:
        yield ac


class TestExceptionClasses:
    """Tests for the RepairDeskError hierarchy."""

    def test_base_error_defaults(self) -> None:
        """Base error should default to a 500 internal error."""
        exc = RepairDeskError("boom")
        assert exc.status_code == 500
        assert exc.code == "INTERNAL_ERROR"
        assert exc.title == "Internal Error"
        assert exc.details == {}

    @pytest.mark.parametrize(
        ("exc", "status_code", "code"),
        [
            (ValidationError(), 422, "VALIDATION_ERROR"),
            (DatabaseError(), 500, "DATABASE_ERROR"),
            (BadRequestError(), 400, "BAD_REQUEST"),
        ],
    )
    def test_subclass_status_codes(
        self, exc: RepairDeskError, status_code: int, code: str
    ) -> None:
        """Each subclass should carry its HTTP status and code."""
        assert exc.status_code == status_code
        assert exc.code == code
        assert exc.error_type_uri == ERROR_TYPES[code]


class TestProblemDetails:
    """Tests for problem detail creation."""

    def test_includes_request_id_when_bound(self) -> None:
        """Problem detail should reference the current request ID."""
        token = request_id_ctx.set("abc")
        try:
            problem = create_problem_detail(status=404, title="Not Found", error_code="NOT_FOUND")
        finally:
            request_id_ctx.reset(token)

        assert problem.request_id == "abc"
        assert problem.instance == "/requests/abc"
        assert problem.type == "/errors/not-found"

    def test_unknown_code_builds_type_uri(self) -> None:
        """Unknown error codes should fall back to a derived type URI."""
        problem = create_problem_detail(status=409, title="Conflict", error_code="CONFLICT")
        assert problem.type == "/errors/conflict"
        assert problem.request_id is None


class TestExceptionHandlers:
    """Tests for registered exception handlers."""

    @pytest.mark.asyncio
    async def test_unknown_path_renders_problem(self, error_client: AsyncClient) -> None:
        """Routing 404s should use the problem format too."""
        response = await error_client.get("/missing")

        assert response.status_code == 404
        assert response.headers["content-type"] == "application/problem+json"
        data = response.json()
        assert data["title"] == "Not Found"
        assert data["type"] == "/errors/not-found"
        assert data["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_bad_request_renders_problem(self, error_client: AsyncClient) -> None:
        """BadRequestError should render as a 400 problem document."""
        response = await error_client.get("/bad")

        assert response.status_code == 400
        data = response.json()
        assert data["type"] == "/errors/bad-request"
        assert data["context"] == {"period": "custom"}

    @pytest.mark.asyncio
    async def test_database_error_renders_problem(self, error_client: AsyncClient) -> None:
        """A propagated SQLAlchemy error should become a 500 problem document."""
        response = await error_client.get("/db")

        assert response.status_code == 500
        data = response.json()
        assert data["code"] == "DATABASE_ERROR"
        assert "connection refused" not in data["detail"]

    @pytest.mark.asyncio
    async def test_validation_error_lists_fields(self, error_client: AsyncClient) -> None:
        """Query validation errors should list the failing field."""
        response = await error_client.get("/typed", params={"limit": 0})

        assert response.status_code == 422
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert data["errors"][0]["field"] == "query.limit"

    @pytest.mark.asyncio
    async def test_wrong_method_renders_problem(self, error_client: AsyncClient) -> None:
        response = await error_client.post("/bad")

        assert response.status_code == 405
        data = response.json()
        assert data["title"] == "Method Not Allowed"
        assert data["type"] == "/errors/http-error"

    def test_multiword_unknown_code_uses_hyphens(self) -> None:
        problem = create_problem_detail(status=503, title="Unavailable", error_code="SERVICE_DOWN")

        assert problem.type == "/errors/service-down"
