"""Application errors and their RFC 7807 exception handlers.

Analytics code never catches its own failures; a failed query surfaces
here as a single error for the whole report request.
"""

from http import HTTPStatus
from typing import Any, ClassVar

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import get_logger
from app.core.problem_details import (
    ProblemDetailResponse,
    error_type_uri,
    problem_response,
)

logger = get_logger(__name__)


# =============================================================================
# Exception Classes
# =============================================================================


class RepairDeskError(Exception):
    """Base exception for RepairDesk application errors.

    Subclasses only set ``code``, ``status_code`` and ``default_message``;
    the problem type URI is looked up from ``code``.
    """

    code: ClassVar[str] = "INTERNAL_ERROR"
    status_code: ClassVar[int] = 500
    default_message: ClassVar[str] = "Internal error"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        """Initialize application error.

        Args:
            message: Human-readable error message (defaults per subclass).
            details: Extra context, echoed in the problem document.
        """
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def title(self) -> str:
        """RFC 7807 title, derived from the error code."""
        return self.code.replace("_", " ").title()

    @property
    def error_type_uri(self) -> str:
        return error_type_uri(self.code)


class ValidationError(RepairDeskError):
    """Input validation error."""

    code = "VALIDATION_ERROR"
    status_code = 422
    default_message = "Validation failed"


class DatabaseError(RepairDeskError):
    """Database operation error."""

    code = "DATABASE_ERROR"
    status_code = 500
    default_message = "Database operation failed"


class BadRequestError(RepairDeskError):
    """Malformed or contradictory request parameters."""

    code = "BAD_REQUEST"
    status_code = 400
    default_message = "Bad request"


# =============================================================================
# Exception Handlers (RFC 7807)
# =============================================================================


async def repairdesk_exception_handler(
    request: Request,
    exc: RepairDeskError,
) -> ProblemDetailResponse:
    """Render a RepairDeskError as a problem document.

    Client errors are logged as warnings, server errors with a traceback.
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "app.error_handled",
        error=exc.message,
        error_type=type(exc).__name__,
        error_code=exc.code,
        status_code=exc.status_code,
        path=request.url.path,
        details=exc.details,
        exc_info=exc.status_code >= 500,
    )

    return problem_response(
        status=exc.status_code,
        title=exc.title,
        detail=exc.message,
        error_code=exc.code,
        context=exc.details or None,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> ProblemDetailResponse:
    """Render request validation errors with one entry per failing field.

    Args:
        request: FastAPI request object.
        exc: Pydantic validation error.

    Returns:
        422 problem document with an ``errors`` list.
    """
    field_errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": str(error.get("msg", "Validation failed")),
            "type": str(error.get("type", "unknown")),
        }
        for error in exc.errors()
    ]

    logger.warning(
        "app.validation_error",
        error_count=len(field_errors),
        path=request.url.path,
        fields=[e["field"] for e in field_errors],
    )

    return problem_response(
        status=ValidationError.status_code,
        title="Validation Error",
        detail=f"Request validation failed with {len(field_errors)} error(s).",
        error_code=ValidationError.code,
        errors=field_errors,
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> ProblemDetailResponse:
    """Render routing errors (unknown path, wrong method) as problem documents."""
    logger.info("app.http_error", status_code=exc.status_code, path=request.url.path)

    return problem_response(
        status=exc.status_code,
        title=HTTPStatus(exc.status_code).phrase,
        detail=str(exc.detail),
        error_code="NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR",
    )


async def database_exception_handler(
    request: Request,
    exc: SQLAlchemyError,
) -> ProblemDetailResponse:
    """Render a query failure that propagated out of the analytics engine.

    The driver message is logged but never returned to the client.
    """
    logger.error(
        "app.database_error",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=True,
    )

    return problem_response(
        status=DatabaseError.status_code,
        title="Database Error",
        detail="A database query failed while building the report. No partial "
        "results were returned.",
        error_code=DatabaseError.code,
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> ProblemDetailResponse:
    logger.error(
        "app.unhandled_error",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=True,
    )

    return problem_response(
        status=500,
        title="Internal Server Error",
        detail="An unexpected error occurred. Quote the request_id when reporting it.",
        error_code=RepairDeskError.code,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register the problem-details handlers on the application."""
    handlers: list[tuple[type[Exception], Any]] = [
        (RepairDeskError, repairdesk_exception_handler),
        (RequestValidationError, validation_exception_handler),
        (StarletteHTTPException, http_exception_handler),
        (SQLAlchemyError, database_exception_handler),
        (Exception, unhandled_exception_handler),
    ]
    for exc_class, handler in handlers:
        app.add_exception_handler(exc_class, handler)
