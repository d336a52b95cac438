"""RFC 7807 Problem Details for HTTP APIs.

Every error leaving the API is rendered as a problem document so the
dashboard can show a consistent failure message for a failed report.

Reference: https://datatracker.ietf.org/doc/html/rfc7807
"""

from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from app.core.logging import request_id_ctx

# Relative URIs keep the documents portable across deployments
ERROR_TYPE_BASE = "/errors"

ERROR_TYPES = {
    "NOT_FOUND": f"{ERROR_TYPE_BASE}/not-found",
    "VALIDATION_ERROR": f"{ERROR_TYPE_BASE}/validation",
    "DATABASE_ERROR": f"{ERROR_TYPE_BASE}/database",
    "INTERNAL_ERROR": f"{ERROR_TYPE_BASE}/internal",
    "BAD_REQUEST": f"{ERROR_TYPE_BASE}/bad-request",
}


def error_type_uri(error_code: str) -> str:
    """Type URI for an error code, derived from the code when unregistered."""
    return ERROR_TYPES.get(error_code, f"{ERROR_TYPE_BASE}/{error_code.lower().replace('_', '-')}")


class ProblemDetail(BaseModel):
    """RFC 7807 problem document.

    ``code``, ``request_id``, ``errors`` and ``context`` are extension members.
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(default="about:blank", description="URI identifying the problem type.")
    title: str = Field(..., description="Short summary of the problem type.")
    status: int = Field(..., ge=400, le=599, description="HTTP status code.")
    detail: str | None = Field(None, description="Explanation specific to this occurrence.")
    instance: str | None = Field(None, description="URI reference for this occurrence.")
    code: str | None = Field(None, description="Machine-readable error code.")
    request_id: str | None = Field(None, description="Correlation ID for support requests.")
    errors: list[dict[str, Any]] | None = Field(
        None, description="Field-level validation errors (422 only)."
    )
    context: dict[str, Any] | None = Field(
        None, description="Request values that caused the error, e.g. a reversed date range."
    )


class ProblemDetailResponse(JSONResponse):
    """JSON response with the RFC 7807 media type."""

    media_type = "application/problem+json"


def create_problem_detail(
    status: int,
    title: str,
    detail: str | None = None,
    error_code: str = "INTERNAL_ERROR",
    errors: list[dict[str, Any]] | None = None,
    context: dict[str, Any] | None = None,
) -> ProblemDetail:
    """Build a problem document tied to the current request ID.

    Args:
        status: HTTP status code.
        title: Short problem summary.
        detail: Explanation for this occurrence.
        error_code: Error code, also selects the type URI.
        errors: Field-level validation errors.
        context: Extra values worth echoing back to the caller.

    Returns:
        ProblemDetail instance.
    """
    request_id = request_id_ctx.get()
    return ProblemDetail(
        type=error_type_uri(error_code),
        title=title,
        status=status,
        detail=detail,
        instance=f"/requests/{request_id}" if request_id else None,
        code=error_code,
        request_id=request_id,
        errors=errors,
        context=context,
    )


def problem_response(status: int, title: str, **kwargs: Any) -> ProblemDetailResponse:
    """Wrap :func:`create_problem_detail` in a problem+json response."""
    problem = create_problem_detail(status, title, **kwargs)
    return ProblemDetailResponse(
        status_code=status,
        content=problem.model_dump(mode="json", exclude_none=True),
    )
