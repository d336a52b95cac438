"""Liveness and readiness probes."""

from typing import Literal

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db
from app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Probe result."""

    status: Literal["ok", "unhealthy"]
    service: str
    env: str
    database: Literal["connected", "disconnected"] | None = None


def _probe(
    status_: Literal["ok", "unhealthy"],
    database: Literal["connected", "disconnected"] | None = None,
) -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        status=status_,
        service=settings.app_name,
        env=settings.app_env,
        database=database,
    )


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe. Does not touch the database."""
    return _probe("ok")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse, "description": "Database unreachable"}},
)
async def readiness_check(
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> HealthResponse:
    """Readiness probe: the analytics endpoints need a reachable database.

    Returns 503 when ``SELECT 1`` fails so load balancers stop routing here.
    """
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.error(
            "health.database_disconnected",
            error=str(e),
            error_type=type(e).__name__,
        )
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return _probe("unhealthy", "disconnected")

    logger.debug("health.database_connected")
    return _probe("ok", "connected")
