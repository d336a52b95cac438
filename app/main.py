"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.database import get_engine
from app.core.exceptions import register_exception_handlers
from app.core.health import router as health_router
from app.core.logging import configure_logging, get_logger
from app.core.middleware import RequestIdMiddleware
from app.features.analytics.routes import router as analytics_router
from app.features.reports.routes import router as reports_router
from app.features.reports.schemas import ReportType

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging on startup and release the pool on shutdown."""
    settings = get_settings()
    configure_logging()
    logger.info(
        "app.started",
        app_name=settings.app_name,
        app_env=settings.app_env,
        report_types=[rt.value for rt in ReportType],
    )

    yield

    await get_engine().dispose()
    logger.info("app.stopped")


def create_app() -> FastAPI:
    """Build the RepairDesk API.

    Interactive docs are only served in development.
    """
    settings = get_settings()
    docs_enabled = settings.is_development

    app = FastAPI(
        title=settings.app_name,
        description="Back-office analytics and reporting for repair shops",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
    )

    # Last added runs first, so request ids exist before CORS responds
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Content-Disposition"],
    )
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    for router in (health_router, analytics_router, reports_router):
        app.include_router(router)

    return app


app = create_app()
