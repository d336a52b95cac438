"""Async SQLAlchemy 2.0 engine and sessions.

The service only reads. Sessions are never committed; leaving the session
context releases the connection and ends the implicit transaction.
"""

from collections.abc import AsyncGenerator
from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import get_settings


class Base(DeclarativeBase):
    """Declarative base for the shop tables."""


@lru_cache
def get_engine() -> AsyncEngine:
    """Process-wide engine; it owns the connection pool."""
    settings = get_settings()
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
    )


@lru_cache
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the shared engine.

    Analytics fan-out opens one session per concurrent branch from this
    factory, since a single AsyncSession cannot run queries concurrently.
    """
    return async_sessionmaker(get_engine(), class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a read-only session."""
    async with get_session_maker()() as session:
        yield session
