"""Tests for the health probes."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from app.core.database import get_db
from app.main import app


@pytest.fixture
def override_db():
    """Install a fake session for get_db and remove it afterwards."""

    def install(session: AsyncMock) -> None:
        async def fake_db():
            yield session

        app.dependency_overrides[get_db] = fake_db

    yield install
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_liveness_names_the_service(client):
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "RepairDesk"
    assert data["database"] is None


@pytest.mark.asyncio
async def test_readiness_connected(client, override_db):
    session = AsyncMock()
    override_db(session)

    response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json()["database"] == "connected"
    session.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_readiness_unreachable_database_is_503(client, override_db):
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, OSError("refused"))
    override_db(session)

    response = await client.get("/health/ready")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["database"] == "disconnected"
