#!/usr/bin/env python
"""Check database connectivity.

Usage:
    uv run python scripts/check_db.py
"""

import asyncio
import sys

from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import create_async_engine

from app.core.config import get_settings
from app.core.database import Base
from app.features.shop import models  # noqa: F401


async def check_database() -> int:
    """Verify the connection and that the shop tables exist."""
    settings = get_settings()

    print("RepairDesk - Database Connectivity Check")
    print("=" * 45)
    print(f"Database URL: {settings.database_url.split('@')[-1]}")  # Hide credentials
    print()

    engine = create_async_engine(settings.database_url)

    try:
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            if result.scalar() != 1:
                print("[FAIL] Unexpected result from SELECT 1")
                return 1
            print("[OK] Basic connectivity")

            result = await conn.execute(text("SELECT version()"))
            version = result.scalar() or ""
            print(f"[OK] PostgreSQL version: {version[:50]}...")

            existing = await conn.run_sync(lambda sync: set(inspect(sync).get_table_names()))
            missing = sorted(set(Base.metadata.tables) - existing)
            if missing:
                print(f"[WARN] {len(missing)} shop tables missing: {', '.join(missing[:5])}")
            else:
                print(f"[OK] All {len(Base.metadata.tables)} shop tables present")

        print()
        print("Database check completed successfully!")
        return 0

    except Exception as e:
        print(f"[FAIL] Connection failed: {e}")
        print()
        print("Troubleshooting:")
        print("  1. Ensure Docker is running: docker-compose up -d")
        print("  2. Check DATABASE_URL in .env file")
        print("  3. Verify PostgreSQL container is healthy: docker-compose ps")
        return 1

    finally:
        await engine.dispose()


def main() -> None:
    sys.exit(asyncio.run(check_database()))


if __name__ == "__main__":
    main()
