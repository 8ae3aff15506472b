"""
Pre-deploy connectivity check.

Verifies that the configured PostgreSQL database and Redis instance are
reachable before the API is started.

Usage:
    python scripts/check_services.py [path/to/.env]
"""

import asyncio
import os
import sys
from pathlib import Path

import asyncpg
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Settings read the environment at import time, so load the file first
load_dotenv(sys.argv[1] if len(sys.argv) > 1 else ".env")

from fleet_tracker.app.core.config import settings
from fleet_tracker.app.core.redis_client import ping_redis


def _dsn(url: str) -> str:
    # asyncpg expects a plain postgresql:// DSN
    return url.replace("+asyncpg", "")


async def check_database() -> bool:
    dsn = _dsn(os.getenv("DATABASE_URL", settings.database_url))
    try:
        conn = await asyncpg.connect(dsn)
    except Exception as e:
        print(f"❌ Database connection failed: {e}")
        return False
    try:
        version = await conn.fetchval("SHOW server_version")
        print(f"✅ Database reachable (PostgreSQL {version})")
    finally:
        await conn.close()
    return True


async def check_redis() -> bool:
    if await ping_redis():
        print(f"✅ Redis reachable at {settings.redis_url}")
        return True
    print(f"❌ Redis unreachable at {settings.redis_url}")
    return False


async def main() -> int:
    results = [await check_database(), await check_redis()]
    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
