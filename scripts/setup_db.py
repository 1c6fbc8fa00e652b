"""
Database setup script.

Creates the product table in the database named by DB_CONN.
The service also does this on startup; run it to prepare a database
ahead of the first deploy.

Usage:
    python -m scripts.setup_db
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.config import settings
from core.storage.postgres import PostgresProductRepository


async def setup_database() -> None:
    """Create the product table if it does not exist."""
    if not settings.db_conn:
        print("DB_CONN is not set")
        raise SystemExit(1)

    repository = PostgresProductRepository(
        connection_string=settings.db_conn,
        connect_timeout_seconds=settings.db_connect_timeout_seconds,
    )

    print("Connecting to database...")
    try:
        await repository.setup()
        await repository.ping()
        print("Product table ready")
    finally:
        await repository.close()


if __name__ == "__main__":
    asyncio.run(setup_database())
