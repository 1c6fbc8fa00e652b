"""
PostgreSQL storage backend implementation.

Uses SQLAlchemy async (asyncpg driver) against a single ``product`` table.
Every operation is one auto-committed statement; ordering of concurrent
writes to the same row is left to the database.

The queries are plain SQLAlchemy Core, so any async URL SQLAlchemy
understands works (the tests run it on sqlite+aiosqlite).
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    Table,
    Text,
    delete,
    func,
    insert,
    select,
    text,
    update,
)
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from core.errors import ProductNotFoundError, StorageUnavailableError
from core.logging import get_logger
from core.storage.base import BaseProductRepository, ProductDraft, ProductRecord


logger = get_logger(__name__)


metadata = MetaData()

product_table = Table(
    "product",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("name", Text, nullable=False),
    Column("price", Integer, nullable=False),
    Column("stock", Integer, nullable=False),
)


_STORAGE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)

# libpq connection parameters asyncpg.connect() does not take
_LIBPQ_ONLY_PARAMS = (
    "connect_timeout",
    "application_name",
    "fallback_application_name",
    "options",
    "gssencmode",
    "keepalives",
    "keepalives_idle",
    "keepalives_interval",
    "keepalives_count",
    "pgbouncer",
)


def _is_plain_postgres(url: URL) -> bool:
    return url.drivername in ("postgres", "postgresql")


def connect_timeout_from_url(raw_url: str) -> Optional[float]:
    """libpq ``connect_timeout`` from a plain PostgreSQL DSN, if present."""
    url = make_url(raw_url)
    if not _is_plain_postgres(url) or "connect_timeout" not in url.query:
        return None
    value = url.query["connect_timeout"]
    if isinstance(value, tuple):
        value = value[-1]
    return float(value)


def normalize_database_url(raw_url: str) -> URL:
    """
    Point a plain PostgreSQL DSN at the async driver.

    ``postgres://`` and ``postgresql://`` become ``postgresql+asyncpg://``,
    libpq's ``sslmode`` query parameter is passed on as asyncpg's ``ssl``,
    and libpq-only parameters asyncpg would reject are dropped
    (``connect_timeout`` is read separately by connect_timeout_from_url).
    URLs that already name a driver are returned unchanged.
    """
    url = make_url(raw_url)
    if not _is_plain_postgres(url):
        return url

    url = url.set(drivername="postgresql+asyncpg")
    if "sslmode" in url.query:
        sslmode = url.query["sslmode"]
        url = url.difference_update_query(["sslmode"]).update_query_dict({"ssl": sslmode})

    dropped = [key for key in _LIBPQ_ONLY_PARAMS if key in url.query]
    if dropped:
        url = url.difference_update_query(dropped)
        logger.debug("Dropped libpq-only connection parameters", params=dropped)
    return url


class PostgresProductRepository(BaseProductRepository):
    """
    Relational product repository.

    Pool bounds come from Settings.db_pool_size and db_max_overflow.
    """

    def __init__(
        self,
        connection_string: str,
        pool_size: int = 1,
        max_overflow: int = 1,
        pool_recycle_seconds: int = 3600,
        connect_timeout_seconds: int = 15,
        echo: bool = False,
    ):
        """
        Initialize the repository. No connection is made until setup().

        Args:
            connection_string: Database URL (plain postgres DSNs are accepted)
            pool_size: Connections kept open while idle
            max_overflow: Extra connections allowed under load
            pool_recycle_seconds: Maximum lifetime of a pooled connection
            connect_timeout_seconds: Timeout for establishing one connection;
                a ``connect_timeout`` in the DSN takes precedence
            echo: Whether to echo SQL statements
        """
        url_timeout = connect_timeout_from_url(connection_string)
        self._url = normalize_database_url(connection_string)
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._pool_recycle_seconds = pool_recycle_seconds
        self._connect_timeout_seconds = (
            url_timeout if url_timeout is not None else connect_timeout_seconds
        )
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None

    def _engine_options(self) -> dict:
        options: dict = {"echo": self._echo, "pool_pre_ping": True}
        # SQLite's async pool takes none of these
        if self._url.get_backend_name() == "postgresql":
            options.update(
                pool_size=self._pool_size,
                max_overflow=self._max_overflow,
                pool_recycle=self._pool_recycle_seconds,
                connect_args={"timeout": self._connect_timeout_seconds},
            )
        return options

    async def setup(self) -> None:
        """Create the engine (once) and the product table if it does not exist."""
        if self._engine is None:
            self._engine = create_async_engine(self._url, **self._engine_options())

        async with self._connection("setup") as conn:
            await conn.run_sync(metadata.create_all)

        logger.info(
            "PostgreSQL product repository initialized",
            backend=self._url.get_backend_name(),
            host=self._url.host,
            database=self._url.database,
        )

    @asynccontextmanager
    async def _connection(self, operation: str) -> AsyncIterator[AsyncConnection]:
        """
        Open a connection inside a transaction, translating driver errors.

        The transaction commits when the block exits cleanly.
        """
        if self._engine is None:
            raise RuntimeError(
                "Repository not initialized. Call setup() first."
            )

        try:
            async with self._engine.begin() as conn:
                yield conn
        except _STORAGE_ERRORS as e:
            logger.error(
                "Storage operation failed",
                operation=operation,
                error=str(e),
            )
            raise StorageUnavailableError(f"{operation} failed: {e}") from e

    async def ping(self) -> None:
        async with self._connection("ping") as conn:
            await conn.execute(text("SELECT 1"))

    async def list_all(self) -> list[ProductRecord]:
        async with self._connection("list") as conn:
            result = await conn.execute(
                select(product_table).order_by(product_table.c.id.desc())
            )
            return [ProductRecord.from_dict(dict(row)) for row in result.mappings()]

    async def get(self, product_id: int) -> ProductRecord:
        async with self._connection("get") as conn:
            result = await conn.execute(
                select(product_table).where(product_table.c.id == product_id)
            )
            row = result.mappings().first()

        if row is None:
            raise ProductNotFoundError(product_id)
        return ProductRecord.from_dict(dict(row))

    async def create(self, draft: ProductDraft) -> ProductRecord:
        async with self._connection("create") as conn:
            result = await conn.execute(
                insert(product_table)
                .values(**draft.to_dict())
                .returning(*product_table.c)
            )
            row = result.mappings().one()

        record = ProductRecord.from_dict(dict(row))
        logger.debug("Product stored", product_id=record.id)
        return record

    async def update(self, product_id: int, draft: ProductDraft) -> ProductRecord:
        async with self._connection("update") as conn:
            result = await conn.execute(
                update(product_table)
                .where(product_table.c.id == product_id)
                .values(**draft.to_dict())
                .returning(*product_table.c)
            )
            row = result.mappings().first()

        if row is None:
            raise ProductNotFoundError(product_id)
        return ProductRecord.from_dict(dict(row))

    async def delete(self, product_id: int) -> None:
        async with self._connection("delete") as conn:
            result = await conn.execute(
                delete(product_table).where(product_table.c.id == product_id)
            )

        if result.rowcount == 0:
            raise ProductNotFoundError(product_id)

    async def close(self) -> None:
        """Dispose of the engine and its pool."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
        logger.info("PostgreSQL product repository closed")
