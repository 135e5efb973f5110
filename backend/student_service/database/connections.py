"""
Relational database connection management.

Uses SQLAlchemy 2.0 asyncio engines; the driver is chosen by configuration
(asyncpg for PostgreSQL, aiosqlite for local databases).
"""
import asyncio
import logging

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from student_service.core.exceptions import DatabaseConnectionException

logger = logging.getLogger(__name__)


def build_url(driver: str, dsn: str) -> URL:
    """
    Build a connection URL from a DSN, applying the configured driver name.

    Args:
        driver: SQLAlchemy driver name, e.g. "postgresql+asyncpg"
        dsn: Connection string, e.g. "postgresql://user:pass@db:5432/students"

    Returns:
        SQLAlchemy URL using `driver` as its drivername
    """
    url = make_url(dsn)
    if driver:
        url = url.set(drivername=driver)
    return url


def _engine_options(url: URL, pool_size: int) -> dict:
    # SQLite pools don't take size options
    if url.get_backend_name() == "sqlite":
        return {}
    return {"pool_size": pool_size, "pool_pre_ping": True}


async def connect_database(
    driver: str,
    dsn: str,
    *,
    pool_size: int = 5,
    echo: bool = False,
) -> AsyncEngine:
    """
    Open a connection pool and verify the database is reachable.

    Args:
        driver: SQLAlchemy async driver name
        dsn: Database connection string
        pool_size: Connection pool size (ignored for SQLite)
        echo: Log emitted SQL

    Returns:
        AsyncEngine: Connected engine

    Raises:
        DatabaseConnectionException: If the URL, driver, or server is unusable
    """
    try:
        url = build_url(driver, dsn)
        engine = create_async_engine(url, echo=echo, **_engine_options(url, pool_size))
    except (SQLAlchemyError, ImportError, ValueError) as e:
        raise DatabaseConnectionException(
            f"error creating database object: {e}",
            {"driver": driver},
        ) from e

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
        await engine.dispose()
        raise DatabaseConnectionException(
            f"database is unreachable: {e}",
            {"driver": driver, "host": url.host, "database": url.database},
        ) from e

    logger.info(
        "Connected to database %s (driver=%s)",
        url.render_as_string(hide_password=True),
        url.drivername,
    )
    return engine


async def close_database(engine: AsyncEngine) -> None:
    """Dispose of the engine's pooled connections."""
    await engine.dispose()
    logger.info("Database connections closed")


async def ping(engine: AsyncEngine) -> bool:
    """Return True if the database answers a trivial query."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
        logger.warning("Database ping failed: %s", e)
        return False
    return True
