"""
Database Connection Module
Builds the SQLAlchemy async engine (the shared connection pool) and runs the
one-time schema bootstrap at startup.
"""

import logging
from typing import Any

from sqlalchemy.exc import ArgumentError, NoSuchModuleError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from meal_orders.core.config import Settings
from meal_orders.exceptions import StorageError

logger = logging.getLogger(__name__)


# Base class for all our models
class Base(DeclarativeBase):
    pass


def build_connect_args(settings: Settings) -> dict[str, Any]:
    """
    Driver-level connection arguments.

    Postgres connects give up after ``db_connect_timeout`` seconds. With
    ``database_ssl_insecure`` set, connections are encrypted but the server
    certificate is not verified, which is what hosted providers with
    self-signed certificates need. An explicit ``sslmode`` in the URL
    always wins.
    """
    if not settings.is_postgres:
        return {}

    connect_args: dict[str, Any] = {"connect_timeout": settings.db_connect_timeout}
    if settings.database_ssl_insecure and "sslmode=" not in settings.async_database_url:
        connect_args["sslmode"] = "require"
    return connect_args


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine that owns the connection pool.

    Connections are borrowed lazily per statement and returned on completion.
    The caller owns the engine and must ``dispose()`` it on shutdown.

    Raises:
        StorageError: the URL cannot be parsed or names an unknown driver
    """
    options: dict[str, Any] = {
        "echo": settings.database_echo,
        "connect_args": build_connect_args(settings),
    }
    if settings.is_postgres:
        options["pool_size"] = settings.db_pool_size  # Connection pool size
        options["max_overflow"] = settings.db_max_overflow  # Extra connections when pool is full

    try:
        return create_async_engine(settings.async_database_url, **options)
    except (ArgumentError, NoSuchModuleError, ImportError) as e:
        raise StorageError.from_exception(e, operation="connect") from e


async def init_db(engine: AsyncEngine) -> bool:
    """
    Ensure the orders table exists.

    Uses a checked create, so running it against an existing table is a no-op
    and leaves rows untouched. Errors never propagate: they are logged and
    reported through the return value so startup can carry on.

    Returns:
        True when the table is known to exist, False if the bootstrap failed
    """
    from meal_orders import models  # noqa: F401  registers the orders table

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    except (SQLAlchemyError, OSError) as e:
        logger.exception(f"Error creating table 'orders': {e}")
        return False

    logger.info("Table 'orders' is ready.")
    return True
