"""Async engine and session factory."""

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from mentor_booking.booking.errors import BookingError, StorageFailureError
from mentor_booking.core.config import settings

logger = logging.getLogger(__name__)


def configure_sqlite(engine: AsyncEngine) -> None:
    """Make SQLite transactions take the write lock up front.

    pysqlite defers BEGIN until the first write, so a check-then-insert
    sequence could interleave with another connection's. Emitting
    ``BEGIN IMMEDIATE`` ourselves makes every transaction hold the database
    write lock from its first statement until commit or rollback.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        # Stop the driver from emitting its own BEGIN
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database_url: str | None = None, **kwargs: Any) -> AsyncEngine:
    """Create an async engine with bounded lock waits.

    Args:
        database_url: Override for ``settings.database_url``
        **kwargs: Passed through to ``create_async_engine`` (e.g. poolclass)

    Returns:
        Configured async engine
    """
    url = database_url or settings.database_url
    timeout = settings.db_lock_timeout_seconds
    connect_args: dict[str, Any] = {}

    if url.startswith("sqlite"):
        # Busy timeout while another transaction holds the write lock
        connect_args["timeout"] = timeout
    elif "+asyncpg" in url:
        connect_args["command_timeout"] = timeout
        connect_args["server_settings"] = {"lock_timeout": str(int(timeout * 1000))}

    kwargs.setdefault("echo", settings.db_echo)
    engine = create_async_engine(url, connect_args=connect_args, **kwargs)

    if engine.dialect.name == "sqlite":
        configure_sqlite(engine)

    return engine


engine = build_engine()

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for one request."""
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def unit_of_work(session: AsyncSession, description: str) -> AsyncIterator[None]:
    """Commit on success, roll back on any failure.

    Database errors and lock timeouts surface as ``StorageFailureError``;
    ``BookingError`` passes through unchanged.

    Args:
        session: Session whose transaction the block runs in
        description: What is being saved, for the log and error message
    """
    try:
        yield
        await session.commit()
    except BookingError:
        await session.rollback()
        raise
    except (SQLAlchemyError, TimeoutError) as e:
        await session.rollback()
        logger.exception(f"{description} failed")
        raise StorageFailureError(f"{description} could not be saved") from e
