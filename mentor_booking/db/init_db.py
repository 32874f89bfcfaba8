"""Database initialization utilities."""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from mentor_booking.db.base import Base
from mentor_booking.db.session import engine as default_engine

# Register models on the metadata
import mentor_booking.models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """Create all database tables."""
    async with (engine or default_engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Initialize the database schema.

    Production schemas are managed with Alembic; this is for development.
    """
    await create_tables(engine)
    logger.info("Database initialization complete")
