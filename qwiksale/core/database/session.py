"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from qwiksale.core.logging_config import get_logger
from qwiksale.server.core.config import settings

from .utils import create_engine, create_sessionmaker

logger = get_logger(__name__)

engine = create_engine(settings.database.url, echo=settings.database.echo)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLAlchemy session.
    """
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """
    Initialize the database.

    Production schemas are managed by Alembic (``alembic/versions``). For local
    SQLite databases the tables are created from the ORM metadata so a fresh
    checkout can serve requests immediately.
    """
    if engine.url.get_backend_name() == "sqlite":
        from .utils import create_all

        await create_all(engine)
        logger.info("Created tables from ORM metadata for local SQLite database")
