"""Database fixtures shared by the unit tests.

Every test gets its own in-memory SQLite database with the full schema.
"""

from typing import AsyncGenerator

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from qwiksale.core.database import create_all, create_sessionmaker
from qwiksale.core.database.repositories import SqlRepoBundle, build_sql_repos_from_session
from test.settings import test_settings


@pytest_asyncio.fixture(name="engine")
async def engine_fixture():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        test_settings.database.url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(engine) -> AsyncGenerator[AsyncSession, None]:
    async with create_sessionmaker(engine)() as session:
        yield session


@pytest_asyncio.fixture(name="repos")
async def repos_fixture(session: AsyncSession) -> SqlRepoBundle:
    return build_sql_repos_from_session(session=session)


