from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from qwiksale.core.database.entities import User
from qwiksale.core.database.repositories import SqlRepoBundle
from qwiksale.core.models.domain.enums import Role
from test.settings import test_settings
from test.unit_test.factories import identity_headers, make_user


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app with the test session injected."""
    from qwiksale.core.database import get_session
    from qwiksale.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def allowlist_headers() -> Dict[str, str]:
    """An admin known only through the ADMIN_EMAILS allowlist."""
    return {"X-Session-User-Email": test_settings.admin.allowlisted_email}


@pytest_asyncio.fixture
async def admin_user(repos: SqlRepoBundle) -> User:
    return await make_user(repos, email="admin@qwiksale.test", name="Admin", role=Role.ADMIN.value)


@pytest_asyncio.fixture
async def superadmin_user(repos: SqlRepoBundle) -> User:
    return await make_user(repos, email="root@qwiksale.test", name="Root", role=Role.SUPERADMIN.value)


@pytest.fixture
def admin_headers(admin_user: User) -> Dict[str, str]:
    return identity_headers(admin_user)


@pytest.fixture
def superadmin_headers(superadmin_user: User) -> Dict[str, str]:
    return identity_headers(superadmin_user)
