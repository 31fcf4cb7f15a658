"""
Route Dependencies.

Annotated aliases shared by the API endpoints: database session, repository
bundle, admin guards and the parsed catalog query.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from qwiksale.core.database import get_session
from qwiksale.core.database.repositories import SqlRepoBundle, build_sql_repos_from_session
from qwiksale.server.services.auth import AdminPrincipal, require_admin, require_superadmin
from qwiksale.server.services.catalog import CatalogQuery, catalog_query


def get_repos(session: AsyncSession = Depends(get_session)) -> SqlRepoBundle:
    """Repository bundle bound to the request's session."""
    return build_sql_repos_from_session(session=session)


SessionDep = Annotated[AsyncSession, Depends(get_session)]
ReposDep = Annotated[SqlRepoBundle, Depends(get_repos)]
AdminDep = Annotated[AdminPrincipal, Depends(require_admin)]
SuperAdminDep = Annotated[AdminPrincipal, Depends(require_superadmin)]
CatalogQueryDep = Annotated[CatalogQuery, Depends(catalog_query)]
