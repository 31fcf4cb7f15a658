"""
Service repository.

The services table is optional in some deployments; callers check
``is_available`` before running any other query.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.services import Service
from ..utils import has_table
from .listings import ListingRepository


class ServiceRepository(ListingRepository[Service]):
    """Repository for service data access operations."""

    search_columns = ("name", "description", "category", "subcategory")
    facet_columns = ("category", "subcategory")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Service)

    async def is_available(self) -> bool:
        """Whether the services table exists in the connected database."""
        return await has_table(self.session, Service.__tablename__)
