"""
Shared listing queries for products and services.

Products and services share the columns the catalog filters on (name,
category, price, status, featured, seller), so both repositories build their
queries here and only declare which columns free-text search covers and which
columns produce facets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import and_, func, or_, select

from qwiksale.core.models.domain.enums import ListingSort

from ..entities.users import User
from .base import EntityType, SQLRepository


@dataclass
class ListingFilters:
    """Normalized catalog filters. ``None`` means 'no constraint'."""

    tokens: List[str] = field(default_factory=list)
    category: Optional[str] = None
    subcategory: Optional[str] = None
    brand: Optional[str] = None
    condition: Optional[str] = None
    seller_id: Optional[str] = None
    seller_username: Optional[str] = None
    featured: Optional[bool] = None
    verified_only: bool = False
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    status: Optional[str] = "ACTIVE"


@dataclass
class AdminListingFilters:
    """Filters for the admin listings console."""

    q: Optional[str] = None
    status: Optional[str] = None
    featured: Optional[bool] = None


class ListingRepository(SQLRepository[EntityType]):
    """Catalog queries shared by product and service repositories."""

    # Columns ORed together for each free-text token
    search_columns: ClassVar[Tuple[str, ...]] = ("name", "category", "subcategory")
    # Columns the public catalog reports facet counts for
    facet_columns: ClassVar[Tuple[str, ...]] = ("category",)
    # Case-insensitive substring match instead of equality
    contains_filters: ClassVar[Tuple[str, ...]] = ()

    # ------------------------------------------------------------------
    # Public catalog
    # ------------------------------------------------------------------

    def catalog_conditions(self, filters: ListingFilters) -> List[Any]:
        """Translate catalog filters into SQL conditions."""
        model = self.model
        conditions: List[Any] = []

        for token in filters.tokens:
            conditions.append(
                or_(*(getattr(model, col).icontains(token, autoescape=True) for col in self.search_columns))
            )

        for name in ("category", "subcategory", "brand", "condition"):
            value = getattr(filters, name)
            if not value or not hasattr(model, name):
                continue
            column = getattr(model, name)
            if name in self.contains_filters:
                conditions.append(column.icontains(value, autoescape=True))
            else:
                conditions.append(func.lower(column) == value.lower())

        if filters.seller_id:
            conditions.append(model.seller_id == filters.seller_id)
        if filters.seller_username:
            conditions.append(
                model.seller_id.in_(
                    select(User.id).where(func.lower(User.username) == filters.seller_username.lower())
                )
            )

        if filters.verified_only:
            conditions.append(model.seller_id.in_(select(User.id).where(User.email_verified.is_not(None))))
        elif filters.featured is not None:
            conditions.append(model.featured == filters.featured)

        price_bounds = []
        if filters.min_price is not None:
            price_bounds.append(model.price >= filters.min_price)
        if filters.max_price is not None:
            price_bounds.append(model.price <= filters.max_price)
        if price_bounds:
            bounded = and_(*price_bounds)
            # Listings without a price stay visible unless a positive floor is set
            if not filters.min_price:
                bounded = or_(bounded, model.price.is_(None))
            conditions.append(bounded)

        if filters.status:
            conditions.append(model.status == filters.status)

        return conditions

    def order_by(self, sort: ListingSort, search_like: bool = False) -> List[Any]:
        """ORDER BY clauses for a sort policy. The id tiebreak is always last."""
        model = self.model
        if sort == ListingSort.price_asc:
            clauses = [model.price.is_(None), model.price.asc(), model.created_at.desc()]
        elif sort == ListingSort.price_desc:
            clauses = [model.price.is_(None), model.price.desc(), model.created_at.desc()]
        elif sort == ListingSort.featured:
            clauses = [model.featured.desc(), model.created_at.desc()]
        elif search_like:
            clauses = [model.featured.desc(), model.created_at.desc()]
        else:
            clauses = [model.created_at.desc()]
        return clauses + [model.id.desc()]

    async def catalog_page(
        self,
        filters: ListingFilters,
        sort: ListingSort,
        limit: int,
        offset: int,
    ) -> Tuple[List[EntityType], int]:
        """Fetch one catalog page and the total match count.

        Price sorts leave out listings without a price.
        """
        conditions = self.catalog_conditions(filters)
        if sort in (ListingSort.price_asc, ListingSort.price_desc):
            conditions.append(self.model.price.is_not(None))

        stmt = select(self.model)
        for condition in conditions:
            stmt = stmt.where(condition)
        stmt = stmt.order_by(*self.order_by(sort, search_like=bool(filters.tokens))).limit(limit).offset(offset)

        result = await self.session.execute(stmt)
        total = await self.count(*conditions)
        return list(result.scalars().all()), total

    async def facets(self, filters: ListingFilters, top: int) -> Dict[str, List[Tuple[str, int]]]:
        """Top values per facet column, grouped case-insensitively.

        Returns:
            Mapping of facet column to ``(value, count)`` pairs, most frequent first
        """
        conditions = self.catalog_conditions(filters)
        out: Dict[str, List[Tuple[str, int]]] = {}
        for name in self.facet_columns:
            column = getattr(self.model, name)
            key = func.lower(column)
            count = func.count()
            stmt = (
                select(func.min(column), count)
                .where(column.is_not(None), column != "")
                .group_by(key)
                .order_by(count.desc(), key.asc())
                .limit(top)
            )
            for condition in conditions:
                stmt = stmt.where(condition)
            result = await self.session.execute(stmt)
            out[name] = [(str(value), int(n)) for value, n in result.all()]
        return out

    # ------------------------------------------------------------------
    # Admin console
    # ------------------------------------------------------------------

    def admin_conditions(self, filters: AdminListingFilters) -> List[Any]:
        model = self.model
        conditions: List[Any] = []
        if filters.q:
            conditions.append(
                or_(
                    model.name.icontains(filters.q, autoescape=True),
                    model.seller_name.icontains(filters.q, autoescape=True),
                    model.category.icontains(filters.q, autoescape=True),
                    model.id == filters.q,
                )
            )
        if filters.status:
            conditions.append(model.status == filters.status)
        if filters.featured is not None:
            conditions.append(model.featured == filters.featured)
        return conditions

    async def admin_count(self, filters: AdminListingFilters) -> int:
        return await self.count(*self.admin_conditions(filters))

    async def admin_slice(
        self,
        filters: AdminListingFilters,
        sort: ListingSort,
        limit: int,
        offset: int,
    ) -> List[EntityType]:
        """Rows ``offset`` to ``offset + limit`` of the admin ordering."""
        if limit <= 0:
            return []
        stmt = select(self.model)
        for condition in self.admin_conditions(filters):
            stmt = stmt.where(condition)
        stmt = stmt.order_by(*self.order_by(sort)).limit(limit).offset(offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Moderation and metrics
    # ------------------------------------------------------------------

    async def set_featured(self, entity: EntityType, featured: bool) -> EntityType:
        entity.featured = featured
        return await self.update(entity)

    async def count_created_between(self, start: datetime, end: datetime) -> int:
        return await self.count(self.model.created_at >= start, self.model.created_at < end)

    async def list_by_seller(self, seller_id: str, ids: Optional[Sequence[str]] = None) -> List[EntityType]:
        stmt = select(self.model).where(self.model.seller_id == seller_id)
        if ids:
            stmt = stmt.where(self.model.id.in_(list(ids)))
        result = await self.session.execute(stmt.order_by(self.model.created_at.desc()))
        return list(result.scalars().all())

    async def newest(self, limit: int) -> List[EntityType]:
        stmt = select(self.model).order_by(self.model.created_at.desc(), self.model.id.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
