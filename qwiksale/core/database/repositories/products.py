"""
Product repository.

Free-text search covers the listing name, brand, category, subcategory and
the seller's display name. Brand filters match on substrings.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.products import Product
from .listings import ListingRepository


class ProductRepository(ListingRepository[Product]):
    """Repository for product data access operations."""

    search_columns = ("name", "brand", "category", "subcategory", "seller_name")
    facet_columns = ("category", "brand", "condition")
    contains_filters = ("brand",)

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Product)
