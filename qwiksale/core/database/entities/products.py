"""
Product entity models.

Products carry a snapshot of the seller's public details taken at listing
time, so listings render without joining the users table.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import NaiveDatetime
from sqlmodel import JSON, Field

from qwiksale.core.models.domain.enums import ListingStatus

from ..base import Base, new_id
from ..utils import utc_now


class ProductBase(Base):
    """Base fields for a product listing."""

    name: str = Field(max_length=200, index=True)
    description: Optional[str] = Field(default=None)
    category: str = Field(max_length=80, index=True)
    subcategory: str = Field(max_length=80)
    brand: Optional[str] = Field(default=None, max_length=80)
    condition: Optional[str] = Field(default=None, max_length=32, description="'brand new' or 'pre-owned'")
    price: Optional[int] = Field(default=None, description="Whole KES; null means 'contact for price'")
    image: Optional[str] = Field(default=None)
    gallery: List[str] = Field(default_factory=list, sa_type=JSON)
    location: Optional[str] = Field(default=None, max_length=120)
    negotiable: bool = Field(default=False)
    status: str = Field(default=ListingStatus.ACTIVE.value, max_length=16, index=True)
    featured: bool = Field(default=False, index=True)

    seller_id: Optional[str] = Field(default=None, foreign_key="users.id", index=True, max_length=64)
    seller_name: Optional[str] = Field(default=None, max_length=120)
    seller_phone: Optional[str] = Field(default=None, max_length=20)
    seller_location: Optional[str] = Field(default=None, max_length=120)
    seller_member_since: Optional[str] = Field(default=None, max_length=16)
    seller_rating: Optional[float] = Field(default=None)
    seller_sales: Optional[int] = Field(default=None)


class Product(ProductBase, table=True):
    """Product listing.

    Table: products
    """

    __tablename__ = "products"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)

    created_at: NaiveDatetime = Field(default_factory=utc_now, index=True)
    updated_at: NaiveDatetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"Product(id={self.id}, name={self.name}, status={self.status})"
