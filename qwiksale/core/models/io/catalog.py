"""
Public catalog I/O models.

Product and service search pages share the admin envelope and add the
active sort policy, facet counts (first page only) and a ``hasMore`` flag for
infinite scrolling.
"""

from __future__ import annotations

from typing import Dict, Generic, List, Optional

from pydantic import Field

from .common import CamelModel, Envelope, ItemT, UtcDatetime


class FacetCount(CamelModel):
    value: str
    count: int


class SellerSnapshot(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = None
    member_since: Optional[str] = None
    rating: Optional[float] = None
    sales: Optional[int] = None


class ProductItem(CamelModel):
    id: str
    name: str
    category: str
    subcategory: Optional[str] = None
    brand: Optional[str] = None
    condition: Optional[str] = None
    price: Optional[int] = None
    image: Optional[str] = None
    location: Optional[str] = None
    status: str
    featured: bool = False
    created_at: Optional[UtcDatetime] = None
    seller: SellerSnapshot = Field(default_factory=SellerSnapshot)


class ServiceItem(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    category: str
    subcategory: Optional[str] = None
    price: Optional[int] = None
    rate_type: Optional[str] = None
    service_area: Optional[str] = None
    availability: Optional[str] = None
    image: Optional[str] = None
    location: Optional[str] = None
    status: str
    featured: bool = False
    created_at: Optional[UtcDatetime] = None
    seller: SellerSnapshot = Field(default_factory=SellerSnapshot)


class CatalogPage(Envelope[ItemT], Generic[ItemT]):
    """Search page for products or services."""

    sort: str
    facets: Optional[Dict[str, List[FacetCount]]] = None
    has_more: bool = False


ProductPage = CatalogPage[ProductItem]
ServicePage = CatalogPage[ServiceItem]
