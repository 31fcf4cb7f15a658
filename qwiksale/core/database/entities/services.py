"""
Service entity models.

Service listings (plumbing, tutoring, repairs). Some deployments run without
this table, so readers probe for it before querying.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import NaiveDatetime
from sqlmodel import JSON, Field

from qwiksale.core.models.domain.enums import ListingStatus, RateType

from ..base import Base, new_id
from ..utils import utc_now


class ServiceBase(Base):
    """Base fields for a service listing."""

    name: str = Field(max_length=200, index=True)
    description: Optional[str] = Field(default=None)
    category: str = Field(max_length=80, index=True)
    subcategory: Optional[str] = Field(default=None, max_length=80)
    price: Optional[int] = Field(default=None)
    rate_type: str = Field(default=RateType.fixed.value, max_length=8)
    service_area: Optional[str] = Field(default=None, max_length=120)
    availability: Optional[str] = Field(default=None, max_length=120)
    image: Optional[str] = Field(default=None)
    gallery: List[str] = Field(default_factory=list, sa_type=JSON)
    location: Optional[str] = Field(default=None, max_length=120)
    status: str = Field(default=ListingStatus.ACTIVE.value, max_length=16, index=True)
    featured: bool = Field(default=False, index=True)

    seller_id: Optional[str] = Field(default=None, foreign_key="users.id", index=True, max_length=64)
    seller_name: Optional[str] = Field(default=None, max_length=120)
    seller_phone: Optional[str] = Field(default=None, max_length=20)
    seller_location: Optional[str] = Field(default=None, max_length=120)
    seller_member_since: Optional[str] = Field(default=None, max_length=16)
    seller_rating: Optional[float] = Field(default=None)
    seller_sales: Optional[int] = Field(default=None)


class Service(ServiceBase, table=True):
    """Service listing.

    Table: services
    """

    __tablename__ = "services"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)

    created_at: NaiveDatetime = Field(default_factory=utc_now, index=True)
    updated_at: NaiveDatetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"Service(id={self.id}, name={self.name}, status={self.status})"
