"""
Admin listing I/O models.

A single row shape covers both products and services so the admin console
can render one merged table.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from qwiksale.core.models.domain.enums import ListingKind

from .common import CamelModel, UtcDatetime


class AdminListingRow(CamelModel):
    """Normalized listing row for the admin console."""

    id: str
    kind: ListingKind = Field(description="Source table of the row")
    name: str
    price: Optional[int] = Field(default=None, description="Null when the listing has no numeric price")
    featured: bool = False
    status: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[UtcDatetime] = None
    seller_name: Optional[str] = None
    seller_id: Optional[str] = None


class FeatureToggleRequest(CamelModel):
    """Body for product feature toggles."""

    featured: bool = Field(strict=True, description="New featured flag")


class ServiceFeatureToggleRequest(CamelModel):
    """Body for service feature toggles. Either field may instead come from the query string."""

    featured: Optional[bool] = Field(default=None, description="Accepts booleans and yes/no style strings")
    force: Optional[bool] = Field(default=None, description="Allow toggling a service that is not ACTIVE")


class FeatureToggleResult(CamelModel):
    ok: bool = True
    id: str
    kind: ListingKind
    featured: bool
    status: Optional[str] = None
    no_change: bool = Field(default=False, description="True when the listing was already in the requested state")
    updated_at: Optional[UtcDatetime] = None
