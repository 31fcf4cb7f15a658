"""
Carrier admin I/O models.

Request bodies for the enforcement endpoints identify a carrier loosely: any
of ``carrierId``, ``id``, ``userId`` or ``email`` may be supplied and the
resolver tries them in turn.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import Field

from .common import CamelModel, Envelope, UtcDatetime


class CarrierTarget(CamelModel):
    """Loose carrier identifier accepted by the enforcement endpoints."""

    carrier_id: Optional[str] = None
    id: Optional[str] = None
    user_id: Optional[str] = None
    email: Optional[str] = None


class CarrierBanRequest(CarrierTarget):
    banned: bool = Field(default=True, description="True to ban, False to lift the ban")
    reason: Optional[str] = Field(default=None, description="Stored with the ban (max 240 chars)")


class CarrierSuspendRequest(CarrierTarget):
    suspended_until: Union[str, int, float, None] = Field(
        default=None,
        description="ISO timestamp or epoch milliseconds; null lifts the suspension",
    )
    reason: Optional[str] = Field(default=None, description="Accepted for the audit trail, not stored")


class CarrierTierRequest(CamelModel):
    plan_tier: Optional[str] = Field(default=None, description="BASIC, GOLD or PLATINUM (case-insensitive)")


class CarrierBanResult(CamelModel):
    ok: bool = True
    carrier_id: str
    user_id: str
    banned_at: Optional[UtcDatetime] = None
    banned_reason: Optional[str] = None
    no_change: bool = False


class CarrierSuspendResult(CamelModel):
    ok: bool = True
    carrier_id: str
    user_id: str
    suspended_until: Optional[UtcDatetime] = None
    no_change: bool = False


class CarrierTierResult(CamelModel):
    ok: bool = True
    carrier_id: str
    plan_tier: str
    no_change: bool = False


class CarrierUserSummary(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None


class CarrierEnforcementState(CamelModel):
    banned: bool = False
    banned_at: Optional[UtcDatetime] = None
    banned_reason: Optional[str] = None
    suspended: bool = False
    suspended_until: Optional[UtcDatetime] = None


class CarrierPosition(CamelModel):
    at: Optional[UtcDatetime] = None
    lat: Optional[float] = None
    lng: Optional[float] = None


class CarrierStation(CamelModel):
    lat: Optional[float] = None
    lng: Optional[float] = None
    label: Optional[str] = None


class AdminCarrierItem(CamelModel):
    """One row of the admin carrier list."""

    id: str
    user_id: str
    user: CarrierUserSummary
    phone: Optional[str] = None
    vehicle_type: Optional[str] = Field(default=None, description="Type of the most recently added vehicle")
    vehicle_plate: Optional[str] = None
    plan_tier: str
    verification_status: str
    status: str
    enforcement: CarrierEnforcementState
    last_seen: CarrierPosition
    station: CarrierStation
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None


class CarrierListSummary(CamelModel):
    returned: int = 0
    available: int = Field(default=0, description="Rows on this page with status AVAILABLE")
    banned: int = 0
    suspended: int = 0


class AdminCarriersPage(Envelope[AdminCarrierItem]):
    ok: bool = True
    summary: CarrierListSummary = Field(default_factory=CarrierListSummary)

