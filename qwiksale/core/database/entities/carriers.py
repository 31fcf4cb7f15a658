"""
Carrier entity models.

This module contains the delivery carrier profile and the vehicles a carrier
registers. Enforcement state lives on the profile:

- ``banned_at`` set means the carrier is banned until an admin lifts it
- ``suspended_until`` in the future means the carrier is suspended
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import NaiveDatetime
from sqlmodel import JSON, Field

from qwiksale.core.models.domain.enums import (
    CarrierPlanTier,
    CarrierStatus,
    CarrierVerificationStatus,
    VehicleType,
)

from ..base import Base, new_id
from ..utils import utc_now


class CarrierProfile(Base, table=True):
    """Delivery carrier attached to a user account.

    Table: carrier_profiles
    """

    __tablename__ = "carrier_profiles"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", unique=True, index=True, max_length=64)
    phone: Optional[str] = Field(default=None, max_length=20)

    status: str = Field(default=CarrierStatus.OFFLINE.value, max_length=16, index=True)
    plan_tier: str = Field(default=CarrierPlanTier.BASIC.value, max_length=16, index=True)
    verification_status: str = Field(default=CarrierVerificationStatus.UNVERIFIED.value, max_length=16)
    doc_photo_key: Optional[str] = Field(default=None)

    # Enforcement
    banned_at: Optional[NaiveDatetime] = Field(default=None)
    banned_reason: Optional[str] = Field(default=None, max_length=240)
    suspended_until: Optional[NaiveDatetime] = Field(default=None)

    # Home station
    station_label: Optional[str] = Field(default=None, max_length=120)
    station_lat: Optional[float] = Field(default=None)
    station_lng: Optional[float] = Field(default=None)

    # Last reported position
    last_seen_at: Optional[NaiveDatetime] = Field(default=None, index=True)
    last_seen_lat: Optional[float] = Field(default=None)
    last_seen_lng: Optional[float] = Field(default=None)

    created_at: NaiveDatetime = Field(default_factory=utc_now)
    updated_at: NaiveDatetime = Field(default_factory=utc_now, index=True)

    def is_suspended(self, now: datetime) -> bool:
        return self.suspended_until is not None and self.suspended_until > now

    def __repr__(self) -> str:
        return f"CarrierProfile(id={self.id}, user_id={self.user_id}, status={self.status})"


class CarrierVehicle(Base, table=True):
    """Vehicle registered by a carrier.

    Table: carrier_vehicles
    """

    __tablename__ = "carrier_vehicles"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    carrier_id: str = Field(foreign_key="carrier_profiles.id", index=True, max_length=64)
    type: str = Field(default=VehicleType.MOTORBIKE.value, max_length=16)
    registration: Optional[str] = Field(default=None, max_length=32)
    photo_keys: List[str] = Field(default_factory=list, sa_type=JSON)

    created_at: NaiveDatetime = Field(default_factory=utc_now)
    updated_at: NaiveDatetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"CarrierVehicle(id={self.id}, carrier_id={self.carrier_id}, type={self.type})"
