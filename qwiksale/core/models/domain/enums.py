"""Domain enums for marketplace records.

Values are stored as plain strings in the database; these enums are the
single source of the accepted vocabulary.
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role. Admin access is granted to ADMIN and SUPERADMIN."""

    USER = "USER"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"
    SUPERADMIN = "SUPERADMIN"


class SubscriptionTier(str, Enum):
    """Seller subscription plan."""

    FREE = "FREE"
    BASIC = "BASIC"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"


class ListingStatus(str, Enum):
    """Lifecycle status shared by products and services."""

    ACTIVE = "ACTIVE"
    DRAFT = "DRAFT"
    PAUSED = "PAUSED"
    ARCHIVED = "ARCHIVED"
    SOLD = "SOLD"
    HIDDEN = "HIDDEN"


class ListingKind(str, Enum):
    """Which table a listing row comes from."""

    product = "product"
    service = "service"


class RateType(str, Enum):
    """How a service price is quoted."""

    hour = "hour"
    day = "day"
    fixed = "fixed"


class CarrierStatus(str, Enum):
    """Carrier availability as reported by the carrier app."""

    OFFLINE = "OFFLINE"
    AVAILABLE = "AVAILABLE"
    ON_TRIP = "ON_TRIP"


class CarrierPlanTier(str, Enum):
    """Carrier plan. Only these three are assignable by admins."""

    BASIC = "BASIC"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"


class CarrierVerificationStatus(str, Enum):
    UNVERIFIED = "UNVERIFIED"
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"


class VehicleType(str, Enum):
    BICYCLE = "BICYCLE"
    MOTORBIKE = "MOTORBIKE"
    CAR = "CAR"
    VAN = "VAN"
    TRUCK = "TRUCK"


class CarrierEnforcement(str, Enum):
    """Enforcement filter for the admin carrier list."""

    banned = "banned"  # banned_at is set
    suspended = "suspended"  # suspended_until lies in the future
    clear = "clear"  # neither banned nor currently suspended


class CarrierSort(str, Enum):
    updated = "updated"
    lastseen = "lastseen"
    created = "created"


class ListingSort(str, Enum):
    """Sort policies for listing queries."""

    newest = "newest"
    price_asc = "price_asc"
    price_desc = "price_desc"
    featured = "featured"
