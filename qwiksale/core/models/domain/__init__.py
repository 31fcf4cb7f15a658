"""Domain vocabulary for marketplace records."""

from .enums import (
    CarrierEnforcement,
    CarrierPlanTier,
    CarrierSort,
    CarrierStatus,
    CarrierVerificationStatus,
    ListingKind,
    ListingSort,
    ListingStatus,
    RateType,
    Role,
    SubscriptionTier,
    VehicleType,
)

__all__ = [
    "CarrierEnforcement",
    "CarrierPlanTier",
    "CarrierSort",
    "CarrierStatus",
    "CarrierVerificationStatus",
    "ListingKind",
    "ListingSort",
    "ListingStatus",
    "RateType",
    "Role",
    "SubscriptionTier",
    "VehicleType",
]
