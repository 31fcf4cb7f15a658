"""
Database entity models.

This package contains all database entity models organized by marketplace
domain. Each module represents either a single table or a small group of
closely related tables.

Modules:
- users: Accounts, roles and pending ban requests
- products: Product listings with seller snapshots
- services: Service listings (optional in some deployments)
- carriers: Carrier profiles and their vehicles
- favorites: Saved products
- payments: Payment records
- support: Support tickets and listing reports
- audit_logs: Admin audit trail
"""

from . import (
    audit_logs,
    carriers,
    favorites,
    payments,
    products,
    services,
    support,
    users,
)
from .audit_logs import AuditLog
from .carriers import CarrierProfile, CarrierVehicle
from .favorites import Favorite
from .payments import Payment
from .products import Product
from .services import Service
from .support import Report, SupportTicket
from .users import User

__all__ = [
    "AuditLog",
    "CarrierProfile",
    "CarrierVehicle",
    "Favorite",
    "Payment",
    "Product",
    "Report",
    "Service",
    "SupportTicket",
    "User",
    "audit_logs",
    "carriers",
    "favorites",
    "payments",
    "products",
    "services",
    "support",
    "users",
]
