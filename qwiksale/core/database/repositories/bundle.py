"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances
for easy dependency injection in route handlers and the seed runner.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.carriers import CarrierVehicle
from ..entities.favorites import Favorite
from ..entities.payments import Payment
from ..entities.support import Report, SupportTicket
from .audit_logs import AuditLogRepository
from .base import SQLRepository
from .carriers import CarrierRepository
from .products import ProductRepository
from .services import ServiceRepository
from .users import UserRepository


@dataclass(frozen=True)
class SqlRepoBundle:
    """Convenience bundle of all SQL repositories sharing one session."""

    session: AsyncSession
    users: UserRepository
    products: ProductRepository
    services: ServiceRepository
    carriers: CarrierRepository
    vehicles: SQLRepository[CarrierVehicle]
    audit_logs: AuditLogRepository
    favorites: SQLRepository[Favorite]
    payments: SQLRepository[Payment]
    support_tickets: SQLRepository[SupportTicket]
    reports: SQLRepository[Report]


def build_sql_repos_from_session(*, session: AsyncSession) -> SqlRepoBundle:
    """Build a SqlRepoBundle from an existing session.

    Args:
        session: Existing async session

    Returns:
        Bundle containing all repository instances
    """
    return SqlRepoBundle(
        session=session,
        users=UserRepository(session),
        products=ProductRepository(session),
        services=ServiceRepository(session),
        carriers=CarrierRepository(session),
        vehicles=SQLRepository(session, CarrierVehicle),
        audit_logs=AuditLogRepository(session),
        favorites=SQLRepository(session, Favorite),
        payments=SQLRepository(session, Payment),
        support_tickets=SQLRepository(session, SupportTicket),
        reports=SQLRepository(session, Report),
    )
