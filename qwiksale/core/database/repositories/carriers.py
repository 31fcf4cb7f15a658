"""
Carrier repository.

Data access for carrier profiles and vehicles: the lookups the enforcement
endpoints resolve targets with, the filtered admin list, and the aggregate
counts shown on the dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from qwiksale.core.models.domain.enums import (
    CarrierEnforcement,
    CarrierSort,
    CarrierStatus,
    VehicleType,
)

from ..entities.carriers import CarrierProfile, CarrierVehicle
from ..entities.users import User
from .base import SQLRepository


@dataclass
class CarrierListFilters:
    q: Optional[str] = None
    status: Optional[str] = None
    tier: Optional[str] = None
    verification: Optional[str] = None
    enforcement: Optional[CarrierEnforcement] = None


@dataclass
class CarrierRow:
    """A carrier with its owner's public details and latest vehicle."""

    carrier: CarrierProfile
    user_name: Optional[str]
    user_email: Optional[str]
    vehicle: Optional[CarrierVehicle] = None


class CarrierRepository(SQLRepository[CarrierProfile]):
    """Repository for carrier profile data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CarrierProfile)

    async def get_by_user_id(self, user_id: str) -> Optional[CarrierProfile]:
        stmt = select(CarrierProfile).where(CarrierProfile.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_user_email(self, email: str) -> Optional[CarrierProfile]:
        stmt = (
            select(CarrierProfile)
            .join(User, User.id == CarrierProfile.user_id)
            .where(func.lower(User.email) == email.lower())
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def add_vehicle(self, vehicle: CarrierVehicle) -> CarrierVehicle:
        self.session.add(vehicle)
        await self.session.commit()
        await self.session.refresh(vehicle)
        return vehicle

    # ------------------------------------------------------------------
    # Admin list
    # ------------------------------------------------------------------

    def _conditions(self, filters: CarrierListFilters, now: datetime) -> List[Any]:
        conditions: List[Any] = []

        if filters.q:
            q = filters.q
            plate_match = select(CarrierVehicle.carrier_id).where(
                CarrierVehicle.registration.icontains(q, autoescape=True)
            )
            text_match = [
                CarrierProfile.phone.icontains(q, autoescape=True),
                CarrierProfile.user_id == q,
                CarrierProfile.id == q,
                User.email.icontains(q, autoescape=True),
                User.name.icontains(q, autoescape=True),
                CarrierProfile.id.in_(plate_match),
            ]
            if q.upper() in VehicleType.__members__:
                text_match.append(
                    CarrierProfile.id.in_(
                        select(CarrierVehicle.carrier_id).where(CarrierVehicle.type == q.upper())
                    )
                )
            conditions.append(or_(*text_match))

        if filters.status:
            conditions.append(CarrierProfile.status == filters.status)
        if filters.tier:
            conditions.append(CarrierProfile.plan_tier == filters.tier)
        if filters.verification:
            conditions.append(CarrierProfile.verification_status == filters.verification)

        if filters.enforcement == CarrierEnforcement.banned:
            conditions.append(CarrierProfile.banned_at.is_not(None))
        elif filters.enforcement == CarrierEnforcement.suspended:
            conditions.append(CarrierProfile.suspended_until > now)
        elif filters.enforcement == CarrierEnforcement.clear:
            conditions.append(CarrierProfile.banned_at.is_(None))
            conditions.append(or_(CarrierProfile.suspended_until.is_(None), CarrierProfile.suspended_until <= now))

        return conditions

    @staticmethod
    def _order_by(sort: CarrierSort) -> List[Any]:
        if sort == CarrierSort.lastseen:
            return [
                CarrierProfile.last_seen_at.is_(None),
                CarrierProfile.last_seen_at.desc(),
                CarrierProfile.id.desc(),
            ]
        if sort == CarrierSort.created:
            return [CarrierProfile.created_at.desc(), CarrierProfile.id.desc()]
        return [CarrierProfile.updated_at.desc(), CarrierProfile.id.desc()]

    async def admin_page(
        self,
        filters: CarrierListFilters,
        sort: CarrierSort,
        limit: int,
        offset: int,
        now: datetime,
    ) -> Tuple[List[CarrierRow], int]:
        """One page of the admin carrier list plus the total match count."""
        conditions = self._conditions(filters, now)

        stmt = select(CarrierProfile, User.name, User.email).outerjoin(User, User.id == CarrierProfile.user_id)
        count_stmt = (
            select(func.count())
            .select_from(CarrierProfile)
            .outerjoin(User, User.id == CarrierProfile.user_id)
        )
        for condition in conditions:
            stmt = stmt.where(condition)
            count_stmt = count_stmt.where(condition)
        stmt = stmt.order_by(*self._order_by(sort)).limit(limit).offset(offset)

        result = await self.session.execute(stmt)
        rows = [CarrierRow(carrier=c, user_name=name, user_email=email) for c, name, email in result.all()]
        total = int((await self.session.execute(count_stmt)).scalar_one())

        latest = await self.latest_vehicles([row.carrier.id for row in rows])
        for row in rows:
            row.vehicle = latest.get(row.carrier.id)
        return rows, total

    async def latest_vehicles(self, carrier_ids: Sequence[str]) -> Dict[str, CarrierVehicle]:
        """Most recently added vehicle per carrier."""
        if not carrier_ids:
            return {}
        stmt = (
            select(CarrierVehicle)
            .where(CarrierVehicle.carrier_id.in_(list(carrier_ids)))
            .order_by(CarrierVehicle.created_at.desc(), CarrierVehicle.id.desc())
        )
        result = await self.session.execute(stmt)
        latest: Dict[str, CarrierVehicle] = {}
        for vehicle in result.scalars().all():
            latest.setdefault(vehicle.carrier_id, vehicle)
        return latest

    # ------------------------------------------------------------------
    # Dashboard aggregates
    # ------------------------------------------------------------------

    async def count_active_online(self, now: datetime, cutoff_seconds: int) -> int:
        """Carriers that are AVAILABLE, not banned or suspended, and seen recently."""
        return await self.count(
            CarrierProfile.status == CarrierStatus.AVAILABLE.value,
            CarrierProfile.banned_at.is_(None),
            or_(CarrierProfile.suspended_until.is_(None), CarrierProfile.suspended_until <= now),
            CarrierProfile.last_seen_at >= now - timedelta(seconds=cutoff_seconds),
        )

    async def count_banned(self) -> int:
        return await self.count(CarrierProfile.banned_at.is_not(None))

    async def count_suspended(self, now: datetime) -> int:
        return await self.count(CarrierProfile.suspended_until > now)

    async def count_by(self, column_name: str) -> Dict[str, int]:
        """Row counts grouped by one profile column."""
        column = getattr(CarrierProfile, column_name)
        stmt = select(column, func.count()).group_by(column)
        result = await self.session.execute(stmt)
        return {str(value): int(n) for value, n in result.all() if value is not None}
