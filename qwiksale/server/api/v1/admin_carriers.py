"""
Admin Carrier Endpoints.

Carrier list with enforcement filters, and the ban, suspension and plan-tier
controls. Enforcement bodies may identify the carrier by profile id, owner
user id or owner email.
"""

from typing import Optional, Type, TypeVar

from fastapi import APIRouter, Query, Response

from qwiksale.core.database.repositories.carriers import CarrierListFilters, CarrierRow
from qwiksale.core.database.utils import utc_now
from qwiksale.core.models.domain.enums import (
    CarrierEnforcement,
    CarrierPlanTier,
    CarrierSort,
    CarrierStatus,
    CarrierVerificationStatus,
)
from qwiksale.core.models.io.carriers import (
    AdminCarrierItem,
    AdminCarriersPage,
    CarrierBanRequest,
    CarrierBanResult,
    CarrierEnforcementState,
    CarrierListSummary,
    CarrierPosition,
    CarrierStation,
    CarrierSuspendRequest,
    CarrierSuspendResult,
    CarrierTarget,
    CarrierTierRequest,
    CarrierTierResult,
    CarrierUserSummary,
)
from qwiksale.core.models.io.common import total_pages
from qwiksale.core.monitoring import log_admin_action
from qwiksale.server.responses import apply_no_store
from qwiksale.server.services.carriers import (
    CarrierResolver,
    apply_ban,
    apply_plan_tier,
    apply_suspension,
    clean_email,
    clean_str,
    parse_plan_tier,
)
from qwiksale.server.services.deps import AdminDep, ReposDep

router = APIRouter()

EnumT = TypeVar("EnumT")


def _enum_or_none(enum_cls: Type[EnumT], value: Optional[str], upper: bool = True) -> Optional[EnumT]:
    """Look up an enum by value; unknown values mean 'no filter'."""
    if not value:
        return None
    text = value.strip().upper() if upper else value.strip().lower()
    try:
        return enum_cls(text)
    except ValueError:
        return None


def to_item(row: CarrierRow, now) -> AdminCarrierItem:
    carrier = row.carrier
    return AdminCarrierItem(
        id=carrier.id,
        user_id=carrier.user_id,
        user=CarrierUserSummary(name=row.user_name, email=row.user_email),
        phone=carrier.phone,
        vehicle_type=row.vehicle.type if row.vehicle else None,
        vehicle_plate=row.vehicle.registration if row.vehicle else None,
        plan_tier=carrier.plan_tier,
        verification_status=carrier.verification_status,
        status=carrier.status,
        enforcement=CarrierEnforcementState(
            banned=carrier.banned_at is not None,
            banned_at=carrier.banned_at,
            banned_reason=carrier.banned_reason,
            suspended=carrier.is_suspended(now),
            suspended_until=carrier.suspended_until,
        ),
        last_seen=CarrierPosition(at=carrier.last_seen_at, lat=carrier.last_seen_lat, lng=carrier.last_seen_lng),
        station=CarrierStation(lat=carrier.station_lat, lng=carrier.station_lng, label=carrier.station_label),
        created_at=carrier.created_at,
        updated_at=carrier.updated_at,
    )


@router.get(
    "/carriers",
    response_model=AdminCarriersPage,
    summary="List Carriers",
    description="Paginated carrier list with text, status, tier, verification and enforcement filters.",
    response_description="Envelope of carriers plus a summary of the returned page.",
    responses={401: {"description": "Not signed in"}, 403: {"description": "Not an admin"}},
)
async def list_carriers(
    response: Response,
    repos: ReposDep,
    admin: AdminDep,
    q: Optional[str] = Query(default=None, max_length=200, description="Phone, plate, vehicle type, name, email or id"),
    email: Optional[str] = Query(default=None, max_length=254, description="Used when q is empty"),
    status: Optional[str] = Query(default=None, description="OFFLINE, AVAILABLE or ON_TRIP"),
    tier: Optional[str] = Query(default=None, description="BASIC, GOLD or PLATINUM"),
    verification: Optional[str] = Query(default=None, description="UNVERIFIED, PENDING, VERIFIED or REJECTED"),
    enforcement: Optional[str] = Query(default=None, description="banned, suspended or clear"),
    sort: Optional[str] = Query(default=None, description="updated (default), lastseen or created"),
    page: int = Query(default=1, ge=1, le=5000),
    page_size: int = Query(default=50, ge=1, le=200, alias="pageSize"),
) -> AdminCarriersPage:
    """
    List carriers for the admin console.

    Unrecognised filter values are ignored. The summary counts cover the
    returned page only.
    """
    apply_no_store(response)
    now = utc_now()

    status_value = _enum_or_none(CarrierStatus, status)
    tier_value = _enum_or_none(CarrierPlanTier, tier)
    verification_value = _enum_or_none(CarrierVerificationStatus, verification)
    filters = CarrierListFilters(
        q=clean_str(q) or clean_email(email),
        status=status_value.value if status_value else None,
        tier=tier_value.value if tier_value else None,
        verification=verification_value.value if verification_value else None,
        enforcement=_enum_or_none(CarrierEnforcement, enforcement, upper=False),
    )
    sort_value = _enum_or_none(CarrierSort, sort, upper=False) or CarrierSort.updated

    rows, total = await repos.carriers.admin_page(
        filters, sort_value, limit=page_size, offset=(page - 1) * page_size, now=now
    )
    items = [to_item(row, now) for row in rows]

    return AdminCarriersPage(
        page=page,
        page_size=page_size,
        total=total,
        total_pages=total_pages(total, page_size),
        items=items,
        summary=CarrierListSummary(
            returned=len(items),
            available=sum(1 for item in items if item.status == CarrierStatus.AVAILABLE.value),
            banned=sum(1 for item in items if item.enforcement.banned),
            suspended=sum(1 for item in items if item.enforcement.suspended),
        ),
    )


@router.post(
    "/carriers/ban",
    response_model=CarrierBanResult,
    summary="Ban or Unban Carrier",
    description="Ban a carrier (optionally with a reason) or lift the ban. Repeating a request is a no-op.",
    response_description="Carrier enforcement state after the change.",
    responses={404: {"description": "Carrier not found"}},
)
async def ban_carrier(
    body: CarrierBanRequest, response: Response, repos: ReposDep, admin: AdminDep
) -> CarrierBanResult:
    apply_no_store(response)
    resolved = await CarrierResolver(repos).require(body)
    result = await apply_ban(repos, resolved.carrier, body.banned, body.reason)
    if not result.no_change:
        log_admin_action(
            "carrier.ban" if body.banned else "carrier.unban",
            actor=admin.user_id,
            target=result.carrier_id,
            matched=resolved.matched,
            reason=result.banned_reason,
        )
    return result


@router.post(
    "/carriers/suspend",
    response_model=CarrierSuspendResult,
    summary="Suspend Carrier",
    description=(
        "Suspend a carrier until the given time (ISO string or epoch milliseconds). "
        "A null or missing suspendedUntil lifts the suspension."
    ),
    response_description="Carrier suspension state after the change.",
    responses={400: {"description": "Invalid suspendedUntil"}, 404: {"description": "Carrier not found"}},
)
async def suspend_carrier(
    body: CarrierSuspendRequest, response: Response, repos: ReposDep, admin: AdminDep
) -> CarrierSuspendResult:
    apply_no_store(response)
    resolved = await CarrierResolver(repos).require(body)
    result = await apply_suspension(repos, resolved.carrier, body.suspended_until)
    if not result.no_change:
        log_admin_action(
            "carrier.suspend" if result.suspended_until else "carrier.unsuspend",
            actor=admin.user_id,
            target=result.carrier_id,
            matched=resolved.matched,
            until=str(result.suspended_until),
            reason=clean_str(body.reason, 240),
        )
    return result


@router.post(
    "/carriers/{carrier_id}/tier",
    response_model=CarrierTierResult,
    summary="Set Carrier Plan Tier",
    description="Change a carrier's plan tier. The path id may be the carrier id or the owner's user id.",
    response_description="The carrier's plan tier after the change.",
    responses={400: {"description": "Invalid planTier"}, 404: {"description": "Carrier not found"}},
)
async def set_carrier_tier(
    carrier_id: str, body: CarrierTierRequest, response: Response, repos: ReposDep, admin: AdminDep
) -> CarrierTierResult:
    apply_no_store(response)
    tier = parse_plan_tier(body.plan_tier)
    resolved = await CarrierResolver(repos).require(CarrierTarget(id=carrier_id))
    old_tier = resolved.carrier.plan_tier
    result = await apply_plan_tier(repos, resolved.carrier, tier)
    if not result.no_change:
        log_admin_action(
            "carrier.tier", actor=admin.user_id, target=result.carrier_id, old_tier=old_tier, new_tier=tier.value
        )
    return result
