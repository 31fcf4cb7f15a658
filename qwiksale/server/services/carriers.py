"""
Carrier Enforcement.

Resolves the loose carrier identifiers sent by the admin console and applies
ban, suspension and plan-tier changes. Every change is idempotent: repeating
a request that matches the stored state reports ``noChange`` and leaves the
row untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Union

from fastapi import HTTPException, status

from qwiksale.core.database.entities.carriers import CarrierProfile
from qwiksale.core.database.repositories import SqlRepoBundle
from qwiksale.core.database.utils import utc_now
from qwiksale.core.logging_config import get_logger
from qwiksale.core.models.domain.enums import CarrierPlanTier
from qwiksale.core.models.io.carriers import (
    CarrierBanResult,
    CarrierSuspendResult,
    CarrierTarget,
    CarrierTierResult,
)
from qwiksale.server.responses import NO_STORE_HEADERS

logger = get_logger(__name__)

MAX_ID_LENGTH = 120
MAX_EMAIL_LENGTH = 254
MAX_REASON_LENGTH = 240
DEFAULT_BAN_REASON = "Admin action"
SAME_INSTANT_TOLERANCE_SECONDS = 1.0


def clean_str(value: Optional[str], max_length: int = MAX_ID_LENGTH) -> Optional[str]:
    """Trim and cap a free-form string; blank values become None."""
    if value is None:
        return None
    text = str(value).strip()
    return text[:max_length] or None


def clean_email(value: Optional[str]) -> Optional[str]:
    text = clean_str(value, MAX_EMAIL_LENGTH)
    return text.lower() if text else None


def parse_instant(value: Union[str, int, float, None]) -> Optional[datetime]:
    """Parse an ISO-8601 string or epoch milliseconds into naive UTC.

    Raises:
        ValueError: if the value is neither
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Not a timestamp: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc).replace(tzinfo=None)
        except (OverflowError, OSError) as e:
            raise ValueError(f"Timestamp out of range: {value!r}") from e

    text = value.strip()
    if not text:
        raise ValueError("Empty timestamp")
    if text.lstrip("-").isdigit():
        return parse_instant(int(text))
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def same_instant(a: Optional[datetime], b: Optional[datetime]) -> bool:
    if a is None or b is None:
        return a is None and b is None
    return abs((a - b).total_seconds()) <= SAME_INSTANT_TOLERANCE_SECONDS


def not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Carrier not found", headers=NO_STORE_HEADERS)


@dataclass
class ResolvedCarrier:
    """A carrier profile together with how it was found."""

    carrier: CarrierProfile
    matched: str
    input: str


class CarrierResolver:
    """Finds the carrier an admin request refers to.

    Candidate ids are tried first as profile ids, then as owner user ids.
    An email is resolved to its user id up front and, failing everything
    else, matched directly through the owner's account.
    """

    def __init__(self, repos: SqlRepoBundle) -> None:
        self.repos = repos

    async def candidates(self, target: CarrierTarget) -> List[str]:
        ids = [clean_str(target.carrier_id), clean_str(target.id), clean_str(target.user_id)]
        email = clean_email(target.email)
        if email:
            user = await self.repos.users.get_by_email(email)
            if user is not None:
                ids.append(user.id)
        unique: List[str] = []
        for value in ids:
            if value and value not in unique:
                unique.append(value)
        return unique

    async def resolve(self, target: CarrierTarget) -> Optional[ResolvedCarrier]:
        candidates = await self.candidates(target)

        for candidate in candidates:
            carrier = await self.repos.carriers.get_by_id(candidate)
            if carrier is not None:
                return ResolvedCarrier(carrier=carrier, matched="id", input=candidate)

        for candidate in candidates:
            carrier = await self.repos.carriers.get_by_user_id(candidate)
            if carrier is not None:
                return ResolvedCarrier(carrier=carrier, matched="userId", input=candidate)

        email = clean_email(target.email)
        if email:
            carrier = await self.repos.carriers.get_by_user_email(email)
            if carrier is not None:
                return ResolvedCarrier(carrier=carrier, matched="user.email", input=email)

        return None

    async def require(self, target: CarrierTarget) -> ResolvedCarrier:
        """Resolve or raise 404."""
        resolved = await self.resolve(target)
        if resolved is None:
            raise not_found()
        logger.debug(f"Resolved carrier {resolved.carrier.id} via {resolved.matched}={resolved.input}")
        return resolved


async def apply_ban(
    repos: SqlRepoBundle, carrier: CarrierProfile, banned: bool, reason: Optional[str]
) -> CarrierBanResult:
    """Ban or unban a carrier.

    Banning an already-banned carrier leaves the row untouched, reason
    included.
    """
    if banned:
        no_change = carrier.banned_at is not None
        if not no_change:
            carrier.banned_at = utc_now()
            carrier.banned_reason = clean_str(reason, MAX_REASON_LENGTH) or DEFAULT_BAN_REASON
    else:
        no_change = carrier.banned_at is None and carrier.banned_reason is None
        if not no_change:
            carrier.banned_at = None
            carrier.banned_reason = None

    if not no_change:
        carrier = await repos.carriers.update(carrier)

    return CarrierBanResult(
        carrier_id=carrier.id,
        user_id=carrier.user_id,
        banned_at=carrier.banned_at,
        banned_reason=carrier.banned_reason,
        no_change=no_change,
    )


async def apply_suspension(
    repos: SqlRepoBundle, carrier: CarrierProfile, suspended_until: Union[str, int, float, None]
) -> CarrierSuspendResult:
    """Set or clear ``suspendedUntil``.

    Raises:
        HTTPException: 400 when the timestamp cannot be parsed
    """
    try:
        until = parse_instant(suspended_until)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid suspendedUntil", headers=NO_STORE_HEADERS
        )

    no_change = same_instant(carrier.suspended_until, until)
    if not no_change:
        carrier.suspended_until = until
        carrier = await repos.carriers.update(carrier)

    return CarrierSuspendResult(
        carrier_id=carrier.id,
        user_id=carrier.user_id,
        suspended_until=carrier.suspended_until,
        no_change=no_change,
    )


def parse_plan_tier(value: Optional[str]) -> CarrierPlanTier:
    """Case-insensitive plan tier lookup.

    Raises:
        HTTPException: 400 for anything but BASIC, GOLD or PLATINUM
    """
    text = (value or "").strip().upper()
    if text not in CarrierPlanTier.__members__:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid planTier. Expected BASIC, GOLD, or PLATINUM.",
            headers=NO_STORE_HEADERS,
        )
    return CarrierPlanTier[text]


async def apply_plan_tier(repos: SqlRepoBundle, carrier: CarrierProfile, tier: CarrierPlanTier) -> CarrierTierResult:
    no_change = carrier.plan_tier == tier.value
    if not no_change:
        carrier.plan_tier = tier.value
        carrier = await repos.carriers.update(carrier)
    return CarrierTierResult(carrier_id=carrier.id, plan_tier=carrier.plan_tier, no_change=no_change)
