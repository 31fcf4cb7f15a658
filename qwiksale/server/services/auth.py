"""
Admin Guard.

Authentication is handled by the upstream auth gateway, which forwards the
signed-in user's id and email in trusted request headers (names configured
in ``Settings``). This module turns those headers into an ``AdminPrincipal``
and enforces access:

- no identity headers: 401
- email on the ``ADMIN_EMAILS`` allowlist, or DB role ADMIN/SUPERADMIN: allowed
- anything else: 403
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from qwiksale.core.database import get_session
from qwiksale.core.database.entities.users import User
from qwiksale.core.database.repositories.users import UserRepository
from qwiksale.core.logging_config import get_logger
from qwiksale.core.models.domain.enums import Role
from qwiksale.server.core.config import settings
from qwiksale.server.responses import NO_STORE_HEADERS

logger = get_logger(__name__)

ADMIN_ROLES = frozenset({Role.ADMIN.value, Role.SUPERADMIN.value})


@dataclass(frozen=True)
class SessionUser:
    """Identity forwarded by the auth gateway."""

    id: Optional[str]
    email: Optional[str]


@dataclass(frozen=True)
class AdminPrincipal:
    """The admin making the current request."""

    user_id: Optional[str]
    email: Optional[str]
    role: Optional[str]
    via_allowlist: bool = False

    @property
    def is_superadmin(self) -> bool:
        return self.role == Role.SUPERADMIN.value


def get_session_user(request: Request) -> Optional[SessionUser]:
    """Read the forwarded identity, or None when the request is anonymous."""
    auth = settings.auth
    user_id = (request.headers.get(auth.user_id_header) or "").strip() or None
    email = (request.headers.get(auth.user_email_header) or "").strip().lower() or None
    if user_id is None and email is None:
        return None
    return SessionUser(id=user_id, email=email)


async def _load_user(session: AsyncSession, identity: SessionUser) -> Optional[User]:
    users = UserRepository(session)
    user = await users.get_by_id(identity.id) if identity.id else None
    if user is None and identity.email:
        user = await users.get_by_email(identity.email)
    return user


async def require_admin(request: Request, session: AsyncSession = Depends(get_session)) -> AdminPrincipal:
    """
    Dependency guarding admin routes.

    Raises:
        HTTPException: 401 for anonymous requests, 403 for non-admins
    """
    identity = get_session_user(request)
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized", headers=NO_STORE_HEADERS)

    user = await _load_user(session, identity)
    email = identity.email or (user.email.lower() if user and user.email else None)
    role = user.role if user else None
    allowlisted = email is not None and email in settings.auth.admin_email_set

    if not allowlisted and role not in ADMIN_ROLES:
        logger.info(f"Admin access denied for user={identity.id or email}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden", headers=NO_STORE_HEADERS)

    return AdminPrincipal(
        user_id=user.id if user else identity.id,
        email=email,
        role=role,
        via_allowlist=allowlisted,
    )


async def require_superadmin(principal: AdminPrincipal = Depends(require_admin)) -> AdminPrincipal:
    """Dependency for routes only a SUPERADMIN may call."""
    if not principal.is_superadmin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden", headers=NO_STORE_HEADERS)
    return principal
