"""Admin user-management I/O models."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from .common import CamelModel, UtcDatetime


class AdminUserRow(CamelModel):
    """User row as listed in the admin console."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    username: Optional[str] = None
    role: str
    subscription: Optional[str] = None
    verified: bool = False
    created_at: Optional[UtcDatetime] = None
    request_ban_until: Optional[UtcDatetime] = None
    request_ban_reason: Optional[str] = None


class RoleUpdateRequest(CamelModel):
    role: str = Field(description="USER, MODERATOR, ADMIN or SUPERADMIN (case-insensitive)")


class RoleUpdateResult(CamelModel):
    ok: bool = True
    user: AdminUserRow


class RequestBanBody(CamelModel):
    action: str = Field(default="ban", description="'ban' or 'unban'")
    until: Optional[str] = Field(default=None, description="ISO timestamp, required when banning")
    reason: Optional[str] = None


class RequestBanUser(CamelModel):
    id: str
    request_ban_until: Optional[UtcDatetime] = None
    request_ban_reason: Optional[str] = None


class RequestBanResult(CamelModel):
    ok: bool = True
    user: RequestBanUser
