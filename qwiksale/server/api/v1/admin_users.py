"""
Admin User Management Endpoints.

Search users, change roles (SUPERADMIN only) and set or lift the request
ban that stops a user from posting delivery requests.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from qwiksale.core.database.entities.users import User
from qwiksale.core.logging_config import get_logger
from qwiksale.core.models.domain.enums import Role
from qwiksale.core.models.io.users import (
    AdminUserRow,
    RequestBanBody,
    RequestBanResult,
    RequestBanUser,
    RoleUpdateRequest,
    RoleUpdateResult,
)
from qwiksale.core.monitoring import log_admin_action
from qwiksale.server.responses import NO_STORE_HEADERS, apply_no_store
from qwiksale.server.services.audit import record_audit
from qwiksale.server.services.carriers import clean_str, parse_instant
from qwiksale.server.services.deps import AdminDep, ReposDep, SuperAdminDep

logger = get_logger(__name__)

router = APIRouter()


def _error(status_code: int, detail: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail=detail, headers=NO_STORE_HEADERS)


@router.get(
    "/users",
    response_model=List[AdminUserRow],
    summary="Search Users",
    description=(
        "Search users by email, name or username (substring, case-insensitive); queries of 8+ characters also "
        "match an exact id. The total count is returned in the X-Total-Count header."
    ),
    response_description="Array of user rows, newest first.",
    responses={401: {"description": "Not signed in"}, 403: {"description": "Not an admin"}},
)
async def list_users(
    response: Response,
    repos: ReposDep,
    admin: AdminDep,
    q: Optional[str] = Query(default=None, max_length=200),
    role: Optional[str] = Query(default=None, description="USER, MODERATOR, ADMIN or SUPERADMIN"),
    limit: int = Query(default=200, ge=1, le=500),
    page: int = Query(default=1, ge=1),
) -> List[AdminUserRow]:
    """
    List users for the admin console.

    An unknown ``role`` value is ignored rather than rejected.
    """
    role_value = (role or "").strip().upper()
    if role_value not in Role.__members__:
        role_value = None

    users, total = await repos.users.search(
        q=(q or "").strip() or None,
        role=role_value,
        limit=limit,
        offset=(page - 1) * limit,
    )

    apply_no_store(response)
    response.headers["X-Total-Count"] = str(total)
    response.headers["X-Page"] = str(page)
    response.headers["X-Per-Page"] = str(limit)
    return [AdminUserRow.model_validate(user) for user in users]


@router.post(
    "/users/{user_id}/role",
    response_model=RoleUpdateResult,
    summary="Change User Role",
    description="Change a user's role. Only a SUPERADMIN may call this endpoint.",
    response_description="The updated user.",
    responses={
        400: {"description": "Invalid role"},
        403: {"description": "Not a SUPERADMIN"},
        404: {"description": "User not found"},
        409: {"description": "Would demote the caller or the last SUPERADMIN"},
    },
)
async def update_user_role(
    user_id: str, body: RoleUpdateRequest, response: Response, repos: ReposDep, admin: SuperAdminDep
) -> RoleUpdateResult:
    """
    Update a user's role.

    The caller cannot demote themselves and the last SUPERADMIN can never be
    demoted. The change is recorded in the audit log.
    """
    apply_no_store(response)

    new_role = (body.role or "").strip().upper()
    if new_role not in Role.__members__:
        raise _error(status.HTTP_400_BAD_REQUEST, "Invalid role")

    user: Optional[User] = await repos.users.get_by_id(user_id)
    if user is None:
        raise _error(status.HTTP_404_NOT_FOUND, "User not found")

    old_role = user.role
    demoting_superadmin = old_role == Role.SUPERADMIN.value and new_role != Role.SUPERADMIN.value
    if demoting_superadmin and user.id == admin.user_id:
        raise _error(status.HTTP_409_CONFLICT, "Refusing to demote self from SUPERADMIN")
    if demoting_superadmin and await repos.users.count_with_role(Role.SUPERADMIN.value) <= 1:
        raise _error(status.HTTP_409_CONFLICT, "Cannot demote the last SUPERADMIN")

    if old_role == new_role:
        return RoleUpdateResult(user=AdminUserRow.model_validate(user))

    user.role = new_role
    user = await repos.users.update(user)
    # Built before the audit write, which may roll the session back
    result = RoleUpdateResult(user=AdminUserRow.model_validate(user))

    await record_audit(repos, "user.role.update", admin.user_id, user_id, {"from": old_role, "to": new_role})
    log_admin_action("user.role.update", actor=admin.user_id, target=user_id, old_role=old_role, new_role=new_role)
    return result


@router.post(
    "/users/{user_id}/request-ban",
    response_model=RequestBanResult,
    summary="Set or Lift Request Ban",
    description="Ban a user from creating delivery requests until a given time, or lift the ban.",
    response_description="The user's ban fields after the change.",
    responses={400: {"description": "Invalid action or until"}, 404: {"description": "User not found"}},
)
async def set_request_ban(
    user_id: str, body: RequestBanBody, response: Response, repos: ReposDep, admin: AdminDep
) -> RequestBanResult:
    """
    Ban or unban a user from making requests.

    ``action=ban`` needs an ISO ``until`` timestamp; ``action=unban`` clears
    both the date and the reason.
    """
    apply_no_store(response)

    action = (body.action or "ban").strip().lower()
    if action not in ("ban", "unban"):
        raise _error(status.HTTP_400_BAD_REQUEST, "Invalid action")

    until = None
    if action == "ban":
        try:
            until = parse_instant(body.until) if body.until else None
        except ValueError:
            until = None
        if until is None:
            raise _error(status.HTTP_400_BAD_REQUEST, "Missing/invalid until (ISO date)")

    user: Optional[User] = await repos.users.get_by_id(user_id)
    if user is None:
        raise _error(status.HTTP_404_NOT_FOUND, "User not found")

    if action == "ban":
        user.request_ban_until = until
        user.request_ban_reason = clean_str(body.reason, 240)
    else:
        user.request_ban_until = None
        user.request_ban_reason = None
    user = await repos.users.update(user)

    log_admin_action(
        f"user.request_{action}", actor=admin.user_id, target=user.id, until=str(user.request_ban_until)
    )
    return RequestBanResult(
        user=RequestBanUser(
            id=user.id,
            request_ban_until=user.request_ban_until,
            request_ban_reason=user.request_ban_reason,
        )
    )
