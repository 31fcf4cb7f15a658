"""
Tests for the admin user management endpoints.
"""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from qwiksale.core.database.entities.audit_logs import AuditLog
from qwiksale.core.database.repositories import SqlRepoBundle
from qwiksale.core.database.repositories.audit_logs import AuditLogRepository
from qwiksale.core.database.repositories.users import UserRepository
from qwiksale.core.models.domain.enums import Role
from test.unit_test.factories import identity_headers, make_user

ADMIN = "/api/admin"


class TestAdminGuard:
    @pytest.mark.asyncio
    async def test_anonymous_is_401(self, client: AsyncClient):
        response = await client.get(f"{ADMIN}/users")
        assert response.status_code == 401
        assert response.json()["detail"] == "Unauthorized"
        assert "no-store" in response.headers["cache-control"]

    @pytest.mark.asyncio
    async def test_regular_user_is_403(self, client: AsyncClient, repos: SqlRepoBundle):
        user = await make_user(repos, email="buyer@qwiksale.test")
        response = await client.get(f"{ADMIN}/users", headers=identity_headers(user))
        assert response.status_code == 403
        assert response.json()["detail"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_allowlisted_email_is_admin(self, client: AsyncClient, allowlist_headers):
        response = await client.get(f"{ADMIN}/users", headers=allowlist_headers)
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_allowlist_is_case_insensitive(self, client: AsyncClient, allowlist_headers):
        headers = {k: v.upper() for k, v in allowlist_headers.items()}
        response = await client.get(f"{ADMIN}/users", headers=headers)
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_db_role_admin(self, client: AsyncClient, admin_headers):
        response = await client.get(f"{ADMIN}/users", headers=admin_headers)
        assert response.status_code == 200


class TestListUsers:
    @pytest.mark.asyncio
    async def test_search_and_headers(self, client: AsyncClient, repos: SqlRepoBundle, admin_headers):
        await make_user(repos, email="wanjiku@qwiksale.test", name="Wanjiku", username="wanjiku")
        await make_user(repos, email="otieno@qwiksale.test", name="Otieno")

        response = await client.get(f"{ADMIN}/users", params={"q": "WANJ"}, headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert [row["email"] for row in body] == ["wanjiku@qwiksale.test"]
        assert body[0]["username"] == "wanjiku"
        assert "createdAt" in body[0]
        assert response.headers["x-total-count"] == "1"
        assert response.headers["x-page"] == "1"
        assert response.headers["x-per-page"] == "200"
        assert "no-store" in response.headers["cache-control"]

    @pytest.mark.asyncio
    async def test_exact_id_match(self, client: AsyncClient, repos: SqlRepoBundle, admin_headers):
        user = await make_user(repos, email="kamau@qwiksale.test")
        response = await client.get(f"{ADMIN}/users", params={"q": user.id}, headers=admin_headers)
        assert [row["id"] for row in response.json()] == [user.id]

    @pytest.mark.asyncio
    async def test_role_filter_and_unknown_role(self, client: AsyncClient, repos: SqlRepoBundle, admin_headers):
        await make_user(repos, role=Role.MODERATOR.value)

        moderators = await client.get(f"{ADMIN}/users", params={"role": "moderator"}, headers=admin_headers)
        assert [row["role"] for row in moderators.json()] == ["MODERATOR"]

        everyone = await client.get(f"{ADMIN}/users", params={"role": "wizard"}, headers=admin_headers)
        assert everyone.headers["x-total-count"] == "2"

    @pytest.mark.asyncio
    async def test_pagination(self, client: AsyncClient, repos: SqlRepoBundle, admin_headers):
        for _ in range(3):
            await make_user(repos)

        response = await client.get(f"{ADMIN}/users", params={"limit": 2, "page": 2}, headers=admin_headers)

        assert len(response.json()) == 2
        assert response.headers["x-total-count"] == "4"
        assert response.headers["x-page"] == "2"

    @pytest.mark.asyncio
    async def test_limit_out_of_range_is_422(self, client: AsyncClient, admin_headers):
        response = await client.get(f"{ADMIN}/users", params={"limit": 0}, headers=admin_headers)
        assert response.status_code == 422


class TestUpdateRole:
    @pytest.mark.asyncio
    async def test_requires_superadmin(self, client: AsyncClient, repos: SqlRepoBundle, admin_headers):
        target = await make_user(repos)
        response = await client.post(f"{ADMIN}/users/{target.id}/role", json={"role": "ADMIN"}, headers=admin_headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_promotes_and_audits(self, client: AsyncClient, repos: SqlRepoBundle, superadmin_user, superadmin_headers):
        target = await make_user(repos)

        response = await client.post(
            f"{ADMIN}/users/{target.id}/role", json={"role": "moderator"}, headers=superadmin_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["user"]["role"] == "MODERATOR"

        entries = await repos.audit_logs.list(filters={"target_user_id": target.id})
        assert len(entries) == 1
        assert entries[0].action == "user.role.update"
        assert entries[0].actor_user_id == superadmin_user.id
        assert entries[0].meta == {"from": "USER", "to": "MODERATOR"}

    @pytest.mark.asyncio
    async def test_same_role_does_not_audit(self, client: AsyncClient, repos: SqlRepoBundle, superadmin_headers):
        target = await make_user(repos, role=Role.ADMIN.value)

        response = await client.post(f"{ADMIN}/users/{target.id}/role", json={"role": "ADMIN"}, headers=superadmin_headers)

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "ADMIN"
        assert await repos.audit_logs.count(AuditLog.target_user_id == target.id) == 0

    @pytest.mark.asyncio
    async def test_invalid_role(self, client: AsyncClient, repos: SqlRepoBundle, superadmin_headers):
        target = await make_user(repos)
        response = await client.post(f"{ADMIN}/users/{target.id}/role", json={"role": "OWNER"}, headers=superadmin_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid role"

    @pytest.mark.asyncio
    async def test_unknown_user(self, client: AsyncClient, superadmin_headers):
        response = await client.post(f"{ADMIN}/users/missing/role", json={"role": "ADMIN"}, headers=superadmin_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"

    @pytest.mark.asyncio
    async def test_cannot_demote_self(self, client: AsyncClient, repos: SqlRepoBundle, superadmin_user, superadmin_headers):
        await make_user(repos, role=Role.SUPERADMIN.value)
        response = await client.post(
            f"{ADMIN}/users/{superadmin_user.id}/role", json={"role": "ADMIN"}, headers=superadmin_headers
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "Refusing to demote self from SUPERADMIN"

    @pytest.mark.asyncio
    async def test_cannot_demote_last_superadmin(self, client: AsyncClient, repos: SqlRepoBundle, superadmin_headers):
        other = await make_user(repos, role=Role.SUPERADMIN.value)

        with patch.object(UserRepository, "count_with_role", AsyncMock(return_value=1)):
            response = await client.post(
                f"{ADMIN}/users/{other.id}/role", json={"role": "USER"}, headers=superadmin_headers
            )

        assert response.status_code == 409
        assert response.json()["detail"] == "Cannot demote the last SUPERADMIN"

    @pytest.mark.asyncio
    async def test_demoting_one_of_several_superadmins(self, client: AsyncClient, repos: SqlRepoBundle, superadmin_headers):
        other = await make_user(repos, role=Role.SUPERADMIN.value)
        response = await client.post(f"{ADMIN}/users/{other.id}/role", json={"role": "USER"}, headers=superadmin_headers)
        assert response.status_code == 200
        assert response.json()["user"]["role"] == "USER"

    @pytest.mark.asyncio
    async def test_audit_failure_does_not_fail_the_change(
        self, client: AsyncClient, repos: SqlRepoBundle, superadmin_headers
    ):
        target = await make_user(repos)

        with patch.object(AuditLogRepository, "record", AsyncMock(side_effect=RuntimeError("audit down"))):
            response = await client.post(
                f"{ADMIN}/users/{target.id}/role", json={"role": "ADMIN"}, headers=superadmin_headers
            )

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "ADMIN"


class TestRequestBan:
    @pytest.mark.asyncio
    async def test_ban_and_unban(self, client: AsyncClient, repos: SqlRepoBundle, admin_headers):
        target = await make_user(repos)

        banned = await client.post(
            f"{ADMIN}/users/{target.id}/request-ban",
            json={"action": "ban", "until": "2030-01-01T00:00:00Z", "reason": "  Spam requests  "},
            headers=admin_headers,
        )
        assert banned.status_code == 200
        assert banned.json() == {
            "ok": True,
            "user": {
                "id": target.id,
                "requestBanUntil": "2030-01-01T00:00:00.000Z",
                "requestBanReason": "Spam requests",
            },
        }

        lifted = await client.post(
            f"{ADMIN}/users/{target.id}/request-ban", json={"action": "unban"}, headers=admin_headers
        )
        assert lifted.status_code == 200
        assert lifted.json()["user"]["requestBanUntil"] is None
        assert lifted.json()["user"]["requestBanReason"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body, detail",
        [
            ({"action": "mute"}, "Invalid action"),
            ({"action": "ban"}, "Missing/invalid until (ISO date)"),
            ({"action": "ban", "until": "someday"}, "Missing/invalid until (ISO date)"),
            ({"action": "ban", "until": "100000000000000000000"}, "Missing/invalid until (ISO date)"),
        ],
    )
    async def test_invalid_body(self, client: AsyncClient, repos: SqlRepoBundle, admin_headers, body, detail):
        target = await make_user(repos)
        response = await client.post(f"{ADMIN}/users/{target.id}/request-ban", json=body, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == detail

    @pytest.mark.asyncio
    async def test_unknown_user(self, client: AsyncClient, admin_headers):
        response = await client.post(
            f"{ADMIN}/users/missing/request-ban", json={"action": "unban"}, headers=admin_headers
        )
        assert response.status_code == 404
