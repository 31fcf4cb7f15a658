"""
Unit tests for the admin audit helper.
"""

from unittest.mock import AsyncMock, patch

import pytest

from qwiksale.core.database.repositories import SqlRepoBundle
from qwiksale.core.database.repositories.audit_logs import AuditLogRepository
from qwiksale.server.services.audit import record_audit

MODULE = "qwiksale.server.services.audit"


@pytest.mark.asyncio
async def test_record_audit_writes_row(repos: SqlRepoBundle):
    written = await record_audit(repos, "user.role.update", "admin-1", "u1", {"from": "USER", "to": "ADMIN"})

    assert written is True
    entries = await repos.audit_logs.for_target("u1")
    assert len(entries) == 1
    assert entries[0].action == "user.role.update"
    assert entries[0].actor_user_id == "admin-1"
    assert entries[0].meta == {"from": "USER", "to": "ADMIN"}


@pytest.mark.asyncio
async def test_record_audit_failure_is_logged(repos: SqlRepoBundle):
    with (
        patch.object(AuditLogRepository, "record", AsyncMock(side_effect=RuntimeError("audit down"))),
        patch(f"{MODULE}.logger") as mock_logger,
    ):
        written = await record_audit(repos, "SERVICE_FEATURE_TOGGLE", "admin-1", None, {"serviceId": "s1"})

    assert written is False
    mock_logger.warning.assert_called_once()
    assert "audit down" in mock_logger.warning.call_args[0][0]
    assert await repos.audit_logs.count() == 0
