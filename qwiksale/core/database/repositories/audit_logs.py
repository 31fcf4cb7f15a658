"""Audit log repository. Entries are append-only."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.audit_logs import AuditLog
from .base import SQLRepository


class AuditLogRepository(SQLRepository[AuditLog]):
    """Repository for admin audit entries."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AuditLog)

    async def record(
        self,
        action: str,
        actor_user_id: Optional[str],
        target_user_id: Optional[str] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> AuditLog:
        """Append an audit entry."""
        return await self.create(
            AuditLog(action=action, actor_user_id=actor_user_id, target_user_id=target_user_id, meta=meta or {})
        )

    async def for_target(self, target_user_id: str) -> List[AuditLog]:
        stmt = (
            select(AuditLog)
            .where(AuditLog.target_user_id == target_user_id)
            .order_by(AuditLog.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
