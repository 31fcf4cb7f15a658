"""
Audit log entity models.

Append-only record of privileged admin changes (role updates and the like).
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import NaiveDatetime
from sqlmodel import JSON, Field

from ..base import Base, new_id
from ..utils import utc_now


class AuditLog(Base, table=True):
    """Admin audit entry.

    Table: audit_logs
    """

    __tablename__ = "audit_logs"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    action: str = Field(max_length=64, index=True)
    actor_user_id: Optional[str] = Field(default=None, max_length=64, index=True)
    target_user_id: Optional[str] = Field(default=None, max_length=64, index=True)
    meta: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)

    created_at: NaiveDatetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"AuditLog(id={self.id}, action={self.action})"
