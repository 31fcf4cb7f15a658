"""
Support entity models.

This module contains the two user-generated moderation inputs:
support tickets and listing reports.
"""

from __future__ import annotations

from typing import Optional

from pydantic import NaiveDatetime
from sqlmodel import Field

from ..base import Base, new_id
from ..utils import utc_now


class SupportTicket(Base, table=True):
    """Support request raised by a user.

    Table: support_tickets
    """

    __tablename__ = "support_tickets"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    reporter_id: Optional[str] = Field(default=None, foreign_key="users.id", index=True, max_length=64)
    type: str = Field(default="OTHER", max_length=32)
    status: str = Field(default="OPEN", max_length=16)
    subject: Optional[str] = Field(default=None, max_length=200)
    message: str = Field(default="")

    created_at: NaiveDatetime = Field(default_factory=utc_now)


class Report(Base, table=True):
    """Listing report.

    Table: reports
    """

    __tablename__ = "reports"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: Optional[str] = Field(default=None, foreign_key="users.id", index=True, max_length=64)
    listing_id: str = Field(max_length=64, index=True)
    listing_type: str = Field(default="product", max_length=16)
    reason: str = Field(max_length=64)
    details: Optional[str] = Field(default=None)

    created_at: NaiveDatetime = Field(default_factory=utc_now)
