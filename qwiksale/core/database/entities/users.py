"""
User entity models.

Accounts for buyers, sellers and staff. The role column drives admin access
and the request-ban columns hold an admin's pending ban request.
"""

from __future__ import annotations

from typing import Optional

from pydantic import NaiveDatetime
from sqlmodel import Field

from qwiksale.core.models.domain.enums import Role, SubscriptionTier

from ..base import Base, new_id
from ..utils import utc_now


class UserBase(Base):
    """Base fields for marketplace accounts."""

    email: Optional[str] = Field(default=None, max_length=254, unique=True, index=True)
    name: Optional[str] = Field(default=None, max_length=120)
    username: Optional[str] = Field(default=None, max_length=64, unique=True, index=True)
    image: Optional[str] = Field(default=None)

    role: str = Field(default=Role.USER.value, max_length=16, index=True)
    subscription: str = Field(default=SubscriptionTier.FREE.value, max_length=16)
    verified: bool = Field(default=False)
    email_verified: Optional[NaiveDatetime] = Field(default=None, description="When the email was confirmed")

    phone: Optional[str] = Field(default=None, max_length=20)
    location: Optional[str] = Field(default=None, max_length=120)
    rating: Optional[float] = Field(default=None)
    sales: int = Field(default=0)

    # Pending ban request raised by an admin
    request_ban_until: Optional[NaiveDatetime] = Field(default=None)
    request_ban_reason: Optional[str] = Field(default=None, max_length=240)


class User(UserBase, table=True):
    """Marketplace account.

    Table: users
    """

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)

    created_at: NaiveDatetime = Field(default_factory=utc_now, index=True)
    updated_at: NaiveDatetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role})"
