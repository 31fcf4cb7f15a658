"""
User repository.

Lookups used by the admin guard and carrier resolution, plus the admin user
search and the counters behind the role-change safety checks.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.users import User
from .base import SQLRepository


class UserRepository(SQLRepository[User]):
    """Repository for user data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Find a user by email, ignoring case."""
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def search(
        self,
        q: Optional[str] = None,
        role: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Tuple[List[User], int]:
        """Search users for the admin console.

        ``q`` matches email, name or username case-insensitively; values of
        eight or more characters also match an exact id.

        Returns:
            The requested page of users (newest first) and the total match count
        """
        conditions = []
        if q:
            text_match = [
                User.email.icontains(q, autoescape=True),
                User.name.icontains(q, autoescape=True),
                User.username.icontains(q, autoescape=True),
            ]
            if len(q) >= 8:
                text_match.append(User.id == q)
            conditions.append(or_(*text_match))
        if role:
            conditions.append(User.role == role)

        stmt = select(User)
        for condition in conditions:
            stmt = stmt.where(condition)
        stmt = stmt.order_by(User.created_at.desc(), User.id.desc()).limit(limit).offset(offset)

        result = await self.session.execute(stmt)
        total = await self.count(*conditions)
        return list(result.scalars().all()), total

    async def count_with_role(self, role: str) -> int:
        return await self.count(User.role == role)

    async def count_created_between(self, start: datetime, end: datetime) -> int:
        return await self.count(User.created_at >= start, User.created_at < end)
