"""Favorite entity: a user's saved product."""

from __future__ import annotations

from pydantic import NaiveDatetime
from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id
from ..utils import utc_now


class Favorite(Base, table=True):
    """Saved product.

    Table: favorites
    """

    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("user_id", "product_id", name="uq_favorites_user_product"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    product_id: str = Field(foreign_key="products.id", index=True, max_length=64)

    created_at: NaiveDatetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"Favorite(user_id={self.user_id}, product_id={self.product_id})"
