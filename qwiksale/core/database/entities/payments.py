"""Payment entity. Rows are written by the payment flow; this backend only reads and purges them."""

from __future__ import annotations

from typing import Optional

from pydantic import NaiveDatetime
from sqlmodel import Field

from ..base import Base, new_id
from ..utils import utc_now


class Payment(Base, table=True):
    """Payment record.

    Table: payments
    """

    __tablename__ = "payments"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: Optional[str] = Field(default=None, foreign_key="users.id", index=True, max_length=64)
    product_id: Optional[str] = Field(default=None, foreign_key="products.id", index=True, max_length=64)
    amount: int = Field(default=0)
    status: str = Field(default="PENDING", max_length=16)
    method: str = Field(default="MPESA", max_length=16)

    created_at: NaiveDatetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"Payment(id={self.id}, amount={self.amount}, status={self.status})"
