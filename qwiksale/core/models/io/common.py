"""
Shared I/O building blocks.

All API payloads use camelCase keys on the wire while the Python side keeps
snake_case attribute names. Timestamps are stored as naive UTC and rendered as
ISO-8601 strings with millisecond precision and a trailing ``Z``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Render a stored timestamp as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


UtcDatetime = Annotated[datetime, PlainSerializer(to_iso, return_type=str)]


class CamelModel(BaseModel):
    """Base model emitting camelCase JSON and accepting either key style."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


ItemT = TypeVar("ItemT")


class Envelope(CamelModel, Generic[ItemT]):
    """Paginated response: ``{page, pageSize, total, totalPages, items}``."""

    page: int = Field(description="1-based page number")
    page_size: int = Field(description="Requested page size")
    total: int = Field(description="Total matching rows across all pages")
    total_pages: int = Field(description="Number of pages, never less than 1")
    items: List[ItemT] = Field(default_factory=list)


def total_pages(total: int, page_size: int) -> int:
    """Page count for ``total`` rows; an empty result still has one page."""
    if page_size <= 0:
        return 1
    return max(1, -(-total // page_size))


class OkResponse(CamelModel):
    ok: bool = True
