"""
API I/O models.

Pydantic schemas that define the contract between the HTTP layer and its
clients. Every model renders camelCase keys on the wire.
"""

from .common import CamelModel, Envelope, OkResponse, UtcDatetime, to_iso, total_pages

__all__ = [
    "CamelModel",
    "Envelope",
    "OkResponse",
    "UtcDatetime",
    "to_iso",
    "total_pages",
]
