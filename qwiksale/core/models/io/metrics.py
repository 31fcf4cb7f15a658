"""Admin dashboard metrics I/O models."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field

from .common import CamelModel


class CarrierOverview(CamelModel):
    total: int = 0
    active_online: int = 0
    suspended: int = 0
    banned: int = 0
    by_tier: Dict[str, int] = {}
    by_verification: Dict[str, int] = {}
    live_cutoff_seconds: int = 90


class MetricsTotals(CamelModel):
    users: int = 0
    products: int = 0
    services: int = 0
    reveals: Optional[int] = None
    carriers: Optional[CarrierOverview] = None


class DailyCounts(CamelModel):
    date: str
    users: int = 0
    products: int = 0
    services: int = 0


class AdminMetrics(CamelModel):
    totals: MetricsTotals
    last7d: List[DailyCounts] = Field(alias="last7d")
