"""
Admin Dashboard Metrics.

Totals for users, listings and carriers plus daily signup/listing counts
for the last seven UTC days (oldest first, today included).
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from qwiksale.core.database.repositories import SqlRepoBundle
from qwiksale.core.database.utils import utc_now
from qwiksale.core.logging_config import get_logger
from qwiksale.core.models.io.metrics import AdminMetrics, CarrierOverview, DailyCounts, MetricsTotals
from qwiksale.server.core.constant import CARRIER_LIVE_CUTOFF_SECONDS

logger = get_logger(__name__)

DAYS = 7


def day_starts(now: datetime, days: int = DAYS) -> List[datetime]:
    """Midnight of each of the last ``days`` days, oldest first."""
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


async def carrier_overview(repos: SqlRepoBundle, now: datetime) -> Optional[CarrierOverview]:
    carriers = repos.carriers
    return CarrierOverview(
        total=await carriers.count(),
        active_online=await carriers.count_active_online(now, CARRIER_LIVE_CUTOFF_SECONDS),
        suspended=await carriers.count_suspended(now),
        banned=await carriers.count_banned(),
        by_tier=await carriers.count_by("plan_tier"),
        by_verification=await carriers.count_by("verification_status"),
        live_cutoff_seconds=CARRIER_LIVE_CUTOFF_SECONDS,
    )


async def collect_metrics(repos: SqlRepoBundle, now: Optional[datetime] = None) -> AdminMetrics:
    """
    Gather the admin dashboard numbers.

    Services count as zero when the services table does not exist.

    Args:
        repos: Repository bundle for the request
        now: Reference time (naive UTC), defaults to the current time

    Returns:
        Totals and the per-day series
    """
    now = now or utc_now()
    services_available = await repos.services.is_available()
    if not services_available:
        logger.warning("Services table not found; service metrics reported as zero")

    totals = MetricsTotals(
        users=await repos.users.count(),
        products=await repos.products.count(),
        services=await repos.services.count() if services_available else 0,
        reveals=None,
        carriers=await carrier_overview(repos, now),
    )

    last7d: List[DailyCounts] = []
    for start in day_starts(now):
        end = start + timedelta(days=1)
        last7d.append(
            DailyCounts(
                date=start.date().isoformat(),
                users=await repos.users.count_created_between(start, end),
                products=await repos.products.count_created_between(start, end),
                services=await repos.services.count_created_between(start, end) if services_available else 0,
            )
        )

    return AdminMetrics(totals=totals, last7d=last7d)
