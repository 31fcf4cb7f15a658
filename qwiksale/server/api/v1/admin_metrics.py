"""
Admin Metrics Endpoint.

Dashboard totals and the seven-day activity series.
"""

from fastapi import APIRouter, Response

from qwiksale.core.models.io.metrics import AdminMetrics
from qwiksale.server.responses import apply_no_store
from qwiksale.server.services.deps import AdminDep, ReposDep
from qwiksale.server.services.metrics import collect_metrics

router = APIRouter()


@router.get(
    "/metrics",
    response_model=AdminMetrics,
    summary="Dashboard Metrics",
    description="Totals for users, products, services and carriers plus daily counts for the last 7 days.",
    response_description="Metrics object.",
    responses={401: {"description": "Not signed in"}, 403: {"description": "Not an admin"}},
)
async def get_admin_metrics(response: Response, repos: ReposDep, admin: AdminDep) -> AdminMetrics:
    apply_no_store(response)
    return await collect_metrics(repos)
