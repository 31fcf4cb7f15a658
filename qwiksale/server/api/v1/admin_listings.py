"""
Admin Listings Endpoint.

One merged, paginated table of products and services for the admin console.
"""

from typing import Optional

from fastapi import APIRouter, Query, Response

from qwiksale.core.database.repositories.listings import AdminListingFilters
from qwiksale.core.models.domain.enums import ListingKind
from qwiksale.core.models.io.common import Envelope
from qwiksale.core.models.io.listings import AdminListingRow
from qwiksale.server.responses import apply_no_store
from qwiksale.server.services.catalog import parse_bool, parse_sort
from qwiksale.server.services.deps import AdminDep, ReposDep
from qwiksale.server.services.listings import list_admin_listings

router = APIRouter()


@router.get(
    "/listings",
    response_model=Envelope[AdminListingRow],
    summary="List Products and Services",
    description="Merged admin view over products and services with shared filters and sort.",
    response_description="Envelope of normalized listing rows.",
    responses={401: {"description": "Not signed in"}, 403: {"description": "Not an admin"}},
)
async def get_admin_listings(
    response: Response,
    repos: ReposDep,
    admin: AdminDep,
    q: Optional[str] = Query(default=None, max_length=200, description="Matches name, seller name, category or id"),
    kind: str = Query(default="all", description="all, product or service"),
    status: Optional[str] = Query(default=None, description="Listing status filter"),
    featured: Optional[str] = Query(default=None, description="true/false"),
    sort: str = Query(default="newest", description="newest, price_asc, price_desc or featured"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, ge=1, le=200, alias="pageSize"),
) -> Envelope[AdminListingRow]:
    """
    List products and services together.

    With ``kind=all`` each page is shared between the two sources, and either
    source backfills when the other runs out. Unknown ``kind`` values list
    both sources.
    """
    apply_no_store(response)

    kind_value = kind.strip().lower()
    if kind_value not in ListingKind.__members__:
        kind_value = None

    filters = AdminListingFilters(
        q=(q or "").strip() or None,
        status=(status or "").strip().upper() or None,
        featured=parse_bool(featured),
    )
    return await list_admin_listings(
        repos,
        page=page,
        page_size=page_size,
        kind=kind_value,
        sort=parse_sort(sort),
        filters=filters,
    )
