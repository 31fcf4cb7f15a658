"""
Unified Search Endpoint.

The endpoint the infinite-scroll search page pages through. It delegates to
the product or service search and only allows edge caching for anonymous
requests on the first few pages.
"""

from typing import Union

from fastapi import APIRouter, Query, Request, Response

from qwiksale.core.models.domain.enums import ListingKind
from qwiksale.core.models.io.catalog import ProductPage, ServicePage
from qwiksale.server.responses import apply_no_store, apply_public_cache
from qwiksale.server.services.auth import get_session_user
from qwiksale.server.services.catalog import page_window
from qwiksale.server.services.deps import CatalogQueryDep, ReposDep

from .products import search_products
from .services import search_services

router = APIRouter()

# Deeper pages and personalised requests bypass the edge cache
CACHEABLE_MAX_PAGE = 10
CACHEABLE_MAX_PAGE_SIZE = 48


@router.get(
    "/search",
    response_model=None,
    summary="Search Listings",
    description=(
        "Search products (type=product, default) or services (type=service). Accepts the same filters as "
        "the listing endpoints; sort also accepts top and new."
    ),
    response_description="Envelope of products or services with sort, facets and hasMore.",
    responses={200: {"model": ProductPage}},
)
async def search(
    request: Request,
    response: Response,
    repos: ReposDep,
    query: CatalogQueryDep,
    type: str = Query(default="product", description="product or service"),
) -> Union[ProductPage, ServicePage]:
    """
    Search products or services.

    The page is serialized as returned; the concrete model depends on ``type``.
    """
    if type.strip().lower() == ListingKind.service.value:
        page = await search_services(repos, query)
    else:
        page = await search_products(repos, query)

    page_number, page_size = page_window(query)
    anonymous = get_session_user(request) is None
    if anonymous and page_number <= CACHEABLE_MAX_PAGE and page_size <= CACHEABLE_MAX_PAGE_SIZE:
        apply_public_cache(response)
    else:
        apply_no_store(response)
    response.headers["X-Total-Count"] = str(page.total)
    return page
