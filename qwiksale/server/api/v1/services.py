"""
Public Service Listing Endpoint.

Same contract as the product search. Deployments without a services table
get an empty page instead of an error.
"""

from fastapi import APIRouter, Response

from qwiksale.core.database.repositories import SqlRepoBundle
from qwiksale.core.logging_config import get_logger
from qwiksale.core.models.io.catalog import ServicePage
from qwiksale.server.responses import apply_public_cache
from qwiksale.server.services.catalog import CatalogQuery, empty_page, search_catalog, to_service_item
from qwiksale.server.services.deps import CatalogQueryDep, ReposDep

logger = get_logger(__name__)

router = APIRouter()

SERVICE_FACET_TOP = 10


async def search_services(repos: SqlRepoBundle, query: CatalogQuery) -> ServicePage:
    if not await repos.services.is_available():
        logger.warning("Services table not found; returning an empty service page")
        return empty_page(query, page_model=ServicePage)
    return await search_catalog(
        repos.services, query, to_service_item, facet_top=SERVICE_FACET_TOP, page_model=ServicePage
    )


@router.get(
    "/services",
    response_model=ServicePage,
    summary="Search Services",
    description=(
        "Search active services. q tokens match name, description, category or subcategory. "
        "Facets (categories, subcategories) are returned on page 1."
    ),
    response_description="Envelope of services with sort, facets and hasMore.",
)
async def list_services(response: Response, repos: ReposDep, query: CatalogQueryDep) -> ServicePage:
    page = await search_services(repos, query)
    apply_public_cache(response)
    response.headers["X-Total-Count"] = str(page.total)
    return page
