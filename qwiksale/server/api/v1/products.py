"""
Public Product Listing Endpoint.

Filtered, sorted and paginated product search with facet counts on the first
page. Responses may be cached at the edge.
"""

from fastapi import APIRouter, Response

from qwiksale.core.database.repositories import SqlRepoBundle
from qwiksale.core.models.io.catalog import ProductPage
from qwiksale.server.responses import apply_public_cache
from qwiksale.server.services.catalog import CatalogQuery, search_catalog, to_product_item
from qwiksale.server.services.deps import CatalogQueryDep, ReposDep

router = APIRouter()

PRODUCT_FACET_TOP = 6


async def search_products(repos: SqlRepoBundle, query: CatalogQuery) -> ProductPage:
    return await search_catalog(
        repos.products, query, to_product_item, facet_top=PRODUCT_FACET_TOP, page_model=ProductPage
    )


@router.get(
    "/products",
    response_model=ProductPage,
    summary="Search Products",
    description=(
        "Search active products. q is split into up to 5 tokens; every token must match name, brand, "
        "category, subcategory or seller name. Facets (categories, brands, conditions) are returned on page 1."
    ),
    response_description="Envelope of products with sort, facets and hasMore.",
)
async def list_products(response: Response, repos: ReposDep, query: CatalogQueryDep) -> ProductPage:
    """
    List products.

    The total match count is also exposed in the ``X-Total-Count`` header.
    """
    page = await search_products(repos, query)
    apply_public_cache(response)
    response.headers["X-Total-Count"] = str(page.total)
    return page
