"""
Public Catalog Search.

Turns loosely-typed query parameters into ``ListingFilters`` and builds the
search page for products or services. Out-of-range numbers are clamped
rather than rejected so that hand-edited URLs keep working.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Type

from fastapi import Query

from qwiksale.core.database.entities.products import Product
from qwiksale.core.database.entities.services import Service
from qwiksale.core.database.repositories.listings import ListingFilters, ListingRepository
from qwiksale.core.logging_config import get_logger
from qwiksale.core.models.domain.enums import ListingSort, ListingStatus
from qwiksale.core.models.io.catalog import CatalogPage, FacetCount, ProductItem, SellerSnapshot, ServiceItem
from qwiksale.core.models.io.common import total_pages
from qwiksale.server.core.constant import MAX_RESULT_WINDOW

logger = get_logger(__name__)

MAX_QUERY_LENGTH = 64
MAX_TOKENS = 5
DEFAULT_PAGE_SIZE = 24
MAX_PAGE_SIZE = 48
MAX_PAGE = 100_000
MAX_PRICE = 9_999_999

# Filter values the search form sends for "no filter"
WILDCARDS = frozenset({"any", "all", "*"})

# Aliases the search page uses for sort policies
SORT_ALIASES: Dict[str, ListingSort] = {
    "top": ListingSort.featured,
    "new": ListingSort.newest,
}

# Facet column -> response key
FACET_KEYS: Dict[str, str] = {
    "category": "categories",
    "subcategory": "subcategories",
    "brand": "brands",
    "condition": "conditions",
}

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """Parse a yes/no style query value; anything unrecognised is None."""
    if value is None:
        return None
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    return None


def tokenize(q: Optional[str]) -> List[str]:
    """Split a search query into at most five tokens longer than one character."""
    if not q:
        return []
    text = q.strip()[:MAX_QUERY_LENGTH]
    return [t for t in re.split(r"\s+", text) if len(t) > 1][:MAX_TOKENS]


def parse_int(value: Optional[str]) -> Optional[int]:
    """Lenient integer parsing for query values; garbage becomes None."""
    if value is None:
        return None
    try:
        return int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return None


def clean_filter(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = value.strip()
    if not text or text.lower() in WILDCARDS:
        return None
    return text


def clamp_price(value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    return max(0, min(MAX_PRICE, int(value)))


def parse_sort(value: Optional[str]) -> ListingSort:
    text = (value or "").strip().lower()
    if text in SORT_ALIASES:
        return SORT_ALIASES[text]
    try:
        return ListingSort(text)
    except ValueError:
        return ListingSort.newest


def parse_status(value: Optional[str]) -> Optional[str]:
    """Status filter: ACTIVE by default, ``ALL`` disables it."""
    text = (value or "").strip().upper()
    if text == "ALL":
        return None
    if text in ListingStatus.__members__:
        return text
    return ListingStatus.ACTIVE.value


def clamp_page(page: Optional[int]) -> int:
    return max(1, min(MAX_PAGE, page or 1))


def clamp_page_size(page_size: Optional[int], limit: Optional[int] = None) -> int:
    size = page_size if page_size is not None else limit
    if size is None:
        return DEFAULT_PAGE_SIZE
    return max(1, min(MAX_PAGE_SIZE, size))


@dataclass
class CatalogQuery:
    """Raw catalog query string values."""

    q: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    brand: Optional[str] = None
    condition: Optional[str] = None
    seller_id: Optional[str] = None
    user_id: Optional[str] = None
    seller: Optional[str] = None
    featured: Optional[str] = None
    verified_only: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    status: Optional[str] = None
    sort: Optional[str] = None
    page: Optional[int] = None
    page_size: Optional[int] = None
    limit: Optional[int] = None
    facets: Optional[str] = None

    def to_filters(self) -> ListingFilters:
        return ListingFilters(
            tokens=tokenize(self.q),
            category=clean_filter(self.category),
            subcategory=clean_filter(self.subcategory),
            brand=clean_filter(self.brand),
            condition=clean_filter(self.condition),
            seller_id=clean_filter(self.seller_id) or clean_filter(self.user_id),
            seller_username=clean_filter(self.seller),
            featured=parse_bool(self.featured),
            verified_only=parse_bool(self.verified_only) is True,
            min_price=clamp_price(self.min_price),
            max_price=clamp_price(self.max_price),
            status=parse_status(self.status),
        )


async def search_catalog(
    repo: ListingRepository,
    query: CatalogQuery,
    to_item: Callable,
    facet_top: int,
    page_model: Type[CatalogPage] = CatalogPage,
) -> CatalogPage:
    """
    Build one catalog search page.

    Facets are computed on the first page only (unless explicitly disabled)
    and the total count is skipped entirely for pages beyond the result
    window.

    Args:
        repo: Product or service repository
        query: Raw query values
        to_item: Maps an entity to its response item
        facet_top: Number of values reported per facet
        page_model: Concrete page class to build (e.g. ``ProductPage``)

    Returns:
        The populated search page
    """
    filters = query.to_filters()
    sort = parse_sort(query.sort)
    page = clamp_page(query.page)
    page_size = clamp_page_size(query.page_size, query.limit)
    offset = (page - 1) * page_size

    if offset > MAX_RESULT_WINDOW:
        logger.debug(f"Catalog request beyond result window: page={page} size={page_size}")
        return page_model(page=page, page_size=page_size, total=0, total_pages=1, sort=sort.value, items=[])

    # One extra row tells us whether another page exists
    rows, total = await repo.catalog_page(filters, sort, limit=page_size + 1, offset=offset)
    has_more = len(rows) > page_size
    items = [to_item(row) for row in rows[:page_size]]

    facets = None
    if page == 1 and parse_bool(query.facets) is not False:
        raw = await repo.facets(filters, top=facet_top)
        facets = {FACET_KEYS.get(name, name): [FacetCount(value=v, count=n) for v, n in values] for name, values in raw.items()}

    return page_model(
        page=page,
        page_size=page_size,
        total=total,
        total_pages=total_pages(total, page_size),
        sort=sort.value,
        items=items,
        facets=facets,
        has_more=has_more,
    )


def empty_page(query: CatalogQuery, page_model: Type[CatalogPage] = CatalogPage) -> CatalogPage:
    """Search page returned when the backing table does not exist."""
    page_size = clamp_page_size(query.page_size, query.limit)
    return page_model(
        page=clamp_page(query.page),
        page_size=page_size,
        total=0,
        total_pages=1,
        sort=parse_sort(query.sort).value,
        items=[],
    )


def page_window(query: CatalogQuery) -> Tuple[int, int]:
    """Clamped ``(page, page_size)`` for cache decisions."""
    return clamp_page(query.page), clamp_page_size(query.page_size, query.limit)


def catalog_query(
    q: Optional[str] = Query(default=None, description="Free-text search"),
    category: Optional[str] = Query(default=None),
    subcategory: Optional[str] = Query(default=None),
    brand: Optional[str] = Query(default=None),
    condition: Optional[str] = Query(default=None),
    seller_id: Optional[str] = Query(default=None, alias="sellerId"),
    user_id: Optional[str] = Query(default=None, alias="userId"),
    seller: Optional[str] = Query(default=None, description="Seller username"),
    featured: Optional[str] = Query(default=None),
    verified_only: Optional[str] = Query(default=None, alias="verifiedOnly"),
    min_price: Optional[str] = Query(default=None, alias="minPrice"),
    max_price: Optional[str] = Query(default=None, alias="maxPrice"),
    status: Optional[str] = Query(default=None, description="Listing status, ACTIVE by default; ALL disables"),
    sort: Optional[str] = Query(default=None, description="newest, price_asc, price_desc or featured"),
    page: Optional[str] = Query(default=None),
    page_size: Optional[str] = Query(default=None, alias="pageSize"),
    limit: Optional[str] = Query(default=None, description="Alias of pageSize"),
    facets: Optional[str] = Query(default=None, description="Set to false to skip facet counts"),
) -> CatalogQuery:
    """Collect catalog query parameters; numbers are parsed leniently."""
    return CatalogQuery(
        q=q,
        category=category,
        subcategory=subcategory,
        brand=brand,
        condition=condition,
        seller_id=seller_id,
        user_id=user_id,
        seller=seller,
        featured=featured,
        verified_only=verified_only,
        min_price=parse_int(min_price),
        max_price=parse_int(max_price),
        status=status,
        sort=sort,
        page=parse_int(page),
        page_size=parse_int(page_size),
        limit=parse_int(limit),
        facets=facets,
    )


def _seller(entity) -> SellerSnapshot:
    return SellerSnapshot(
        id=entity.seller_id,
        name=entity.seller_name,
        location=entity.seller_location,
        member_since=entity.seller_member_since,
        rating=entity.seller_rating,
        sales=entity.seller_sales,
    )


def to_product_item(product: Product) -> ProductItem:
    return ProductItem(
        id=product.id,
        name=product.name,
        category=product.category,
        subcategory=product.subcategory,
        brand=product.brand,
        condition=product.condition,
        price=product.price,
        image=product.image,
        location=product.location,
        status=product.status,
        featured=bool(product.featured),
        created_at=product.created_at,
        seller=_seller(product),
    )


def to_service_item(service: Service) -> ServiceItem:
    return ServiceItem(
        id=service.id,
        name=service.name,
        description=service.description,
        category=service.category,
        subcategory=service.subcategory,
        price=service.price,
        rate_type=service.rate_type,
        service_area=service.service_area,
        availability=service.availability,
        image=service.image,
        location=service.location,
        status=service.status,
        featured=bool(service.featured),
        created_at=service.created_at,
        seller=_seller(service),
    )
