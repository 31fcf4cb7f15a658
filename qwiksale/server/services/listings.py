"""
Admin Listings Aggregator.

Merges products and services into one paginated, ranked list for the admin
console.

Each page of ``n`` rows is split between the two sources: products get
``n // 2`` slots and services the rest. When one source runs dry the other
fills the remaining slots. Offsets are derived from how many rows of each
source all earlier pages consumed, so paging walks both tables without
gaps or repeats and the page totals add up to the combined count.

The services table is optional. When it is missing the aggregator logs a
warning and pages through products alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple, Union

from qwiksale.core.database.entities.products import Product
from qwiksale.core.database.entities.services import Service
from qwiksale.core.database.repositories import SqlRepoBundle
from qwiksale.core.database.repositories.listings import AdminListingFilters
from qwiksale.core.logging_config import get_logger
from qwiksale.core.models.domain.enums import ListingKind, ListingSort
from qwiksale.core.models.io.common import Envelope, total_pages
from qwiksale.core.models.io.listings import AdminListingRow

logger = get_logger(__name__)


@dataclass(frozen=True)
class PageSlice:
    """Offset and row count to read from one source for one page."""

    offset: int
    take: int


def consumed_before(page_index: int, share: int, other_share: int, own_total: int, other_total: int) -> int:
    """Rows of one source consumed by the first ``page_index`` pages.

    Args:
        page_index: Number of full pages already served
        share: Slots per page reserved for this source
        other_share: Slots per page reserved for the other source
        own_total: Rows available in this source
        other_total: Rows available in the other source
    """
    page_size = share + other_share
    if page_index * share > own_total:
        # This source ran dry; everything it had is consumed
        return own_total
    if page_index * other_share > other_total:
        # The other source ran dry and this one backfilled its slots
        return min(own_total, page_index * page_size - other_total)
    return page_index * share


def split_page(page: int, page_size: int, product_total: int, service_total: int) -> Tuple[PageSlice, PageSlice]:
    """Work out which product and service rows make up ``page``."""
    product_share = page_size // 2
    service_share = page_size - product_share
    index = page - 1

    def _slice(share: int, other_share: int, own_total: int, other_total: int) -> PageSlice:
        start = consumed_before(index, share, other_share, own_total, other_total)
        end = consumed_before(index + 1, share, other_share, own_total, other_total)
        return PageSlice(offset=start, take=max(0, end - start))

    return (
        _slice(product_share, service_share, product_total, service_total),
        _slice(service_share, product_share, service_total, product_total),
    )


def to_row(entity: Union[Product, Service], kind: ListingKind) -> AdminListingRow:
    price = entity.price if isinstance(entity.price, int) and not isinstance(entity.price, bool) else None
    return AdminListingRow(
        id=entity.id,
        kind=kind,
        name=entity.name,
        price=price,
        featured=bool(entity.featured),
        status=entity.status,
        category=entity.category,
        created_at=entity.created_at,
        seller_name=entity.seller_name,
        seller_id=entity.seller_id,
    )


def sort_rows(rows: List[AdminListingRow], sort: ListingSort) -> None:
    """Order merged rows in place the same way each source query is ordered."""
    # Stable sorts applied from the last tiebreak to the primary key
    rows.sort(key=lambda r: r.id, reverse=True)
    rows.sort(key=lambda r: r.created_at or datetime.min, reverse=True)
    if sort == ListingSort.price_asc:
        rows.sort(key=lambda r: (r.price is None, r.price or 0))
    elif sort == ListingSort.price_desc:
        rows.sort(key=lambda r: (r.price is None, -(r.price or 0)))
    elif sort == ListingSort.featured:
        rows.sort(key=lambda r: not r.featured)


async def list_admin_listings(
    repos: SqlRepoBundle,
    *,
    page: int,
    page_size: int,
    kind: Optional[str] = None,
    sort: ListingSort = ListingSort.newest,
    filters: Optional[AdminListingFilters] = None,
) -> Envelope[AdminListingRow]:
    """
    Build one page of the merged admin listing.

    Args:
        repos: Repository bundle for the request
        page: 1-based page number
        page_size: Rows per page
        kind: ``product``, ``service`` or None for both
        sort: Sort policy applied to both sources and to the merged page
        filters: Text, status and featured filters applied to both sources

    Returns:
        Envelope whose ``total`` is the product count plus the service count
    """
    filters = filters or AdminListingFilters()
    want_products = kind in (None, ListingKind.product.value)
    want_services = kind in (None, ListingKind.service.value)

    services_available = False
    if want_services:
        services_available = await repos.services.is_available()
        if not services_available:
            logger.warning("Services table not found; admin listings will include products only")

    product_total = await repos.products.admin_count(filters) if want_products else 0
    service_total = await repos.services.admin_count(filters) if services_available else 0

    product_slice, service_slice = split_page(page, page_size, product_total, service_total)

    rows: List[AdminListingRow] = []
    if product_slice.take:
        products = await repos.products.admin_slice(filters, sort, product_slice.take, product_slice.offset)
        rows.extend(to_row(p, ListingKind.product) for p in products)
    if service_slice.take:
        services = await repos.services.admin_slice(filters, sort, service_slice.take, service_slice.offset)
        rows.extend(to_row(s, ListingKind.service) for s in services)

    sort_rows(rows, sort)
    total = product_total + service_total

    logger.debug(
        f"Admin listings page={page} size={page_size} products={product_slice} services={service_slice} total={total}"
    )
    return Envelope[AdminListingRow](
        page=page,
        page_size=page_size,
        total=total,
        total_pages=total_pages(total, page_size),
        items=rows,
    )
