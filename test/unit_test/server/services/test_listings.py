"""
Unit tests for the admin listings aggregator.
"""

from datetime import datetime

import pytest

from qwiksale.core.database.repositories import SqlRepoBundle
from qwiksale.core.database.repositories.listings import AdminListingFilters
from qwiksale.core.models.domain.enums import ListingKind, ListingSort
from qwiksale.core.models.io.listings import AdminListingRow
from qwiksale.server.services.listings import (
    PageSlice,
    consumed_before,
    list_admin_listings,
    sort_rows,
    split_page,
)
from test.unit_test.factories import make_product, make_service


class TestSplitPage:
    def test_even_split_when_both_sources_are_deep(self):
        products, services = split_page(1, 10, product_total=100, service_total=100)
        assert products == PageSlice(offset=0, take=5)
        assert services == PageSlice(offset=0, take=5)

        products, services = split_page(3, 10, product_total=100, service_total=100)
        assert products == PageSlice(offset=10, take=5)
        assert services == PageSlice(offset=10, take=5)

    def test_odd_page_size_gives_services_the_extra_slot(self):
        products, services = split_page(1, 5, product_total=100, service_total=100)
        assert products.take == 2
        assert services.take == 3

    def test_short_source_is_backfilled(self):
        products, services = split_page(1, 4, product_total=1, service_total=10)
        assert products == PageSlice(offset=0, take=1)
        assert services == PageSlice(offset=0, take=3)

        products, services = split_page(2, 4, product_total=1, service_total=10)
        assert products == PageSlice(offset=1, take=0)
        assert services == PageSlice(offset=3, take=4)

    def test_page_past_the_end_is_empty(self):
        products, services = split_page(9, 4, product_total=3, service_total=2)
        assert products.take == 0
        assert services.take == 0

    @pytest.mark.parametrize("page_size", [1, 2, 3, 7, 10])
    @pytest.mark.parametrize("product_total, service_total", [(0, 0), (0, 9), (9, 0), (3, 17), (17, 3), (12, 12)])
    def test_pages_cover_both_sources_without_gaps(self, page_size, product_total, service_total):
        seen_products, seen_services = [], []
        page = 1
        while True:
            products, services = split_page(page, page_size, product_total, service_total)
            if products.take == 0 and services.take == 0:
                break
            assert products.take + services.take <= page_size
            seen_products.extend(range(products.offset, products.offset + products.take))
            seen_services.extend(range(services.offset, services.offset + services.take))
            page += 1

        assert seen_products == list(range(product_total))
        assert seen_services == list(range(service_total))

    def test_consumed_before_start(self):
        assert consumed_before(0, 5, 5, 100, 100) == 0


class TestSortRows:
    def _row(self, id, price=None, featured=False, created_at=datetime(2026, 1, 1)):
        return AdminListingRow(
            id=id, kind=ListingKind.product, name=id, price=price, featured=featured, created_at=created_at
        )

    def test_price_asc_puts_missing_prices_last(self):
        rows = [self._row("a", None), self._row("b", 300), self._row("c", 100)]
        sort_rows(rows, ListingSort.price_asc)
        assert [r.id for r in rows] == ["c", "b", "a"]

    def test_price_desc(self):
        rows = [self._row("a", None), self._row("b", 300), self._row("c", 100)]
        sort_rows(rows, ListingSort.price_desc)
        assert [r.id for r in rows] == ["b", "c", "a"]

    def test_featured_then_newest(self):
        rows = [
            self._row("old-featured", featured=True, created_at=datetime(2026, 1, 1)),
            self._row("new", created_at=datetime(2026, 1, 3)),
            self._row("new-featured", featured=True, created_at=datetime(2026, 1, 2)),
        ]
        sort_rows(rows, ListingSort.featured)
        assert [r.id for r in rows] == ["new-featured", "old-featured", "new"]

    def test_newest_breaks_ties_by_id(self):
        same = datetime(2026, 1, 1)
        rows = [self._row("a", created_at=same), self._row("b", created_at=same)]
        sort_rows(rows, ListingSort.newest)
        assert [r.id for r in rows] == ["b", "a"]


class TestListAdminListings:
    @pytest.mark.asyncio
    async def test_merges_products_and_services(self, repos: SqlRepoBundle):
        for i in range(3):
            await make_product(repos, f"Product {i}", age_minutes=10 + i)
        await make_service(repos, "Service 0", age_minutes=1)

        page = await list_admin_listings(repos, page=1, page_size=10)

        assert page.total == 4
        assert page.total_pages == 1
        assert [row.name for row in page.items] == ["Service 0", "Product 0", "Product 1", "Product 2"]
        assert page.items[0].kind == ListingKind.service

    @pytest.mark.asyncio
    async def test_kind_filter(self, repos: SqlRepoBundle):
        await make_product(repos)
        await make_service(repos)

        products_only = await list_admin_listings(repos, page=1, page_size=10, kind="product")
        services_only = await list_admin_listings(repos, page=1, page_size=10, kind="service")

        assert [row.kind for row in products_only.items] == [ListingKind.product]
        assert [row.kind for row in services_only.items] == [ListingKind.service]
        assert products_only.total == 1

    @pytest.mark.asyncio
    async def test_filters_apply_to_both_sources(self, repos: SqlRepoBundle):
        await make_product(repos, "Featured phone", featured=True)
        await make_product(repos, "Plain phone")
        await make_service(repos, "Featured plumbing", featured=True, status="PAUSED")

        page = await list_admin_listings(
            repos, page=1, page_size=10, filters=AdminListingFilters(q="featured", featured=True)
        )
        assert sorted(row.name for row in page.items) == ["Featured phone", "Featured plumbing"]

        paused = await list_admin_listings(repos, page=1, page_size=10, filters=AdminListingFilters(status="PAUSED"))
        assert [row.name for row in paused.items] == ["Featured plumbing"]

    @pytest.mark.asyncio
    async def test_pages_through_everything_once(self, repos: SqlRepoBundle):
        for i in range(5):
            await make_product(repos, f"P{i}", age_minutes=i)
        for i in range(2):
            await make_service(repos, f"S{i}", age_minutes=i)

        names = []
        for page in (1, 2, 3):
            result = await list_admin_listings(repos, page=page, page_size=3)
            assert result.total == 7
            assert result.total_pages == 3
            names.extend(row.name for row in result.items)

        assert sorted(names) == ["P0", "P1", "P2", "P3", "P4", "S0", "S1"]

    @pytest.mark.asyncio
    async def test_missing_services_table_lists_products_only(self, repos: SqlRepoBundle, engine):
        await make_product(repos)
        async with engine.begin() as conn:
            await conn.exec_driver_sql("DROP TABLE services")

        page = await list_admin_listings(repos, page=1, page_size=10)

        assert page.total == 1
        assert page.items[0].kind == ListingKind.product

    @pytest.mark.asyncio
    async def test_non_integer_price_is_reported_as_null(self, repos: SqlRepoBundle):
        await make_product(repos, price=None)
        page = await list_admin_listings(repos, page=1, page_size=10, kind="product")
        assert page.items[0].price is None
