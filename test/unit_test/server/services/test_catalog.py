"""
Unit tests for catalog query parsing and the catalog search page builder.
"""

import pytest

from qwiksale.core.database.repositories import SqlRepoBundle
from qwiksale.core.models.domain.enums import ListingSort, ListingStatus
from qwiksale.core.models.io.catalog import ProductPage
from qwiksale.server.services.catalog import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MAX_PRICE,
    CatalogQuery,
    clamp_page,
    clamp_page_size,
    clamp_price,
    clean_filter,
    empty_page,
    page_window,
    parse_bool,
    parse_int,
    parse_sort,
    parse_status,
    search_catalog,
    to_product_item,
    tokenize,
)
from test.unit_test.factories import make_product, make_user


class TestParsing:
    """Lenient parsing of raw query values."""

    @pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
    def test_parse_bool_truthy(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", ["0", "false", "No", "off"])
    def test_parse_bool_falsy(self, value):
        assert parse_bool(value) is False

    @pytest.mark.parametrize("value", [None, "", "maybe"])
    def test_parse_bool_unknown(self, value):
        assert parse_bool(value) is None

    def test_tokenize_drops_single_characters_and_caps_tokens(self):
        assert tokenize("  a iphone 13 pro max x blue case  ") == ["iphone", "13", "pro", "max", "blue"]

    def test_tokenize_truncates_long_queries(self):
        tokens = tokenize("x" * 100)
        assert tokens == ["x" * 64]

    def test_tokenize_empty(self):
        assert tokenize(None) == []
        assert tokenize("   ") == []

    @pytest.mark.parametrize(
        "raw, expected",
        [("12", 12), (" 7 ", 7), ("3.9", 3), ("abc", None), (None, None), ("1e400", None)],
    )
    def test_parse_int(self, raw, expected):
        assert parse_int(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "  ", "any", "ALL", "*"])
    def test_clean_filter_wildcards(self, raw):
        assert clean_filter(raw) is None

    def test_clean_filter_strips(self):
        assert clean_filter("  Phones ") == "Phones"

    def test_clamp_price(self):
        assert clamp_price(None) is None
        assert clamp_price(-5) == 0
        assert clamp_price(MAX_PRICE + 1) == MAX_PRICE
        assert clamp_price(500) == 500

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, ListingSort.newest),
            ("price_asc", ListingSort.price_asc),
            ("PRICE_DESC", ListingSort.price_desc),
            ("top", ListingSort.featured),
            ("new", ListingSort.newest),
            ("bogus", ListingSort.newest),
        ],
    )
    def test_parse_sort(self, raw, expected):
        assert parse_sort(raw) == expected

    def test_parse_status(self):
        assert parse_status(None) == ListingStatus.ACTIVE.value
        assert parse_status("sold") == "SOLD"
        assert parse_status("all") is None
        assert parse_status("weird") == ListingStatus.ACTIVE.value

    def test_clamp_page(self):
        assert clamp_page(None) == 1
        assert clamp_page(0) == 1
        assert clamp_page(-3) == 1
        assert clamp_page(4) == 4

    def test_clamp_page_size(self):
        assert clamp_page_size(None) == DEFAULT_PAGE_SIZE
        assert clamp_page_size(None, limit=10) == 10
        assert clamp_page_size(5, limit=10) == 5
        assert clamp_page_size(0) == 1
        assert clamp_page_size(500) == MAX_PAGE_SIZE

    def test_page_window(self):
        assert page_window(CatalogQuery(page=0, page_size=1000)) == (1, MAX_PAGE_SIZE)


class TestCatalogQuery:
    """CatalogQuery.to_filters normalisation."""

    def test_defaults(self):
        filters = CatalogQuery().to_filters()
        assert filters.tokens == []
        assert filters.status == "ACTIVE"
        assert filters.featured is None
        assert filters.verified_only is False

    def test_user_id_is_a_seller_id_alias(self):
        assert CatalogQuery(user_id="u1").to_filters().seller_id == "u1"
        assert CatalogQuery(seller_id="s1", user_id="u1").to_filters().seller_id == "s1"

    def test_filters_are_cleaned(self):
        filters = CatalogQuery(
            q="galaxy phone",
            category="any",
            brand=" Samsung ",
            featured="yes",
            verified_only="1",
            min_price=-10,
            max_price=50_000_000,
            status="all",
        ).to_filters()
        assert filters.tokens == ["galaxy", "phone"]
        assert filters.category is None
        assert filters.brand == "Samsung"
        assert filters.featured is True
        assert filters.verified_only is True
        assert filters.min_price == 0
        assert filters.max_price == MAX_PRICE
        assert filters.status is None


class TestSearchCatalog:
    """search_catalog against a real database."""

    @pytest.mark.asyncio
    async def test_first_page_has_facets_and_has_more(self, repos: SqlRepoBundle):
        for i in range(5):
            await make_product(repos, f"Phone {i}", brand="Samsung" if i % 2 else "Apple", age_minutes=i)

        page = await search_catalog(
            repos.products, CatalogQuery(page_size=2), to_product_item, facet_top=6, page_model=ProductPage
        )

        assert page.total == 5
        assert page.total_pages == 3
        assert page.has_more is True
        assert [item.name for item in page.items] == ["Phone 0", "Phone 1"]
        assert page.sort == "newest"
        assert page.facets is not None
        assert {f.value: f.count for f in page.facets["brands"]} == {"Apple": 3, "Samsung": 2}
        assert page.facets["categories"][0].value == "Electronics"

    @pytest.mark.asyncio
    async def test_later_pages_skip_facets(self, repos: SqlRepoBundle):
        for i in range(3):
            await make_product(repos, f"Phone {i}", age_minutes=i)

        page = await search_catalog(
            repos.products, CatalogQuery(page=2, page_size=2), to_product_item, facet_top=6, page_model=ProductPage
        )

        assert page.facets is None
        assert page.has_more is False
        assert [item.name for item in page.items] == ["Phone 2"]

    @pytest.mark.asyncio
    async def test_facets_can_be_disabled(self, repos: SqlRepoBundle):
        await make_product(repos)
        page = await search_catalog(repos.products, CatalogQuery(facets="false"), to_product_item, facet_top=6)
        assert page.facets is None

    @pytest.mark.asyncio
    async def test_beyond_result_window_returns_empty_page(self, repos: SqlRepoBundle):
        await make_product(repos)
        page = await search_catalog(
            repos.products, CatalogQuery(page=1000, page_size=48), to_product_item, facet_top=6
        )
        assert page.total == 0
        assert page.items == []
        assert page.total_pages == 1

    @pytest.mark.asyncio
    async def test_tokens_must_all_match(self, repos: SqlRepoBundle):
        await make_product(repos, "Samsung Galaxy A14", brand="Samsung")
        await make_product(repos, "Samsung Fridge", category="Appliances", subcategory="Kitchen")
        await make_product(repos, "iPhone 13", brand="Apple")

        page = await search_catalog(repos.products, CatalogQuery(q="samsung phones"), to_product_item, facet_top=6)

        assert [item.name for item in page.items] == ["Samsung Galaxy A14"]

    @pytest.mark.asyncio
    async def test_item_carries_seller_snapshot(self, repos: SqlRepoBundle):
        seller = await make_user(repos, username="mama-mboga")
        await make_product(repos, seller_id=seller.id, seller_name="Mama Mboga", seller_rating=4.2)

        page = await search_catalog(repos.products, CatalogQuery(seller="MAMA-MBOGA"), to_product_item, facet_top=6)

        assert page.total == 1
        assert page.items[0].seller.id == seller.id
        assert page.items[0].seller.name == "Mama Mboga"
        assert page.items[0].seller.rating == 4.2


def test_empty_page_uses_clamped_window():
    page = empty_page(CatalogQuery(page=-1, limit=500, sort="price_asc"))
    assert page.page == 1
    assert page.page_size == MAX_PAGE_SIZE
    assert page.total == 0
    assert page.sort == "price_asc"
