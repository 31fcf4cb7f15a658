"""
Tests for the merged admin listings endpoint.
"""

import pytest
from httpx import AsyncClient

from qwiksale.core.database.repositories import SqlRepoBundle
from test.unit_test.factories import make_product, make_service

LISTINGS = "/api/admin/listings"


@pytest.mark.asyncio
async def test_requires_admin(client: AsyncClient):
    response = await client.get(LISTINGS)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_merged_page(client: AsyncClient, repos: SqlRepoBundle, admin_headers):
    await make_product(repos, "Phone", age_minutes=5, seller_name="Duka La Simu")
    await make_service(repos, "Plumbing", age_minutes=1)

    response = await client.get(LISTINGS, headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["page"] == 1
    assert body["pageSize"] == 50
    assert body["total"] == 2
    assert body["totalPages"] == 1
    assert [(row["kind"], row["name"]) for row in body["items"]] == [("service", "Plumbing"), ("product", "Phone")]
    assert body["items"][1]["sellerName"] == "Duka La Simu"
    assert body["items"][1]["createdAt"].endswith("Z")
    assert "no-store" in response.headers["cache-control"]


@pytest.mark.asyncio
async def test_kind_status_and_featured_filters(client: AsyncClient, repos: SqlRepoBundle, admin_headers):
    await make_product(repos, "Sold phone", status="SOLD")
    await make_product(repos, "Featured phone", featured=True)
    await make_service(repos, "Featured service", featured=True)

    products = await client.get(LISTINGS, params={"kind": "product", "featured": "true"}, headers=admin_headers)
    sold = await client.get(LISTINGS, params={"status": "sold"}, headers=admin_headers)
    both = await client.get(LISTINGS, params={"kind": "everything", "featured": "1"}, headers=admin_headers)

    assert [row["name"] for row in products.json()["items"]] == ["Featured phone"]
    assert [row["name"] for row in sold.json()["items"]] == ["Sold phone"]
    assert both.json()["total"] == 2


@pytest.mark.asyncio
async def test_price_sort(client: AsyncClient, repos: SqlRepoBundle, admin_headers):
    await make_product(repos, "Pricey", price=90000)
    await make_product(repos, "Cheap", price=500)
    await make_service(repos, "Mid", price=5000)

    response = await client.get(LISTINGS, params={"sort": "price_asc"}, headers=admin_headers)

    assert [row["name"] for row in response.json()["items"]] == ["Cheap", "Mid", "Pricey"]


@pytest.mark.asyncio
async def test_page_size_bounds(client: AsyncClient, admin_headers):
    assert (await client.get(LISTINGS, params={"pageSize": 0}, headers=admin_headers)).status_code == 422
    assert (await client.get(LISTINGS, params={"pageSize": 201}, headers=admin_headers)).status_code == 422
