"""
Unit tests for the infinite-scroll search client.

The API is replaced by an ``httpx.MockTransport`` serving canned pages.
"""

import asyncio
from typing import Dict, List

import httpx
import pytest

from qwiksale.client.search import RateLimitedError, SearchClientError, SearchPager, build_params

BASE_URL = "http://localhost"


def _page(page: int, total_pages: int, ids: List[str], total: int = 0) -> Dict:
    return {
        "page": page,
        "pageSize": len(ids),
        "total": total,
        "totalPages": total_pages,
        "items": [{"id": i, "name": f"Item {i}"} for i in ids],
    }


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestBuildParams:
    def test_drops_empty_values_and_renders_booleans(self):
        params = build_params({"q": "phone", "brand": "", "featured": True, "verifiedOnly": False, "page": 2, "x": None})
        assert params == {"q": "phone", "featured": "true", "page": "2"}


class TestSearchPager:
    @pytest.mark.asyncio
    async def test_pages_until_last_and_skips_duplicates(self):
        pages = {
            "1": _page(1, 2, ["a", "b"], total=3),
            "2": _page(2, 2, ["b", "c"], total=3),
        }
        seen_params = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen_params.append(dict(request.url.params))
            return httpx.Response(200, json=pages[request.url.params["page"]])

        async with _client(handler) as client:
            pager = SearchPager(BASE_URL, kind="service", params={"q": "plumber"}, page_size=2, client=client)

            first = await pager.fetch_next()
            second = await pager.fetch_next()
            third = await pager.fetch_next()

        assert [item["id"] for item in first] == ["a", "b"]
        assert [item["id"] for item in second] == ["c"]
        assert third == []
        assert pager.done is True
        assert pager.total == 3
        assert [item["id"] for item in pager.items] == ["a", "b", "c"]
        assert seen_params[0] == {"q": "plumber", "type": "service", "page": "1", "pageSize": "2"}
        assert len(seen_params) == 2

    @pytest.mark.asyncio
    async def test_iter_items(self):
        def handler(request: httpx.Request) -> httpx.Response:
            page = int(request.url.params["page"])
            return httpx.Response(200, json=_page(page, 3, [f"p{page}"]))

        async with _client(handler) as client:
            async with SearchPager(BASE_URL, client=client) as pager:
                ids = [item["id"] async for item in pager.iter_items()]

        assert ids == ["p1", "p2", "p3"]

    @pytest.mark.asyncio
    async def test_rate_limited(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, text="slow down")

        async with _client(handler) as client:
            pager = SearchPager(BASE_URL, client=client)
            with pytest.raises(RateLimitedError) as exc_info:
                await pager.fetch_next()

        assert exc_info.value.status_code == 429
        assert exc_info.value.details == "slow down"

    @pytest.mark.asyncio
    async def test_server_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"detail": "Internal server error"})

        async with _client(handler) as client:
            pager = SearchPager(BASE_URL, client=client)
            with pytest.raises(SearchClientError) as exc_info:
                await pager.fetch_next()

        assert not isinstance(exc_info.value, RateLimitedError)
        assert exc_info.value.status_code == 500
        assert pager.page == 0

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            pager = SearchPager(BASE_URL, client=client)
            with pytest.raises(SearchClientError, match="Search request failed"):
                await pager.fetch_next()

    @pytest.mark.asyncio
    async def test_newer_fetch_supersedes_older_one(self):
        release = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            await release.wait()
            return httpx.Response(200, json=_page(1, 1, ["a"]))

        async with _client(handler) as client:
            pager = SearchPager(BASE_URL, client=client)
            older = asyncio.create_task(pager.fetch_next())
            await asyncio.sleep(0)
            newer = asyncio.create_task(pager.fetch_next())
            await asyncio.sleep(0)
            release.set()

            older_items, newer_items = await asyncio.gather(older, newer)

        assert older_items == []
        assert [item["id"] for item in newer_items] == ["a"]
        assert pager.loading is False

    @pytest.mark.asyncio
    async def test_reset_starts_over_with_new_filters(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(dict(request.url.params))
            return httpx.Response(200, json=_page(1, 1, ["a"]))

        async with _client(handler) as client:
            pager = SearchPager(BASE_URL, params={"q": "old"}, client=client)
            await pager.fetch_next()
            assert pager.done is True

            pager.reset({"q": "new"})
            assert pager.items == []
            assert pager.done is False

            again = await pager.fetch_next()

        assert [item["id"] for item in again] == ["a"]
        assert requests[-1]["q"] == "new"
        assert requests[-1]["page"] == "1"

    @pytest.mark.asyncio
    async def test_closed_pager_refuses_to_fetch(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_page(1, 1, []))

        async with _client(handler) as client:
            pager = SearchPager(BASE_URL, client=client)
            await pager.close()

            with pytest.raises(SearchClientError, match="closed"):
                await pager.fetch_next()

            # A caller-supplied client stays open
            assert client.is_closed is False

    @pytest.mark.asyncio
    async def test_close_releases_own_client(self):
        pager = SearchPager(BASE_URL)
        await pager.close()
        assert pager._client.is_closed is True
