"""Infinite-scroll search client

Overview
--------
``SearchPager`` walks ``GET /api/search`` one page at a time the way the
search page's infinite scroll does: each call to ``fetch_next`` loads the next
page, drops items whose id was already seen, and stops once the server
reports the last page.

Only one fetch is in flight at a time. Triggering a new fetch cancels the
previous one (its caller gets an empty list), and ``close`` cancels whatever
is still running.

Errors
------
Non-2xx responses raise ``SearchClientError``; HTTP 429 raises the
``RateLimitedError`` subclass so callers can back off.

Usage
-----
>>> async with SearchPager("http://localhost:8000", kind="service", params={"q": "plumber"}) as pager:
...     async for item in pager.iter_items():
...         print(item["name"])
"""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Set

import httpx

from qwiksale.core.logging_config import get_logger
from qwiksale.core.models.io.common import Envelope

logger = get_logger(__name__)

SEARCH_PATH = "/api/search"


class SearchClientError(Exception):
    """Search request failure.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code, when the server answered.
        details: Response body, when available.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class RateLimitedError(SearchClientError):
    """The server answered 429."""


def build_params(params: Mapping[str, Any]) -> Dict[str, str]:
    """Drop empty values and render booleans the way the API parses them."""
    out: Dict[str, str] = {}
    for key, value in params.items():
        if value is None or value == "" or value is False:
            continue
        out[key] = "true" if value is True else str(value)
    return out


class SearchPager:
    """Pages through product or service search results."""

    def __init__(
        self,
        base_url: str,
        *,
        kind: str = "product",
        params: Optional[Mapping[str, Any]] = None,
        page_size: Optional[int] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Create a pager.

        Args:
            base_url: Base URL of the API (e.g. ``http://localhost:8000``).
            kind: ``product`` or ``service``.
            params: Search filters (``q``, ``category``, ``minPrice``, ``sort``, ...).
            page_size: Items per page; the server default applies when omitted.
            timeout: Default HTTP timeout for the internal client.
            client: Optional preconfigured ``httpx.AsyncClient``; it is not closed by ``close``.
        """
        self.base_url = base_url.rstrip("/")
        self.kind = kind
        self.params: Dict[str, Any] = dict(params or {})
        self.page_size = page_size
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._owns_client = client is None

        self.items: List[Dict[str, Any]] = []
        self.page = 0
        self.total_pages: Optional[int] = None
        self.total: Optional[int] = None
        self.done = False

        self._seen: Set[str] = set()
        self._inflight: Optional[asyncio.Task] = None
        self._closed = False

    async def __aenter__(self) -> "SearchPager":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def loading(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    def _query(self, page: int) -> Dict[str, str]:
        return build_params({**self.params, "type": self.kind, "page": page, "pageSize": self.page_size})

    async def _get(self, page: int) -> Envelope[Dict[str, Any]]:
        try:
            r = await self._client.get(f"{self.base_url}{SEARCH_PATH}", params=self._query(page))
        except httpx.HTTPError as e:
            raise SearchClientError(f"Search request failed: {e}") from e

        if r.status_code == 429:
            raise RateLimitedError("Search rate limited", status_code=429, details=r.text)
        if r.is_error:
            raise SearchClientError(f"Search failed: {r.status_code}", status_code=r.status_code, details=r.text)
        return Envelope[Dict[str, Any]].model_validate(r.json())

    def _cancel_inflight(self) -> None:
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()

    async def fetch_next(self) -> List[Dict[str, Any]]:
        """Load the next page.

        Returns:
            Items on the page that were not seen before. Empty when the pager
            is exhausted or this fetch was superseded by a newer one.

        Raises:
            SearchClientError: When the request fails.
        """
        if self._closed:
            raise SearchClientError("Pager is closed")
        if self.done:
            return []

        next_page = self.page + 1
        if self.total_pages is not None and next_page > self.total_pages:
            self.done = True
            return []

        self._cancel_inflight()
        task = asyncio.create_task(self._get(next_page))
        self._inflight = task
        try:
            envelope = await task
        except asyncio.CancelledError:
            if self._inflight is task and not self._closed:
                # Cancelled from outside, not superseded
                raise
            logger.debug(f"Search fetch for page {next_page} superseded")
            return []
        finally:
            if self._inflight is task:
                self._inflight = None

        fresh: List[Dict[str, Any]] = []
        for item in envelope.items:
            item_id = str(item.get("id"))
            if item_id in self._seen:
                continue
            self._seen.add(item_id)
            fresh.append(item)

        self.items.extend(fresh)
        self.page = envelope.page
        self.total_pages = envelope.total_pages
        self.total = envelope.total
        if envelope.page >= envelope.total_pages:
            self.done = True
        logger.debug(f"Search page {envelope.page}/{envelope.total_pages}: {len(fresh)} new items")
        return fresh

    async def iter_items(self) -> AsyncIterator[Dict[str, Any]]:
        """Yield every unique item, fetching pages until the last one."""
        while not self.done:
            for item in await self.fetch_next():
                yield item

    def reset(self, params: Optional[Mapping[str, Any]] = None) -> None:
        """Start over, optionally with new filters. Any in-flight fetch is cancelled."""
        self._cancel_inflight()
        self._inflight = None
        if params is not None:
            self.params = dict(params)
        self.items = []
        self.page = 0
        self.total_pages = None
        self.total = None
        self.done = False
        self._seen = set()

    async def close(self) -> None:
        """Cancel any in-flight fetch and release the HTTP client."""
        self._closed = True
        self._cancel_inflight()
        if self._owns_client:
            await self._client.aclose()
