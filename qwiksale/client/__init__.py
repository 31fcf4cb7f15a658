"""Async HTTP clients for the public QwikSale API."""

from .search import RateLimitedError, SearchClientError, SearchPager

__all__ = ["RateLimitedError", "SearchClientError", "SearchPager"]
